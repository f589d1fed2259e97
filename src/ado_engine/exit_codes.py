"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.

Process exit codes. Several values are shared between configuration failures
and run results; callers must not read 1-3 as a pure success/failure signal.
"""

from __future__ import annotations

from typing import Dict, Optional

# Run results.
EXIT_SUCCEEDED = 0
EXIT_FAILED = 1
EXIT_CANCELED = 2
EXIT_AMBIGUOUS = 3

# Configuration.
EXIT_MISSING_ORG = 1
EXIT_MISSING_PROJECT = 2
EXIT_MISSING_TOKEN = 3
EXIT_MISSING_PIPELINE = 4
EXIT_INVALID_OPTION = 5

# Remote failures.
EXIT_LIST_FAILED = 1
EXIT_STATUS_FAILED = 10
EXIT_POLL_ABORTED = 11
EXIT_PIPELINE_NOT_FOUND = 20
EXIT_LAUNCH_FAILED = 21

RESULT_EXIT_CODES: Dict[str, int] = {
    "succeeded": EXIT_SUCCEEDED,
    "failed": EXIT_FAILED,
    "canceled": EXIT_CANCELED,
}


def exit_code_for_result(result: Optional[str]) -> int:
    """Translate a remote run result into a process exit code.

    Unknown or missing results map to ``EXIT_AMBIGUOUS``.
    """
    if result is None:
        return EXIT_AMBIGUOUS
    return RESULT_EXIT_CODES.get(result, EXIT_AMBIGUOUS)
