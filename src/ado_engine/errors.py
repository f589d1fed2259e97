"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from typing import Optional

from ado_engine import exit_codes


class PipelineRunnerError(RuntimeError):
    """Base class for every fatal condition raised by the engine."""


class ConfigError(PipelineRunnerError):
    """Raised before any remote call when a required input is missing or invalid."""

    def __init__(self, field: str, message: str, *, exit_code: int = exit_codes.EXIT_INVALID_OPTION) -> None:
        super().__init__(message)
        self.field = field
        self.exit_code = exit_code


class GatewayError(PipelineRunnerError):
    """Transport or API failure talking to the pipeline service."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PipelineNotFoundError(PipelineRunnerError, LookupError):
    exit_code = exit_codes.EXIT_PIPELINE_NOT_FOUND

    def __init__(self, project: str, pipeline_name: str) -> None:
        super().__init__(f"Pipeline '{pipeline_name}' does not exist in project '{project}'.")
        self.project = project
        self.pipeline_name = pipeline_name


class LaunchFailedError(PipelineRunnerError):
    exit_code = exit_codes.EXIT_LAUNCH_FAILED


class RunWaitAborted(PipelineRunnerError):
    """Polling stopped before the run reached a terminal state."""

    exit_code = exit_codes.EXIT_POLL_ABORTED

    def __init__(self, message: str, *, run_id: int, reason: str) -> None:
        super().__init__(message)
        self.run_id = run_id
        self.reason = reason
