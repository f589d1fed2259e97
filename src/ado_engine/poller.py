"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from ado_engine.errors import RunWaitAborted
from ado_engine.exit_codes import EXIT_AMBIGUOUS
from ado_engine.gateway.base import PipelineGateway
from ado_engine.models import RunHandle, RunStatus
from ado_engine.utils.time import format_rfc1123

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 10.0


def log_terminal_status(status: RunStatus, pipeline_name: str) -> None:
    level = logging.WARNING if status.exit_code == EXIT_AMBIGUOUS else logging.INFO
    logger.log(
        level,
        "Pipeline %s is in state '%s' with result '%s', finished %s (URL: %s).",
        status.pipeline_name or pipeline_name,
        status.state,
        status.result or "unknown",
        format_rfc1123(status.finished_at),
        status.url,
    )


def wait_for_run(
    gateway: PipelineGateway,
    project: str,
    handle: RunHandle,
    *,
    pipeline_name: str = "",
    interval_s: float = POLL_INTERVAL_S,
    timeout_s: Optional[float] = None,
    stop_event: Optional[threading.Event] = None,
    wait: Optional[Callable[[float], bool]] = None,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """
    Poll a run until the service reports ``completed`` and return its exit code.

    Between polls the loop waits ``interval_s`` seconds. ``wait`` receives the
    delay and returns True when the wait was interrupted; by default it waits
    on ``stop_event`` (a fresh, never-set event when none is given). With no
    ``timeout_s`` and no stop request the loop runs until completion.

    ``GatewayError`` from a status fetch propagates immediately.
    Raises ``RunWaitAborted`` on deadline or stop.
    """
    event = stop_event or threading.Event()
    waiter = wait or event.wait
    deadline = clock() + timeout_s if timeout_s is not None else None
    label = pipeline_name or str(handle.pipeline_id)

    while True:
        status = gateway.get_run(project, handle.pipeline_id, handle.id)
        if status.is_terminal:
            break
        logger.debug("... '%s (id: %d)' is still running (state: %s).", label, handle.pipeline_id, status.state)

        delay = interval_s
        if deadline is not None:
            remaining = deadline - clock()
            if remaining <= 0:
                raise RunWaitAborted(
                    f"Run {handle.id} of pipeline '{label}' did not complete within {timeout_s:g}s.",
                    run_id=handle.id,
                    reason="deadline",
                )
            delay = min(delay, remaining)
        if waiter(delay) or event.is_set():
            raise RunWaitAborted(
                f"Waiting for run {handle.id} of pipeline '{label}' was stopped.",
                run_id=handle.id,
                reason="stopped",
            )

    exit_code = status.exit_code
    log_terminal_status(status, label)
    logger.info(
        "Pipeline '%s (id: %d)' with run id '%d' finished. Exit code will be %d",
        label,
        handle.pipeline_id,
        handle.id,
        exit_code,
    )
    return exit_code
