"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from typing import Optional

from ado_engine.errors import GatewayError, LaunchFailedError
from ado_engine.gateway.base import PipelineGateway
from ado_engine.models import RunHandle, RunRequest

logger = logging.getLogger(__name__)


def launch_run(
    gateway: PipelineGateway,
    project: str,
    request: RunRequest,
    *,
    pipeline_name: Optional[str] = None,
) -> RunHandle:
    """Start one run; parameters are passed through without validation against the template."""
    label = pipeline_name or str(request.pipeline_id)
    try:
        handle = gateway.run_pipeline(project, request.pipeline_id, request.branch, request.parameters)
    except GatewayError as exc:
        raise LaunchFailedError(f"Pipeline '{label}' start failed: {exc}") from exc
    logger.debug("Run pipeline '%s'. Run id is '%d' and state is '%s'.", label, handle.id, handle.state)
    return handle
