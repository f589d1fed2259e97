"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from ado_engine.errors import (
    ConfigError,
    GatewayError,
    LaunchFailedError,
    PipelineNotFoundError,
    PipelineRunnerError,
    RunWaitAborted,
)
from ado_engine.launcher import launch_run
from ado_engine.models import PipelineRef, RunHandle, RunRequest, RunStatus
from ado_engine.parameters import ParameterSet, parse_parameters
from ado_engine.poller import wait_for_run
from ado_engine.resolver import resolve_pipeline

__all__ = [
    "ConfigError",
    "GatewayError",
    "LaunchFailedError",
    "ParameterSet",
    "PipelineNotFoundError",
    "PipelineRef",
    "PipelineRunnerError",
    "RunHandle",
    "RunRequest",
    "RunStatus",
    "RunWaitAborted",
    "launch_run",
    "parse_parameters",
    "resolve_pipeline",
    "wait_for_run",
]
