"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from typing import List, Mapping, Optional

from ado_engine import exit_codes
from ado_engine.errors import (
    ConfigError,
    GatewayError,
    LaunchFailedError,
    PipelineNotFoundError,
    RunWaitAborted,
)
from ado_engine.gateway import AzureDevOpsGateway, PipelineGateway
from ado_engine.launcher import launch_run
from ado_engine.models import RunRequest
from ado_engine.poller import wait_for_run
from ado_engine.resolver import resolve_pipeline

from .config import RunnerConfig, build_parser, load_config, resolve_log_level

logger = logging.getLogger(__name__)


def _setup_logging(level: int) -> None:
    root = logging.getLogger()
    if root.hasHandlers():
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        stream=sys.stdout,
    )


def build_gateway(config: RunnerConfig) -> PipelineGateway:
    return AzureDevOpsGateway(
        config.base_url,
        config.token,
        api_version=config.api_version,
        timeout_s=config.http_timeout_s,
    )


def run(
    config: RunnerConfig,
    gateway: PipelineGateway,
    *,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Resolve, launch and wait for one pipeline run; return the process exit code.

    ``main`` never passes ``stop_event``; from the command line the wait is only
    bounded by ``--timeout``. Embedding callers may set the event from another
    thread to stop polling.
    """
    try:
        pipeline = resolve_pipeline(gateway, config.project, config.pipeline)
    except PipelineNotFoundError:
        logger.error("Pipeline '%s' does not exist!", config.pipeline)
        return exit_codes.EXIT_PIPELINE_NOT_FOUND
    except GatewayError as exc:
        logger.error("Error occurred during get pipelines call. %s", exc)
        return exit_codes.EXIT_LIST_FAILED

    request = RunRequest(pipeline_id=pipeline.id, branch=config.branch, parameters=config.parameters)
    try:
        handle = launch_run(gateway, config.project, request, pipeline_name=pipeline.name)
    except LaunchFailedError as exc:
        logger.error("%s", exc)
        return exit_codes.EXIT_LAUNCH_FAILED

    try:
        exit_code = wait_for_run(
            gateway,
            config.project,
            handle,
            pipeline_name=pipeline.name,
            interval_s=config.poll_interval_s,
            timeout_s=config.timeout_s,
            stop_event=stop_event,
        )
    except GatewayError as exc:
        logger.error("Error occurred during get pipeline run status. %s", exc)
        return exit_codes.EXIT_STATUS_FAILED
    except RunWaitAborted as exc:
        logger.error("%s", exc)
        return exit_codes.EXIT_POLL_ABORTED

    if exit_code == exit_codes.EXIT_AMBIGUOUS:
        logger.warning("It was not possible to identify the correct return value for pipeline '%s'.", config.pipeline)
    return exit_code


def main(argv: Optional[List[str]] = None, env: Optional[Mapping[str, str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(resolve_log_level(args))

    try:
        config = load_config(args, os.environ if env is None else env)
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        parser.print_help(sys.stderr)
        return exc.exit_code

    for entry in config.rejected_parameters:
        print(f"Parameter 'param' does not contain '=': {entry}", file=sys.stderr)

    gateway = build_gateway(config)
    try:
        return run(config, gateway)
    finally:
        gateway.close()


if __name__ == "__main__":
    raise SystemExit(main())
