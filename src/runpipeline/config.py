"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, NoReturn, Optional, Tuple

from ado_engine import exit_codes
from ado_engine.errors import ConfigError
from ado_engine.gateway.azure_devops import DEFAULT_API_VERSION, DEFAULT_HTTP_TIMEOUT_S, default_base_url
from ado_engine.models import DEFAULT_BRANCH
from ado_engine.parameters import parse_parameters
from ado_engine.poller import POLL_INTERVAL_S
from ado_engine.utils.url_guard import UrlGuardError, validate_service_url

# (dest, flag name, env vars, exit code) in the order they are checked.
REQUIRED_FIELDS: Tuple[Tuple[str, str, Tuple[str, ...], int], ...] = (
    ("org", "org", ("ADO_ORG",), exit_codes.EXIT_MISSING_ORG),
    ("prj", "prj", ("ADO_PROJECT",), exit_codes.EXIT_MISSING_PROJECT),
    ("token", "token", ("ADO_TOKEN", "AZURE_DEVOPS_EXT_PAT"), exit_codes.EXIT_MISSING_TOKEN),
    ("pipeline", "pipeline", ("ADO_PIPELINE",), exit_codes.EXIT_MISSING_PIPELINE),
)

EXIT_CODES_EPILOG = """\
exit codes:
  0   run succeeded
  1   run failed | missing org | pipeline listing failed
  2   run canceled | missing project
  3   run result could not be identified | missing token
  4   missing pipeline name
  5   invalid option value
  10  error fetching run status
  11  polling deadline passed or stop requested
  20  pipeline not found
  21  pipeline start failed

Codes 1-3 are shared between configuration errors and run results.
"""


class RunnerArgumentParser(argparse.ArgumentParser):
    """argparse exits 2 on usage errors, which would read as 'canceled'."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(exit_codes.EXIT_INVALID_OPTION, f"{self.prog}: error: {message}\n")


@dataclass(frozen=True)
class RunnerConfig:
    org: str
    project: str
    token: str = field(repr=False)
    pipeline: str
    branch: str = DEFAULT_BRANCH
    parameters: Dict[str, str] = field(default_factory=dict)
    rejected_parameters: Tuple[str, ...] = ()
    base_url: str = ""
    api_version: str = DEFAULT_API_VERSION
    poll_interval_s: float = POLL_INTERVAL_S
    timeout_s: Optional[float] = None
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    log_level: int = logging.ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = RunnerArgumentParser(
        prog="run-pipeline",
        description="Start an Azure DevOps pipeline run, wait for it, and exit with its result.",
        epilog=EXIT_CODES_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--org", help="Azure DevOps organization (env: ADO_ORG).")
    parser.add_argument("--prj", help="Azure DevOps project (env: ADO_PROJECT).")
    parser.add_argument("--token", help="Azure DevOps personal access token (env: ADO_TOKEN or AZURE_DEVOPS_EXT_PAT).")
    parser.add_argument("--pipeline", help="Azure DevOps pipeline name (env: ADO_PIPELINE).")
    parser.add_argument("--branch", help=f"Branch for pipeline run (env: ADO_BRANCH, default: {DEFAULT_BRANCH}).")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        dest="params",
        metavar="KEY=VALUE",
        help="Template parameter as 'key=value'; repeatable.",
    )
    parser.add_argument("-w", dest="warn_log", action="store_true", help="Logging with warn output.")
    parser.add_argument("-i", dest="info_log", action="store_true", help="Logging with info output.")
    parser.add_argument("-v", dest="verbose_log", action="store_true", help="Logging with verbose output.")
    parser.add_argument(
        "--base-url",
        help="Service root URL (env: ADO_BASE_URL, default: https://dev.azure.com/<org>).",
    )
    parser.add_argument("--api-version", default=DEFAULT_API_VERSION, help="REST api-version.")
    parser.add_argument("--poll-interval", type=float, default=POLL_INTERVAL_S, help="Seconds between status polls.")
    parser.add_argument("--timeout", type=float, help="Give up waiting after this many seconds (default: wait forever).")
    parser.add_argument("--http-timeout", type=float, default=DEFAULT_HTTP_TIMEOUT_S, help="Per-request timeout.")
    return parser


def resolve_log_level(args: argparse.Namespace) -> int:
    level = logging.ERROR
    if args.warn_log:
        level = logging.WARNING
    if args.info_log:
        level = logging.INFO
    if args.verbose_log:
        level = logging.DEBUG
    return level


def _from_env(env: Mapping[str, str], names: Tuple[str, ...]) -> str:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return ""


def _positive(name: str, value: Optional[float]) -> None:
    if value is None:
        return
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(name, f"Parameter '{name}' must be a finite number greater than zero.")


def load_config(args: argparse.Namespace, env: Optional[Mapping[str, str]] = None) -> RunnerConfig:
    """Merge parsed flags with environment fallbacks and validate the result.

    Flags win over environment variables. Raises ``ConfigError`` carrying the
    exit code of the first problem found.
    """
    env_map = os.environ if env is None else env
    values: Dict[str, str] = {}
    for dest, flag, env_names, code in REQUIRED_FIELDS:
        value = (getattr(args, dest, None) or "").strip() or _from_env(env_map, env_names)
        if not value:
            raise ConfigError(flag, f"Parameter '{flag}' is empty.", exit_code=code)
        values[dest] = value

    branch = (args.branch or "").strip() or _from_env(env_map, ("ADO_BRANCH",)) or DEFAULT_BRANCH

    raw_base_url = (args.base_url or "").strip() or _from_env(env_map, ("ADO_BASE_URL",))
    try:
        base_url = validate_service_url(raw_base_url or default_base_url(values["org"]))
    except UrlGuardError as exc:
        raise ConfigError("base-url", f"Parameter 'base-url' is invalid: {exc}") from exc

    _positive("poll-interval", args.poll_interval)
    _positive("timeout", args.timeout)
    _positive("http-timeout", args.http_timeout)

    params: List[str] = list(args.params or [])
    parameter_set = parse_parameters(params)

    return RunnerConfig(
        org=values["org"],
        project=values["prj"],
        token=values["token"],
        pipeline=values["pipeline"],
        branch=branch,
        parameters=parameter_set.values,
        rejected_parameters=parameter_set.rejected,
        base_url=base_url,
        api_version=args.api_version,
        poll_interval_s=args.poll_interval,
        timeout_s=args.timeout,
        http_timeout_s=args.http_timeout,
        log_level=resolve_log_level(args),
    )
