"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from ado_engine.exit_codes import exit_code_for_result

COMPLETED_STATE = "completed"
DEFAULT_BRANCH = "master"


@dataclass(frozen=True)
class PipelineRef:
    name: str
    id: int


@dataclass(frozen=True)
class RunRequest:
    pipeline_id: int
    branch: str = DEFAULT_BRANCH
    parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Callers hand us their dict; keep a read-only copy so the request stays a value.
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))


@dataclass(frozen=True)
class RunHandle:
    id: int
    pipeline_id: int
    state: str = "unknown"


@dataclass(frozen=True)
class RunStatus:
    state: str
    result: Optional[str] = None
    finished_at: Optional[datetime] = None
    url: str = ""
    pipeline_name: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.state == COMPLETED_STATE

    @property
    def exit_code(self) -> int:
        return exit_code_for_result(self.result)
