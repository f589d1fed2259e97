"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Mapping

from ado_engine.models import PipelineRef, RunHandle, RunStatus


class PipelineGateway(ABC):
    """
    Remote operations the runner needs from a pipeline service.

    Implementations raise ``GatewayError`` for any transport or API failure
    and never retry on their own.
    """

    @abstractmethod
    def list_pipelines(self, project: str) -> Iterator[PipelineRef]:
        """Yield pipelines in service order; later pages are fetched only when iterated."""
        raise NotImplementedError

    @abstractmethod
    def run_pipeline(
        self,
        project: str,
        pipeline_id: int,
        branch: str,
        template_parameters: Mapping[str, str],
    ) -> RunHandle:
        raise NotImplementedError

    @abstractmethod
    def get_run(self, project: str, pipeline_id: int, run_id: int) -> RunStatus:
        raise NotImplementedError

    def close(self) -> None:
        """Release transport resources. Default is a no-op."""
