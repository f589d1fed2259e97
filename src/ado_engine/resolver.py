"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging

from ado_engine.errors import PipelineNotFoundError
from ado_engine.gateway.base import PipelineGateway
from ado_engine.models import PipelineRef

logger = logging.getLogger(__name__)


def resolve_pipeline(gateway: PipelineGateway, project: str, pipeline_name: str) -> PipelineRef:
    """
    Return the first pipeline whose name equals ``pipeline_name`` exactly.

    Names are compared case-sensitively in the order the service lists them.
    Iteration stops at the first match, so later listing pages are not fetched.
    Gateway errors propagate unchanged.
    """
    for pipeline in gateway.list_pipelines(project):
        if pipeline.name == pipeline_name:
            logger.info("Pipeline %s has ID %d.", pipeline_name, pipeline.id)
            return pipeline
    raise PipelineNotFoundError(project, pipeline_name)
