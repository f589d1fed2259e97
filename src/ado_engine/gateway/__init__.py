"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from ado_engine.gateway.azure_devops import AzureDevOpsGateway, default_base_url
from ado_engine.gateway.base import PipelineGateway

__all__ = ["AzureDevOpsGateway", "PipelineGateway", "default_base_url"]
