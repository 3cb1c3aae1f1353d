"""
Log Analytics module.

Workspace backing Container Insights for the AKS cluster.
"""

from __future__ import annotations

from constructs import Construct

from cdktf_cdktf_provider_azurerm.log_analytics_workspace import LogAnalyticsWorkspace

from iac_types import AzureInfrastructureConfig


def provision_log_analytics(
    *, scope: Construct, cfg: AzureInfrastructureConfig, rg_name: str
) -> LogAnalyticsWorkspace:
    return LogAnalyticsWorkspace(
        scope,
        "logAnalytics",
        name=cfg.log_analytics_config.workspace_name,
        location=cfg.location,
        resource_group_name=rg_name,
        sku="PerGB2018",
        retention_in_days=cfg.log_analytics_config.retention_in_days,
        tags=cfg.tags,
    )
