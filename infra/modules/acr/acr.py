"""
Container registry module.

Premium registry (private link needs Premium) reachable only through its
private endpoint in pe-subnet.
"""

from __future__ import annotations

from typing import Dict, List

from constructs import Construct

from cdktf_cdktf_provider_azurerm.container_registry import ContainerRegistry
from cdktf_cdktf_provider_azurerm.subnet import Subnet

from iac_types import AzureInfrastructureConfig
from modules.private_endpoint.private_endpoint import provision_private_endpoint
from utils.naming import CONTAINER_REGISTRY, validate_name
from utils.subnets import SubnetMap


def provision_acr(
    *,
    scope: Construct,
    cfg: AzureInfrastructureConfig,
    rg_name: str,
    subnets: SubnetMap[Subnet],
    private_dns_zone_ids: List[str],
    tags: Dict[str, str],
) -> ContainerRegistry:
    acr_cfg = cfg.acr_config
    if acr_cfg.sku != "Premium":
        raise ValueError(
            f"Container registry SKU must be Premium for private endpoints, got {acr_cfg.sku}"
        )
    name = validate_name(acr_cfg.registry_name, CONTAINER_REGISTRY)

    acr = ContainerRegistry(
        scope,
        "acr",
        name=name,
        location=cfg.location,
        resource_group_name=rg_name,
        sku=acr_cfg.sku,
        admin_enabled=False,
        public_network_access_enabled=False,
        network_rule_bypass_option="AzureServices",
        tags=tags,
    )

    provision_private_endpoint(
        scope=scope,
        id="privateEndpointRegistry",
        name=f"{name}-pe",
        rg_name=rg_name,
        location=cfg.location,
        subnets=subnets,
        resource_id=acr.id,
        subresource="registry",
        private_dns_zone_ids=private_dns_zone_ids,
        tags=tags,
    )
    return acr
