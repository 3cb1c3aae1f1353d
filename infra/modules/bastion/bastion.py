"""
Bastion module.

Static Standard public IP, then a bastion host in AzureBastionSubnet.
"""

from __future__ import annotations

from typing import Dict, Tuple

from constructs import Construct

from cdktf_cdktf_provider_azurerm.bastion_host import (
    BastionHost,
    BastionHostIpConfiguration,
)
from cdktf_cdktf_provider_azurerm.public_ip import PublicIp
from cdktf_cdktf_provider_azurerm.subnet import Subnet

from iac_types import AzureInfrastructureConfig
from utils.subnets import BASTION_SUBNET, SubnetMap


def provision_bastion(
    *,
    scope: Construct,
    cfg: AzureInfrastructureConfig,
    rg_name: str,
    subnets: SubnetMap[Subnet],
    tags: Dict[str, str],
) -> Tuple[BastionHost, PublicIp]:
    """Provision the bastion and return (host, public_ip)."""
    name = cfg.bastion_config.host_name
    pip = PublicIp(
        scope,
        "bastionPip",
        name=f"{name}-pip",
        location=cfg.location,
        resource_group_name=rg_name,
        allocation_method="Static",
        sku="Standard",
        tags=tags,
    )

    host = BastionHost(
        scope,
        "bastionHost",
        name=name,
        location=cfg.location,
        resource_group_name=rg_name,
        sku=cfg.bastion_config.sku,
        ip_configuration=BastionHostIpConfiguration(
            name="bastionIpConfig",
            subnet_id=subnets[BASTION_SUBNET].id,
            public_ip_address_id=pip.id,
        ),
        tags=tags,
        depends_on=[pip],
    )
    return host, pip
