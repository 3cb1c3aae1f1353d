"""
Network module.

Creates RG, VNet, NSGs and the keyed subnet map.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from constructs import Construct

from cdktf import TerraformOutput
from cdktf_cdktf_provider_azurerm.resource_group import ResourceGroup
from cdktf_cdktf_provider_azurerm.virtual_network import VirtualNetwork
from cdktf_cdktf_provider_azurerm.subnet import Subnet
from cdktf_cdktf_provider_azurerm.network_security_group import NetworkSecurityGroup
from cdktf_cdktf_provider_azurerm.network_security_rule import NetworkSecurityRule

from iac_types import AzureInfrastructureConfig
from modules.subnet.subnet import provision_subnet
from utils.subnets import SubnetMap


@dataclass
class NetworkResources:
    rg: ResourceGroup
    vnet: VirtualNetwork
    nsgs: Dict[str, NetworkSecurityGroup]
    subnets: SubnetMap[Subnet]


def provision_network(
    *, scope: Construct, cfg: AzureInfrastructureConfig
) -> NetworkResources:
    """Provision networking and return the RG, VNet, NSGs and keyed subnets."""
    rg = ResourceGroup(
        scope, "rg", name=cfg.resource_group_name, location=cfg.location, tags=cfg.tags
    )

    vnet = VirtualNetwork(
        scope,
        "vnet",
        name=cfg.vnet_config.name,
        location=cfg.location,
        resource_group_name=rg.name,
        address_space=cfg.vnet_config.address_space,
        tags=cfg.tags,
    )

    nsgs: Dict[str, NetworkSecurityGroup] = {}
    for nsg_key, nsg_cfg in cfg.vnet_config.network_security_groups.items():
        nsg = NetworkSecurityGroup(
            scope,
            f"nsg-{nsg_key}",
            name=nsg_cfg.name,
            location=cfg.location,
            resource_group_name=rg.name,
            tags=cfg.tags,
        )
        for rule in nsg_cfg.rules:
            NetworkSecurityRule(
                scope,
                f"nsg-{nsg_key}-{rule.name}",
                name=rule.name,
                priority=rule.priority,
                direction=rule.direction,
                access=rule.access,
                protocol=rule.protocol,
                source_port_range=rule.source_port,
                destination_port_range=rule.destination_port,
                source_address_prefix=rule.source,
                destination_address_prefix=rule.destination,
                resource_group_name=rg.name,
                network_security_group_name=nsg.name,
            )
        nsgs[nsg_key] = nsg

    subnets: Dict[str, Subnet] = {}
    for key, subnet_cfg in cfg.vnet_config.subnets.items():
        if subnet_cfg.nsg_key is not None and subnet_cfg.nsg_key not in nsgs:
            raise ValueError(
                f"Subnet '{key}' references undeclared NSG '{subnet_cfg.nsg_key}'"
            )
        subnets[key] = provision_subnet(
            scope=scope,
            key=key,
            cfg=subnet_cfg,
            rg_name=rg.name,
            vnet=vnet,
            nsg=nsgs[subnet_cfg.nsg_key] if subnet_cfg.nsg_key else None,
        )

    TerraformOutput(scope, "resource_group", value=rg.name)
    TerraformOutput(scope, "virtual_network", value=vnet.name)
    TerraformOutput(scope, "virtual_network_id", value=vnet.id)
    for nsg_key, nsg in nsgs.items():
        TerraformOutput(scope, f"nsg_id_{nsg_key}", value=nsg.id)

    return NetworkResources(rg=rg, vnet=vnet, nsgs=nsgs, subnets=SubnetMap(subnets))
