"""
Subnet module.

One instance per entry of the VNet subnet map. The ``mysql`` entry is
delegated to MySQL flexible servers; every other entry has no delegation.
"""

from __future__ import annotations

from typing import Optional

from constructs import Construct

from cdktf_cdktf_provider_azurerm.network_security_group import NetworkSecurityGroup
from cdktf_cdktf_provider_azurerm.subnet import (
    Subnet,
    SubnetDelegation,
    SubnetDelegationServiceDelegation,
)
from cdktf_cdktf_provider_azurerm.subnet_network_security_group_association import (
    SubnetNetworkSecurityGroupAssociation,
)
from cdktf_cdktf_provider_azurerm.virtual_network import VirtualNetwork

from iac_types import SubnetConfig
from utils.subnets import PE_SUBNET, delegations_for


def provision_subnet(
    *,
    scope: Construct,
    key: str,
    cfg: SubnetConfig,
    rg_name: str,
    vnet: VirtualNetwork,
    nsg: Optional[NetworkSecurityGroup],
) -> Subnet:
    """Provision the subnet declared under ``key`` and associate its NSG."""
    delegation = [
        SubnetDelegation(
            name=d.name,
            service_delegation=SubnetDelegationServiceDelegation(
                name=d.service,
                actions=d.actions,
            ),
        )
        for d in delegations_for(key)
    ]

    subnet = Subnet(
        scope,
        f"subnet-{key}",
        name=cfg.name,
        resource_group_name=rg_name,
        virtual_network_name=vnet.name,
        address_prefixes=[cfg.address_prefix],
        service_endpoints=cfg.service_endpoints or None,
        private_endpoint_network_policies="Disabled" if key == PE_SUBNET else None,
        delegation=delegation or None,
        depends_on=[vnet],
    )

    if nsg is not None:
        SubnetNetworkSecurityGroupAssociation(
            scope,
            f"subnet-{key}-nsg-assoc",
            subnet_id=subnet.id,
            network_security_group_id=nsg.id,
        )

    return subnet
