"""
Private endpoint helper shared by the platform services.

Every endpoint lands in ``pe-subnet``; callers pass the subnet map rather
than a subnet so they cannot pick another one.
"""

from __future__ import annotations

from typing import Dict, List

from constructs import Construct

from cdktf_cdktf_provider_azurerm.private_endpoint import PrivateEndpoint
from cdktf_cdktf_provider_azurerm.subnet import Subnet

from utils.subnets import PE_SUBNET, SubnetMap


def provision_private_endpoint(
    *,
    scope: Construct,
    id: str,
    name: str,
    rg_name: str,
    location: str,
    subnets: SubnetMap[Subnet],
    resource_id: str,
    subresource: str,
    private_dns_zone_ids: List[str],
    tags: Dict[str, str],
) -> PrivateEndpoint:
    return PrivateEndpoint(
        scope,
        id,
        name=name,
        resource_group_name=rg_name,
        location=location,
        subnet_id=subnets[PE_SUBNET].id,
        private_service_connection={
            "name": f"{subresource}-connection",
            "private_connection_resource_id": resource_id,
            "is_manual_connection": False,
            "subresource_names": [subresource],
        },
        private_dns_zone_group={
            "name": f"{subresource}-dns-group",
            "private_dns_zone_ids": private_dns_zone_ids,
        },
        tags=tags,
    )
