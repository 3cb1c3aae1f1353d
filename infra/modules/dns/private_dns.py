"""
Private DNS module.

One private zone per private-linked service, each linked to the VNet with
auto-registration disabled.
"""

from __future__ import annotations

from typing import Dict, Tuple

from constructs import Construct

from cdktf_cdktf_provider_azurerm.private_dns_zone import PrivateDnsZone
from cdktf_cdktf_provider_azurerm.private_dns_zone_virtual_network_link import (
    PrivateDnsZoneVirtualNetworkLink,
)
from cdktf_cdktf_provider_azurerm.virtual_network import VirtualNetwork


def provision_private_dns_zones(
    *,
    scope: Construct,
    rg_name: str,
    vnet: VirtualNetwork,
    zones: Dict[str, str],
    tags: Dict[str, str],
) -> Tuple[Dict[str, PrivateDnsZone], Dict[str, PrivateDnsZoneVirtualNetworkLink]]:
    """Provision zones + VNet links and return both keyed by service."""
    created: Dict[str, PrivateDnsZone] = {}
    links: Dict[str, PrivateDnsZoneVirtualNetworkLink] = {}
    for key, zone_name in zones.items():
        zone = PrivateDnsZone(
            scope,
            f"pdns-{key}",
            name=zone_name,
            resource_group_name=rg_name,
            tags=tags,
        )
        links[key] = PrivateDnsZoneVirtualNetworkLink(
            scope,
            f"pdns-{key}-link",
            name=f"{key}-vnet-link",
            resource_group_name=rg_name,
            private_dns_zone_name=zone.name,
            virtual_network_id=vnet.id,
            registration_enabled=False,
            tags=tags,
        )
        created[key] = zone
    return created, links
