"""
MySQL Flexible Server module.

Creates a private MySQL Flexible Server in the delegated subnet, bound to
its private DNS zone and to a pre-created user-assigned identity.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from constructs import Construct

from cdktf_cdktf_provider_azurerm.mysql_flexible_server import MysqlFlexibleServer
from cdktf_cdktf_provider_azurerm.mysql_flexible_server_configuration import (
    MysqlFlexibleServerConfiguration,
)
from cdktf_cdktf_provider_azurerm.private_dns_zone import PrivateDnsZone
from cdktf_cdktf_provider_azurerm.private_dns_zone_virtual_network_link import (
    PrivateDnsZoneVirtualNetworkLink,
)
from cdktf_cdktf_provider_azurerm.subnet import Subnet
from cdktf_cdktf_provider_azurerm.user_assigned_identity import UserAssignedIdentity

from iac_types import AzureInfrastructureConfig, MySQLConfig
from utils.subnets import MYSQL_SUBNET, SubnetMap


def _high_availability(mysql_cfg: MySQLConfig) -> Optional[Dict[str, Any]]:
    if mysql_cfg.high_availability is None:
        return None
    if mysql_cfg.high_availability not in ("ZoneRedundant", "SameZone"):
        raise ValueError(
            f"Unsupported MySQL high availability mode: {mysql_cfg.high_availability}"
        )
    ha: Dict[str, Any] = {"mode": mysql_cfg.high_availability}
    if mysql_cfg.high_availability == "ZoneRedundant":
        if not mysql_cfg.standby_zone or mysql_cfg.standby_zone == mysql_cfg.zone:
            raise ValueError(
                "ZoneRedundant MySQL needs a standby zone different from the primary zone"
            )
        ha["standby_availability_zone"] = mysql_cfg.standby_zone
    return ha


def provision_mysql(
    *,
    scope: Construct,
    cfg: AzureInfrastructureConfig,
    rg_name: str,
    location: str,
    subnets: SubnetMap[Subnet],
    private_dns_zone: PrivateDnsZone,
    dns_link: PrivateDnsZoneVirtualNetworkLink,
    identity: UserAssignedIdentity,
    tags: Dict[str, str],
) -> MysqlFlexibleServer:
    """Provision MySQL Flexible Server and return the server resource."""
    admin_login: Optional[str] = os.getenv("MYSQL_ADMIN_LOGIN")
    admin_password: Optional[str] = os.getenv("MYSQL_ADMIN_PASSWORD")
    if not admin_login or not admin_password:
        raise ValueError(
            "MYSQL_ADMIN_LOGIN and MYSQL_ADMIN_PASSWORD must be set as environment variables."
        )

    mysql_cfg = cfg.mysql_config
    subnet_db = subnets[MYSQL_SUBNET]
    window = mysql_cfg.maintenance_window

    server = MysqlFlexibleServer(
        scope,
        "mysql",
        name=mysql_cfg.server_name,
        location=location,
        resource_group_name=rg_name,
        version=mysql_cfg.version,
        sku_name=mysql_cfg.sku_name,
        administrator_login=admin_login,
        administrator_password=admin_password,
        backup_retention_days=mysql_cfg.backup_retention_days,
        geo_redundant_backup_enabled=mysql_cfg.geo_redundant_backup,
        high_availability=_high_availability(mysql_cfg),
        maintenance_window={
            "day_of_week": window.day_of_week,
            "start_hour": window.start_hour,
            "start_minute": window.start_minute,
        },
        storage={
            "size_gb": mysql_cfg.storage_size_gb,
            "iops": mysql_cfg.storage_iops,
            "auto_grow_enabled": mysql_cfg.storage_auto_grow,
        },
        identity={"type": "UserAssigned", "identity_ids": [identity.id]},
        delegated_subnet_id=subnet_db.id,
        private_dns_zone_id=private_dns_zone.id,
        zone=mysql_cfg.zone,
        tags=tags,
        depends_on=[dns_link, subnet_db],
    )

    MysqlFlexibleServerConfiguration(
        scope,
        "mysqlConfigSecureTransport",
        name="require_secure_transport",
        resource_group_name=rg_name,
        server_name=server.name,
        value="ON",
    )

    return server
