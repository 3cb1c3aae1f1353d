"""
Identity module.

Creates the Azure AD groups (AKS admins, storage access) and the
user-assigned managed identities handed to AKS and MySQL. Identities are
created up front so their lifecycle is independent of the servers using them.
"""

from __future__ import annotations

from dataclasses import dataclass

from constructs import Construct

from cdktf_cdktf_provider_azuread.data_azuread_client_config import (
    DataAzureadClientConfig,
)
from cdktf_cdktf_provider_azuread.group import Group
from cdktf_cdktf_provider_azurerm.user_assigned_identity import UserAssignedIdentity

from iac_types import AzureInfrastructureConfig


@dataclass
class Identities:
    admin_group: Group
    storage_group: Group
    aks_identity: UserAssignedIdentity
    mysql_identity: UserAssignedIdentity


def provision_identities(
    *, scope: Construct, cfg: AzureInfrastructureConfig, rg_name: str
) -> Identities:
    client = DataAzureadClientConfig(scope, "azureadClient")

    admin_group = Group(
        scope,
        "adminGroup",
        display_name=cfg.ad_groups_config.admin_group_name,
        description="Cluster administrators for the platform AKS cluster",
        security_enabled=True,
        owners=[client.object_id],
    )

    storage_group = Group(
        scope,
        "storageGroup",
        display_name=cfg.ad_groups_config.storage_group_name,
        description="Blob data access to the platform storage account",
        security_enabled=True,
        owners=[client.object_id],
    )

    aks_identity = UserAssignedIdentity(
        scope,
        "aksIdentity",
        name=cfg.aks_config.identity_name,
        location=cfg.location,
        resource_group_name=rg_name,
        tags=cfg.tags,
    )

    mysql_identity = UserAssignedIdentity(
        scope,
        "mysqlIdentity",
        name=cfg.mysql_config.identity_name,
        location=cfg.location,
        resource_group_name=rg_name,
        tags=cfg.tags,
    )

    return Identities(
        admin_group=admin_group,
        storage_group=storage_group,
        aks_identity=aks_identity,
        mysql_identity=mysql_identity,
    )
