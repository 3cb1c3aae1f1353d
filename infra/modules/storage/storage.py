"""
Storage module for Azure Blob Storage with a private endpoint.

Provisions Storage Account, Container, Management Policy and the blob
Private Endpoint. The account name is computed by the caller.
"""

from typing import Dict, List

from constructs import Construct

from cdktf_cdktf_provider_azurerm.storage_account import StorageAccount
from cdktf_cdktf_provider_azurerm.storage_container import StorageContainer
from cdktf_cdktf_provider_azurerm.storage_management_policy import (
    StorageManagementPolicy,
    StorageManagementPolicyRule,
    StorageManagementPolicyRuleActions,
    StorageManagementPolicyRuleActionsVersion,
    StorageManagementPolicyRuleFilters,
)
from cdktf_cdktf_provider_azurerm.subnet import Subnet
from iac_types import BlobStorageConfig
from modules.private_endpoint.private_endpoint import provision_private_endpoint
from utils.subnets import SubnetMap


def provision_storage(
    scope: Construct,
    config: BlobStorageConfig,
    account_name: str,
    rg_name: str,
    location: str,
    subnets: SubnetMap[Subnet],
    private_dns_zone_ids: List[str],
    tags: Dict[str, str],
) -> StorageAccount:
    """Provision storage resources with private connectivity."""
    # Storage Account with network rules denying public traffic, versioning, soft-delete
    storage_account = StorageAccount(
        scope,
        "storageAccount",
        name=account_name,
        resource_group_name=rg_name,
        location=location,
        account_kind="StorageV2",
        account_tier="Standard",
        account_replication_type=config.replication_type.upper(),
        access_tier=config.access_tier,
        https_traffic_only_enabled=True,
        min_tls_version="TLS1_2",
        shared_access_key_enabled=True,
        public_network_access_enabled=bool(config.allowed_ips),
        allow_nested_items_to_be_public=False,
        network_rules={
            "default_action": "Deny",
            "bypass": ["AzureServices"],
            "ip_rules": config.allowed_ips,
        },
        blob_properties={
            "versioning_enabled": True,
            "delete_retention_policy": {"days": 7},
            "container_delete_retention_policy": {"days": 7},
        },
        tags=tags,
    )

    StorageContainer(
        scope,
        "storageContainer",
        name=config.container_name,
        storage_account_id=storage_account.id,
        container_access_type="private",
    )

    # Expire old blob versions so versioning does not grow unbounded
    StorageManagementPolicy(
        scope,
        "storageManagementPolicy",
        storage_account_id=storage_account.id,
        rule=[
            StorageManagementPolicyRule(
                name="expire-old-versions",
                enabled=True,
                filters=StorageManagementPolicyRuleFilters(
                    blob_types=["blockBlob"],
                ),
                actions=StorageManagementPolicyRuleActions(
                    version=StorageManagementPolicyRuleActionsVersion(
                        delete_after_days_since_creation=90,
                    ),
                ),
            )
        ],
    )

    provision_private_endpoint(
        scope=scope,
        id="privateEndpointBlob",
        name=f"{config.account_prefix}-blob-pe",
        rg_name=rg_name,
        location=location,
        subnets=subnets,
        resource_id=storage_account.id,
        subresource="blob",
        private_dns_zone_ids=private_dns_zone_ids,
        tags=tags,
    )

    return storage_account
