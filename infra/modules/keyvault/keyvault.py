"""
Key Vault module.

Creates Azure Key Vault with RBAC enabled, network ACLs denying public
traffic and a private endpoint in pe-subnet.
"""

from __future__ import annotations

import os
from typing import Dict, List, Tuple

from constructs import Construct

from cdktf_cdktf_provider_azurerm.key_vault import KeyVault
from cdktf_cdktf_provider_azurerm.subnet import Subnet

from iac_types import AzureInfrastructureConfig
from modules.private_endpoint.private_endpoint import provision_private_endpoint
from utils.subnets import SubnetMap


def provision_key_vault(
    *,
    scope: Construct,
    cfg: AzureInfrastructureConfig,
    vault_name: str,
    rg_name: str,
    location: str,
    subnets: SubnetMap[Subnet],
    private_dns_zone_ids: List[str],
    tags: Dict[str, str],
) -> Tuple[KeyVault, str]:
    """Provision Key Vault and return (vault, tenant_id)."""
    tenant_id = os.getenv("ARM_TENANT_ID")
    if not tenant_id:
        raise ValueError("ARM_TENANT_ID must be set for Key Vault tenant binding")
    kv_cfg = cfg.key_vault_config
    kv = KeyVault(
        scope,
        "keyVault",
        name=vault_name,
        location=location,
        resource_group_name=rg_name,
        tenant_id=tenant_id,
        sku_name=kv_cfg.sku,
        soft_delete_retention_days=kv_cfg.soft_delete_retention_days,
        purge_protection_enabled=kv_cfg.purge_protection_enabled,
        enabled_for_deployment=kv_cfg.enabled_for_deployment,
        enabled_for_template_deployment=kv_cfg.enabled_for_template_deployment,
        rbac_authorization_enabled=True,
        public_network_access_enabled=bool(kv_cfg.allowed_ips),
        network_acls={
            "default_action": "Deny",
            "bypass": "AzureServices",
            "ip_rules": kv_cfg.allowed_ips,
        },
        tags=tags,
    )

    provision_private_endpoint(
        scope=scope,
        id="privateEndpointVault",
        name=f"{kv_cfg.vault_prefix.rstrip('-')}-pe",
        rg_name=rg_name,
        location=location,
        subnets=subnets,
        resource_id=kv.id,
        subresource="vault",
        private_dns_zone_ids=private_dns_zone_ids,
        tags=tags,
    )
    return kv, tenant_id
