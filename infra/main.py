"""
CDKTF entrypoint for the Azure platform infrastructure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple
import os
import sys

from constructs import Construct
from cdktf import App, TerraformOutput, TerraformStack

from cdktf_cdktf_provider_azurerm.provider import AzurermProvider
from cdktf_cdktf_provider_azuread.provider import AzureadProvider
from cdktf_cdktf_provider_random.provider import RandomProvider
from cdktf_cdktf_provider_random.string_resource import StringResource

from stacks.azure_stack import synth_config_json
from modules.network.network import provision_network
from modules.dns.private_dns import provision_private_dns_zones
from modules.identity.identity import provision_identities
from modules.monitoring.log_analytics import provision_log_analytics
from modules.storage.storage import provision_storage
from modules.keyvault.keyvault import provision_key_vault
from modules.acr.acr import provision_acr
from modules.aks.aks import provision_aks
from modules.mysql.mysql import provision_mysql
from modules.bastion.bastion import provision_bastion
from modules.vm.vm import provision_vm
from modules.rbac.role_assignments import provision_role_assignments
from iac_types import AzureInfrastructureConfig
from utils.config_loader import load_tfvars_config
from utils.naming import KEY_VAULT, STORAGE_ACCOUNT, check_prefix_fits, suffixed_name
from utils.subnets import PE_SUBNET
from utils.validation import REQUIRED_ENV, missing_env, format_missing_env_message

STACK_NAME = "azure-platform"


def _unique_names(scope: Construct, cfg: AzureInfrastructureConfig) -> Tuple[str, str]:
    """Return (storage account name, key vault name) with a shared suffix."""
    storage_prefix = cfg.storage_config.account_prefix
    vault_prefix = cfg.key_vault_config.vault_prefix
    if cfg.name_suffix:
        return (
            suffixed_name(storage_prefix, cfg.name_suffix, STORAGE_ACCOUNT),
            suffixed_name(vault_prefix, cfg.name_suffix, KEY_VAULT),
        )
    check_prefix_fits(storage_prefix, cfg.suffix_length, STORAGE_ACCOUNT)
    check_prefix_fits(vault_prefix, cfg.suffix_length, KEY_VAULT)
    suffix = StringResource(
        scope,
        "nameSuffix",
        length=cfg.suffix_length,
        special=False,
        upper=False,
    )
    return f"{storage_prefix}{suffix.result}", f"{vault_prefix}{suffix.result}"


class AzurePlatformStack(TerraformStack):
    """TerraformStack that wires Azure resources based on typed config."""

    def __init__(
        self, scope: Construct, id: str, config: AzureInfrastructureConfig
    ) -> None:
        super().__init__(scope, id)
        tags = config.tags

        # Providers
        AzurermProvider(self, "azurerm", features=[{}])
        AzureadProvider(self, "azuread")
        RandomProvider(self, "random")

        # Network foundation
        net = provision_network(scope=self, cfg=config)
        rg_name = net.rg.name
        zones, links = provision_private_dns_zones(
            scope=self,
            rg_name=rg_name,
            vnet=net.vnet,
            zones=config.private_dns_config.zones,
            tags=tags,
        )

        # Identity
        ids = provision_identities(scope=self, cfg=config, rg_name=rg_name)

        # Platform services
        law = provision_log_analytics(scope=self, cfg=config, rg_name=rg_name)
        storage_name, vault_name = _unique_names(self, config)
        storage = provision_storage(
            self,
            config.storage_config,
            storage_name,
            rg_name,
            config.location,
            net.subnets,
            [zones["blob"].id],
            tags,
        )
        kv, tenant_id = provision_key_vault(
            scope=self,
            cfg=config,
            vault_name=vault_name,
            rg_name=rg_name,
            location=config.location,
            subnets=net.subnets,
            private_dns_zone_ids=[zones["key_vault"].id],
            tags=tags,
        )
        acr = provision_acr(
            scope=self,
            cfg=config,
            rg_name=rg_name,
            subnets=net.subnets,
            private_dns_zone_ids=[zones["acr"].id],
            tags=tags,
        )

        # Compute
        aks = provision_aks(
            scope=self,
            cfg=config,
            rg_name=rg_name,
            vnet=net.vnet,
            subnets=net.subnets,
            identity=ids.aks_identity,
            admin_group_object_ids=[
                ids.admin_group.object_id,
                *config.ad_groups_config.extra_admin_object_ids,
            ],
            tenant_id=tenant_id,
            log_analytics=law,
            private_dns_zone=zones.get("aks"),
            tags=tags,
        )
        mysql = provision_mysql(
            scope=self,
            cfg=config,
            rg_name=rg_name,
            location=config.location,
            subnets=net.subnets,
            private_dns_zone=zones["mysql"],
            dns_link=links["mysql"],
            identity=ids.mysql_identity,
            tags=tags,
        )
        bastion, bastion_pip = provision_bastion(
            scope=self, cfg=config, rg_name=rg_name, subnets=net.subnets, tags=tags
        )
        vm = provision_vm(
            scope=self,
            cfg=config,
            rg_name=rg_name,
            subnets=net.subnets,
            bastion=bastion,
            tags=tags,
        )

        # Access bindings
        provision_role_assignments(
            scope=self,
            aks=aks,
            vm=vm,
            acr=acr,
            storage=storage,
            key_vault=kv,
            admin_group=ids.admin_group,
            storage_group=ids.storage_group,
        )

        # Outputs
        for key in net.subnets:
            TerraformOutput(self, f"subnet_id_{key}", value=net.subnets[key].id)
        TerraformOutput(self, "pe_subnet_id", value=net.subnets[PE_SUBNET].id)
        TerraformOutput(self, "aks_name", value=aks.name)
        TerraformOutput(self, "aks_id", value=aks.id)
        TerraformOutput(self, "acr_login_server", value=acr.login_server)
        TerraformOutput(self, "key_vault_name", value=kv.name)
        TerraformOutput(self, "key_vault_uri", value=kv.vault_uri)
        TerraformOutput(self, "storage_account_name", value=storage.name)
        TerraformOutput(self, "mysql_fqdn", value=mysql.fqdn)
        TerraformOutput(self, "bastion_public_ip", value=bastion_pip.ip_address)
        TerraformOutput(self, "vm_principal_id", value=vm.identity.principal_id)
        TerraformOutput(self, "admin_group_object_id", value=ids.admin_group.object_id)
        TerraformOutput(self, "tenant_id", value=tenant_id)
        subscription_id = os.getenv("ARM_SUBSCRIPTION_ID")
        if subscription_id:
            TerraformOutput(self, "subscription_id", value=subscription_id)

        # Surface a copy of the config used for traceability
        TerraformOutput(self, "config_json", value=synth_config_json(config))


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]

    # Preflight: ensure required env vars are present before synthesizing
    missing = missing_env(env=os.environ, keys=list(REQUIRED_ENV))
    if missing:
        msg = format_missing_env_message(missing, stack=STACK_NAME)
        print(msg, file=sys.stderr)
        sys.exit(2)

    try:
        cfg = load_tfvars_config(repo_root=repo_root)
    except (KeyError, ValueError, FileNotFoundError) as ex:
        print(f"Error: {ex}", file=sys.stderr)
        sys.exit(1)

    app = App()
    try:
        AzurePlatformStack(app, STACK_NAME, cfg)
    except (KeyError, ValueError) as ex:
        # Surface a concise, friendly message instead of a long traceback
        print(f"Error: {ex}", file=sys.stderr)
        sys.exit(1)

    try:
        app.synth()
    except Exception as ex:  # noqa: BLE001 - present actionable error
        print("Synthesis failed.", file=sys.stderr)
        print(str(ex), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
