"""Shared pytest fixtures for the platform CDKTF tests.

- tfvars_text: a complete tfvars document
- platform_config: typed config parsed from tfvars_text
- platform_env: secrets the stack reads from the environment
- synthesized: Terraform JSON of the stack built with a fixed name suffix
"""

import dataclasses
import json
import typing

import pytest

from iac_types import AzureInfrastructureConfig
from utils.config_loader import _parse_tfvars, build_config

TFVARS = """
env         = "dev"
location    = "westeurope"
name_prefix = "platform"

tags = {
  owner = "platform-team"
}

vnet_cidr = "10.20.0.0/16"
subnet_cidrs = {
  "pe-subnet"          = "10.20.1.0/24"
  "aks"                = "10.20.16.0/20"
  "mysql"              = "10.20.2.0/24"
  "AzureBastionSubnet" = "10.20.3.0/26"
  "vm-subnet"          = "10.20.4.0/24"
}

aks_private_cluster  = true
aks_system_vm_size   = "Standard_D4s_v5"
aks_system_min_count = 1
aks_system_max_count = 3
aks_work_vm_size     = "Standard_D8s_v5"
aks_work_min_count   = 2
aks_work_max_count   = 5

mysql_version               = "8.0.21"
mysql_sku_name              = "GP_Standard_D2ds_v4"
mysql_storage_gb            = 64
mysql_backup_retention_days = 7
mysql_geo_redundant_backup  = false
mysql_high_availability     = "ZoneRedundant"
mysql_zone                  = "1"
mysql_standby_zone          = "2"
mysql_maintenance_day       = 0
mysql_maintenance_hour      = 3

storage_container_name   = "data"
storage_access_tier      = "Hot"
storage_replication_type = "zrs"

kv_sku                             = "standard"
kv_enabled_for_deployment          = false
kv_enabled_for_template_deployment = false

vm_size           = "Standard_B2s"
vm_admin_username = "azureuser"
"""

PLATFORM_ENV = {
    "ARM_TENANT_ID": "00000000-0000-0000-0000-000000000001",
    "MYSQL_ADMIN_LOGIN": "mysqladmin",
    "MYSQL_ADMIN_PASSWORD": "not-a-real-password",
    "VM_ADMIN_PASSWORD": "not-a-real-password",
}

FIXED_SUFFIX = "abc123"


def synthesize(cfg: AzureInfrastructureConfig) -> dict[str, typing.Any]:
    """Build the stack in a throwaway app and return its Terraform JSON."""
    from cdktf import Testing

    from main import AzurePlatformStack

    app = Testing.app()
    stack = AzurePlatformStack(app, "test", cfg)
    return json.loads(Testing.synth(stack))


def resources(synth: dict[str, typing.Any], tf_type: str) -> dict[str, dict[str, typing.Any]]:
    return synth.get("resource", {}).get(tf_type, {})


def one(block: typing.Any) -> dict[str, typing.Any]:
    """Single nested blocks may render as an object or a one-element list."""
    if isinstance(block, list):
        assert len(block) == 1
        return block[0]
    return block


@pytest.fixture
def tfvars_text() -> str:
    return TFVARS


@pytest.fixture(scope="module")
def platform_config() -> AzureInfrastructureConfig:
    return build_config(_parse_tfvars(TFVARS))


@pytest.fixture(scope="module")
def platform_env() -> typing.Iterator[dict[str, str]]:
    with pytest.MonkeyPatch.context() as mp:
        for key, value in PLATFORM_ENV.items():
            mp.setenv(key, value)
        yield PLATFORM_ENV


@pytest.fixture(scope="module")
def fixed_config(platform_config: AzureInfrastructureConfig) -> AzureInfrastructureConfig:
    return dataclasses.replace(platform_config, name_suffix=FIXED_SUFFIX)


@pytest.fixture(scope="module")
def synthesized(
    platform_env: dict[str, str], fixed_config: AzureInfrastructureConfig
) -> dict[str, typing.Any]:
    return synthesize(fixed_config)
