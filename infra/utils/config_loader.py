"""
Config loader for tfvars -> typed config used by the CDKTF stack.

Functional, pure helpers that parse a minimal subset of .tfvars syntax
for the variables used by this repo. No external dependencies.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from iac_types import (
    ADGroupsConfig,
    AKSConfig,
    AzureInfrastructureConfig,
    BastionConfig,
    BlobStorageConfig,
    ContainerRegistryConfig,
    KeyVaultConfig,
    LinuxVMConfig,
    LogAnalyticsConfig,
    MaintenanceWindow,
    MySQLConfig,
    NodePoolConfig,
    NSGConfig,
    NSGRule,
    PrivateDnsConfig,
    SubnetConfig,
    VNetConfig,
)
from utils.naming import compact
from utils.subnets import (
    AKS_SUBNET,
    BASTION_SUBNET,
    MYSQL_SUBNET,
    PE_SUBNET,
    VM_SUBNET,
)

REQUIRED_SUBNETS = (PE_SUBNET, AKS_SUBNET, MYSQL_SUBNET, BASTION_SUBNET, VM_SUBNET)

# Service key -> private DNS zone for every private-linked service.
PRIVATE_DNS_ZONES = {
    "key_vault": "privatelink.vaultcore.azure.net",
    "acr": "privatelink.azurecr.io",
    "mysql": "privatelink.mysql.database.azure.com",
    "blob": "privatelink.blob.core.windows.net",
}


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def _strip_comment(line: str) -> str:
    """Drop a trailing '#' comment that is not inside a quoted string."""
    quote: Optional[str] = None
    for i, ch in enumerate(line):
        if quote:
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch == "#":
            return line[:i]
    return line


def _depth_delta(text: str) -> int:
    depth = 0
    quote: Optional[str] = None
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
    return depth


def _parse_tfvars(content: str) -> Dict[str, str]:
    """Very small tfvars parser for key = value pairs.

    Supports strings, integers and booleans on single lines, plus lists
    ``[...]`` and flat maps ``{ k = v }`` that may span several lines.
    Values are returned raw; the ``_to_*`` helpers convert them.
    """
    vars_map: Dict[str, str] = {}
    pending_key: Optional[str] = None
    pending: List[str] = []
    depth = 0
    for raw in content.splitlines():
        line = _strip_comment(raw).strip()
        if pending_key is not None:
            if line:
                pending.append(line)
                depth += _depth_delta(line)
            if depth <= 0:
                vars_map[pending_key] = "\n".join(pending)
                pending_key, pending = None, []
            continue
        if not line or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip()
        depth = _depth_delta(val)
        if depth > 0:
            pending_key, pending = key, [val]
            continue
        vars_map[key] = val
    if pending_key is not None:
        raise ValueError(f"Unterminated value for var: {pending_key}")
    return vars_map


def _split_items(body: str) -> List[str]:
    """Split a list/map body on commas and newlines outside quotes."""
    items: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    for ch in body:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ('"', "'"):
            quote = ch
            current.append(ch)
        elif ch in ",\n":
            items.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    items.append("".join(current).strip())
    return [item for item in items if item]


_BOOLS = {"true": True, "false": False}


def _to_bool(value: str) -> bool:
    # tfvars booleans may be written bare or quoted
    parsed = _BOOLS.get(_strip_quotes(value.strip()).lower())
    if parsed is None:
        raise ValueError(f"Invalid boolean value: {value}")
    return parsed


def _to_int(value: str) -> int:
    text = _strip_quotes(value.strip())
    if not text.lstrip("-").isdigit():
        raise ValueError(f"Invalid int value: {value}")
    return int(text)


def _to_list(value: str) -> List[str]:
    value = value.strip()
    if not (value.startswith("[") and value.endswith("]")):
        raise ValueError(f"Invalid list value: {value}")
    return [_strip_quotes(item) for item in _split_items(value[1:-1])]


def _to_map(value: str) -> Dict[str, str]:
    value = value.strip()
    if not (value.startswith("{") and value.endswith("}")):
        raise ValueError(f"Invalid map value: {value}")
    result: Dict[str, str] = {}
    for item in _split_items(value[1:-1]):
        if "=" not in item:
            raise ValueError(f"Invalid map entry: {item}")
        k, v = item.split("=", 1)
        result[_strip_quotes(k.strip())] = _strip_quotes(v.strip())
    return result


def _required(vars_map: Dict[str, str], key: str) -> str:
    value = vars_map.get(key, "")
    if not _strip_quotes(value.strip()):
        raise KeyError(f"Missing required var: {key}")
    return value


def _optional(vars_map: Dict[str, str], key: str, default: str) -> str:
    return vars_map.get(key, default)


def _resource_name(prefix: str, env: str, kind: str) -> str:
    """Hyphenated resource name, e.g. platform-dev-aks."""
    return f"{prefix}-{env}-{kind}"


def _build_vnet_config(
    name: str, vnet_cidr: str, subnet_cidrs: Dict[str, str]
) -> VNetConfig:
    missing = [k for k in REQUIRED_SUBNETS if k not in subnet_cidrs]
    if missing:
        raise KeyError(f"Missing subnet_cidrs entries: {', '.join(missing)}")

    subnets: Dict[str, SubnetConfig] = {}
    for key, cidr in subnet_cidrs.items():
        subnets[key] = SubnetConfig(
            name=key,
            address_prefix=cidr,
            # Bastion brings its own NSG requirements; leave it unassociated
            nsg_key=None if key == BASTION_SUBNET else "default",
            service_endpoints=(
                ["Microsoft.Storage", "Microsoft.KeyVault"] if key == AKS_SUBNET else []
            ),
        )
    # Minimal NSG rules; can be extended per environment needs
    allow_vnet_inbound = NSGRule(
        name="allow-vnet-inbound",
        priority=200,
        direction="Inbound",
        access="Allow",
        protocol="Tcp",
        source="VirtualNetwork",
        destination="VirtualNetwork",
        source_port="*",
        destination_port="*",
    )
    allow_azure_lb = NSGRule(
        name="allow-azlb-inbound",
        priority=210,
        direction="Inbound",
        access="Allow",
        protocol="Tcp",
        source="AzureLoadBalancer",
        destination="*",
        source_port="*",
        destination_port="*",
    )
    nsgs = {
        "default": NSGConfig(
            name=f"{name}-nsg", rules=[allow_vnet_inbound, allow_azure_lb]
        ),
    }
    return VNetConfig(
        name=name,
        address_space=[vnet_cidr],
        subnets=subnets,
        network_security_groups=nsgs,
    )


def _build_pool(vars_map: Dict[str, str], pool: str, zones: List[str]) -> NodePoolConfig:
    min_count = _to_int(_required(vars_map, f"aks_{pool}_min_count"))
    max_count = _to_int(_required(vars_map, f"aks_{pool}_max_count"))
    if min_count < 1 or max_count < min_count:
        raise ValueError(
            f"Invalid autoscaling bounds for {pool} pool: min={min_count} max={max_count}"
        )
    return NodePoolConfig(
        name=pool,
        vm_size=_strip_quotes(_required(vars_map, f"aks_{pool}_vm_size")),
        min_count=min_count,
        max_count=max_count,
        availability_zones=zones,
        os_disk_size_gb=_to_int(_optional(vars_map, f"aks_{pool}_os_disk_size_gb", "128")),
        max_pods=_to_int(_optional(vars_map, f"aks_{pool}_max_pods", "30")),
    )


def _build_aks_config(aks_name: str, vars_map: Dict[str, str]) -> AKSConfig:
    zones = _to_list(_optional(vars_map, "aks_zones", '["1", "2", "3"]'))
    version = _strip_quotes(_optional(vars_map, "aks_kubernetes_version", '""'))
    return AKSConfig(
        cluster_name=aks_name,
        kubernetes_version=version or None,
        sku_tier=_strip_quotes(_optional(vars_map, "aks_sku_tier", '"Standard"')),
        system_pool=_build_pool(vars_map, "system", zones),
        work_pool=_build_pool(vars_map, "work", zones),
        network_plugin="azure",
        network_policy="azure",
        service_cidr=_strip_quotes(_optional(vars_map, "aks_service_cidr", '"10.96.0.0/16"')),
        dns_service_ip=_strip_quotes(_optional(vars_map, "aks_dns_service_ip", '"10.96.0.10"')),
        private_cluster_enabled=_to_bool(_required(vars_map, "aks_private_cluster")),
        workload_identity_enabled=_to_bool(_optional(vars_map, "aks_workload_identity", "true")),
        identity_name=f"{aks_name}-identity",
    )


def _build_mysql_config(vars_map: Dict[str, str], mysql_name: str) -> MySQLConfig:
    ha = _strip_quotes(_optional(vars_map, "mysql_high_availability", '"Disabled"'))
    standby = _strip_quotes(_optional(vars_map, "mysql_standby_zone", '""'))
    return MySQLConfig(
        server_name=mysql_name,
        version=_strip_quotes(_required(vars_map, "mysql_version")),
        sku_name=_strip_quotes(_required(vars_map, "mysql_sku_name")),
        storage_size_gb=_to_int(_required(vars_map, "mysql_storage_gb")),
        storage_iops=_to_int(_optional(vars_map, "mysql_storage_iops", "360")),
        storage_auto_grow=_to_bool(_optional(vars_map, "mysql_storage_auto_grow", "true")),
        backup_retention_days=_to_int(_required(vars_map, "mysql_backup_retention_days")),
        geo_redundant_backup=_to_bool(_required(vars_map, "mysql_geo_redundant_backup")),
        high_availability=None if ha == "Disabled" else ha,
        zone=_strip_quotes(_optional(vars_map, "mysql_zone", '"1"')),
        standby_zone=standby or None,
        maintenance_window=MaintenanceWindow(
            day_of_week=_to_int(_optional(vars_map, "mysql_maintenance_day", "0")),
            start_hour=_to_int(_optional(vars_map, "mysql_maintenance_hour", "2")),
            start_minute=_to_int(_optional(vars_map, "mysql_maintenance_minute", "0")),
        ),
        identity_name=f"{mysql_name}-identity",
    )


def _build_storage_config(
    vars_map: Dict[str, str], prefix: str, env: str, allowed_ips: List[str]
) -> BlobStorageConfig:
    return BlobStorageConfig(
        account_prefix=compact(f"{prefix}{env}st"),
        container_name=_strip_quotes(_required(vars_map, "storage_container_name")),
        access_tier=_strip_quotes(_required(vars_map, "storage_access_tier")),
        replication_type=_strip_quotes(_required(vars_map, "storage_replication_type")),
        allowed_ips=allowed_ips,
    )


def _build_kv_config(
    vars_map: Dict[str, str], prefix: str, env: str, allowed_ips: List[str]
) -> KeyVaultConfig:
    return KeyVaultConfig(
        vault_prefix=_resource_name(prefix, env, "kv-"),
        sku=_strip_quotes(_required(vars_map, "kv_sku")),
        soft_delete_retention_days=_to_int(_optional(vars_map, "kv_soft_delete_days", "7")),
        purge_protection_enabled=_to_bool(_optional(vars_map, "kv_purge_protection", "false")),
        enabled_for_deployment=_to_bool(
            _required(vars_map, "kv_enabled_for_deployment")
        ),
        enabled_for_template_deployment=_to_bool(
            _required(vars_map, "kv_enabled_for_template_deployment")
        ),
        allowed_ips=allowed_ips,
    )


def _build_vm_config(vars_map: Dict[str, str], prefix: str, env: str) -> LinuxVMConfig:
    return LinuxVMConfig(
        vm_name=_resource_name(prefix, env, "vm"),
        size=_strip_quotes(_required(vars_map, "vm_size")),
        admin_username=_strip_quotes(_required(vars_map, "vm_admin_username")),
        image_publisher="Canonical",
        image_offer="0001-com-ubuntu-server-jammy",
        image_sku="22_04-lts-gen2",
        os_disk_size_gb=_to_int(_optional(vars_map, "vm_os_disk_size_gb", "64")),
        os_disk_storage_type=_strip_quotes(
            _optional(vars_map, "vm_os_disk_type", '"StandardSSD_LRS"')
        ),
    )


def build_config(vars_map: Dict[str, str]) -> AzureInfrastructureConfig:
    """Turn parsed tfvars into the typed config."""
    env = _strip_quotes(_required(vars_map, "env"))
    location = _strip_quotes(_required(vars_map, "location"))
    prefix = _strip_quotes(_required(vars_map, "name_prefix"))

    rg_name = _resource_name(prefix, env, "rg")
    vnet_name = _resource_name(prefix, env, "vnet")
    aks_name = _resource_name(prefix, env, "aks")

    tags = {"environment": env, "managed-by": "cdktf"}
    if "tags" in vars_map:
        tags.update(_to_map(vars_map["tags"]))

    name_suffix = _strip_quotes(_optional(vars_map, "name_suffix", '""'))
    allowed_ips = _to_list(_optional(vars_map, "allowed_ips", "[]"))

    vnet_cfg = _build_vnet_config(
        name=vnet_name,
        vnet_cidr=_strip_quotes(_required(vars_map, "vnet_cidr")),
        subnet_cidrs=_to_map(_required(vars_map, "subnet_cidrs")),
    )

    aks_cfg = _build_aks_config(aks_name=aks_name, vars_map=vars_map)
    zones = dict(PRIVATE_DNS_ZONES)
    if aks_cfg.private_cluster_enabled:
        zones["aks"] = f"privatelink.{location}.azmk8s.io"

    return AzureInfrastructureConfig(
        resource_group_name=rg_name,
        location=location,
        tags=tags,
        name_suffix=name_suffix or None,
        suffix_length=_to_int(_optional(vars_map, "suffix_length", "6")),
        vnet_config=vnet_cfg,
        private_dns_config=PrivateDnsConfig(zones=zones),
        ad_groups_config=ADGroupsConfig(
            admin_group_name=_resource_name(prefix, env, "aks-admins"),
            storage_group_name=_resource_name(prefix, env, "storage-access"),
            extra_admin_object_ids=_to_list(
                _optional(vars_map, "aks_admin_object_ids", "[]")
            ),
        ),
        log_analytics_config=LogAnalyticsConfig(
            workspace_name=_resource_name(prefix, env, "law"),
            retention_in_days=_to_int(_optional(vars_map, "log_retention_days", "30")),
        ),
        aks_config=aks_cfg,
        mysql_config=_build_mysql_config(
            vars_map=vars_map, mysql_name=_resource_name(prefix, env, "mysql")
        ),
        storage_config=_build_storage_config(vars_map, prefix, env, allowed_ips),
        key_vault_config=_build_kv_config(vars_map, prefix, env, allowed_ips),
        acr_config=ContainerRegistryConfig(
            registry_name=compact(f"{prefix}{env}acr"),
            sku=_strip_quotes(_optional(vars_map, "acr_sku", '"Premium"')),
        ),
        bastion_config=BastionConfig(
            host_name=_resource_name(prefix, env, "bastion"),
            sku=_strip_quotes(_optional(vars_map, "bastion_sku", '"Basic"')),
        ),
        vm_config=_build_vm_config(vars_map, prefix, env),
    )


def load_tfvars_config(*, repo_root: Path) -> AzureInfrastructureConfig:
    # Use default if env var is missing or empty
    tfvars_file_env = os.getenv("TFVARS_FILE")
    tfvars_file = (
        tfvars_file_env
        if (tfvars_file_env and tfvars_file_env.strip())
        else "vars/dev.tfvars"
    )
    vars_path = (repo_root / tfvars_file).resolve()
    if not vars_path.exists():
        raise FileNotFoundError(f"tfvars file not found: {vars_path}")

    content = vars_path.read_text(encoding="utf-8")
    return build_config(_parse_tfvars(content))
