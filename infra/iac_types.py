from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class SubnetConfig:
    name: str
    address_prefix: str
    nsg_key: Optional[str]  # key into VNetConfig.network_security_groups
    service_endpoints: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NSGRule:
    name: str
    priority: int
    direction: str  # Inbound or Outbound
    access: str  # Allow or Deny
    protocol: str  # Tcp/Udp/Asterisk
    source: str
    destination: str
    source_port: str
    destination_port: str


@dataclass(frozen=True)
class NSGConfig:
    name: str
    rules: List[NSGRule]


@dataclass(frozen=True)
class VNetConfig:
    name: str
    address_space: List[str]
    subnets: Dict[str, SubnetConfig]
    network_security_groups: Dict[str, NSGConfig]


@dataclass(frozen=True)
class PrivateDnsConfig:
    zones: Dict[str, str]  # service key -> zone name


@dataclass(frozen=True)
class ADGroupsConfig:
    admin_group_name: str
    storage_group_name: str
    extra_admin_object_ids: List[str]


@dataclass(frozen=True)
class NodePoolConfig:
    name: str
    vm_size: str
    min_count: int
    max_count: int
    availability_zones: List[str]
    os_disk_size_gb: int
    max_pods: int


@dataclass(frozen=True)
class AKSConfig:
    cluster_name: str
    kubernetes_version: Optional[str]
    sku_tier: str  # Free/Standard/Premium
    system_pool: NodePoolConfig
    work_pool: NodePoolConfig
    network_plugin: str  # e.g., "azure"
    network_policy: str  # e.g., "azure"
    service_cidr: str
    dns_service_ip: str
    private_cluster_enabled: bool
    workload_identity_enabled: bool
    identity_name: str


@dataclass(frozen=True)
class MaintenanceWindow:
    day_of_week: int  # 0 = Sunday
    start_hour: int
    start_minute: int


@dataclass(frozen=True)
class MySQLConfig:
    server_name: str
    version: str
    sku_name: str
    storage_size_gb: int
    storage_iops: int
    storage_auto_grow: bool
    backup_retention_days: int
    geo_redundant_backup: bool
    high_availability: Optional[str]  # "ZoneRedundant", "SameZone" or None
    zone: str
    standby_zone: Optional[str]
    maintenance_window: MaintenanceWindow
    identity_name: str


@dataclass(frozen=True)
class BlobStorageConfig:
    account_prefix: str
    container_name: str
    access_tier: str  # Hot/Cool
    replication_type: str  # LRS/ZRS/GRS
    allowed_ips: List[str]


@dataclass(frozen=True)
class KeyVaultConfig:
    vault_prefix: str
    sku: str
    soft_delete_retention_days: int
    purge_protection_enabled: bool
    enabled_for_deployment: bool
    enabled_for_template_deployment: bool
    allowed_ips: List[str]


@dataclass(frozen=True)
class ContainerRegistryConfig:
    registry_name: str
    sku: str


@dataclass(frozen=True)
class LogAnalyticsConfig:
    workspace_name: str
    retention_in_days: int


@dataclass(frozen=True)
class BastionConfig:
    host_name: str
    sku: str


@dataclass(frozen=True)
class LinuxVMConfig:
    vm_name: str
    size: str
    admin_username: str
    image_publisher: str
    image_offer: str
    image_sku: str
    os_disk_size_gb: int
    os_disk_storage_type: str


@dataclass(frozen=True)
class AzureInfrastructureConfig:
    resource_group_name: str
    location: str
    tags: Dict[str, str]
    name_suffix: Optional[str]  # fixed suffix; None draws a random_string
    suffix_length: int
    vnet_config: VNetConfig
    private_dns_config: PrivateDnsConfig
    ad_groups_config: ADGroupsConfig
    log_analytics_config: LogAnalyticsConfig
    aks_config: AKSConfig
    mysql_config: MySQLConfig
    storage_config: BlobStorageConfig
    key_vault_config: KeyVaultConfig
    acr_config: ContainerRegistryConfig
    bastion_config: BastionConfig
    vm_config: LinuxVMConfig
