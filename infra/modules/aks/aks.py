"""
AKS module.

Creates a (optionally private) AKS cluster with a system pool and a work
pool, Azure AD RBAC, workload identity and Container Insights. The function
is pure with respect to inputs and returns the created cluster.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from constructs import Construct

from cdktf_cdktf_provider_azurerm.kubernetes_cluster import KubernetesCluster
from cdktf_cdktf_provider_azurerm.kubernetes_cluster_node_pool import (
    KubernetesClusterNodePool,
)
from cdktf_cdktf_provider_azurerm.log_analytics_workspace import LogAnalyticsWorkspace
from cdktf_cdktf_provider_azurerm.private_dns_zone import PrivateDnsZone
from cdktf_cdktf_provider_azurerm.role_assignment import RoleAssignment
from cdktf_cdktf_provider_azurerm.subnet import Subnet
from cdktf_cdktf_provider_azurerm.user_assigned_identity import UserAssignedIdentity
from cdktf_cdktf_provider_azurerm.virtual_network import VirtualNetwork

from iac_types import AzureInfrastructureConfig
from utils.subnets import AKS_SUBNET, SubnetMap


def provision_aks(
    *,
    scope: Construct,
    cfg: AzureInfrastructureConfig,
    rg_name: str,
    vnet: VirtualNetwork,
    subnets: SubnetMap[Subnet],
    identity: UserAssignedIdentity,
    admin_group_object_ids: List[str],
    tenant_id: str,
    log_analytics: LogAnalyticsWorkspace,
    private_dns_zone: Optional[PrivateDnsZone],
    tags: Dict[str, str],
) -> KubernetesCluster:
    """Provision AKS using settings from cfg and return the cluster."""
    aks_cfg = cfg.aks_config
    if aks_cfg.private_cluster_enabled and private_dns_zone is None:
        raise ValueError("A private AKS cluster needs its private DNS zone")
    subnet_aks = subnets[AKS_SUBNET]

    # The control-plane identity must manage the zone and join the subnet
    # before the cluster is created.
    prerequisites = [
        RoleAssignment(
            scope,
            "aksIdentityNetworkContributor",
            scope=vnet.id,
            role_definition_name="Network Contributor",
            principal_id=identity.principal_id,
            principal_type="ServicePrincipal",
            depends_on=[vnet, identity],
        )
    ]
    if aks_cfg.private_cluster_enabled:
        prerequisites.append(
            RoleAssignment(
                scope,
                "aksIdentityDnsContributor",
                scope=private_dns_zone.id,
                role_definition_name="Private DNS Zone Contributor",
                principal_id=identity.principal_id,
                principal_type="ServicePrincipal",
                depends_on=[private_dns_zone, identity],
            )
        )

    system = aks_cfg.system_pool
    aks = KubernetesCluster(
        scope,
        "aks",
        name=aks_cfg.cluster_name,
        location=cfg.location,
        resource_group_name=rg_name,
        dns_prefix=f"{aks_cfg.cluster_name}-dns",
        kubernetes_version=aks_cfg.kubernetes_version,
        sku_tier=aks_cfg.sku_tier,
        default_node_pool={
            "name": system.name,
            "vm_size": system.vm_size,
            "vnet_subnet_id": subnet_aks.id,
            "type": "VirtualMachineScaleSets",
            "auto_scaling_enabled": True,
            "min_count": system.min_count,
            "max_count": system.max_count,
            "zones": system.availability_zones,
            "os_disk_size_gb": system.os_disk_size_gb,
            "max_pods": system.max_pods,
            "only_critical_addons_enabled": True,
            "temporary_name_for_rotation": f"{system.name}tmp",
        },
        identity={"type": "UserAssigned", "identity_ids": [identity.id]},
        private_cluster_enabled=aks_cfg.private_cluster_enabled,
        private_dns_zone_id=(
            private_dns_zone.id if aks_cfg.private_cluster_enabled else None
        ),
        oidc_issuer_enabled=aks_cfg.workload_identity_enabled,
        workload_identity_enabled=aks_cfg.workload_identity_enabled,
        azure_active_directory_role_based_access_control={
            "tenant_id": tenant_id,
            "admin_group_object_ids": admin_group_object_ids,
            "azure_rbac_enabled": True,
        },
        local_account_disabled=True,
        oms_agent={
            "log_analytics_workspace_id": log_analytics.id,
            "msi_auth_for_monitoring_enabled": True,
        },
        network_profile={
            "network_plugin": aks_cfg.network_plugin,
            "network_policy": aks_cfg.network_policy,
            "load_balancer_sku": "standard",
            "service_cidr": aks_cfg.service_cidr,
            "dns_service_ip": aks_cfg.dns_service_ip,
        },
        role_based_access_control_enabled=True,
        tags=tags,
        depends_on=prerequisites,
    )

    work = aks_cfg.work_pool
    KubernetesClusterNodePool(
        scope,
        "aksWorkPool",
        kubernetes_cluster_id=aks.id,
        name=work.name,
        vm_size=work.vm_size,
        vnet_subnet_id=subnet_aks.id,
        mode="User",
        auto_scaling_enabled=True,
        min_count=work.min_count,
        max_count=work.max_count,
        zones=work.availability_zones,
        os_disk_size_gb=work.os_disk_size_gb,
        max_pods=work.max_pods,
        tags=tags,
    )

    return aks
