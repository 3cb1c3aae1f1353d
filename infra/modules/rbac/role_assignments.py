"""
Role assignment bindings.

Every assignment depends on both its scope resource and the resource that
produces its principal, so none can run before either exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from constructs import Construct

from cdktf import ITerraformDependable
from cdktf_cdktf_provider_azuread.group import Group
from cdktf_cdktf_provider_azurerm.container_registry import ContainerRegistry
from cdktf_cdktf_provider_azurerm.key_vault import KeyVault
from cdktf_cdktf_provider_azurerm.kubernetes_cluster import KubernetesCluster
from cdktf_cdktf_provider_azurerm.linux_virtual_machine import LinuxVirtualMachine
from cdktf_cdktf_provider_azurerm.role_assignment import RoleAssignment
from cdktf_cdktf_provider_azurerm.storage_account import StorageAccount

AKS_CLUSTER_ADMIN_ROLE = "Azure Kubernetes Service RBAC Cluster Admin"
AKS_CLUSTER_USER_ROLE = "Azure Kubernetes Service Cluster User Role"
ACR_PULL_ROLE = "AcrPull"
STORAGE_BLOB_CONTRIBUTOR_ROLE = "Storage Blob Data Contributor"
KEY_VAULT_ADMIN_ROLE = "Key Vault Administrator"


@dataclass
class RoleBindings:
    cluster_admin: RoleAssignment
    vm_cluster_user: RoleAssignment
    kubelet_acr_pull: RoleAssignment
    storage_access: RoleAssignment
    key_vault_admin: RoleAssignment


def _assign(
    scope: Construct,
    id: str,
    *,
    target_id: str,
    role: str,
    principal_id: str,
    principal_type: str,
    depends_on: List[ITerraformDependable],
) -> RoleAssignment:
    return RoleAssignment(
        scope,
        id,
        scope=target_id,
        role_definition_name=role,
        principal_id=principal_id,
        principal_type=principal_type,
        depends_on=depends_on,
    )


def provision_role_assignments(
    *,
    scope: Construct,
    aks: KubernetesCluster,
    vm: LinuxVirtualMachine,
    acr: ContainerRegistry,
    storage: StorageAccount,
    key_vault: KeyVault,
    admin_group: Group,
    storage_group: Group,
) -> RoleBindings:
    return RoleBindings(
        cluster_admin=_assign(
            scope,
            "aksAdminGroupClusterAdmin",
            target_id=aks.id,
            role=AKS_CLUSTER_ADMIN_ROLE,
            principal_id=admin_group.object_id,
            principal_type="Group",
            depends_on=[aks, admin_group],
        ),
        vm_cluster_user=_assign(
            scope,
            "vmIdentityClusterUser",
            target_id=aks.id,
            role=AKS_CLUSTER_USER_ROLE,
            principal_id=vm.identity.principal_id,
            principal_type="ServicePrincipal",
            depends_on=[aks, vm],
        ),
        # ACR attachment: the kubelet identity pulls images
        kubelet_acr_pull=_assign(
            scope,
            "kubeletAcrPull",
            target_id=acr.id,
            role=ACR_PULL_ROLE,
            principal_id=aks.kubelet_identity.object_id,
            principal_type="ServicePrincipal",
            depends_on=[acr, aks],
        ),
        storage_access=_assign(
            scope,
            "storageGroupBlobContributor",
            target_id=storage.id,
            role=STORAGE_BLOB_CONTRIBUTOR_ROLE,
            principal_id=storage_group.object_id,
            principal_type="Group",
            depends_on=[storage, storage_group],
        ),
        key_vault_admin=_assign(
            scope,
            "adminGroupKeyVaultAdmin",
            target_id=key_vault.id,
            role=KEY_VAULT_ADMIN_ROLE,
            principal_id=admin_group.object_id,
            principal_type="Group",
            depends_on=[key_vault, admin_group],
        ),
    )
