"""
Linux VM module.

A private Linux VM in vm-subnet, reached through the bastion. Its
system-assigned identity is granted cluster-user rights later on.
"""

from __future__ import annotations

import os
from typing import Dict

from constructs import Construct

from cdktf_cdktf_provider_azurerm.bastion_host import BastionHost
from cdktf_cdktf_provider_azurerm.linux_virtual_machine import LinuxVirtualMachine
from cdktf_cdktf_provider_azurerm.network_interface import (
    NetworkInterface,
    NetworkInterfaceIpConfiguration,
)
from cdktf_cdktf_provider_azurerm.subnet import Subnet

from iac_types import AzureInfrastructureConfig
from utils.subnets import VM_SUBNET, SubnetMap


def provision_vm(
    *,
    scope: Construct,
    cfg: AzureInfrastructureConfig,
    rg_name: str,
    subnets: SubnetMap[Subnet],
    bastion: BastionHost,
    tags: Dict[str, str],
) -> LinuxVirtualMachine:
    admin_password = os.getenv("VM_ADMIN_PASSWORD")
    if not admin_password:
        raise ValueError("VM_ADMIN_PASSWORD must be set as an environment variable.")
    vm_cfg = cfg.vm_config

    nic = NetworkInterface(
        scope,
        "vmNic",
        name=f"{vm_cfg.vm_name}-nic",
        location=cfg.location,
        resource_group_name=rg_name,
        ip_configuration=[
            NetworkInterfaceIpConfiguration(
                name="internal",
                subnet_id=subnets[VM_SUBNET].id,
                private_ip_address_allocation="Dynamic",
            )
        ],
        tags=tags,
    )

    return LinuxVirtualMachine(
        scope,
        "vm",
        name=vm_cfg.vm_name,
        location=cfg.location,
        resource_group_name=rg_name,
        size=vm_cfg.size,
        admin_username=vm_cfg.admin_username,
        admin_password=admin_password,
        disable_password_authentication=False,
        network_interface_ids=[nic.id],
        os_disk={
            "name": f"{vm_cfg.vm_name}-osdisk",
            "caching": "ReadWrite",
            "storage_account_type": vm_cfg.os_disk_storage_type,
            "disk_size_gb": vm_cfg.os_disk_size_gb,
        },
        source_image_reference={
            "publisher": vm_cfg.image_publisher,
            "offer": vm_cfg.image_offer,
            "sku": vm_cfg.image_sku,
            "version": "latest",
        },
        identity={"type": "SystemAssigned"},
        tags=tags,
        depends_on=[bastion],
    )
