"""
Subnet helpers.

Pure functions for subnet delegation and keyed subnet lookup. Nothing here
touches CDKTF, so the rules can be unit-tested without synthesizing a stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Iterator, List, Mapping, TypeVar

PE_SUBNET = "pe-subnet"
AKS_SUBNET = "aks"
MYSQL_SUBNET = "mysql"
BASTION_SUBNET = "AzureBastionSubnet"
VM_SUBNET = "vm-subnet"

MYSQL_DELEGATION_SERVICE = "Microsoft.DBforMySQL/flexibleServers"
SUBNET_JOIN_ACTION = "Microsoft.Network/virtualNetworks/subnets/join/action"


@dataclass(frozen=True)
class Delegation:
    name: str
    service: str
    actions: List[str]


def delegations_for(key: str) -> List[Delegation]:
    """Return the service delegations for the subnet declared under ``key``.

    Only the ``mysql`` entry is delegated (to MySQL flexible servers).
    """
    if key == MYSQL_SUBNET:
        return [
            Delegation(
                name="mysql-flexible",
                service=MYSQL_DELEGATION_SERVICE,
                actions=[SUBNET_JOIN_ACTION],
            )
        ]
    return []


T = TypeVar("T")


class SubnetMap(Mapping[str, T], Generic[T]):
    """Read-only mapping of logical subnet key -> subnet.

    Lookups of undeclared keys fail immediately with a KeyError that lists
    what was declared.
    """

    def __init__(self, subnets: Dict[str, T]) -> None:
        self._subnets = dict(subnets)

    def __getitem__(self, key: str) -> T:
        try:
            return self._subnets[key]
        except KeyError:
            known = ", ".join(sorted(self._subnets)) or "<none>"
            raise KeyError(
                f"Subnet '{key}' is not declared (declared subnets: {known})"
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._subnets)

    def __len__(self) -> int:
        return len(self._subnets)
