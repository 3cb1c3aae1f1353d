"""
Azure resource naming rules.

Storage accounts, key vaults and registries live in global namespaces, so
their names are checked here before synthesis instead of failing at apply.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NameRule:
    kind: str
    min_length: int
    max_length: int
    pattern: str
    hint: str


STORAGE_ACCOUNT = NameRule(
    kind="storage account",
    min_length=3,
    max_length=24,
    pattern=r"^[a-z0-9]+$",
    hint="lowercase letters and digits only",
)

KEY_VAULT = NameRule(
    kind="key vault",
    min_length=3,
    max_length=24,
    pattern=r"^[A-Za-z](?!.*--)[A-Za-z0-9-]*[A-Za-z0-9]$",
    hint="letters, digits and single hyphens; must start with a letter and end with a letter or digit",
)

CONTAINER_REGISTRY = NameRule(
    kind="container registry",
    min_length=5,
    max_length=50,
    pattern=r"^[A-Za-z0-9]+$",
    hint="letters and digits only",
)


def compact(value: str) -> str:
    """Lowercase and drop every character that is not a letter or digit."""
    return re.sub(r"[^a-z0-9]", "", value.lower())


def validate_name(name: str, rule: NameRule) -> str:
    if not rule.min_length <= len(name) <= rule.max_length:
        raise ValueError(
            f"Invalid {rule.kind} name '{name}': length {len(name)} is outside "
            f"{rule.min_length}-{rule.max_length}"
        )
    if not re.match(rule.pattern, name):
        raise ValueError(f"Invalid {rule.kind} name '{name}': {rule.hint}")
    return name


def suffixed_name(prefix: str, suffix: str, rule: NameRule) -> str:
    """Return ``prefix + suffix`` after checking it against ``rule``."""
    return validate_name(f"{prefix}{suffix}", rule)


def check_prefix_fits(prefix: str, suffix_length: int, rule: NameRule) -> str:
    """Check that ``prefix`` plus a random suffix of ``suffix_length`` is valid.

    Random suffixes are lowercase alphanumerics, so a run of zeros stands in
    for the value Terraform will pick.
    """
    validate_name(f"{prefix}{'0' * suffix_length}", rule)
    return prefix
