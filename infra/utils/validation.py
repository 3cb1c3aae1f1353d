"""
Preflight validation helpers.

Secrets never live in tfvars; the stack reads them from the environment and
refuses to synthesize until all of them are present.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

# Variable -> what the stack uses it for
REQUIRED_ENV: Dict[str, str] = {
    "ARM_TENANT_ID": "Azure AD tenant for Key Vault and AKS RBAC",
    "MYSQL_ADMIN_LOGIN": "MySQL flexible server administrator login",
    "MYSQL_ADMIN_PASSWORD": "MySQL flexible server administrator password",
    "VM_ADMIN_PASSWORD": "Linux VM administrator password",
}


def missing_env(env: Mapping[str, str], keys: List[str]) -> List[str]:
    """Keys that are unset or empty in env, in the order given."""
    return [k for k in keys if not env.get(k, "").strip()]


def format_missing_env_message(missing: List[str], *, stack: str = "azure-platform") -> str:
    if not missing:
        return ""
    width = max(len(k) for k in missing)
    sections = [
        f"Stack '{stack}' cannot be synthesized: {len(missing)} environment variable(s) unset.",
        "\n".join(f"  - {k.ljust(width)}  {REQUIRED_ENV.get(k, '')}".rstrip() for k in missing),
        "PowerShell (current session):\n"
        + "\n".join(f"  $env:{k} = \"<value>\"" for k in missing),
        "bash:\n" + "\n".join(f"  export {k}=\"<value>\"" for k in missing),
        "Then re-run: python -m scripts.cli infra-deploy --project-dir infra",
    ]
    return "\n\n".join(sections)
