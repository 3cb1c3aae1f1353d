"""
Azure stack config helpers.

This module adapts tfvars (loaded elsewhere) into the strongly-typed
AzureInfrastructureConfig used by the CDKTF stack.
"""

import json
from dataclasses import asdict
from typing import Any, Dict

from iac_types import AzureInfrastructureConfig


def synth_config_dict(config: AzureInfrastructureConfig) -> Dict[str, Any]:
    """Convert dataclasses to plain dict for diagnostics or outputs."""
    return asdict(config)


def synth_config_json(config: AzureInfrastructureConfig) -> str:
    """Stable JSON rendering of the config, safe to expose as an output."""
    return json.dumps(synth_config_dict(config), sort_keys=True)
