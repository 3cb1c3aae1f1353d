from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .utils import (
    CmdError,
    az,
    cdktf,
    default_project_dir,
    synthesized_stack_dir,
    terraform_plan_detailed,
)


STACK_NAME = "azure-platform"


def _project(args: argparse.Namespace) -> Path:
    project = Path(args.project_dir)
    if not project.exists():
        raise CmdError(f"Project directory not found: {project}")
    return project


def infra_synth(args: argparse.Namespace) -> None:
    project = _project(args)
    print("Synthesizing CDKTF...")
    cdktf(project, ["get"])  # ensure providers
    cdktf(project, ["synth"])  # generate JSON tf
    print(f"Synthesized to {synthesized_stack_dir(project, STACK_NAME)}")


def infra_deploy(args: argparse.Namespace) -> None:
    infra_synth(args)
    project = _project(args)
    print("Deploying CDKTF...")
    cdktf(project, ["deploy", STACK_NAME, "--auto-approve"])
    print("CDKTF deploy completed.")


def infra_diff(args: argparse.Namespace) -> None:
    project = _project(args)
    cdktf(project, ["diff", STACK_NAME])


def infra_check_drift(args: argparse.Namespace) -> None:
    """Fail when re-applying the current inputs would change anything."""
    infra_synth(args)
    stack_dir = synthesized_stack_dir(_project(args), STACK_NAME)
    if terraform_plan_detailed(stack_dir):
        raise CmdError(
            "Planned changes detected: deployed infrastructure differs from the configuration."
        )
    print("No changes. Infrastructure matches the configuration.")


def infra_destroy(args: argparse.Namespace) -> None:
    project = _project(args)
    print("Destroying CDKTF-managed infrastructure...")
    cdktf(project, ["destroy", STACK_NAME, "--auto-approve"])
    print("Destroy completed.")


def _show(label: str, cmd: list[str]) -> None:
    try:
        info = json.loads(az(cmd))
        print(f"{label}: " + " | ".join(f"{k}: {v}" for k, v in info.items()))
    except (CmdError, json.JSONDecodeError) as e:
        print(f"{label} info error: {e}")


def diagnose(args: argparse.Namespace) -> None:
    rg = args.resource_group
    print("=== Azure Platform Diagnostics ===")
    if args.cluster_name:
        _show(
            "AKS",
            [
                "aks",
                "show",
                "-g",
                rg,
                "-n",
                args.cluster_name,
                "--query",
                "{name:name, powerState:powerState.code, provisioningState:provisioningState, kubernetesVersion:kubernetesVersion, private:apiServerAccessProfile.enablePrivateCluster}",
                "-o",
                "json",
            ],
        )
    if args.mysql_server:
        _show(
            "MySQL",
            [
                "mysql",
                "flexible-server",
                "show",
                "-g",
                rg,
                "-n",
                args.mysql_server,
                "--query",
                "{name:name, state:state, haState:highAvailability.state, fqdn:fullyQualifiedDomainName}",
                "-o",
                "json",
            ],
        )
    if args.bastion:
        _show(
            "Bastion",
            [
                "network",
                "bastion",
                "show",
                "-g",
                rg,
                "-n",
                args.bastion,
                "--query",
                "{name:name, provisioningState:provisioningState, sku:sku.name}",
                "-o",
                "json",
            ],
        )
    if args.vm:
        _show(
            "VM",
            [
                "vm",
                "get-instance-view",
                "-g",
                rg,
                "-n",
                args.vm,
                "--query",
                "{name:name, powerState:instanceView.statuses[1].displayStatus}",
                "-o",
                "json",
            ],
        )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="azure-platform", description="Azure platform infrastructure CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    isyn = sub.add_parser("infra-synth", help="Synthesize the Terraform JSON")
    isyn.add_argument("--project-dir", default=default_project_dir())
    isyn.set_defaults(func=infra_synth)

    idep = sub.add_parser("infra-deploy", help="Deploy infrastructure via CDKTF")
    idep.add_argument("--project-dir", default=default_project_dir())
    idep.set_defaults(func=infra_deploy)

    idiff = sub.add_parser("infra-diff", help="Show planned changes via CDKTF")
    idiff.add_argument("--project-dir", default=default_project_dir())
    idiff.set_defaults(func=infra_diff)

    idrift = sub.add_parser(
        "infra-check-drift",
        help="Fail if re-applying the configuration would plan any change",
    )
    idrift.add_argument("--project-dir", default=default_project_dir())
    idrift.set_defaults(func=infra_check_drift)

    ides = sub.add_parser("infra-destroy", help="Destroy infrastructure via CDKTF")
    ides.add_argument("--project-dir", default=default_project_dir())
    ides.set_defaults(func=infra_destroy)

    diag = sub.add_parser("diagnose", help="Diagnose deployed resources")
    diag.add_argument("--resource-group", required=True)
    diag.add_argument("--cluster-name")
    diag.add_argument("--mysql-server")
    diag.add_argument("--bastion")
    diag.add_argument("--vm")
    diag.set_defaults(func=diagnose)

    args = parser.parse_args()
    try:
        args.func(args)
    except CmdError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
