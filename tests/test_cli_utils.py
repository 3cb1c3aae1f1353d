import argparse
import pathlib

import pytest

from scripts import cli
from scripts.utils import (
    CmdError,
    plan_has_changes,
    synthesized_stack_dir,
    terraform_plan_detailed,
)


def test_plan_exit_codes() -> None:
    assert plan_has_changes(0) is False
    assert plan_has_changes(2) is True
    with pytest.raises(CmdError, match="exit code 1"):
        plan_has_changes(1)


def test_synthesized_stack_dir() -> None:
    assert synthesized_stack_dir(pathlib.Path("infra"), "azure-platform") == pathlib.Path(
        "infra/cdktf.out/stacks/azure-platform"
    )


def test_plan_requires_synthesized_stack(tmp_path: pathlib.Path) -> None:
    with pytest.raises(CmdError, match="Synthesized stack not found"):
        terraform_plan_detailed(tmp_path / "missing")


@pytest.fixture
def project(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> argparse.Namespace:
    calls: list[list[str]] = []
    monkeypatch.setattr(cli, "cdktf", lambda project_dir, args: calls.append(args) or "")
    ns = argparse.Namespace(project_dir=str(tmp_path))
    ns.calls = calls
    return ns


def test_check_drift_passes_on_clean_plan(
    project: argparse.Namespace, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    seen: list[pathlib.Path] = []
    monkeypatch.setattr(cli, "terraform_plan_detailed", lambda d: seen.append(d) or False)

    cli.infra_check_drift(project)

    assert project.calls == [["get"], ["synth"]]
    assert seen == [pathlib.Path(project.project_dir) / "cdktf.out" / "stacks" / "azure-platform"]
    assert "No changes" in capsys.readouterr().out


def test_check_drift_fails_on_pending_changes(
    project: argparse.Namespace, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "terraform_plan_detailed", lambda d: True)
    with pytest.raises(CmdError, match="Planned changes detected"):
        cli.infra_check_drift(project)


def test_deploy_synthesizes_first(project: argparse.Namespace) -> None:
    cli.infra_deploy(project)
    assert project.calls == [["get"], ["synth"], ["deploy", "azure-platform", "--auto-approve"]]


def test_missing_project_dir(tmp_path: pathlib.Path) -> None:
    with pytest.raises(CmdError, match="Project directory not found"):
        cli.infra_diff(argparse.Namespace(project_dir=str(tmp_path / "nope")))
