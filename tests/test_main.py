import pathlib

import pytest

import main
from conftest import PLATFORM_ENV
from utils.validation import REQUIRED_ENV


@pytest.fixture
def secrets(monkeypatch: pytest.MonkeyPatch) -> None:
    for key, value in PLATFORM_ENV.items():
        monkeypatch.setenv(key, value)


def _run_main() -> int:
    with pytest.raises(SystemExit) as exc:
        main.main()
    return exc.value.code


def test_missing_secrets_exit_2(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    for key in REQUIRED_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ARM_TENANT_ID", PLATFORM_ENV["ARM_TENANT_ID"])

    assert _run_main() == 2

    err = capsys.readouterr().err
    assert err.startswith(f"Stack '{main.STACK_NAME}' cannot be synthesized: 3 environment")
    assert "MYSQL_ADMIN_LOGIN" in err
    assert "ARM_TENANT_ID" not in err


@pytest.mark.usefixtures("secrets")
def test_missing_tfvars_file_exit_1(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("TFVARS_FILE", "vars/nope.tfvars")

    assert _run_main() == 1
    assert capsys.readouterr().err.startswith("Error: tfvars file not found")


@pytest.mark.usefixtures("secrets")
def test_invalid_tfvars_exit_1(
    tfvars_text: str,
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = tmp_path / "bad.tfvars"
    path.write_text(tfvars_text + "\naks_private_cluster = maybe\n", encoding="utf-8")
    monkeypatch.setenv("TFVARS_FILE", str(path))

    assert _run_main() == 1
    assert "Error: Invalid boolean value: maybe" in capsys.readouterr().err


@pytest.mark.usefixtures("secrets")
def test_stack_construction_error_exit_1(
    tfvars_text: str,
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = tmp_path / "same-zone.tfvars"
    path.write_text(tfvars_text + '\nmysql_standby_zone = "1"\n', encoding="utf-8")
    monkeypatch.setenv("TFVARS_FILE", str(path))

    assert _run_main() == 1
    assert "Error: ZoneRedundant MySQL needs a standby zone" in capsys.readouterr().err
