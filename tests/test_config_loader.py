import pathlib

import pytest

from utils.config_loader import (
    PRIVATE_DNS_ZONES,
    _parse_tfvars,
    _to_bool,
    _to_int,
    _to_list,
    _to_map,
    build_config,
    load_tfvars_config,
)


def test_parse_scalars_and_comments() -> None:
    vars_map = _parse_tfvars(
        """
# comment
env = "dev" # trailing comment
count = 3
flag = true
hash = "value#with-hash"
"""
    )
    assert vars_map == {
        "env": '"dev"',
        "count": "3",
        "flag": "true",
        "hash": '"value#with-hash"',
    }


def test_parse_multiline_map_and_list() -> None:
    vars_map = _parse_tfvars(
        """
subnets = {
  "pe-subnet" = "10.0.1.0/24" # private endpoints
  aks         = "10.0.16.0/20"
}
zones = [
  "1",
  "2",
]
"""
    )
    assert _to_map(vars_map["subnets"]) == {"pe-subnet": "10.0.1.0/24", "aks": "10.0.16.0/20"}
    assert _to_list(vars_map["zones"]) == ["1", "2"]


def test_inline_list_and_map() -> None:
    assert _to_list('["a", "b"]') == ["a", "b"]
    assert _to_list("[]") == []
    assert _to_map('{ a = "1", b = "2" }') == {"a": "1", "b": "2"}


def test_unterminated_value() -> None:
    with pytest.raises(ValueError, match="Unterminated value for var: tags"):
        _parse_tfvars('tags = {\n  a = "b"\n')


def test_invalid_collections() -> None:
    with pytest.raises(ValueError, match="Invalid list value"):
        _to_list('"a"')
    with pytest.raises(ValueError, match="Invalid map entry"):
        _to_map("{ novalue }")


def test_build_config(tfvars_text: str) -> None:
    cfg = build_config(_parse_tfvars(tfvars_text))

    assert cfg.resource_group_name == "platform-dev-rg"
    assert cfg.tags == {"environment": "dev", "managed-by": "cdktf", "owner": "platform-team"}
    assert cfg.name_suffix is None
    assert cfg.suffix_length == 6

    assert set(cfg.vnet_config.subnets) == {
        "pe-subnet",
        "aks",
        "mysql",
        "AzureBastionSubnet",
        "vm-subnet",
    }
    assert cfg.vnet_config.subnets["AzureBastionSubnet"].nsg_key is None
    assert cfg.vnet_config.subnets["mysql"].nsg_key == "default"

    assert cfg.aks_config.cluster_name == "platform-dev-aks"
    assert cfg.aks_config.kubernetes_version is None
    assert cfg.aks_config.work_pool.min_count == 2
    assert cfg.aks_config.work_pool.max_count == 5
    assert cfg.aks_config.system_pool.availability_zones == ["1", "2", "3"]

    assert cfg.private_dns_config.zones == {
        **PRIVATE_DNS_ZONES,
        "aks": "privatelink.westeurope.azmk8s.io",
    }

    assert cfg.mysql_config.high_availability == "ZoneRedundant"
    assert cfg.mysql_config.standby_zone == "2"
    assert cfg.mysql_config.maintenance_window.start_hour == 3

    assert cfg.storage_config.account_prefix == "platformdevst"
    assert cfg.key_vault_config.vault_prefix == "platform-dev-kv-"
    assert cfg.acr_config.registry_name == "platformdevacr"


def test_public_cluster_has_no_aks_zone(tfvars_text: str) -> None:
    text = tfvars_text.replace("aks_private_cluster  = true", "aks_private_cluster  = false")
    cfg = build_config(_parse_tfvars(text))
    assert "aks" not in cfg.private_dns_config.zones


def test_missing_required_var(tfvars_text: str) -> None:
    text = tfvars_text.replace('mysql_version               = "8.0.21"', "")
    with pytest.raises(KeyError, match="Missing required var: mysql_version"):
        build_config(_parse_tfvars(text))


def test_missing_subnet_entry(tfvars_text: str) -> None:
    text = tfvars_text.replace('"vm-subnet"          = "10.20.4.0/24"', "")
    with pytest.raises(KeyError, match="Missing subnet_cidrs entries: vm-subnet"):
        build_config(_parse_tfvars(text))


def test_invalid_autoscaling_bounds(tfvars_text: str) -> None:
    text = tfvars_text.replace("aks_work_max_count   = 5", "aks_work_max_count   = 1")
    with pytest.raises(ValueError, match="Invalid autoscaling bounds for work pool"):
        build_config(_parse_tfvars(text))


def test_invalid_bool(tfvars_text: str) -> None:
    text = tfvars_text.replace("aks_private_cluster  = true", "aks_private_cluster  = yes")
    with pytest.raises(ValueError, match="Invalid boolean value: yes"):
        build_config(_parse_tfvars(text))


def test_load_tfvars_config_from_env_path(
    tfvars_text: str, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "vars").mkdir()
    (tmp_path / "vars" / "prod.tfvars").write_text(tfvars_text, encoding="utf-8")
    monkeypatch.setenv("TFVARS_FILE", "vars/prod.tfvars")

    cfg = load_tfvars_config(repo_root=tmp_path)
    assert cfg.location == "westeurope"


def test_load_tfvars_config_missing_file(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TFVARS_FILE", raising=False)
    with pytest.raises(FileNotFoundError, match="tfvars file not found"):
        load_tfvars_config(repo_root=tmp_path)


def test_repo_dev_tfvars_loads() -> None:
    repo_root = pathlib.Path(__file__).resolve().parents[1]
    cfg = build_config(_parse_tfvars((repo_root / "vars" / "dev.tfvars").read_text(encoding="utf-8")))
    assert cfg.name_suffix is None
    assert cfg.tags["cost-center"] == "engineering"
    assert cfg.vnet_config.subnets["mysql"].address_prefix == "10.20.2.0/24"


def test_scalar_helpers_accept_quoted_values() -> None:
    assert _to_bool('"true"') is True
    assert _to_bool("FALSE") is False
    assert _to_int('"42"') == 42
    with pytest.raises(ValueError, match="Invalid boolean value: 1"):
        _to_bool("1")
    with pytest.raises(ValueError, match="Invalid int value: 4.5"):
        _to_int("4.5")


def test_empty_required_var_is_missing(tfvars_text: str) -> None:
    with pytest.raises(KeyError, match="Missing required var: name_prefix"):
        build_config(_parse_tfvars(tfvars_text + '\nname_prefix = ""\n'))


def test_resource_names_share_prefix(tfvars_text: str) -> None:
    cfg = build_config(_parse_tfvars(tfvars_text))
    assert cfg.vnet_config.name == "platform-dev-vnet"
    assert cfg.mysql_config.server_name == "platform-dev-mysql"
    assert cfg.bastion_config.host_name == "platform-dev-bastion"
    assert cfg.vm_config.vm_name == "platform-dev-vm"
    assert cfg.ad_groups_config.admin_group_name == "platform-dev-aks-admins"
