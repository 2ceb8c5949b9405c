"""Config loading and validation."""

import json

import pytest

from rota.config import RotaConfig, load_config


def test_load_yaml(tmp_path):
    path = tmp_path / "rota_config.yaml"
    path.write_text(
        "timezone: Europe/London\n"
        "store:\n"
        "  collection: carers\n"
        "  document: schedule\n"
        "  serialize_writes: true\n"
        "view:\n"
        "  initial_days: 28\n"
        "  page_days: 7\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.timezone == "Europe/London"
    assert cfg.collection == "carers"
    assert cfg.document == "schedule"
    assert cfg.serialize_writes is True
    assert cfg.initial_days == 28
    assert cfg.page_days == 7
    assert cfg.step_minutes == 30


def test_load_json_defaults(tmp_path):
    path = tmp_path / "rota.json"
    path.write_text(json.dumps({}), encoding="utf-8")
    assert load_config(path) == RotaConfig()


def test_missing_and_unsupported(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
    other = tmp_path / "rota.toml"
    other.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(other)


@pytest.mark.parametrize("raw", [
    {"view": {"page_days": 0}},
    {"view": {"step_minutes": 0}},
    {"store": {"document": "a/b"}},
    {"store": {"max_write_workers": 0}},
    {"store": {"serialize_writes": "false"}},
    {"store": {"serialize_writes": 1}},
    {"timezone": "Mars/Olympus_Mons"},
])
def test_invalid_config(tmp_path, raw):
    path = tmp_path / "rota.json"
    path.write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
