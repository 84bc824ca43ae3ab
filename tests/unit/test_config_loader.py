from pathlib import Path

import pytest

from conftest import CONFIG_PATH
from hydrant_export.common.config_loader import build_config, load_config
from hydrant_export.common.errors import ConfigError
from hydrant_export.common.fs import read_yaml


def test_load_config_from_repo_config_dir():
    config = load_config(CONFIG_PATH)

    assert config.kml_path == "hydranten_ewk.kml"
    assert config.formats == ("csv", "geojson")
    assert config.policy.require_in_service is True
    assert config.policy.in_service_status == "in Betrieb"
    assert config.policy.operator == "EWK Kirchzarten"
    assert len(config.fields.diameters) == 7
    assert config.emits("geojson")


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yml")


def test_load_config_applies_overlay_values(tmp_path: Path):
    overlay = tmp_path / "local.yml"
    overlay.write_text(
        """output:
  formats: [csv]
policy:
  require_in_service: false
fields:
  diameters: [NENNWEITE]
""",
        encoding="utf-8",
    )

    config = load_config(CONFIG_PATH, overlay_path=overlay)

    assert config.formats == ("csv",)
    assert not config.emits("geojson")
    assert config.policy.require_in_service is False
    assert config.policy.operator == "EWK Kirchzarten"
    assert config.fields.diameters == ("NENNWEITE",)
    assert config.fields.status == "STATUS"


def test_load_config_rejects_missing_overlay(tmp_path: Path):
    with pytest.raises(ConfigError, match="Overlay config file not found"):
        load_config(CONFIG_PATH, overlay_path=tmp_path / "absent.yml")


def test_build_config_deduplicates_formats():
    raw = read_yaml(CONFIG_PATH)
    raw["output"]["formats"] = ["geojson", "csv", "geojson"]
    assert build_config(raw).formats == ("geojson", "csv")


def test_load_config_rejects_empty_file(tmp_path: Path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="Missing keys"):
        load_config(path)
