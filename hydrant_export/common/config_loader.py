"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hydrant_export.common.errors import ConfigError
from hydrant_export.common.fs import read_yaml
from hydrant_export.common.schema import validate_conversion_config


@dataclass(frozen=True)
class FieldNames:
    status: str
    hydrant_type: str
    operator: str
    transaction_id: str
    id: str
    logical_id: str
    start_date: str
    diameters: tuple[str, ...]


@dataclass(frozen=True)
class Policy:
    require_in_service: bool
    in_service_status: str
    operator: str


@dataclass(frozen=True)
class ConversionConfig:
    kml_path: str
    csv_filename: str
    geojson_filename: str
    formats: tuple[str, ...]
    policy: Policy
    fields: FieldNames

    def emits(self, fmt: str) -> bool:
        return fmt in self.formats


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None:
        return base
    if not overlay_path.exists():
        raise ConfigError(f"Overlay config file not found: {overlay_path}")
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def build_config(cfg: dict, *, allow_unknown: bool = False) -> ConversionConfig:
    validated = validate_conversion_config(cfg, allow_unknown=allow_unknown)
    fields = validated["fields"]
    policy = validated["policy"]
    return ConversionConfig(
        kml_path=validated["input"]["kml_path"],
        csv_filename=validated["output"]["csv_filename"],
        geojson_filename=validated["output"]["geojson_filename"],
        formats=tuple(dict.fromkeys(validated["output"]["formats"])),
        policy=Policy(
            require_in_service=policy["require_in_service"],
            in_service_status=policy["in_service_status"],
            operator=policy["operator"],
        ),
        fields=FieldNames(
            status=fields["status"],
            hydrant_type=fields["hydrant_type"],
            operator=fields["operator"],
            transaction_id=fields["transaction_id"],
            id=fields["id"],
            logical_id=fields["logical_id"],
            start_date=fields["start_date"],
            diameters=tuple(fields["diameters"]),
        ),
    )


def load_config(
    config_path: Path,
    *,
    allow_unknown: bool = False,
    overlay_path: Path | None = None,
) -> ConversionConfig:
    return build_config(_load_yaml_with_overlay(config_path, overlay_path), allow_unknown=allow_unknown)
