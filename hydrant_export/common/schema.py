"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from hydrant_export.common.constants import MAX_DIAMETER_CANDIDATES, OUTPUT_FORMATS
from hydrant_export.common.errors import ConfigError

FIELD_KEYS = {
    "status",
    "hydrant_type",
    "operator",
    "transaction_id",
    "id",
    "logical_id",
    "start_date",
    "diameters",
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_non_empty_string(value, ctx: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx} must be a non-empty string")


def validate_conversion_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    sections = {"input", "output", "policy", "fields"}
    _assert_required_keys(cfg, sections, "hydrant config")
    _assert_no_unknown_keys(cfg, sections, "hydrant config", allow_unknown)

    _assert_required_keys(cfg["input"], {"kml_path"}, "input")
    _assert_no_unknown_keys(cfg["input"], {"kml_path"}, "input", allow_unknown)
    _assert_non_empty_string(cfg["input"]["kml_path"], "input.kml_path")

    output_keys = {"csv_filename", "geojson_filename", "formats"}
    _assert_required_keys(cfg["output"], output_keys, "output")
    _assert_no_unknown_keys(cfg["output"], output_keys, "output", allow_unknown)
    formats = cfg["output"]["formats"]
    if not isinstance(formats, list) or not formats:
        raise ConfigError("output.formats must be a non-empty list")
    unsupported = [fmt for fmt in formats if fmt not in OUTPUT_FORMATS]
    if unsupported:
        raise ConfigError(f"Unsupported output formats: {', '.join(map(str, unsupported))}")
    for fmt in formats:
        _assert_non_empty_string(cfg["output"][f"{fmt}_filename"], f"output.{fmt}_filename")

    policy_keys = {"require_in_service", "in_service_status", "operator"}
    _assert_required_keys(cfg["policy"], policy_keys, "policy")
    _assert_no_unknown_keys(cfg["policy"], policy_keys, "policy", allow_unknown)
    if not isinstance(cfg["policy"]["require_in_service"], bool):
        raise ConfigError("policy.require_in_service must be a boolean")
    _assert_non_empty_string(cfg["policy"]["in_service_status"], "policy.in_service_status")
    _assert_non_empty_string(cfg["policy"]["operator"], "policy.operator")

    _assert_required_keys(cfg["fields"], FIELD_KEYS, "fields")
    _assert_no_unknown_keys(cfg["fields"], FIELD_KEYS, "fields", allow_unknown)
    for key in sorted(FIELD_KEYS - {"diameters"}):
        _assert_non_empty_string(cfg["fields"][key], f"fields.{key}")

    diameters = cfg["fields"]["diameters"]
    if not isinstance(diameters, list) or not diameters:
        raise ConfigError("fields.diameters must be a non-empty list")
    if len(diameters) > MAX_DIAMETER_CANDIDATES:
        raise ConfigError(f"fields.diameters accepts at most {MAX_DIAMETER_CANDIDATES} columns")
    for idx, name in enumerate(diameters):
        _assert_non_empty_string(name, f"fields.diameters[{idx}]")
    dupes = {name for name in diameters if diameters.count(name) > 1}
    if dupes:
        raise ConfigError(f"Duplicate diameter columns: {', '.join(sorted(dupes))}")

    return cfg
