"""Extended-data attribute extraction and in-service filtering."""

from __future__ import annotations

from typing import AbstractSet

from hydrant_export.common.config_loader import ConversionConfig
from hydrant_export.common.errors import StructuralError, ValidationError
from hydrant_export.common.models import RawFeature


def _simple_data_entries(feature: RawFeature) -> list:
    extended_data = feature.node.get("ExtendedData")
    if not isinstance(extended_data, dict):
        raise StructuralError("Hydrant has no extended data")
    schema_data = extended_data.get("SchemaData")
    if not isinstance(schema_data, dict):
        raise StructuralError("Hydrant extended data has no single SchemaData block")
    return schema_data.get("SimpleData") or []


def extract_attributes(feature: RawFeature, schema_names: AbstractSet[str]) -> dict[str, str | None]:
    attributes: dict[str, str | None] = {}
    for entry in _simple_data_entries(feature):
        # xmltodict collapses <SimpleData>text</SimpleData> without attributes to a bare string.
        name = entry.get("@name") if isinstance(entry, dict) else None
        if not name:
            raise StructuralError("Hydrant attribute has no name")
        if name in attributes:
            raise StructuralError(f"Hydrant attribute {name!r} appears more than once")
        if name not in schema_names:
            raise ValidationError(f"Hydrant attribute {name!r} is not declared in the schema")
        attributes[name] = entry.get("#text")
    return attributes


def check_in_service(attributes: dict[str, str | None], config: ConversionConfig) -> None:
    policy = config.policy
    if not policy.require_in_service:
        return
    status = attributes.get(config.fields.status)
    if status != policy.in_service_status:
        raise ValidationError(
            f"Hydrant {config.fields.status} is {status!r}, expected {policy.in_service_status!r}"
        )
