"""KML source loading and schema extraction."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping
from xml.parsers.expat import ExpatError

import xmltodict

from hydrant_export.common.errors import StageError, StructuralError
from hydrant_export.common.models import RawFeature, SchemaField

# Elements that always come back as lists. Point is not forced, so several
# points in one placemark remain visible as a list.
FORCE_LIST_TAGS = ("Folder", "Placemark", "SimpleField", "SimpleData")


def parse_kml(content: str | bytes) -> dict:
    """Parse KML text into the ``Document`` node of a nested mapping."""
    try:
        parsed = xmltodict.parse(content, force_list=FORCE_LIST_TAGS)
    except ExpatError as exc:
        raise StageError(f"Input is not well-formed XML: {exc}") from exc

    kml = parsed.get("kml") if isinstance(parsed, dict) else None
    if not isinstance(kml, dict):
        raise StructuralError("Input has no kml root element")
    document = kml.get("Document")
    if not isinstance(document, dict):
        raise StructuralError("KML has no single Document element")
    return document


def load_kml_document(path: Path) -> dict:
    if not path.exists():
        raise StageError(f"Missing KML input: {path}")
    with path.open("rb") as f:
        return parse_kml(f.read())


def extract_schema(document: Mapping[str, Any]) -> tuple[SchemaField, ...]:
    schema = document.get("Schema")
    if isinstance(schema, list):
        raise StructuralError("KML declares more than one Schema")
    if not isinstance(schema, dict):
        raise StructuralError("KML has no Schema declaration")

    fields: list[SchemaField] = []
    for idx, simple_field in enumerate(schema.get("SimpleField") or []):
        if not isinstance(simple_field, dict) or not simple_field.get("@name"):
            raise StructuralError(f"Schema field #{idx} has no name")
        fields.append(SchemaField(name=simple_field["@name"], type=simple_field.get("@type") or ""))
    return tuple(fields)


def _collect_placemarks(folders: list, features: list[RawFeature]) -> None:
    """Append placemarks of each folder, then descend into its sub-folders."""
    for folder in folders:
        if not isinstance(folder, dict):
            continue
        for placemark in folder.get("Placemark") or []:
            # An empty <Placemark/> fails per record, in the normaliser.
            node = placemark if isinstance(placemark, dict) else {}
            name = node.get("name")
            features.append(
                RawFeature(
                    index=len(features),
                    name=name if isinstance(name, str) else None,
                    node=node,
                )
            )
        _collect_placemarks(folder.get("Folder") or [], features)


def extract_features(document: Mapping[str, Any]) -> tuple[RawFeature, ...]:
    folders = document.get("Folder")
    if not folders:
        raise StructuralError("KML has no Folder of placemarks")

    features: list[RawFeature] = []
    _collect_placemarks(folders, features)
    return tuple(features)
