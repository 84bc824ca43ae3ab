"""Shared fixtures: KML documents and conversion configs."""

from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

import pytest

from hydrant_export.common.config_loader import ConversionConfig, load_config
from hydrant_export.common.models import RawFeature

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "config" / "hydrants.yml"

SCHEMA_FIELDS = [
    ("TRANSAKTIONSID", "string"),
    ("ID", "string"),
    ("LOGISCHEID", "string"),
    ("NUMMERNVERGABE", "string"),
    ("STATUS", "string"),
    ("HYDRANTENART", "string"),
    ("INBETRIEBNAHME", "string"),
    ("NENNWEITE", "float"),
    ("NENNWEITE_ANSCHLUSS", "float"),
    ("NENNWEITE_LEITUNG", "float"),
    ("DN", "int"),
    ("DN_ALT", "int"),
    ("DURCHMESSER", "float"),
    ("DURCHMESSER_ALT", "float"),
    ("BEMERKUNG", "string"),
]


def hydrant_attributes(**overrides: str | None) -> dict[str, str | None]:
    attributes: dict[str, str | None] = {
        "TRANSAKTIONSID": "4711",
        "ID": "4711",
        "LOGISCHEID": "ID-4711",
        "NUMMERNVERGABE": "EWK Kirchzarten",
        "STATUS": "in Betrieb",
        "HYDRANTENART": "Unterflurhydrant",
        "INBETRIEBNAHME": "1998/01/01",
        "NENNWEITE": "100",
        "DN": "100",
    }
    attributes.update(overrides)
    return attributes


def placemark_xml(
    attributes: dict[str, str | None] | None = None,
    *,
    coordinates: str | None = "7.9461234,47.9512345",
    name: str | None = "Hydrant 4711",
) -> str:
    attributes = hydrant_attributes() if attributes is None else attributes
    parts = ["<Placemark>"]
    if name is not None:
        parts.append(f"<name>{escape(name)}</name>")
    parts.append('<ExtendedData><SchemaData schemaUrl="#hydranten_ewk">')
    for key, value in attributes.items():
        if value is None:
            parts.append(f"<SimpleData name={quoteattr(key)}/>")
        else:
            parts.append(f"<SimpleData name={quoteattr(key)}>{escape(value)}</SimpleData>")
    parts.append("</SchemaData></ExtendedData>")
    if coordinates is not None:
        parts.append(f"<Point><coordinates>{coordinates}</coordinates></Point>")
    parts.append("</Placemark>")
    return "".join(parts)


def kml_document(*placemarks: str, schema_fields=SCHEMA_FIELDS) -> str:
    fields = "".join(
        f"<SimpleField name={quoteattr(name)} type={quoteattr(type_)}></SimpleField>"
        for name, type_ in schema_fields
    )
    return (
        '<?xml version="1.0" encoding="utf-8" ?>\n'
        '<kml xmlns="http://www.opengis.net/kml/2.2">\n'
        '<Document id="root_doc">\n'
        f'<Schema name="hydranten_ewk" id="hydranten_ewk">{fields}</Schema>\n'
        f"<Folder><name>hydranten_ewk</name>{''.join(placemarks)}</Folder>\n"
        "</Document></kml>\n"
    )


def simple_data_node(
    attributes: dict[str, str | None] | None = None,
    *,
    coordinates: str | None = "7.9461234,47.9512345",
) -> dict:
    """Placemark node shaped the way the KML loader returns it."""
    attributes = hydrant_attributes() if attributes is None else attributes
    entries = []
    for key, value in attributes.items():
        entry = {"@name": key}
        if value is not None:
            entry["#text"] = value
        entries.append(entry)
    node: dict = {"ExtendedData": {"SchemaData": {"@schemaUrl": "#hydranten_ewk", "SimpleData": entries}}}
    if coordinates is not None:
        node["Point"] = {"coordinates": coordinates}
    return node


def raw_feature(node: dict, *, index: int = 0, name: str | None = None) -> RawFeature:
    return RawFeature(index=index, name=name, node=node)


@pytest.fixture
def config() -> ConversionConfig:
    return load_config(CONFIG_PATH)


@pytest.fixture
def schema_names() -> frozenset[str]:
    return frozenset(name for name, _ in SCHEMA_FIELDS)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path
