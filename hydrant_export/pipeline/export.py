"""CSV and GeoJSON export of normalised hydrants."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import geojson

from hydrant_export.common.constants import GEOJSON_COORDINATE_PRECISION
from hydrant_export.common.fs import atomic_writer, write_csv
from hydrant_export.common.models import ExportHydrant, NormalizedHydrant, SchemaField

COORDINATE_HEADERS = ["latitude", "longitude"]


def csv_headers(schema: Iterable[SchemaField]) -> list[str]:
    return [*COORDINATE_HEADERS, *(field.label for field in schema)]


def _serialize_row(hydrant: NormalizedHydrant, schema: tuple[SchemaField, ...]) -> dict:
    out = {"latitude": hydrant.latitude, "longitude": hydrant.longitude}
    for field in schema:
        value = hydrant.attribute(field.name)
        out[field.label] = "" if value is None else value
    return out


def write_hydrant_csv(path: Path, schema: Iterable[SchemaField], hydrants: Iterable[NormalizedHydrant]) -> Path:
    schema = tuple(schema)
    write_csv(path, csv_headers(schema), (_serialize_row(hydrant, schema) for hydrant in hydrants))
    return path


def to_feature(hydrant: ExportHydrant) -> geojson.Feature:
    point = geojson.Point(
        (float(hydrant.longitude), float(hydrant.latitude)),
        precision=GEOJSON_COORDINATE_PRECISION,
    )
    return geojson.Feature(geometry=point, properties=hydrant.tags())


def build_feature_collection(hydrants: Iterable[ExportHydrant]) -> geojson.FeatureCollection:
    return geojson.FeatureCollection([to_feature(hydrant) for hydrant in hydrants])


def write_hydrant_geojson(path: Path, hydrants: Iterable[ExportHydrant]) -> Path:
    collection = build_feature_collection(hydrants)
    with atomic_writer(path) as f:
        geojson.dump(collection, f, ensure_ascii=False, indent=2)
        f.write("\n")
    return path
