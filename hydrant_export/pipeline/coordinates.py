"""Point coordinate extraction from placemarks.

KML writes coordinates as ``longitude,latitude[,altitude]``. Source files for this
pipeline carry exactly two unsigned decimal components and no altitude, so
anything else is treated as a malformed record.
"""

from __future__ import annotations

import re

from hydrant_export.common.errors import FormatError, StructuralError
from hydrant_export.common.models import RawFeature

COORDINATES_RE = re.compile(r"(\d+\.\d+),(\d+\.\d+)", re.ASCII)


def parse_coordinates(text: str) -> tuple[str, str]:
    """Return ``(latitude, longitude)`` from a ``lon,lat`` coordinate string."""
    match = COORDINATES_RE.fullmatch(text)
    if match is None:
        raise FormatError(f"Hydrant point coordinates invalid: {text!r}")
    longitude, latitude = match.groups()
    return latitude, longitude


def extract_coordinates(feature: RawFeature) -> tuple[str, str]:
    point = feature.node.get("Point")
    if point is None:
        raise StructuralError("Hydrant has no point")
    if isinstance(point, list):
        raise StructuralError("Multiple points found in a single hydrant")
    if not isinstance(point, dict) or not point.get("coordinates"):
        raise StructuralError("Hydrant point has no coordinates")

    coordinates = point["coordinates"]
    if not isinstance(coordinates, str):
        raise FormatError("Hydrant point coordinates invalid: expected a single coordinate string")
    return parse_coordinates(coordinates)
