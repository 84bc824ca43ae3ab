"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

OSM_CATEGORY_TAGS = {"emergency": "fire_hydrant"}


class HydrantType(str, Enum):
    UNDERGROUND = "underground"
    PILLAR = "pillar"


@dataclass(frozen=True)
class SchemaField:
    name: str
    type: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.type})"


@dataclass(frozen=True)
class RawFeature:
    """One source placemark as parsed from the KML document."""

    index: int
    name: str | None
    node: Mapping[str, Any]


@dataclass(frozen=True)
class NormalizedHydrant:
    latitude: str
    longitude: str
    attributes: Mapping[str, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def attribute(self, name: str) -> str | None:
        return self.attributes.get(name)


@dataclass(frozen=True)
class ExportHydrant:
    latitude: str
    longitude: str
    operator: str
    ref: str
    hydrant_type: HydrantType
    diameter: str | None = None
    start_date: str | None = None

    def tags(self) -> dict[str, str]:
        """OpenStreetMap tags for this hydrant, absent values omitted."""
        tags = dict(OSM_CATEGORY_TAGS)
        tags["fire_hydrant:type"] = self.hydrant_type.value
        tags["operator"] = self.operator
        tags["ref"] = self.ref
        if self.diameter is not None:
            tags["fire_hydrant:diameter"] = self.diameter
        if self.start_date is not None:
            tags["start_date"] = self.start_date
        return tags


@dataclass(frozen=True)
class RejectedFeature:
    index: int
    name: str | None
    error_code: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NormalisationResult:
    hydrants: tuple[NormalizedHydrant, ...]
    export_hydrants: tuple[ExportHydrant, ...]
    rejected: tuple[RejectedFeature, ...] = ()

    @property
    def had_rejections(self) -> bool:
        return bool(self.rejected)
