"""Per-record normalisation and the batch wrapper around it."""

from __future__ import annotations

from typing import AbstractSet, Iterable

from hydrant_export.common.config_loader import ConversionConfig
from hydrant_export.common.errors import HydrantDataError
from hydrant_export.common.models import (
    ExportHydrant,
    NormalisationResult,
    NormalizedHydrant,
    RawFeature,
    RejectedFeature,
    SchemaField,
)
from hydrant_export.pipeline.attributes import check_in_service, extract_attributes
from hydrant_export.pipeline.coordinates import extract_coordinates
from hydrant_export.pipeline.tagging import tag_hydrant


def normalise_feature(
    feature: RawFeature,
    schema_names: AbstractSet[str],
    config: ConversionConfig,
) -> NormalizedHydrant:
    latitude, longitude = extract_coordinates(feature)
    attributes = extract_attributes(feature, schema_names)
    check_in_service(attributes, config)
    return NormalizedHydrant(latitude=latitude, longitude=longitude, attributes=attributes)


def normalise_record(
    feature: RawFeature,
    schema_names: AbstractSet[str],
    config: ConversionConfig,
) -> tuple[NormalizedHydrant, ExportHydrant | None]:
    """Run every configured check for one placemark.

    Raises the first :class:`HydrantDataError` encountered, annotated with the
    placemark's position and name.
    """
    try:
        hydrant = normalise_feature(feature, schema_names, config)
        tagged = tag_hydrant(hydrant, config) if config.emits("geojson") else None
    except HydrantDataError as exc:
        exc.locate(feature.index, feature.name)
        raise
    return hydrant, tagged


def normalise_features(
    features: Iterable[RawFeature],
    schema: Iterable[SchemaField],
    config: ConversionConfig,
    *,
    skip_invalid: bool = False,
) -> NormalisationResult:
    schema_names = frozenset(field.name for field in schema)
    hydrants: list[NormalizedHydrant] = []
    export_hydrants: list[ExportHydrant] = []
    rejected: list[RejectedFeature] = []

    for feature in features:
        try:
            hydrant, tagged = normalise_record(feature, schema_names, config)
        except HydrantDataError as exc:
            if not skip_invalid:
                raise
            rejected.append(
                RejectedFeature(
                    index=feature.index,
                    name=feature.name,
                    error_code=exc.error_code,
                    message=exc.message,
                )
            )
            continue

        hydrants.append(hydrant)
        if tagged is not None:
            export_hydrants.append(tagged)

    return NormalisationResult(
        hydrants=tuple(hydrants),
        export_hydrants=tuple(export_hydrants),
        rejected=tuple(rejected),
    )
