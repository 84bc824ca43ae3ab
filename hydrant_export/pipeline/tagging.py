"""Map normalised hydrants onto OpenStreetMap fire hydrant tags."""

from __future__ import annotations

from hydrant_export.common.config_loader import ConversionConfig
from hydrant_export.common.errors import ValidationError
from hydrant_export.common.models import ExportHydrant, HydrantType, NormalizedHydrant
from hydrant_export.pipeline.diameter import reconcile_diameter
from hydrant_export.pipeline.start_date import extract_start_year

HYDRANT_TYPE_BY_LABEL = {
    "Unterflurhydrant": HydrantType.UNDERGROUND,
    "Überflurhydrant": HydrantType.PILLAR,
}
LOGICAL_ID_PREFIX = "ID-"


def map_hydrant_type(label: str | None) -> HydrantType:
    try:
        return HYDRANT_TYPE_BY_LABEL[label]
    except KeyError:
        raise ValidationError(f"Unknown hydrant type {label!r}") from None


def cross_check_identity(transaction_id: str | None, plain_id: str | None, logical_id: str | None) -> str:
    if not transaction_id or not plain_id or not logical_id:
        raise ValidationError("Hydrant identifiers incomplete")
    if transaction_id != plain_id:
        raise ValidationError(f"Transaction id {transaction_id!r} does not match id {plain_id!r}")
    if logical_id != f"{LOGICAL_ID_PREFIX}{plain_id}":
        raise ValidationError(f"Logical id {logical_id!r} does not match id {plain_id!r}")
    return transaction_id


def validate_operator(raw: str | None, expected: str) -> str:
    if raw != expected:
        raise ValidationError(f"Hydrant numbered by {raw!r}, expected {expected!r}")
    return expected


def tag_hydrant(hydrant: NormalizedHydrant, config: ConversionConfig) -> ExportHydrant:
    fields = config.fields
    return ExportHydrant(
        latitude=hydrant.latitude,
        longitude=hydrant.longitude,
        operator=validate_operator(hydrant.attribute(fields.operator), config.policy.operator),
        ref=cross_check_identity(
            hydrant.attribute(fields.transaction_id),
            hydrant.attribute(fields.id),
            hydrant.attribute(fields.logical_id),
        ),
        hydrant_type=map_hydrant_type(hydrant.attribute(fields.hydrant_type)),
        diameter=reconcile_diameter(hydrant.attribute(name) for name in fields.diameters),
        start_date=extract_start_year(hydrant.attribute(fields.start_date)),
    )
