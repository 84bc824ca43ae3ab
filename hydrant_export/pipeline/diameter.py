"""Reconcile redundant nominal-diameter columns into one plausible value.

Legacy exports carry the same width in several columns with differing precision.
Rounding to the nearest 5 absorbs measurement noise; columns that still disagree
afterwards are dropped rather than guessed at.
"""

from __future__ import annotations

import math
from typing import Iterable

from hydrant_export.common.errors import ValidationError

DIAMETER_STEP = 5
MAX_DIAMETER = 200


def _parse_candidate(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def round_to_step(value: float, step: int = DIAMETER_STEP) -> int:
    # Halves round up, unlike the built-in round().
    return int(math.floor(value / step + 0.5)) * step


def reconcile_diameter(candidates: Iterable[str | None]) -> str | None:
    values = [value for value in (_parse_candidate(raw) for raw in candidates) if value is not None]
    if not values:
        return None

    if not any(value % DIAMETER_STEP == 0 for value in values):
        raise ValidationError(f"No plausible diameter among {values}")

    rounded = {round_to_step(value) for value in values}
    if len(rounded) > 1:
        return None

    (diameter,) = rounded
    if diameter > MAX_DIAMETER:
        raise ValidationError(f"Diameter {diameter} implausibly large")
    return str(diameter)
