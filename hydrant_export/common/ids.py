"""Run identifier helpers."""

from __future__ import annotations

from datetime import datetime, timezone

RUN_ID_PREFIX = "run"


def generate_run_id(prefix: str = RUN_ID_PREFIX) -> str:
    now = datetime.now(tz=timezone.utc)
    # Sortable by creation time.
    return now.strftime(f"{prefix}-%Y%m%dT%H%M%S%fZ")
