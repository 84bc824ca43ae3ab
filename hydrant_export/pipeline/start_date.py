"""Service start date parsing."""

from __future__ import annotations

import re

from hydrant_export.common.errors import FormatError

START_DATE_RE = re.compile(r"(\d{4})/(\d{2})/(\d{2})", re.ASCII)


def extract_start_year(raw: str | None) -> str | None:
    if not raw:
        return None
    match = START_DATE_RE.fullmatch(raw)
    if match is None:
        raise FormatError(f"Hydrant start date {raw!r} is not YYYY/MM/DD")
    # Day and month are placeholders in the source data.
    return match.group(1)
