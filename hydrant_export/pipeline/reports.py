"""Run summary report."""

from __future__ import annotations

from pathlib import Path

from hydrant_export.common.fs import write_json
from hydrant_export.common.models import NormalisationResult
from hydrant_export.common.time_utils import utc_timestamp_iso


def summary_path(data_dir: Path) -> Path:
    return data_dir / "out" / "reports" / "run_summary.json"


def write_run_summary(
    data_dir: Path,
    *,
    run_id: str,
    command: str,
    placemark_count: int,
    result: NormalisationResult | None,
    outputs: dict[str, str],
    error: dict | None = None,
) -> Path:
    if error is not None:
        status = "error"
    elif result is not None and result.had_rejections:
        status = "partial"
    else:
        status = "success"

    payload = {
        "run_id": run_id,
        "command": command,
        "generated_at": utc_timestamp_iso(),
        "status": status,
        "counts": {
            "placemarks": placemark_count,
            "normalised": len(result.hydrants) if result is not None else 0,
            "tagged": len(result.export_hydrants) if result is not None else 0,
            "rejected": len(result.rejected) if result is not None else 0,
        },
        "rejected": [rejected.to_dict() for rejected in result.rejected] if result is not None else [],
        "outputs": outputs,
        "error": error,
    }
    path = summary_path(data_dir)
    write_json(path, payload)
    return path
