"""CLI entrypoint for the hydrant KML to CSV/GeoJSON conversion."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from hydrant_export.common.config_loader import ConversionConfig, load_config
from hydrant_export.common.constants import (
    COMMANDS,
    DEFAULT_CONFIG_PATH,
    EXIT_HARD_FAIL,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
)
from hydrant_export.common.errors import HydrantDataError, PipelineError
from hydrant_export.common.ids import generate_run_id
from hydrant_export.common.logging import build_logger, close_logger, log_event
from hydrant_export.common.models import NormalisationResult
from hydrant_export.common.time_utils import elapsed_ms
from hydrant_export.pipeline.export import write_hydrant_csv, write_hydrant_geojson
from hydrant_export.pipeline.normalise import normalise_features
from hydrant_export.pipeline.reports import write_run_summary
from hydrant_export.source.kml_loader import extract_features, extract_schema, load_kml_document

UNEXPECTED_ERROR_CODE = "UNEXPECTED_ERROR"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", nargs="?", default="convert", choices=COMMANDS)
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="reject failing placemarks individually instead of aborting the run",
    )
    return parser.parse_args(argv)


class ConversionRun:
    """State of one conversion: what was loaded, normalised and written."""

    def __init__(self, args: argparse.Namespace, config: ConversionConfig, logger: logging.Logger, run_id: str):
        self.args = args
        self.config = config
        self.logger = logger
        self.run_id = run_id
        self.data_dir = Path(args.data_dir)
        self.placemark_count = 0
        self.result: NormalisationResult | None = None
        self.outputs: dict[str, str] = {}
        self.stage: str | None = None

    def _log(self, message: str, **fields) -> None:
        log_event(self.logger, message, run_id=self.run_id, **fields)

    def execute(self) -> None:
        self.stage = "load"
        started = time.monotonic()
        self._log("stage start", stage="load", event="STAGE_START", status="ok")
        kml_path = self.data_dir / self.config.kml_path
        document = load_kml_document(kml_path)
        schema = extract_schema(document)
        features = extract_features(document)
        self.placemark_count = len(features)
        self._log(
            "stage end",
            stage="load",
            source=str(kml_path),
            event="STAGE_END",
            status="ok",
            rows_out=len(features),
            duration_ms=elapsed_ms(started),
        )

        self.stage = "normalise"
        started = time.monotonic()
        self._log("stage start", stage="normalise", event="STAGE_START", status="ok")
        self.result = normalise_features(features, schema, self.config, skip_invalid=self.args.skip_invalid)
        for rejected in self.result.rejected:
            self._log(
                rejected.message,
                level=logging.WARNING,
                stage="normalise",
                event="RECORD_REJECTED",
                status="skipped",
                placemark=rejected.index,
                error_code=rejected.error_code,
            )
        self._log(
            "stage end",
            stage="normalise",
            event="STAGE_END",
            status="partial" if self.result.had_rejections else "ok",
            rows_in=len(features),
            rows_out=len(self.result.hydrants),
            duration_ms=elapsed_ms(started),
        )

        if self.args.command == "check":
            return

        self.stage = "export"
        started = time.monotonic()
        self._log("stage start", stage="export", event="STAGE_START", status="ok")
        if self.config.emits("csv"):
            path = write_hydrant_csv(self.data_dir / self.config.csv_filename, schema, self.result.hydrants)
            self.outputs["csv"] = str(path)
        if self.config.emits("geojson"):
            path = write_hydrant_geojson(self.data_dir / self.config.geojson_filename, self.result.export_hydrants)
            self.outputs["geojson"] = str(path)
        self._log(
            "stage end",
            stage="export",
            event="STAGE_END",
            status="ok",
            rows_in=len(self.result.hydrants),
            rows_out=len(self.result.hydrants),
            duration_ms=elapsed_ms(started),
        )

    def write_summary(self, error: dict | None = None) -> Path:
        return write_run_summary(
            self.data_dir,
            run_id=self.run_id,
            command=self.args.command,
            placemark_count=self.placemark_count,
            result=self.result,
            outputs=self.outputs,
            error=error,
        )


def _error_payload(exc: PipelineError) -> dict:
    payload = {"error_code": exc.error_code, "message": str(exc)}
    if isinstance(exc, HydrantDataError):
        payload["placemark_index"] = exc.placemark_index
        payload["placemark_name"] = exc.placemark_name
    return payload


def _write_failure_summary(run: ConversionRun, error: dict) -> None:
    try:
        run.write_summary(error=error)
    except OSError as exc:
        log_event(
            run.logger,
            f"run summary not written: {exc}",
            level=logging.ERROR,
            run_id=run.run_id,
            stage="report",
            event="SUMMARY_FAIL",
            status="error",
            error_code=UNEXPECTED_ERROR_CODE,
        )


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir)
    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)

    try:
        overlay_path = Path(args.overlay_config) if args.overlay_config else None
        config = load_config(Path(args.config), overlay_path=overlay_path)
    except PipelineError as exc:
        log_event(
            logger,
            str(exc),
            level=logging.ERROR,
            run_id=run_id,
            stage="config",
            event="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        close_logger(logger)
        return EXIT_HARD_FAIL

    run = ConversionRun(args, config, logger, run_id)
    try:
        run.execute()
    except PipelineError as exc:
        log_event(
            logger,
            str(exc),
            level=logging.ERROR,
            run_id=run_id,
            event="STAGE_FAIL",
            status="error",
            stage=run.stage,
            placemark=getattr(exc, "placemark_index", None),
            error_code=exc.error_code,
        )
        _write_failure_summary(run, _error_payload(exc))
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            event="STAGE_FAIL",
            status="error",
            stage=run.stage,
            error_code=UNEXPECTED_ERROR_CODE,
        )
        _write_failure_summary(run, {"error_code": UNEXPECTED_ERROR_CODE, "message": str(exc)})
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)

    run.write_summary()
    if run.result is not None and run.result.had_rejections:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
