"""Domain errors and failure typing."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """Raised when a stage cannot run at all (missing or unreadable input)."""

    error_code = "STAGE_ERROR"


class HydrantDataError(PipelineError):
    """Raised when a single placemark fails normalisation."""

    error_code = "HYDRANT_DATA_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.placemark_index: int | None = None
        self.placemark_name: str | None = None

    def locate(self, index: int, name: str | None) -> "HydrantDataError":
        self.placemark_index = index
        self.placemark_name = name
        return self

    @property
    def placemark(self) -> str | None:
        if self.placemark_index is None:
            return None
        if self.placemark_name:
            return f"#{self.placemark_index} ({self.placemark_name})"
        return f"#{self.placemark_index}"

    def __str__(self) -> str:
        if self.placemark is None:
            return self.message
        return f"Placemark {self.placemark}: {self.message}"


class StructuralError(HydrantDataError):
    """Required shape missing: no point, no attributes, empty name."""

    error_code = "STRUCTURAL_ERROR"


class FormatError(HydrantDataError):
    """Value present but not matching the required lexical pattern."""

    error_code = "FORMAT_ERROR"


class ValidationError(HydrantDataError):
    """Well-formed value violating a domain constraint."""

    error_code = "VALIDATION_ERROR"
