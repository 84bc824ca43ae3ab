"""Application constants."""

DEFAULT_CONFIG_PATH = "config/hydrants.yml"
COMMANDS = ("convert", "check")
STAGES = (
    "load",
    "normalise",
    "export",
)
OUTPUT_FORMATS = ("csv", "geojson")
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
MAX_DIAMETER_CANDIDATES = 7
# geojson rounds coordinates on construction; keep every digit the source carries.
GEOJSON_COORDINATE_PRECISION = 12
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "placemark",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
