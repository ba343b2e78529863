"""Report projection exports."""

from .projector import (
    REPORT_HEADERS,
    escape_csv_field,
    format_timestamp,
    project_row,
    project_rows,
    resolve_timezone,
    serialize_row,
)

__all__ = [
    "REPORT_HEADERS",
    "escape_csv_field",
    "format_timestamp",
    "project_row",
    "project_rows",
    "resolve_timezone",
    "serialize_row",
]
