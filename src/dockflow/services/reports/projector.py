"""Flatten vehicles into report rows and escape them for delimited text."""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from ...models.domain import Vehicle, VehicleStatus
from ..metrics.kpis import unload_duration, wait_time, whole_minutes
from ..yard.registry import DEFAULT_STATUS_TEXTS, UNKNOWN_SUPPLIER

NOT_AVAILABLE = "N/A"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
LINE_TERMINATOR = "\r\n"

REPORT_HEADERS: tuple[str, ...] = (
    "VehicleReg",
    "Supplier",
    "Status",
    "Arrival",
    "CalledIn",
    "UnloadStart",
    "UnloadEnd",
    "Departed",
    "WaitTime(min)",
    "UnloadDuration(min)",
    "Dock",
    "Driver",
    "ASN",
)


def resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def format_timestamp(value: Optional[datetime], tz: tzinfo) -> str:
    if value is None:
        return NOT_AVAILABLE
    return value.astimezone(tz).strftime(TIMESTAMP_FORMAT)


def _minutes_or_na(minutes: Optional[int]) -> str:
    return NOT_AVAILABLE if minutes is None else str(minutes)


def project_row(
    vehicle: Vehicle,
    supplier_names: Mapping[str, str],
    status_texts: Mapping[VehicleStatus, str],
    tz: tzinfo = timezone.utc,
) -> tuple[str, ...]:
    """One report row, in ``REPORT_HEADERS`` order, with raw (unescaped) values."""
    stamps = vehicle.timestamps
    return (
        vehicle.registration_number,
        supplier_names.get(vehicle.supplier_id, UNKNOWN_SUPPLIER),
        status_texts.get(vehicle.status) or DEFAULT_STATUS_TEXTS[vehicle.status],
        format_timestamp(stamps.arrival, tz),
        format_timestamp(stamps.called_in, tz),
        format_timestamp(stamps.unloading_start, tz),
        format_timestamp(stamps.unloading_end, tz),
        format_timestamp(stamps.departed, tz),
        _minutes_or_na(whole_minutes(wait_time(vehicle))),
        _minutes_or_na(whole_minutes(unload_duration(vehicle))),
        vehicle.assigned_dock or vehicle.last_dock or "",
        vehicle.driver_name or "",
        vehicle.asn or "",
    )


def project_rows(
    vehicles: Iterable[Vehicle],
    supplier_names: Mapping[str, str],
    status_texts: Mapping[VehicleStatus, str],
    tz: tzinfo = timezone.utc,
) -> list[tuple[str, ...]]:
    return [project_row(vehicle, supplier_names, status_texts, tz) for vehicle in vehicles]


def csv_writer(buffer: io.StringIO):
    """Writer for report text; rows end in CRLF so a bare CR or LF in a cell is quoted."""
    return csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator=LINE_TERMINATOR)


def serialize_row(row: Sequence[object]) -> str:
    buffer = io.StringIO()
    csv_writer(buffer).writerow(row)
    return buffer.getvalue()[: -len(LINE_TERMINATOR)]


def escape_csv_field(value: object) -> str:
    """Quote a cell holding a comma, quote or line break; inner quotes are doubled."""
    if value is None:
        return ""
    text = str(value)
    # A lone empty cell would be written as "" to tell it apart from an empty row.
    return serialize_row((text,)) if text else ""
