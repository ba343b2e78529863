"""Derived timings, urgency flags and aggregate KPIs for yard vehicles.

Everything here is a pure function of a vehicle snapshot (and ``now`` where a
live age is involved). Nothing is cached on the vehicles themselves.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from ...config import YardPolicy
from ...models.domain import STATUS_ORDER, Vehicle, VehicleStatus


class StagingUrgency(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


def _span(start: Optional[datetime], end: Optional[datetime]) -> Optional[timedelta]:
    if start is None or end is None:
        return None
    delta = end - start
    # Clock anomalies yield no duration rather than a negative one.
    if delta < timedelta(0):
        return None
    return delta


def whole_minutes(delta: Optional[timedelta]) -> Optional[int]:
    if delta is None:
        return None
    return int(delta.total_seconds() // 60)


def wait_time(vehicle: Vehicle) -> Optional[timedelta]:
    """Arrival until unloading started."""
    return _span(vehicle.timestamps.arrival, vehicle.timestamps.unloading_start)


def unload_duration(vehicle: Vehicle) -> Optional[timedelta]:
    """Unloading start until unloading end."""
    return _span(vehicle.timestamps.unloading_start, vehicle.timestamps.unloading_end)


def staging_age(vehicle: Vehicle, now: datetime) -> Optional[timedelta]:
    if vehicle.status is not VehicleStatus.STAGING:
        return None
    return _span(vehicle.timestamps.arrival, now)


def staging_urgency(vehicle: Vehicle, now: datetime, policy: YardPolicy) -> StagingUrgency:
    age = staging_age(vehicle, now)
    if age is None:
        return StagingUrgency.NORMAL
    if age >= timedelta(minutes=policy.staging_critical_minutes):
        return StagingUrgency.CRITICAL
    if age >= timedelta(minutes=policy.staging_warning_minutes):
        return StagingUrgency.WARNING
    return StagingUrgency.NORMAL


def unloading_elapsed(vehicle: Vehicle, now: datetime) -> Optional[timedelta]:
    if vehicle.status is not VehicleStatus.UNLOADING:
        return None
    return _span(vehicle.timestamps.unloading_start, now)


def unloading_overtime(vehicle: Vehicle, now: datetime, policy: YardPolicy) -> bool:
    elapsed = unloading_elapsed(vehicle, now)
    if elapsed is None:
        return False
    return elapsed > timedelta(minutes=policy.unloading_overtime_minutes)


def format_hours_minutes(delta: timedelta) -> str:
    minutes = whole_minutes(delta) or 0
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m"


def elapsed_label(vehicle: Vehicle, now: datetime) -> str:
    """Short card caption: time since the vehicle's latest event, or unload time once done."""
    stamps = vehicle.timestamps
    if vehicle.status is VehicleStatus.COMPLETED:
        duration = unload_duration(vehicle)
        return f"Unloaded in {format_hours_minutes(duration)}" if duration is not None else "Unloaded"

    reference = {
        VehicleStatus.STAGING: stamps.arrival,
        VehicleStatus.CALLED_IN: stamps.called_in,
        VehicleStatus.UNLOADING: stamps.unloading_start,
        VehicleStatus.DEPARTED: stamps.departed,
    }[vehicle.status]
    since = _span(reference, now)
    if since is None:
        return ""
    return f"{format_hours_minutes(since)} ago"


@dataclass(frozen=True, slots=True)
class KpiSummary:
    total: int
    by_status: dict[VehicleStatus, int]
    staging: int
    processing: int
    completed: int
    average_wait_minutes: Optional[float]
    average_unload_minutes: Optional[float]
    wait_sample_size: int
    unload_sample_size: int


def _average_minutes(spans: list[timedelta]) -> Optional[float]:
    if not spans:
        return None
    total_seconds = sum(span.total_seconds() for span in spans)
    return round(total_seconds / len(spans) / 60, 1)


def kpi_summary(vehicles: Iterable[Vehicle]) -> KpiSummary:
    """Counts by status plus average wait and unload times.

    Averages only consider vehicles with both endpoints present and are
    ``None`` when no vehicle qualifies.
    """
    vehicles = list(vehicles)
    counts: Counter[VehicleStatus] = Counter(vehicle.status for vehicle in vehicles)
    by_status = {status: counts.get(status, 0) for status in STATUS_ORDER}

    waits = [span for span in (wait_time(vehicle) for vehicle in vehicles) if span is not None]
    unloads = [span for span in (unload_duration(vehicle) for vehicle in vehicles) if span is not None]

    return KpiSummary(
        total=len(vehicles),
        by_status=by_status,
        staging=by_status[VehicleStatus.STAGING],
        processing=by_status[VehicleStatus.CALLED_IN] + by_status[VehicleStatus.UNLOADING],
        completed=by_status[VehicleStatus.COMPLETED],
        average_wait_minutes=_average_minutes(waits),
        average_unload_minutes=_average_minutes(unloads),
        wait_sample_size=len(waits),
        unload_sample_size=len(unloads),
    )
