"""Domain models for vehicles, suppliers, shifts and docks in the receiving yard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class VehicleStatus(str, Enum):
    STAGING = "Staging"
    CALLED_IN = "Called In"
    UNLOADING = "Unloading"
    COMPLETED = "Completed"
    DEPARTED = "Departed"


STATUS_ORDER: tuple[VehicleStatus, ...] = (
    VehicleStatus.STAGING,
    VehicleStatus.CALLED_IN,
    VehicleStatus.UNLOADING,
    VehicleStatus.COMPLETED,
    VehicleStatus.DEPARTED,
)

# Statuses in which a vehicle holds its dock.
DOCK_HOLDING_STATUSES = frozenset({VehicleStatus.CALLED_IN, VehicleStatus.UNLOADING})

# Timestamp field stamped on entry into each status.
STATUS_TIMESTAMP_FIELDS: dict[VehicleStatus, str] = {
    VehicleStatus.STAGING: "arrival",
    VehicleStatus.CALLED_IN: "called_in",
    VehicleStatus.UNLOADING: "unloading_start",
    VehicleStatus.COMPLETED: "unloading_end",
    VehicleStatus.DEPARTED: "departed",
}


class DockState(str, Enum):
    AVAILABLE = "Available"
    ASSIGNED = "Assigned"
    UNLOADING = "Unloading"
    MAINTENANCE = "Maintenance"


@dataclass(frozen=True, slots=True)
class VehicleTimestamps:
    """Instants recorded as a vehicle moves through the yard (timezone-aware UTC)."""

    arrival: datetime
    called_in: Optional[datetime] = None
    unloading_start: Optional[datetime] = None
    unloading_end: Optional[datetime] = None
    departed: Optional[datetime] = None

    def present_fields(self) -> tuple[str, ...]:
        return tuple(
            name
            for name in STATUS_TIMESTAMP_FIELDS.values()
            if getattr(self, name) is not None
        )


@dataclass(frozen=True, slots=True)
class Vehicle:
    """A truck moving through the receiving yard.

    Instances are immutable; every lifecycle command swaps in a new copy.
    ``assigned_dock`` is only set while the vehicle holds a dock (Called In or
    Unloading). ``last_dock`` remembers the most recent dock for history and
    reports and is never used to compute occupancy.
    """

    id: str
    registration_number: str
    supplier_id: str
    status: VehicleStatus
    timestamps: VehicleTimestamps
    asn: Optional[str] = None
    assigned_dock: Optional[str] = None
    last_dock: Optional[str] = None
    driver_name: Optional[str] = None
    loadmen_count: Optional[int] = None
    cleaning_crew_available: Optional[bool] = None
    delay_remarks: Optional[str] = None

    @property
    def holds_dock(self) -> bool:
        return self.status in DOCK_HOLDING_STATUSES


@dataclass(frozen=True, slots=True)
class Supplier:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Shift:
    """Reference shift window; times are wall-clock ``HH:MM`` strings."""

    id: str
    name: str
    start_time: str
    end_time: str


@dataclass(slots=True)
class DockView:
    """Derived state of one dock at a given instant."""

    dock_id: str
    state: DockState
    vehicle_id: Optional[str] = None
    registration_number: Optional[str] = None
    supplier_id: Optional[str] = None
    unloading_minutes: Optional[int] = None
    overtime: bool = False
    conflict: bool = False
