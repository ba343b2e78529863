"""Vehicle lifecycle transitions.

Staging -> Called In -> Unloading -> Completed -> Departed. Each command
checks every precondition before touching the registry, so a rejected
command leaves the yard exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ...models.domain import Vehicle, VehicleStatus, VehicleTimestamps
from .docks import ensure_dock_free, normalize_dock_id
from .errors import InvalidTransition, NotFound, ValidationError
from .registry import YardRegistry

logger = logging.getLogger(__name__)


def _require_status(vehicle: Vehicle, expected: VehicleStatus, action: str) -> None:
    if vehicle.status is not expected:
        raise InvalidTransition(
            f"Cannot {action} vehicle '{vehicle.id}': status is {vehicle.status.value}, "
            f"expected {expected.value}"
        )


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def register_arrival(
    registry: YardRegistry,
    *,
    registration_number: str,
    supplier_id: str,
    asn: Optional[str] = None,
    now: datetime,
    id_factory: Callable[[], str],
) -> Vehicle:
    registration = _clean(registration_number).upper()
    supplier = _clean(supplier_id)
    if not registration:
        raise ValidationError("Registration number is required")
    if not supplier:
        raise ValidationError("Supplier is required")
    if registry.find_supplier(supplier) is None:
        raise NotFound(f"Supplier '{supplier}' not found")

    vehicle_id = id_factory()
    if registry.find_vehicle(vehicle_id) is not None:
        raise ValidationError(f"Vehicle id '{vehicle_id}' already exists")

    vehicle = Vehicle(
        id=vehicle_id,
        registration_number=registration,
        supplier_id=supplier,
        status=VehicleStatus.STAGING,
        timestamps=VehicleTimestamps(arrival=now),
        asn=_clean(asn) or None,
    )
    registry.vehicles.append(vehicle)
    logger.info("Registered arrival %s (%s) for supplier %s", vehicle.id, registration, supplier)
    return vehicle


def assign_resources(
    registry: YardRegistry,
    vehicle_id: str,
    *,
    driver_name: str,
    dock_id: object,
    loadmen_count: int,
    cleaning_crew_available: bool,
    total_docks: int,
    now: datetime,
) -> Vehicle:
    """Start unloading (Called In -> Unloading) with the crew that will work the dock.

    The dock is normally the one the vehicle was called in to. A different
    dock is accepted only when it is free.
    """
    vehicle = registry.get_vehicle(vehicle_id)
    driver = _clean(driver_name)
    if not driver:
        raise ValidationError("Driver name is required")
    dock = normalize_dock_id(dock_id, total_docks)
    if loadmen_count is None or loadmen_count < 1:
        raise ValidationError("At least one loadman is required")
    _require_status(vehicle, VehicleStatus.CALLED_IN, "start unloading")
    if dock != vehicle.assigned_dock:
        ensure_dock_free(registry, dock, for_vehicle=vehicle.id)

    updated = replace(
        vehicle,
        status=VehicleStatus.UNLOADING,
        assigned_dock=dock,
        last_dock=dock,
        driver_name=driver,
        loadmen_count=int(loadmen_count),
        cleaning_crew_available=bool(cleaning_crew_available),
        timestamps=replace(vehicle.timestamps, unloading_start=now),
    )
    registry.replace_vehicle(updated)
    logger.info(
        "Vehicle %s unloading at dock %s (driver=%s, loadmen=%s)",
        updated.id,
        dock,
        driver,
        updated.loadmen_count,
    )
    return updated


def complete_unloading(registry: YardRegistry, vehicle_id: str, *, now: datetime) -> Vehicle:
    """Finish unloading and release the dock; ``last_dock`` keeps it for reports."""
    vehicle = registry.get_vehicle(vehicle_id)
    _require_status(vehicle, VehicleStatus.UNLOADING, "complete")

    updated = replace(
        vehicle,
        status=VehicleStatus.COMPLETED,
        assigned_dock=None,
        timestamps=replace(vehicle.timestamps, unloading_end=now),
    )
    registry.replace_vehicle(updated)
    logger.info("Vehicle %s completed unloading, dock %s released", updated.id, vehicle.assigned_dock)
    return updated


def mark_departed(registry: YardRegistry, vehicle_id: str, *, now: datetime) -> Vehicle:
    vehicle = registry.get_vehicle(vehicle_id)
    _require_status(vehicle, VehicleStatus.COMPLETED, "mark departed")

    updated = replace(
        vehicle,
        status=VehicleStatus.DEPARTED,
        timestamps=replace(vehicle.timestamps, departed=now),
    )
    registry.replace_vehicle(updated)
    logger.info("Vehicle %s departed", updated.id)
    return updated


def add_delay_remark(registry: YardRegistry, vehicle_id: str, remarks: str) -> Vehicle:
    vehicle = registry.get_vehicle(vehicle_id)
    updated = replace(vehicle, delay_remarks=remarks)
    registry.replace_vehicle(updated)
    logger.info("Delay remark recorded for vehicle %s", vehicle.id)
    return updated


def delete_vehicle(registry: YardRegistry, vehicle_id: str) -> Vehicle:
    vehicle = registry.get_vehicle(vehicle_id)
    registry.vehicles = [item for item in registry.vehicles if item.id != vehicle_id]
    logger.info("Deleted vehicle %s (%s) in status %s", vehicle.id, vehicle.registration_number, vehicle.status.value)
    return vehicle
