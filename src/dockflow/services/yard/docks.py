"""Dock occupancy, availability and assignment."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Sequence

from ...config import YardPolicy
from ...models.domain import DockState, DockView, Vehicle, VehicleStatus
from ..metrics.kpis import unloading_elapsed, unloading_overtime, whole_minutes
from .errors import DockUnavailable, InvalidTransition, ValidationError
from .registry import YardRegistry

logger = logging.getLogger(__name__)


def dock_ids(total_docks: int) -> list[str]:
    return [str(number) for number in range(1, total_docks + 1)]


def normalize_dock_id(dock_id: object, total_docks: int) -> str:
    """Return the canonical dock id (``"3"`` for ``3``, ``" 3 "`` or ``"03"``)."""
    text = str(dock_id).strip() if dock_id is not None else ""
    if not text:
        raise ValidationError("Dock is required")
    try:
        number = int(text)
    except ValueError as exc:
        raise ValidationError(f"Dock '{text}' is not a dock number") from exc
    if number < 1 or number > total_docks:
        raise ValidationError(f"Dock '{text}' is outside 1..{total_docks}")
    return str(number)


def occupied_docks(vehicles: Iterable[Vehicle]) -> dict[str, str]:
    """Map each held dock to the vehicle holding it.

    Only Called In and Unloading vehicles hold docks. Should two vehicles
    claim the same dock, the one later in the collection wins.
    """
    occupied: dict[str, str] = {}
    for vehicle in vehicles:
        if vehicle.holds_dock and vehicle.assigned_dock:
            occupied[vehicle.assigned_dock] = vehicle.id
    return occupied


def available_docks(total_docks: int, vehicles: Iterable[Vehicle], maintenance_docks: Iterable[str]) -> set[str]:
    blocked = set(occupied_docks(vehicles)) | set(maintenance_docks)
    return {dock for dock in dock_ids(total_docks) if dock not in blocked}


def ensure_dock_free(registry: YardRegistry, dock_id: str, *, for_vehicle: str | None = None) -> None:
    if dock_id in registry.maintenance_docks:
        raise DockUnavailable(f"Dock {dock_id} is under maintenance")
    holder = occupied_docks(registry.vehicles).get(dock_id)
    if holder is not None and holder != for_vehicle:
        raise DockUnavailable(f"Dock {dock_id} is occupied by vehicle '{holder}'")


def assign_vehicle_to_dock(
    registry: YardRegistry,
    vehicle_id: str,
    dock_id: object,
    *,
    total_docks: int,
    now: datetime,
) -> Vehicle:
    """Call a staged vehicle in to ``dock_id`` (Staging -> Called In)."""
    vehicle = registry.get_vehicle(vehicle_id)
    dock = normalize_dock_id(dock_id, total_docks)
    if vehicle.status is not VehicleStatus.STAGING:
        raise InvalidTransition(
            f"Vehicle '{vehicle_id}' is {vehicle.status.value}; only Staging vehicles can be called in"
        )
    ensure_dock_free(registry, dock)

    updated = replace(
        vehicle,
        status=VehicleStatus.CALLED_IN,
        assigned_dock=dock,
        last_dock=dock,
        timestamps=replace(vehicle.timestamps, called_in=now),
    )
    registry.replace_vehicle(updated)
    logger.info("Vehicle %s (%s) called in to dock %s", updated.id, updated.registration_number, dock)
    return updated


def set_maintenance_docks(registry: YardRegistry, docks: Iterable[object], *, total_docks: int) -> set[str]:
    """Replace the maintenance set.

    A dock currently held by a vehicle cannot newly enter maintenance. Docks
    that were already under maintenance stay accepted so an inconsistent
    restored snapshot can still be edited.
    """
    requested = {normalize_dock_id(dock, total_docks) for dock in docks}
    occupied = occupied_docks(registry.vehicles)
    conflicts = sort_docks([dock for dock in requested - registry.maintenance_docks if dock in occupied])
    if conflicts:
        held = ", ".join(f"{dock} ({occupied[dock]})" for dock in conflicts)
        raise DockUnavailable(f"Cannot place occupied docks under maintenance: {held}")

    registry.maintenance_docks = requested
    logger.info("Maintenance docks set to %s", sort_docks(list(requested)) or "none")
    return set(requested)


def dock_overview(registry: YardRegistry, *, policy: YardPolicy, now: datetime) -> list[DockView]:
    """Per-dock state; maintenance is reported ahead of occupancy."""
    holders = {vehicle.id: vehicle for vehicle in registry.vehicles if vehicle.holds_dock}
    occupied = occupied_docks(registry.vehicles)
    views: list[DockView] = []
    for dock in dock_ids(policy.total_docks):
        vehicle = holders.get(occupied[dock]) if dock in occupied else None
        if dock in registry.maintenance_docks:
            views.append(DockView(dock_id=dock, state=DockState.MAINTENANCE, conflict=vehicle is not None))
            continue
        if vehicle is None:
            views.append(DockView(dock_id=dock, state=DockState.AVAILABLE))
            continue
        state = DockState.UNLOADING if vehicle.status is VehicleStatus.UNLOADING else DockState.ASSIGNED
        views.append(
            DockView(
                dock_id=dock,
                state=state,
                vehicle_id=vehicle.id,
                registration_number=vehicle.registration_number,
                supplier_id=vehicle.supplier_id,
                unloading_minutes=whole_minutes(unloading_elapsed(vehicle, now)),
                overtime=unloading_overtime(vehicle, now, policy),
            )
        )
    return views


def sort_docks(docks: Sequence[str]) -> list[str]:
    return sorted(docks, key=int)
