"""Snapshot serialization and file-based persistence for the yard registry."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..models.domain import STATUS_ORDER, STATUS_TIMESTAMP_FIELDS, Shift, Supplier, Vehicle, VehicleTimestamps
from ..schemas.snapshot import YardSnapshotModel
from ..services.yard.docks import occupied_docks, sort_docks
from ..services.yard.registry import DEFAULT_STATUS_TEXTS, YardRegistry

logger = logging.getLogger(__name__)


def dump_snapshot(registry: YardRegistry) -> dict[str, Any]:
    """JSON-compatible copy of the registry, plus the derived dock occupancy."""
    model = YardSnapshotModel(
        vehicles=[asdict(vehicle) for vehicle in registry.vehicles],
        suppliers=[asdict(supplier) for supplier in registry.suppliers],
        shifts=[asdict(shift) for shift in registry.shifts],
        status_texts=dict(registry.status_texts),
        maintenance_docks=sort_docks(list(registry.maintenance_docks)),
        occupied_docks=occupied_docks(registry.vehicles),
    )
    return model.model_dump(mode="json")


def _expected_fields(vehicle: Vehicle) -> tuple[str, ...]:
    reached = STATUS_ORDER[: STATUS_ORDER.index(vehicle.status) + 1]
    return tuple(STATUS_TIMESTAMP_FIELDS[status] for status in reached)


def check_vehicle_invariants(vehicles: Iterable[Vehicle]) -> None:
    """Raise ``ValueError`` unless every vehicle is consistent with its status.

    A dock is held exactly while Called In or Unloading, the present
    timestamps are the prefix reached by the status, and no two vehicles
    hold the same dock.
    """
    seen_ids: set[str] = set()
    holders: dict[str, str] = {}
    for vehicle in vehicles:
        if vehicle.id in seen_ids:
            raise ValueError(f"Vehicle id {vehicle.id} appears more than once")
        seen_ids.add(vehicle.id)

        if (vehicle.assigned_dock is not None) != vehicle.holds_dock:
            raise ValueError(
                f"Vehicle {vehicle.id} is {vehicle.status.value} with assigned dock {vehicle.assigned_dock!r}"
            )
        present = vehicle.timestamps.present_fields()
        expected = _expected_fields(vehicle)
        if present != expected:
            raise ValueError(
                f"Vehicle {vehicle.id} is {vehicle.status.value} but has timestamps {list(present)}; "
                f"expected {list(expected)}"
            )
        if vehicle.assigned_dock is not None:
            holder = holders.get(vehicle.assigned_dock)
            if holder is not None:
                raise ValueError(f"Dock {vehicle.assigned_dock} is held by both {holder} and {vehicle.id}")
            holders[vehicle.assigned_dock] = vehicle.id


def restore_registry(payload: Mapping[str, Any]) -> YardRegistry:
    """Rebuild a registry from :func:`dump_snapshot` output.

    Raises ``ValueError`` when the payload does not describe a snapshot or
    describes vehicles that break the lifecycle rules.
    """
    try:
        model = YardSnapshotModel.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid yard snapshot: {exc}") from exc

    vehicles = [
        Vehicle(
            **item.model_dump(exclude={"timestamps"}),
            timestamps=VehicleTimestamps(**item.timestamps.model_dump()),
        )
        for item in model.vehicles
    ]
    check_vehicle_invariants(vehicles)
    status_texts = dict(DEFAULT_STATUS_TEXTS)
    status_texts.update(model.status_texts)
    return YardRegistry(
        vehicles=vehicles,
        suppliers=[Supplier(**item.model_dump()) for item in model.suppliers],
        shifts=[Shift(**item.model_dump()) for item in model.shifts],
        status_texts=status_texts,
        maintenance_docks=set(model.maintenance_docks),
    )


class SnapshotStore:
    """Keeps the latest yard snapshot in a single JSON file under the data root."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or settings.snapshot_path).resolve()

    def load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Snapshot file {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValueError(f"Snapshot file {self.path} does not contain an object")
        logger.info("Loaded yard snapshot from %s (%d vehicles)", self.path, len(payload.get("vehicles", [])))
        return payload

    def save(self, payload: Mapping[str, Any], *, indent: int = 2) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with temp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=indent)
        os.replace(temp_path, self.path)
        logger.info("Saved yard snapshot to %s", self.path)
