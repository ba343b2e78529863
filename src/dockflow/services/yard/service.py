"""Single-writer command facade over the yard registry."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from ...config import YardPolicy
from ...models.domain import DockView, Shift, Supplier, Vehicle, VehicleStatus
from ...persistence.snapshots import SnapshotStore, dump_snapshot, restore_registry
from ..metrics.kpis import KpiSummary, kpi_summary
from ..reports.projector import project_rows, resolve_timezone
from . import catalog, docks, lifecycle
from .registry import YardRegistry

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[dict[str, Any]], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class YardService:
    """Owns one :class:`YardRegistry` and serializes every command against it.

    After each successful command the new snapshot is handed to every
    subscribed listener (for example :meth:`SnapshotStore.save`).
    """

    def __init__(
        self,
        registry: Optional[YardRegistry] = None,
        *,
        policy: Optional[YardPolicy] = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.registry = registry if registry is not None else YardRegistry.seeded()
        self.policy = policy or YardPolicy()
        self._clock = clock
        self._id_factory = id_factory or self._next_vehicle_id
        self._lock = threading.RLock()
        self._listeners: list[SnapshotListener] = []

    def now(self) -> datetime:
        return self._clock()

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def _next_vehicle_id(self) -> str:
        stamp = int(self.now().timestamp() * 1000)
        candidate = f"V-{stamp}"
        while self.registry.find_vehicle(candidate) is not None:
            stamp += 1
            candidate = f"V-{stamp}"
        return candidate

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = dump_snapshot(self.registry)
        for listener in self._listeners:
            try:
                listener(snapshot)
            except OSError as exc:
                logger.error("Failed to persist yard snapshot: %s", exc)

    def _command(self, action: Callable[[], Any]) -> Any:
        with self._lock:
            result = action()
            self._publish()
            return result

    def register_arrival(self, registration_number: str, supplier_id: str, asn: Optional[str] = None) -> Vehicle:
        return self._command(
            lambda: lifecycle.register_arrival(
                self.registry,
                registration_number=registration_number,
                supplier_id=supplier_id,
                asn=asn,
                now=self.now(),
                id_factory=self._id_factory,
            )
        )

    def assign_vehicle_to_dock(self, vehicle_id: str, dock_id: object) -> Vehicle:
        return self._command(
            lambda: docks.assign_vehicle_to_dock(
                self.registry,
                vehicle_id,
                dock_id,
                total_docks=self.policy.total_docks,
                now=self.now(),
            )
        )

    call_in = assign_vehicle_to_dock

    def assign_resources(
        self,
        vehicle_id: str,
        *,
        driver_name: str,
        dock_id: object,
        loadmen_count: int,
        cleaning_crew_available: bool,
    ) -> Vehicle:
        return self._command(
            lambda: lifecycle.assign_resources(
                self.registry,
                vehicle_id,
                driver_name=driver_name,
                dock_id=dock_id,
                loadmen_count=loadmen_count,
                cleaning_crew_available=cleaning_crew_available,
                total_docks=self.policy.total_docks,
                now=self.now(),
            )
        )

    def complete_unloading(self, vehicle_id: str) -> Vehicle:
        return self._command(lambda: lifecycle.complete_unloading(self.registry, vehicle_id, now=self.now()))

    def mark_departed(self, vehicle_id: str) -> Vehicle:
        return self._command(lambda: lifecycle.mark_departed(self.registry, vehicle_id, now=self.now()))

    def add_delay_remark(self, vehicle_id: str, remarks: str) -> Vehicle:
        return self._command(lambda: lifecycle.add_delay_remark(self.registry, vehicle_id, remarks))

    def delete_vehicle(self, vehicle_id: str) -> Vehicle:
        return self._command(lambda: lifecycle.delete_vehicle(self.registry, vehicle_id))

    def set_maintenance_docks(self, dock_ids: Iterable[object]) -> set[str]:
        return self._command(
            lambda: docks.set_maintenance_docks(self.registry, dock_ids, total_docks=self.policy.total_docks)
        )

    def upsert_supplier(self, name: str, supplier_id: Optional[str] = None) -> Supplier:
        return self._command(lambda: catalog.upsert_supplier(self.registry, name=name, supplier_id=supplier_id))

    def delete_supplier(self, supplier_id: str) -> Supplier:
        return self._command(lambda: catalog.delete_supplier(self.registry, supplier_id))

    def set_status_text(self, status: VehicleStatus, text: str) -> str:
        return self._command(lambda: catalog.set_status_text(self.registry, status, text))

    def vehicles(self, status: Optional[VehicleStatus] = None) -> list[Vehicle]:
        with self._lock:
            return [vehicle for vehicle in self.registry.vehicles if status is None or vehicle.status is status]

    def vehicle_count(self) -> int:
        with self._lock:
            return len(self.registry.vehicles)

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        with self._lock:
            return self.registry.get_vehicle(vehicle_id)

    def supplier_name(self, supplier_id: str) -> str:
        with self._lock:
            return self.registry.supplier_name(supplier_id)

    def status_text(self, status: VehicleStatus) -> str:
        with self._lock:
            return self.registry.status_text(status)

    def suppliers(self) -> list[Supplier]:
        with self._lock:
            return list(self.registry.suppliers)

    def shifts(self) -> list[Shift]:
        with self._lock:
            return list(self.registry.shifts)

    def status_texts(self) -> dict[VehicleStatus, str]:
        with self._lock:
            return {status: self.registry.status_text(status) for status in VehicleStatus}

    def current_snapshot(self) -> dict[str, Any]:
        with self._lock:
            return dump_snapshot(self.registry)

    def kpi_summary(self) -> KpiSummary:
        with self._lock:
            return kpi_summary(self.registry.vehicles)

    def report_rows(self) -> list[tuple[str, ...]]:
        with self._lock:
            return project_rows(
                self.registry.vehicles,
                self.registry.supplier_names(),
                self.registry.status_texts,
                resolve_timezone(self.policy.report_timezone),
            )

    def dock_overview(self) -> list[DockView]:
        with self._lock:
            return docks.dock_overview(self.registry, policy=self.policy, now=self.now())

    def available_docks(self) -> list[str]:
        with self._lock:
            free = docks.available_docks(
                self.policy.total_docks,
                self.registry.vehicles,
                self.registry.maintenance_docks,
            )
            return docks.sort_docks(list(free))

    def maintenance_docks(self) -> list[str]:
        with self._lock:
            return docks.sort_docks(list(self.registry.maintenance_docks))


def build_yard_service(
    policy: YardPolicy,
    *,
    store: Optional[SnapshotStore] = None,
    default_maintenance_docks: Iterable[str] = (),
    clock: Callable[[], datetime] = _utc_now,
) -> YardService:
    """Restore the yard from ``store`` (or seed a fresh one) and persist future changes to it."""
    registry: Optional[YardRegistry] = None
    if store is not None:
        try:
            payload = store.load()
        except ValueError as exc:
            logger.warning("Ignoring unreadable yard snapshot: %s", exc)
            payload = None
        if payload is not None:
            try:
                registry = restore_registry(payload)
            except ValueError as exc:
                logger.warning("Ignoring invalid yard snapshot: %s", exc)

    if registry is None:
        registry = YardRegistry.seeded(
            docks.normalize_dock_id(dock, policy.total_docks) for dock in default_maintenance_docks
        )
        logger.info("Starting with a fresh yard (%d suppliers)", len(registry.suppliers))

    service = YardService(registry, policy=policy, clock=clock)
    if store is not None:
        service.subscribe(store.save)
    return service
