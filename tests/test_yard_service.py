from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from dockflow.config import YardPolicy
from dockflow.models.domain import VehicleStatus
from dockflow.persistence.snapshots import SnapshotStore, dump_snapshot
from dockflow.services.yard.errors import DockUnavailable, InvalidTransition, NotFound, ValidationError
from dockflow.services.yard.registry import YardRegistry
from dockflow.services.yard.service import YardService, build_yard_service

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


def _service(clock: FakeClock | None = None) -> YardService:
    return YardService(policy=YardPolicy(total_docks=10), clock=clock or FakeClock())


def test_generated_vehicle_ids_are_unique_per_instant() -> None:
    service = _service()

    first = service.register_arrival("ab1", "S01")
    second = service.register_arrival("ab2", "S01")

    assert first.id == f"V-{int(T0.timestamp() * 1000)}"
    assert second.id == f"V-{int(T0.timestamp() * 1000) + 1}"


def test_service_runs_full_lifecycle_with_clock() -> None:
    clock = FakeClock()
    service = _service(clock)

    vehicle = service.register_arrival("ka01ab1234", "S05", asn="ASN-1")
    clock.advance(minutes=30)
    service.call_in(vehicle.id, "3")
    clock.advance(minutes=15)
    service.assign_resources(vehicle.id, driver_name="Ramesh", dock_id="3", loadmen_count=4, cleaning_crew_available=False)
    clock.advance(minutes=50)
    service.complete_unloading(vehicle.id)
    clock.advance(minutes=5)
    departed = service.mark_departed(vehicle.id)

    assert departed.status is VehicleStatus.DEPARTED
    assert departed.timestamps.unloading_start == T0 + timedelta(minutes=45)
    summary = service.kpi_summary()
    assert summary.average_wait_minutes == 45.0
    assert summary.average_unload_minutes == 50.0
    row = service.report_rows()[0]
    assert row[0] == "KA01AB1234"
    assert row[8:11] == ("45", "50", "3")


def test_rejected_command_does_not_publish_or_mutate() -> None:
    service = _service()
    published: list[dict] = []
    service.subscribe(published.append)
    vehicle = service.register_arrival("ab1", "S01")
    before = service.current_snapshot()

    with pytest.raises(InvalidTransition):
        service.complete_unloading(vehicle.id)
    with pytest.raises(NotFound):
        service.mark_departed("missing")
    with pytest.raises(ValidationError):
        service.call_in(vehicle.id, "0")

    assert len(published) == 1
    assert service.current_snapshot() == before


def test_every_successful_command_publishes_snapshot() -> None:
    service = _service()
    published: list[dict] = []
    service.subscribe(published.append)

    vehicle = service.register_arrival("ab1", "S01")
    service.assign_vehicle_to_dock(vehicle.id, "2")
    service.add_delay_remark(vehicle.id, "Late")
    service.set_maintenance_docks(["9"])
    service.upsert_supplier("Acme Traders")
    service.set_status_text(VehicleStatus.STAGING, "Queued")

    assert len(published) == 6
    assert published[-1] == service.current_snapshot()
    assert published[1]["occupied_docks"] == {"2": vehicle.id}


def test_second_vehicle_cannot_take_occupied_dock() -> None:
    service = _service()
    first = service.register_arrival("ab1", "S05")
    second = service.register_arrival("ab2", "S05")
    service.assign_vehicle_to_dock(first.id, "3")

    with pytest.raises(DockUnavailable):
        service.assign_vehicle_to_dock(second.id, "3")

    assert service.available_docks() == ["1", "2", "4", "5", "6", "7", "8", "9", "10"]


def test_vehicles_filter_and_status_texts() -> None:
    service = _service()
    staged = service.register_arrival("ab1", "S01")
    called = service.register_arrival("ab2", "S01")
    service.call_in(called.id, "1")

    assert [v.id for v in service.vehicles(VehicleStatus.STAGING)] == [staged.id]
    assert len(service.vehicles()) == 2
    assert service.status_texts()[VehicleStatus.COMPLETED] == "Unloading Completed"


def test_lookup_queries_read_through_the_service() -> None:
    service = _service()
    service.register_arrival("ab1", "S05")
    service.set_maintenance_docks(["10", "2"])
    service.set_status_text(VehicleStatus.STAGING, "Queued")

    assert service.vehicle_count() == 1
    assert service.maintenance_docks() == ["2", "10"]
    assert service.supplier_name("S05") == service.registry.supplier_name("S05")
    assert service.supplier_name("S99") == "Unknown Supplier"
    assert service.status_text(VehicleStatus.STAGING) == "Queued"
    assert service.status_text(VehicleStatus.DEPARTED) == "Departed"


def test_build_yard_service_restores_and_persists(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path / "yard.json")
    clock = FakeClock()

    service = build_yard_service(YardPolicy(), store=store, default_maintenance_docks=["7"], clock=clock)
    assert service.registry.maintenance_docks == {"7"}
    assert len(service.suppliers()) == 9
    vehicle = service.register_arrival("ab1", "S03")

    reloaded = build_yard_service(YardPolicy(), store=store, default_maintenance_docks=["1"], clock=clock)

    assert reloaded.get_vehicle(vehicle.id) == vehicle
    assert reloaded.registry.maintenance_docks == {"7"}


def test_build_yard_service_ignores_corrupt_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "yard.json"
    path.write_text("garbage", encoding="utf-8")

    service = build_yard_service(YardPolicy(), store=SnapshotStore(path))

    assert service.vehicles() == []
    assert len(service.suppliers()) == 9


def test_build_yard_service_ignores_snapshot_with_inconsistent_vehicles(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path / "yard.json")
    arrival = {"arrival": T0.isoformat()}
    store.save(
        {
            "vehicles": [
                {
                    "id": "B",
                    "registration_number": "AB1",
                    "supplier_id": "S01",
                    "status": "Unloading",
                    "timestamps": arrival,
                    "assigned_dock": "4",
                },
                {
                    "id": "C",
                    "registration_number": "CD2",
                    "supplier_id": "S01",
                    "status": "Called In",
                    "timestamps": {**arrival, "called_in": T0.isoformat()},
                    "assigned_dock": "4",
                },
            ]
        }
    )

    service = build_yard_service(YardPolicy(), store=store, clock=FakeClock())

    assert service.vehicles() == []
    assert "4" in service.available_docks()


def test_service_can_wrap_existing_registry() -> None:
    registry = YardRegistry.seeded()
    service = YardService(registry, clock=FakeClock())
    service.register_arrival("ab1", "S01")

    assert dump_snapshot(registry) == service.current_snapshot()
