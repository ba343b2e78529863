from datetime import datetime, timedelta, timezone

import pytest

from dockflow.models.domain import STATUS_ORDER, STATUS_TIMESTAMP_FIELDS, Vehicle, VehicleStatus
from dockflow.services.yard import lifecycle
from dockflow.services.yard.docks import assign_vehicle_to_dock
from dockflow.services.yard.errors import DockUnavailable, InvalidTransition, NotFound, ValidationError
from dockflow.services.yard.registry import YardRegistry

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def _register(registry: YardRegistry, vehicle_id: str = "V01", supplier_id: str = "S05", **kwargs) -> Vehicle:
    return lifecycle.register_arrival(
        registry,
        registration_number=kwargs.pop("registration_number", "ka01ab1234"),
        supplier_id=supplier_id,
        now=kwargs.pop("now", T0),
        id_factory=lambda: vehicle_id,
        **kwargs,
    )


def _to_unloading(registry: YardRegistry, vehicle_id: str = "V01", dock: str = "3") -> Vehicle:
    _register(registry, vehicle_id)
    assign_vehicle_to_dock(registry, vehicle_id, dock, total_docks=10, now=T0 + timedelta(minutes=30))
    return lifecycle.assign_resources(
        registry,
        vehicle_id,
        driver_name="Ramesh",
        dock_id=dock,
        loadmen_count=4,
        cleaning_crew_available=False,
        total_docks=10,
        now=T0 + timedelta(minutes=45),
    )


def _assert_consistent(vehicle: Vehicle) -> None:
    assert (vehicle.assigned_dock is not None) == (vehicle.status in {VehicleStatus.CALLED_IN, VehicleStatus.UNLOADING})
    expected = tuple(STATUS_TIMESTAMP_FIELDS[s] for s in STATUS_ORDER[: STATUS_ORDER.index(vehicle.status) + 1])
    assert vehicle.timestamps.present_fields() == expected


def test_register_arrival_normalizes_registration_and_stamps_arrival() -> None:
    registry = YardRegistry.seeded()

    vehicle = _register(registry, registration_number="  ka01ab1234 ", asn="ASN-77")

    assert vehicle.id == "V01"
    assert vehicle.registration_number == "KA01AB1234"
    assert vehicle.status is VehicleStatus.STAGING
    assert vehicle.timestamps.arrival == T0
    assert vehicle.asn == "ASN-77"
    assert registry.vehicles == [vehicle]
    _assert_consistent(vehicle)


@pytest.mark.parametrize("registration, supplier", [("", "S05"), ("   ", "S05"), ("AB123", ""), ("AB123", "  ")])
def test_register_arrival_requires_registration_and_supplier(registration: str, supplier: str) -> None:
    registry = YardRegistry.seeded()

    with pytest.raises(ValidationError):
        _register(registry, registration_number=registration, supplier_id=supplier)

    assert registry.vehicles == []


def test_register_arrival_rejects_unknown_supplier() -> None:
    registry = YardRegistry.seeded()

    with pytest.raises(NotFound):
        _register(registry, supplier_id="S99")

    assert registry.vehicles == []


def test_assign_resources_moves_called_in_vehicle_to_unloading() -> None:
    registry = YardRegistry.seeded()

    vehicle = _to_unloading(registry)

    assert vehicle.status is VehicleStatus.UNLOADING
    assert vehicle.driver_name == "Ramesh"
    assert vehicle.loadmen_count == 4
    assert vehicle.cleaning_crew_available is False
    assert vehicle.assigned_dock == "3"
    assert vehicle.timestamps.unloading_start == T0 + timedelta(minutes=45)
    _assert_consistent(vehicle)


@pytest.mark.parametrize(
    "driver, dock, loadmen",
    [("", "3", 2), ("Ramesh", "", 2), ("Ramesh", "3", 0), ("Ramesh", "11", 2)],
)
def test_assign_resources_validates_inputs(driver: str, dock: str, loadmen: int) -> None:
    registry = YardRegistry.seeded()
    _register(registry)
    called_in = assign_vehicle_to_dock(registry, "V01", "3", total_docks=10, now=T0)

    with pytest.raises(ValidationError):
        lifecycle.assign_resources(
            registry,
            "V01",
            driver_name=driver,
            dock_id=dock,
            loadmen_count=loadmen,
            cleaning_crew_available=True,
            total_docks=10,
            now=T0,
        )

    assert registry.get_vehicle("V01") == called_in


def test_assign_resources_requires_called_in_status() -> None:
    registry = YardRegistry.seeded()
    staged = _register(registry)

    with pytest.raises(InvalidTransition):
        lifecycle.assign_resources(
            registry,
            "V01",
            driver_name="Ramesh",
            dock_id="3",
            loadmen_count=4,
            cleaning_crew_available=False,
            total_docks=10,
            now=T0,
        )

    assert registry.get_vehicle("V01") == staged


def test_assign_resources_can_move_to_a_free_dock_only() -> None:
    registry = YardRegistry.seeded()
    _register(registry, "V01")
    _register(registry, "V02")
    assign_vehicle_to_dock(registry, "V01", "3", total_docks=10, now=T0)
    assign_vehicle_to_dock(registry, "V02", "4", total_docks=10, now=T0)

    with pytest.raises(DockUnavailable):
        lifecycle.assign_resources(
            registry,
            "V01",
            driver_name="Ramesh",
            dock_id="4",
            loadmen_count=2,
            cleaning_crew_available=True,
            total_docks=10,
            now=T0,
        )

    moved = lifecycle.assign_resources(
        registry,
        "V01",
        driver_name="Ramesh",
        dock_id="5",
        loadmen_count=2,
        cleaning_crew_available=True,
        total_docks=10,
        now=T0,
    )
    assert moved.assigned_dock == "5"
    assert moved.last_dock == "5"


def test_complete_unloading_while_staging_is_rejected_without_changes() -> None:
    registry = YardRegistry.seeded()
    staged = _register(registry)

    with pytest.raises(InvalidTransition):
        lifecycle.complete_unloading(registry, "V01", now=T0 + timedelta(hours=1))

    assert registry.get_vehicle("V01") == staged


def test_complete_unloading_releases_dock_but_remembers_it() -> None:
    registry = YardRegistry.seeded()
    _to_unloading(registry)

    completed = lifecycle.complete_unloading(registry, "V01", now=T0 + timedelta(hours=2))

    assert completed.status is VehicleStatus.COMPLETED
    assert completed.assigned_dock is None
    assert completed.last_dock == "3"
    assert completed.timestamps.unloading_end == T0 + timedelta(hours=2)
    _assert_consistent(completed)


def test_mark_departed_only_after_completion() -> None:
    registry = YardRegistry.seeded()
    _to_unloading(registry)

    with pytest.raises(InvalidTransition):
        lifecycle.mark_departed(registry, "V01", now=T0 + timedelta(hours=2))

    lifecycle.complete_unloading(registry, "V01", now=T0 + timedelta(hours=2))
    departed = lifecycle.mark_departed(registry, "V01", now=T0 + timedelta(hours=3))

    assert departed.status is VehicleStatus.DEPARTED
    assert departed.timestamps.departed == T0 + timedelta(hours=3)
    _assert_consistent(departed)

    with pytest.raises(InvalidTransition):
        lifecycle.mark_departed(registry, "V01", now=T0 + timedelta(hours=4))


def test_full_lifecycle_keeps_dock_and_timestamp_invariants() -> None:
    registry = YardRegistry.seeded()
    seen = [_register(registry)]
    seen.append(assign_vehicle_to_dock(registry, "V01", "2", total_docks=10, now=T0 + timedelta(minutes=5)))
    seen.append(
        lifecycle.assign_resources(
            registry,
            "V01",
            driver_name="Suresh",
            dock_id="2",
            loadmen_count=1,
            cleaning_crew_available=True,
            total_docks=10,
            now=T0 + timedelta(minutes=10),
        )
    )
    seen.append(lifecycle.complete_unloading(registry, "V01", now=T0 + timedelta(minutes=50)))
    seen.append(lifecycle.mark_departed(registry, "V01", now=T0 + timedelta(minutes=55)))

    assert [vehicle.status for vehicle in seen] == list(STATUS_ORDER)
    for vehicle in seen:
        _assert_consistent(vehicle)


def test_add_delay_remark_is_last_write_wins() -> None:
    registry = YardRegistry.seeded()
    _register(registry)

    lifecycle.add_delay_remark(registry, "V01", "Paperwork missing")
    lifecycle.add_delay_remark(registry, "V01", "Paperwork missing")

    vehicle = registry.get_vehicle("V01")
    assert vehicle.delay_remarks == "Paperwork missing"
    assert vehicle.status is VehicleStatus.STAGING

    lifecycle.add_delay_remark(registry, "V01", "Forklift breakdown")
    assert registry.get_vehicle("V01").delay_remarks == "Forklift breakdown"


def test_delete_vehicle_from_any_state_and_unknown_id() -> None:
    registry = YardRegistry.seeded()
    _to_unloading(registry)

    removed = lifecycle.delete_vehicle(registry, "V01")

    assert removed.id == "V01"
    assert registry.vehicles == []
    with pytest.raises(NotFound):
        lifecycle.delete_vehicle(registry, "V01")
