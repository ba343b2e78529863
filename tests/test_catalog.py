import pytest

from dockflow.models.domain import VehicleStatus
from dockflow.services.yard import catalog
from dockflow.services.yard.errors import NotFound, ValidationError
from dockflow.services.yard.registry import DEFAULT_SHIFTS, DEFAULT_STATUS_TEXTS, YardRegistry


def test_seeded_registry_has_reference_data() -> None:
    registry = YardRegistry.seeded()

    assert [s.id for s in registry.suppliers] == [f"S0{n}" for n in range(1, 10)]
    assert registry.shifts == list(DEFAULT_SHIFTS)
    assert registry.status_texts == DEFAULT_STATUS_TEXTS
    assert set(DEFAULT_STATUS_TEXTS) == set(VehicleStatus)


def test_upsert_supplier_adds_with_next_id_and_renames() -> None:
    registry = YardRegistry.seeded()

    added = catalog.upsert_supplier(registry, name="  Acme Traders ")
    assert added.id == "S10"
    assert added.name == "Acme Traders"

    renamed = catalog.upsert_supplier(registry, name="Global Foods Ltd.", supplier_id="S01")
    assert renamed.name == "Global Foods Ltd."
    assert registry.supplier_name("S01") == "Global Foods Ltd."
    assert len(registry.suppliers) == 10


def test_upsert_supplier_requires_name() -> None:
    registry = YardRegistry.seeded()

    with pytest.raises(ValidationError):
        catalog.upsert_supplier(registry, name="   ")


def test_next_supplier_id_skips_deleted_gaps() -> None:
    registry = YardRegistry.seeded()
    catalog.delete_supplier(registry, "S03")

    assert catalog.next_supplier_id(registry.suppliers) == "S10"
    assert catalog.next_supplier_id([]) == "S01"


def test_delete_supplier_leaves_dangling_name_placeholder() -> None:
    registry = YardRegistry.seeded()

    catalog.delete_supplier(registry, "S05")

    assert registry.supplier_name("S05") == "Unknown Supplier"
    with pytest.raises(NotFound):
        catalog.delete_supplier(registry, "S05")


def test_set_status_text_blank_restores_default() -> None:
    registry = YardRegistry.seeded()

    assert catalog.set_status_text(registry, VehicleStatus.UNLOADING, "At dock") == "At dock"
    assert registry.status_text(VehicleStatus.UNLOADING) == "At dock"

    assert catalog.set_status_text(registry, VehicleStatus.UNLOADING, " ") == "Unloading"
