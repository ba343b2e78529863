"""In-memory state container for the receiving yard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ...models.domain import Shift, Supplier, Vehicle, VehicleStatus
from .errors import NotFound

UNKNOWN_SUPPLIER = "Unknown Supplier"

DEFAULT_STATUS_TEXTS: dict[VehicleStatus, str] = {
    VehicleStatus.STAGING: "In Staging Area",
    VehicleStatus.CALLED_IN: "Called In",
    VehicleStatus.UNLOADING: "Unloading",
    VehicleStatus.COMPLETED: "Unloading Completed",
    VehicleStatus.DEPARTED: "Departed",
}

DEFAULT_SUPPLIERS: tuple[Supplier, ...] = (
    Supplier(id="S01", name="Global Foods Inc."),
    Supplier(id="S02", name="Fresh Produce Co."),
    Supplier(id="S03", name="Beverage Masters"),
    Supplier(id="S04", name="Pantry Essentials"),
    Supplier(id="S05", name="Delhivery Logistics"),
    Supplier(id="S06", name="Blue Dart Express"),
    Supplier(id="S07", name="Gati Ltd."),
    Supplier(id="S08", name="Ecom Express"),
    Supplier(id="S09", name="Future Supply Chains"),
)

DEFAULT_SHIFTS: tuple[Shift, ...] = (
    Shift(id="shift1", name="Morning Shift", start_time="06:00", end_time="14:00"),
    Shift(id="shift2", name="Afternoon Shift", start_time="14:00", end_time="22:00"),
    Shift(id="shift3", name="Night Shift", start_time="22:00", end_time="06:00"),
)


@dataclass
class YardRegistry:
    """Canonical collections of vehicles, suppliers, shifts and display texts.

    Vehicles keep their registration order; dock tie-breaks rely on it.
    """

    vehicles: list[Vehicle] = field(default_factory=list)
    suppliers: list[Supplier] = field(default_factory=list)
    shifts: list[Shift] = field(default_factory=list)
    status_texts: dict[VehicleStatus, str] = field(default_factory=lambda: dict(DEFAULT_STATUS_TEXTS))
    maintenance_docks: set[str] = field(default_factory=set)

    @classmethod
    def seeded(cls, maintenance_docks: Iterable[str] = ()) -> "YardRegistry":
        return cls(
            suppliers=list(DEFAULT_SUPPLIERS),
            shifts=list(DEFAULT_SHIFTS),
            maintenance_docks=set(maintenance_docks),
        )

    def find_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.find_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFound(f"Vehicle '{vehicle_id}' not found")
        return vehicle

    def replace_vehicle(self, updated: Vehicle) -> None:
        for index, vehicle in enumerate(self.vehicles):
            if vehicle.id == updated.id:
                self.vehicles[index] = updated
                return
        raise NotFound(f"Vehicle '{updated.id}' not found")

    def find_supplier(self, supplier_id: str) -> Optional[Supplier]:
        for supplier in self.suppliers:
            if supplier.id == supplier_id:
                return supplier
        return None

    def supplier_names(self) -> dict[str, str]:
        return {supplier.id: supplier.name for supplier in self.suppliers}

    def supplier_name(self, supplier_id: str) -> str:
        supplier = self.find_supplier(supplier_id)
        return supplier.name if supplier else UNKNOWN_SUPPLIER

    def status_text(self, status: VehicleStatus) -> str:
        return self.status_texts.get(status) or DEFAULT_STATUS_TEXTS[status]
