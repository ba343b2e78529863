"""Pydantic models describing a serialized yard snapshot."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import VehicleStatus

SNAPSHOT_VERSION = 1


class TimestampsModel(BaseModel):
    arrival: datetime
    called_in: Optional[datetime] = None
    unloading_start: Optional[datetime] = None
    unloading_end: Optional[datetime] = None
    departed: Optional[datetime] = None

    @field_validator("arrival", "called_in", "unloading_start", "unloading_end", "departed")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class VehicleModel(BaseModel):
    id: str
    registration_number: str
    supplier_id: str
    status: VehicleStatus
    timestamps: TimestampsModel
    asn: Optional[str] = None
    assigned_dock: Optional[str] = None
    last_dock: Optional[str] = None
    driver_name: Optional[str] = None
    loadmen_count: Optional[int] = None
    cleaning_crew_available: Optional[bool] = None
    delay_remarks: Optional[str] = None


class SupplierModel(BaseModel):
    id: str
    name: str


class ShiftModel(BaseModel):
    id: str
    name: str
    start_time: str
    end_time: str


class YardSnapshotModel(BaseModel):
    version: int = SNAPSHOT_VERSION
    vehicles: list[VehicleModel] = Field(default_factory=list)
    suppliers: list[SupplierModel] = Field(default_factory=list)
    shifts: list[ShiftModel] = Field(default_factory=list)
    status_texts: dict[VehicleStatus, str] = Field(default_factory=dict)
    maintenance_docks: list[str] = Field(default_factory=list)
    occupied_docks: dict[str, str] = Field(
        default_factory=dict,
        description="Derived dock -> vehicle map; informational, recomputed on restore.",
    )

    @field_validator("maintenance_docks")
    @classmethod
    def _numeric_docks(cls, value: list[str]) -> list[str]:
        docks: list[str] = []
        for item in value:
            text = str(item).strip()
            if not text.isdigit() or int(text) < 1:
                raise ValueError(f"maintenance dock '{item}' is not a dock number")
            docks.append(str(int(text)))
        return docks
