"""Pydantic request/response models for vehicle endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import VehicleStatus
from ..services.metrics.kpis import StagingUrgency
from .snapshot import TimestampsModel


class ArrivalRequest(BaseModel):
    registration_number: str = Field(..., description="Vehicle registration plate.")
    supplier_id: str = Field(..., description="Supplier delivering the load.")
    asn: Optional[str] = Field(default=None, description="Advance Shipment Notice reference.")


class CallInRequest(BaseModel):
    dock_id: str = Field(..., description="Dock the vehicle is called in to.")

    @field_validator("dock_id", mode="before")
    @classmethod
    def _coerce_dock(cls, value: object) -> str:
        return str(value) if isinstance(value, int) else value


class ResourceRequest(BaseModel):
    driver_name: str = Field(..., description="Driver (or dock supervisor) working the unload.")
    dock_id: str = Field(..., description="Dock where unloading happens.")
    loadmen_count: int = Field(..., description="Number of loadmen assigned.")
    cleaning_crew_available: bool = Field(default=False)

    @field_validator("dock_id", mode="before")
    @classmethod
    def _coerce_dock(cls, value: object) -> str:
        return str(value) if isinstance(value, int) else value


class RemarkRequest(BaseModel):
    remarks: str = Field(..., description="Free-text delay remark; replaces any previous remark.")


class VehicleResponse(BaseModel):
    id: str
    registration_number: str
    supplier_id: str
    supplier_name: str
    status: VehicleStatus
    status_text: str
    timestamps: TimestampsModel
    asn: Optional[str] = None
    assigned_dock: Optional[str] = None
    last_dock: Optional[str] = None
    driver_name: Optional[str] = None
    loadmen_count: Optional[int] = None
    cleaning_crew_available: Optional[bool] = None
    delay_remarks: Optional[str] = None
    wait_minutes: Optional[int] = None
    unload_minutes: Optional[int] = None
    staging_urgency: StagingUrgency = StagingUrgency.NORMAL
    unloading_overtime: bool = False
    elapsed_label: str = ""
