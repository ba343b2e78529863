"""Pydantic models for docks, reference data and reports."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import DockState, VehicleStatus


class DockModel(BaseModel):
    dock_id: str
    state: DockState
    vehicle_id: Optional[str] = None
    registration_number: Optional[str] = None
    supplier_id: Optional[str] = None
    unloading_minutes: Optional[int] = None
    overtime: bool = False
    conflict: bool = False


class MaintenanceRequest(BaseModel):
    dock_ids: list[str] = Field(default_factory=list, description="Complete set of docks under maintenance.")


class MaintenanceResponse(BaseModel):
    dock_ids: list[str]


class SupplierRequest(BaseModel):
    name: str = Field(..., description="Supplier display name.")


class StatusTextRequest(BaseModel):
    text: str = Field(..., description="Display label; blank restores the default.")


class KpiResponse(BaseModel):
    total: int
    by_status: dict[VehicleStatus, int]
    staging: int
    processing: int
    completed: int
    average_wait_minutes: Optional[float] = Field(
        default=None, description="Mean arrival-to-unloading time; null when no vehicle has both."
    )
    average_unload_minutes: Optional[float] = Field(
        default=None, description="Mean unloading time; null when no vehicle has finished."
    )
    wait_sample_size: int
    unload_sample_size: int


class ReportRowsResponse(BaseModel):
    headers: list[str]
    rows: list[list[str]]
