"""Supplier, shift and status-text endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, status

from ...models.domain import VehicleStatus
from ...schemas.snapshot import ShiftModel, SupplierModel
from ...schemas.yard import StatusTextRequest, SupplierRequest
from ...services.yard.service import YardService
from ..deps import YardRole, get_yard_service, require_role

router = APIRouter(tags=["admin"])


@router.get("/suppliers", response_model=List[SupplierModel])
def list_suppliers(service: YardService = Depends(get_yard_service)) -> List[SupplierModel]:
    return [SupplierModel(**asdict(supplier)) for supplier in service.suppliers()]


@router.post("/suppliers", response_model=SupplierModel, status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: SupplierRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role()),
) -> SupplierModel:
    return SupplierModel(**asdict(service.upsert_supplier(payload.name)))


@router.put("/suppliers/{supplier_id}", response_model=SupplierModel)
def update_supplier(
    supplier_id: str,
    payload: SupplierRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role()),
) -> SupplierModel:
    return SupplierModel(**asdict(service.upsert_supplier(payload.name, supplier_id=supplier_id)))


@router.delete("/suppliers/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(
    supplier_id: str,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role()),
) -> None:
    service.delete_supplier(supplier_id)


@router.get("/shifts", response_model=List[ShiftModel])
def list_shifts(service: YardService = Depends(get_yard_service)) -> List[ShiftModel]:
    return [ShiftModel(**asdict(shift)) for shift in service.shifts()]


@router.get("/status-texts", response_model=dict[VehicleStatus, str])
def get_status_texts(service: YardService = Depends(get_yard_service)) -> dict[VehicleStatus, str]:
    return service.status_texts()


@router.put("/status-texts/{vehicle_status}", response_model=dict[VehicleStatus, str])
def set_status_text(
    vehicle_status: VehicleStatus,
    payload: StatusTextRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role()),
) -> dict[VehicleStatus, str]:
    service.set_status_text(vehicle_status, payload.text)
    return service.status_texts()
