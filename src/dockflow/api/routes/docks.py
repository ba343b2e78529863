"""Dock overview and maintenance endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends

from ...schemas.yard import DockModel, MaintenanceRequest, MaintenanceResponse
from ...services.yard.docks import sort_docks
from ...services.yard.service import YardService
from ..deps import YardRole, get_yard_service, require_role

router = APIRouter(prefix="/docks", tags=["docks"])


@router.get("", response_model=List[DockModel])
def get_dock_overview(service: YardService = Depends(get_yard_service)) -> List[DockModel]:
    return [DockModel(**asdict(view)) for view in service.dock_overview()]


@router.get("/available", response_model=List[str])
def get_available_docks(service: YardService = Depends(get_yard_service)) -> List[str]:
    return service.available_docks()


@router.get("/maintenance", response_model=MaintenanceResponse)
def get_maintenance_docks(service: YardService = Depends(get_yard_service)) -> MaintenanceResponse:
    return MaintenanceResponse(dock_ids=service.maintenance_docks())


@router.put("/maintenance", response_model=MaintenanceResponse)
def set_maintenance_docks(
    payload: MaintenanceRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role()),
) -> MaintenanceResponse:
    docks = service.set_maintenance_docks(payload.dock_ids)
    return MaintenanceResponse(dock_ids=sort_docks(list(docks)))
