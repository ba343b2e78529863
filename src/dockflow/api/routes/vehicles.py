"""Vehicle lifecycle endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Query, status

from ...models.domain import Vehicle, VehicleStatus
from ...schemas.snapshot import TimestampsModel
from ...schemas.vehicles import (
    ArrivalRequest,
    CallInRequest,
    RemarkRequest,
    ResourceRequest,
    VehicleResponse,
)
from ...services.metrics import (
    elapsed_label,
    staging_urgency,
    unload_duration,
    unloading_overtime,
    wait_time,
    whole_minutes,
)
from ...services.yard.service import YardService
from ..deps import YardRole, get_yard_service, require_role

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def to_vehicle_response(vehicle: Vehicle, service: YardService) -> VehicleResponse:
    now = service.now()
    fields = asdict(vehicle)
    fields.pop("timestamps")
    return VehicleResponse(
        **fields,
        timestamps=TimestampsModel(**asdict(vehicle.timestamps)),
        supplier_name=service.supplier_name(vehicle.supplier_id),
        status_text=service.status_text(vehicle.status),
        wait_minutes=whole_minutes(wait_time(vehicle)),
        unload_minutes=whole_minutes(unload_duration(vehicle)),
        staging_urgency=staging_urgency(vehicle, now, service.policy),
        unloading_overtime=unloading_overtime(vehicle, now, service.policy),
        elapsed_label=elapsed_label(vehicle, now),
    )


@router.get("", response_model=List[VehicleResponse])
def list_vehicles(
    status_filter: VehicleStatus | None = Query(default=None, alias="status", description="Optional status filter"),
    service: YardService = Depends(get_yard_service),
) -> List[VehicleResponse]:
    return [to_vehicle_response(vehicle, service) for vehicle in service.vehicles(status_filter)]


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
def register_arrival(
    payload: ArrivalRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role(YardRole.SECURITY)),
) -> VehicleResponse:
    vehicle = service.register_arrival(payload.registration_number, payload.supplier_id, payload.asn)
    return to_vehicle_response(vehicle, service)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(vehicle_id: str, service: YardService = Depends(get_yard_service)) -> VehicleResponse:
    return to_vehicle_response(service.get_vehicle(vehicle_id), service)


@router.post("/{vehicle_id}/call-in", response_model=VehicleResponse)
def call_in_vehicle(
    vehicle_id: str,
    payload: CallInRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role(YardRole.SECURITY)),
) -> VehicleResponse:
    return to_vehicle_response(service.assign_vehicle_to_dock(vehicle_id, payload.dock_id), service)


@router.post("/{vehicle_id}/resources", response_model=VehicleResponse)
def assign_resources(
    vehicle_id: str,
    payload: ResourceRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role(YardRole.OPERATOR)),
) -> VehicleResponse:
    vehicle = service.assign_resources(
        vehicle_id,
        driver_name=payload.driver_name,
        dock_id=payload.dock_id,
        loadmen_count=payload.loadmen_count,
        cleaning_crew_available=payload.cleaning_crew_available,
    )
    return to_vehicle_response(vehicle, service)


@router.post("/{vehicle_id}/complete", response_model=VehicleResponse)
def complete_unloading(
    vehicle_id: str,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role(YardRole.OPERATOR)),
) -> VehicleResponse:
    return to_vehicle_response(service.complete_unloading(vehicle_id), service)


@router.post("/{vehicle_id}/depart", response_model=VehicleResponse)
def mark_departed(
    vehicle_id: str,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role(YardRole.SECURITY)),
) -> VehicleResponse:
    return to_vehicle_response(service.mark_departed(vehicle_id), service)


@router.put("/{vehicle_id}/remarks", response_model=VehicleResponse)
def add_delay_remark(
    vehicle_id: str,
    payload: RemarkRequest,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role(YardRole.OPERATOR)),
) -> VehicleResponse:
    return to_vehicle_response(service.add_delay_remark(vehicle_id, payload.remarks), service)


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vehicle(
    vehicle_id: str,
    service: YardService = Depends(get_yard_service),
    _role: YardRole = Depends(require_role()),
) -> None:
    service.delete_vehicle(vehicle_id)
