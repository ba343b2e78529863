"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...services.yard.service import YardService
from ..deps import get_yard_service

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/yard", status_code=status.HTTP_200_OK)
def health_yard(service: YardService = Depends(get_yard_service)) -> dict:
    """Report yard size and whether snapshots are being persisted."""
    return {
        "status": "ok",
        "vehicles": service.vehicle_count(),
        "total_docks": service.policy.total_docks,
        "persist_snapshots": settings.persist_snapshots,
        "snapshot_path": str(settings.snapshot_path) if settings.persist_snapshots else None,
    }
