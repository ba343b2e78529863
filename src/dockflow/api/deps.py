"""Shared FastAPI dependencies: the yard service and caller-role checks."""

from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Callable, Optional

from fastapi import Header, HTTPException, status

from ..config import settings
from ..persistence.snapshots import SnapshotStore
from ..services.yard.service import YardService, build_yard_service

logger = logging.getLogger(__name__)


class YardRole(str, Enum):
    ADMIN = "Admin"
    OPERATOR = "Operator"
    SECURITY = "Security"


@functools.lru_cache(maxsize=1)
def get_yard_service() -> YardService:
    store = SnapshotStore(settings.snapshot_path) if settings.persist_snapshots else None
    return build_yard_service(
        settings.yard_policy(),
        store=store,
        default_maintenance_docks=settings.default_maintenance_docks,
    )


def _parse_role(raw: Optional[str]) -> YardRole:
    if not raw:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="X-Yard-Role header is required")
    for role in YardRole:
        if role.value.lower() == raw.strip().lower():
            return role
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Unknown role '{raw}'")


def require_role(*allowed: YardRole) -> Callable[..., YardRole]:
    """Dependency factory: the caller's declared role must be one of ``allowed``.

    Admin is always accepted. The role is taken at face value; identity is
    not verified.
    """
    permitted = set(allowed) | {YardRole.ADMIN}

    def checker(x_yard_role: Optional[str] = Header(default=None)) -> YardRole:
        role = _parse_role(x_yard_role)
        if role not in permitted:
            logger.warning("Role %s denied; requires one of %s", role.value, sorted(r.value for r in permitted))
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role {role.value} may not perform this action",
            )
        return role

    return checker
