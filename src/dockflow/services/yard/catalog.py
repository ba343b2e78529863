"""Supplier and status-text administration."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from ...models.domain import Supplier, VehicleStatus
from .errors import NotFound, ValidationError
from .registry import DEFAULT_STATUS_TEXTS, YardRegistry

logger = logging.getLogger(__name__)

_SUPPLIER_ID_PATTERN = re.compile(r"^S(\d+)$")


def next_supplier_id(suppliers: Iterable[Supplier]) -> str:
    numbers = [
        int(match.group(1))
        for match in (_SUPPLIER_ID_PATTERN.match(supplier.id) for supplier in suppliers)
        if match
    ]
    return f"S{(max(numbers, default=0) + 1):02d}"


def upsert_supplier(registry: YardRegistry, *, name: str, supplier_id: Optional[str] = None) -> Supplier:
    """Rename an existing supplier, or add one (with the next ``Snn`` id when none is given)."""
    clean_name = (name or "").strip()
    if not clean_name:
        raise ValidationError("Supplier name is required")

    target_id = (supplier_id or "").strip() or next_supplier_id(registry.suppliers)
    supplier = Supplier(id=target_id, name=clean_name)
    for index, existing in enumerate(registry.suppliers):
        if existing.id == target_id:
            registry.suppliers[index] = supplier
            logger.info("Renamed supplier %s to %s", target_id, clean_name)
            return supplier

    registry.suppliers.append(supplier)
    logger.info("Added supplier %s (%s)", target_id, clean_name)
    return supplier


def delete_supplier(registry: YardRegistry, supplier_id: str) -> Supplier:
    """Remove a supplier. Vehicles referring to it keep the id and show a placeholder name."""
    supplier = registry.find_supplier(supplier_id)
    if supplier is None:
        raise NotFound(f"Supplier '{supplier_id}' not found")
    registry.suppliers = [item for item in registry.suppliers if item.id != supplier_id]
    logger.info("Deleted supplier %s (%s)", supplier.id, supplier.name)
    return supplier


def set_status_text(registry: YardRegistry, status: VehicleStatus, text: str) -> str:
    """Override the display label of ``status``; a blank label restores the default."""
    label = (text or "").strip() or DEFAULT_STATUS_TEXTS[status]
    registry.status_texts[status] = label
    logger.info("Status text for %s set to %r", status.value, label)
    return label
