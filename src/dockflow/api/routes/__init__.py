"""Route group exports."""

from . import admin, docks, health, reports, vehicles

__all__ = ["admin", "docks", "health", "reports", "vehicles"]
