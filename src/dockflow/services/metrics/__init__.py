"""Yard metrics exports."""

from .kpis import (
    KpiSummary,
    StagingUrgency,
    elapsed_label,
    kpi_summary,
    staging_age,
    staging_urgency,
    unload_duration,
    unloading_elapsed,
    unloading_overtime,
    wait_time,
    whole_minutes,
)

__all__ = [
    "KpiSummary",
    "StagingUrgency",
    "elapsed_label",
    "kpi_summary",
    "staging_age",
    "staging_urgency",
    "unload_duration",
    "unloading_elapsed",
    "unloading_overtime",
    "wait_time",
    "whole_minutes",
]
