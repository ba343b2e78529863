"""Application configuration and settings management."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKFLOW_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "DockFlow Yard API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted yard state.")
    snapshot_file: str = Field(
        default="yard_snapshot.json",
        description="File name (relative to data_root) holding the latest yard snapshot.",
    )
    persist_snapshots: bool = Field(
        default=True,
        description="Write a snapshot to disk after every successful yard command.",
    )
    total_docks: int = Field(default=10, ge=1, le=200, description="Number of unloading docks in the yard.")
    staging_warning_minutes: int = Field(
        default=120,
        ge=1,
        description="Staging age (minutes) from which a waiting vehicle is flagged as a warning.",
    )
    staging_critical_minutes: int = Field(
        default=240,
        ge=1,
        description="Staging age (minutes) from which a waiting vehicle is flagged as critical.",
    )
    unloading_overtime_minutes: int = Field(
        default=120,
        ge=1,
        description="Unloading duration (minutes) after which a vehicle is flagged as overtime.",
    )
    report_timezone: str = Field(
        default="UTC",
        description="IANA timezone used to format timestamps in exported reports.",
    )
    default_maintenance_docks: tuple[str, ...] = Field(
        default=(),
        description="Docks placed under maintenance when no snapshot exists yet.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", "default_maintenance_docks", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @model_validator(mode="after")
    def _check_staging_thresholds(self) -> "Settings":
        if self.staging_critical_minutes < self.staging_warning_minutes:
            raise ValueError("staging_critical_minutes must be >= staging_warning_minutes")
        return self

    @property
    def snapshot_path(self) -> Path:
        return self.data_root / self.snapshot_file

    def yard_policy(self) -> "YardPolicy":
        return YardPolicy(
            total_docks=self.total_docks,
            staging_warning_minutes=self.staging_warning_minutes,
            staging_critical_minutes=self.staging_critical_minutes,
            unloading_overtime_minutes=self.unloading_overtime_minutes,
            report_timezone=self.report_timezone,
        )


@dataclass(frozen=True, slots=True)
class YardPolicy:
    """Yard thresholds handed to the lifecycle, allocator and metrics code."""

    total_docks: int = 10
    staging_warning_minutes: int = 120
    staging_critical_minutes: int = 240
    unloading_overtime_minutes: int = 120
    report_timezone: str = "UTC"


settings = Settings()
