#!/usr/bin/env python3
"""Helper script to check (or create) the .env file and print the resolved yard settings."""

import sys
from pathlib import Path

ENV_TEMPLATE = """# API Configuration
DOCKFLOW_API_PREFIX=/api
# DOCKFLOW_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list
# DOCKFLOW_FRONTEND_ALLOWED_ORIGINS=http://localhost:5173,http://127.0.0.1:5173

# Persistence
DOCKFLOW_DATA_ROOT=./data
DOCKFLOW_SNAPSHOT_FILE=yard_snapshot.json
DOCKFLOW_PERSIST_SNAPSHOTS=true

# Yard policy
DOCKFLOW_TOTAL_DOCKS=10
DOCKFLOW_STAGING_WARNING_MINUTES=120
DOCKFLOW_STAGING_CRITICAL_MINUTES=240
DOCKFLOW_UNLOADING_OVERTIME_MINUTES=120
DOCKFLOW_REPORT_TIMEZONE=UTC
# DOCKFLOW_DEFAULT_MAINTENANCE_DOCKS=7
"""


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("DockFlow Environment Checker")
    print("=" * 60)

    if env_file.exists():
        print(f"Found .env file at: {env_file}")
    else:
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
    print()

    sys.path.insert(0, str(project_root / "src"))
    try:
        from dockflow.config import Settings

        settings = Settings()
    except ValueError as exc:
        print(f"Error loading config: {exc}")
        return 1

    print(f"API prefix:            {settings.api_prefix}")
    print(f"Snapshot file:         {settings.snapshot_path}")
    print(f"Persist snapshots:     {settings.persist_snapshots}")
    print(f"Total docks:           {settings.total_docks}")
    print(f"Staging warning/crit:  {settings.staging_warning_minutes}/{settings.staging_critical_minutes} min")
    print(f"Unloading overtime:    {settings.unloading_overtime_minutes} min")
    print(f"Report timezone:       {settings.report_timezone}")
    print(f"Maintenance at start:  {', '.join(settings.default_maintenance_docks) or 'none'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
