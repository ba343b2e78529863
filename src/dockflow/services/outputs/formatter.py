"""Render projected report rows as a CSV document."""

from __future__ import annotations

import io
from datetime import date
from typing import Iterable, Sequence

from ..reports.projector import REPORT_HEADERS, csv_writer


def rows_to_csv(rows: Iterable[Sequence[object]], headers: Sequence[str] = REPORT_HEADERS) -> str:
    buffer = io.StringIO()
    writer = csv_writer(buffer)
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def report_filename(day: date) -> str:
    return f"dockflow_report_{day.isoformat()}.csv"
