"""KPI, report and snapshot endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...schemas.yard import KpiResponse, ReportRowsResponse
from ...services.outputs.formatter import report_filename, rows_to_csv
from ...services.reports import REPORT_HEADERS
from ...services.yard.service import YardService
from ..deps import get_yard_service

router = APIRouter(tags=["reports"])


@router.get("/reports/kpis", response_model=KpiResponse)
def get_kpis(service: YardService = Depends(get_yard_service)) -> KpiResponse:
    return KpiResponse(**asdict(service.kpi_summary()))


@router.get("/reports/rows", response_model=ReportRowsResponse)
def get_report_rows(service: YardService = Depends(get_yard_service)) -> ReportRowsResponse:
    return ReportRowsResponse(
        headers=list(REPORT_HEADERS),
        rows=[list(row) for row in service.report_rows()],
    )


@router.get("/reports/export", response_class=Response)
def export_report(service: YardService = Depends(get_yard_service)) -> Response:
    content = rows_to_csv(service.report_rows())
    filename = report_filename(service.now().date())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/snapshot")
def get_snapshot(service: YardService = Depends(get_yard_service)) -> dict[str, Any]:
    return service.current_snapshot()
