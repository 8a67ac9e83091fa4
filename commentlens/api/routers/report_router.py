"""
Report API Router
Dashboard listing and report detail
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from commentlens.api.schemas import (
    ReportDetailResponse,
    ReportListResponse,
    report_to_summary,
)
from commentlens.app.dependencies import get_current_user_id, get_persistence_service
from commentlens.services import PersistenceService
from commentlens.services.report_insights import build_report_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/reports", tags=["Reports"])


@router.get("", response_model=ReportListResponse)
async def list_reports(
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    """The caller's reports, newest first"""
    reports = await service.get_reports(uid)
    return ReportListResponse(
        items=[report_to_summary(r) for r in reports], total=len(reports)
    )


@router.get("/{report_id}", response_model=ReportDetailResponse)
async def get_report(
    report_id: str = Path(..., description="Report ID"),
    uid: str = Depends(get_current_user_id),
    service: PersistenceService = Depends(get_persistence_service),
):
    """One report with its derived insights"""
    report = await service.get_report(uid, report_id)
    if report is None:
        raise HTTPException(404, detail=f"Report not found: {report_id}")
    return build_report_view(report)
