"""
API Schemas
Request/response models for the HTTP layer
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from commentlens.domain.models import Report, UserProfile


# ============================================================================
# Profiles
# ============================================================================


class ProfileCreateRequest(BaseModel):
    """Signup profile; credits are granted by the server"""

    email: str = Field(default="", description="Sign-in email")
    full_name: str = Field(default="", description="Full name")
    youtube_channel_name: str = Field(default="", description="Channel name")
    address: str = Field(default="", description="Postal address")
    phone_number: str = Field(default="", description="Phone number")


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; unknown fields such as credits are rejected"""

    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    full_name: Optional[str] = None
    youtube_channel_name: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None


class ProfileResponse(BaseModel):
    uid: str
    email: str
    full_name: str
    youtube_channel_name: str
    address: str
    phone_number: str
    credits: int
    created_at: Optional[datetime] = None


def profile_to_response(profile: UserProfile) -> ProfileResponse:
    return ProfileResponse(**profile.model_dump())


# ============================================================================
# Analysis Runs
# ============================================================================


class AnalysisRunResponse(BaseModel):
    """Analysis run status"""

    run_id: str = Field(..., description="Run identifier")
    user_id: str
    video_url: str
    video_id: Optional[str] = None
    video_title: Optional[str] = None
    step: int = Field(..., description="Current step, 0 to 7")
    step_name: str
    status: str = Field(..., description="pending/running/completed/failed/cancelled")
    progress: float = 0.0
    error: Optional[str] = None
    error_type: Optional[str] = None
    report_id: Optional[str] = None
    redirect_to: Optional[str] = None
    navigated_to: Optional[str] = None
    created_at: Optional[str] = None
    finished_at: Optional[str] = None


# ============================================================================
# Reports
# ============================================================================


class ReportSummary(BaseModel):
    """Dashboard entry"""

    id: Optional[str] = None
    video_id: str
    video_title: str
    video_url: str
    created_at: Optional[datetime] = None
    overall_sentiment: Optional[str] = None


class ReportListResponse(BaseModel):
    items: List[ReportSummary]
    total: int


class ReportDetailResponse(BaseModel):
    report: Dict[str, Any]
    insights: Dict[str, Any]


def report_to_summary(report: Report) -> ReportSummary:
    glance = (report.report_data or {}).get("atAGlanceSummary") or {}
    return ReportSummary(
        id=report.id,
        video_id=report.video_id,
        video_title=report.video_title,
        video_url=report.video_url,
        created_at=report.created_at,
        overall_sentiment=glance.get("overallSentiment"),
    )
