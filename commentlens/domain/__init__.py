# commentlens/domain/__init__.py
"""
Domain layer: DTOs, the generative response schema and gateway protocols.

    from commentlens.domain import VideoDetails, AnalysisReport, VideoDataGateway
"""
from .interfaces import (
    VideoDataGateway,
    ReportGenerator,
    PersistenceGateway,
    Navigate,
)
from .models import (
    AnalysisData,
    AnalysisReport,
    Report,
    UserProfile,
    VideoComment,
    VideoDetails,
)
from .analysis_schema import ANALYSIS_REPORT_SCHEMA

__all__ = [
    "VideoDataGateway",
    "ReportGenerator",
    "PersistenceGateway",
    "Navigate",
    "AnalysisData",
    "AnalysisReport",
    "Report",
    "UserProfile",
    "VideoComment",
    "VideoDetails",
    "ANALYSIS_REPORT_SCHEMA",
]
