"""API Routers"""

from .analysis_router import router as analysis_router
from .profile_router import router as profile_router
from .report_router import router as report_router

__all__ = ["analysis_router", "profile_router", "report_router"]
