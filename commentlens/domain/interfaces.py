"""
Domain-facing gateway interfaces (Protocols).

These reflect only what the analysis pipeline uses. Concrete clients and
services satisfy them via duck typing; tests substitute mocks.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from commentlens.domain.models import (
    AnalysisData,
    AnalysisReport,
    Report,
    UserProfile,
    VideoComment,
    VideoDetails,
)


@runtime_checkable
class VideoDataGateway(Protocol):
    """Read-only access to the video platform."""

    async def fetch_video_details(self, video_id: str) -> VideoDetails: ...

    async def fetch_comments(
        self, video_id: str, max_results: int = 100
    ) -> List[VideoComment]: ...

    async def fetch_analysis_data(
        self, video_id: str, max_comments: int = 100
    ) -> AnalysisData:
        """Details and comments fetched concurrently and joined."""
        ...


@runtime_checkable
class ReportGenerator(Protocol):
    """Turns video context plus comments into a structured report."""

    async def generate(
        self, title: str, description: str, comments: Sequence[Any]
    ) -> AnalysisReport: ...


@runtime_checkable
class PersistenceGateway(Protocol):
    """Credit-gated access to profiles and reports."""

    async def get_profile(self, uid: str) -> Optional[UserProfile]: ...

    async def deduct_credit(self, uid: str) -> bool:
        """Decrement with a floor of zero; True only if a credit was taken."""
        ...

    async def save_report(
        self,
        user_id: str,
        video_id: str,
        video_title: str,
        video_url: str,
        report_data: Dict[str, Any],
    ) -> str: ...

    async def get_reports(self, user_id: str) -> List[Report]: ...

    async def get_report(self, user_id: str, report_id: str) -> Optional[Report]: ...


Navigate = Callable[[str], None]
