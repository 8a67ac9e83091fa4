# commentlens/infrastructure/repositories/report_repository.py
"""
Report Repository
Report documents, always scoped to their owning user
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from commentlens.app.models import ReportRecord

logger = logging.getLogger(__name__)


class ReportRepository(BaseRepository[ReportRecord]):
    """Repository for persisted analysis reports"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ReportRecord)

    async def save_report(
        self,
        user_id: str,
        video_id: str,
        video_title: str,
        video_url: str,
        report_data: Dict[str, Any],
    ) -> ReportRecord:
        """Insert a report; id and created_at are assigned by the store"""
        return await self.create(
            user_id=user_id,
            video_id=video_id,
            video_title=video_title,
            video_url=video_url,
            report_data=report_data,
        )

    async def get_for_user(self, user_id: str) -> List[ReportRecord]:
        """All reports of one user, newest first"""
        return await self.find_by(
            order_by=desc(ReportRecord.created_at), user_id=user_id
        )

    async def get_user_report(
        self, user_id: str, report_id: str
    ) -> Optional[ReportRecord]:
        """One report, only if it belongs to ``user_id``"""
        return await self.find_one_by(id=report_id, user_id=user_id)
