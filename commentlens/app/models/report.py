"""
Report Model
A persisted analysis: video context plus the generated report payload
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base


def _generate_report_id() -> str:
    return uuid.uuid4().hex


class ReportRecord(Base):
    """
    Report document scoped under its owning user

    Written once at the end of a successful analysis and never updated.
    """

    __tablename__ = "reports"

    id = Column(String(32), primary_key=True, default=_generate_report_id)
    user_id = Column(
        String(128),
        ForeignKey("users.uid", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning user",
    )
    video_id = Column(String(11), nullable=False, index=True, comment="YouTube video ID")
    video_title = Column(String(500), nullable=False, default="")
    video_url = Column(Text, nullable=False, default="")
    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        index=True,
        comment="Assigned by the store on insert",
    )
    report_data = Column(JSON, nullable=False, default=dict)

    user = relationship("User", back_populates="reports")

    def __repr__(self):
        return f"<ReportRecord(id={self.id}, video_id={self.video_id})>"

    def to_dict(self) -> dict:
        """Convert model to report document"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "videoId": self.video_id,
            "videoTitle": self.video_title,
            "videoUrl": self.video_url,
            "createdAt": self.created_at,
            "reportData": self.report_data,
        }
