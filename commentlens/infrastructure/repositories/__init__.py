# commentlens/infrastructure/repositories/__init__.py
"""
Repository Layer
Data access for profiles and reports
"""

from .base import BaseRepository
from .user_repository import UserRepository
from .report_repository import ReportRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ReportRepository",
]
