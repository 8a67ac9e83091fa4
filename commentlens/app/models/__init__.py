"""
ORM Models
Document store collections: users/{uid} and users/{uid}/reports/{reportId}
"""

from .base import Base
from .user import User
from .report import ReportRecord

__all__ = ["Base", "User", "ReportRecord"]
