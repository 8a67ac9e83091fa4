"""
User Model
Profile document of a signed-up creator, including the credit balance
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    Creator profile

    Credits are only decremented through UserRepository.deduct_credit,
    which refuses to go below zero.
    """

    __tablename__ = "users"

    uid = Column(String(128), primary_key=True, comment="Identity provider uid")
    email = Column(String(320), nullable=False, default="", comment="Sign-in email")
    full_name = Column(String(200), nullable=False, default="")
    youtube_channel_name = Column(String(200), nullable=False, default="")
    address = Column(String(500), nullable=False, default="")
    phone_number = Column(String(50), nullable=False, default="")
    credits = Column(Integer, nullable=False, default=0, comment="Remaining analyses")
    created_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, comment="Signup timestamp"
    )

    reports = relationship(
        "ReportRecord", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User(uid={self.uid}, credits={self.credits})>"

    def to_dict(self) -> dict:
        """Convert model to profile document"""
        return {
            "uid": self.uid,
            "email": self.email,
            "fullName": self.full_name,
            "youtubeChannelName": self.youtube_channel_name,
            "address": self.address,
            "phoneNumber": self.phone_number,
            "credits": self.credits,
            "createdAt": self.created_at,
        }
