# commentlens/services/persistence_service.py
"""
Persistence Service
Credit-gated access to profiles and reports on top of the repositories
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from commentlens.app.config import get_config
from commentlens.app.database import DatabaseManager, db_manager
from commentlens.domain.models import Report, UserProfile
from commentlens.infrastructure.repositories import ReportRepository, UserRepository
from commentlens.services.exceptions import PersistenceError, ValidationError
from commentlens.services.profile_stream import ProfileStream

logger = logging.getLogger(__name__)


def _to_profile(user) -> UserProfile:
    return UserProfile.model_validate(user.to_dict())


def _to_report(record) -> Report:
    return Report.model_validate(record.to_dict())


class PersistenceService:
    """
    Profiles, the credit balance and report documents

    Every public method opens its own session. Store failures surface as
    PersistenceError; "absent" is returned as None, never raised.

    The live profile stream follows a single signed-in user per process
    (``sign_in``/``sign_out``). Changes to any other user are stored but
    not published.
    """

    def __init__(
        self,
        database: Optional[DatabaseManager] = None,
        stream: Optional[ProfileStream] = None,
        starting_credits: Optional[int] = None,
    ):
        self.db = database or db_manager
        self.stream = stream or ProfileStream()
        self.starting_credits = (
            starting_credits
            if starting_credits is not None
            else get_config().accounts.starting_credits
        )
        self._signed_in_uid: Optional[str] = None

    @property
    def signed_in_uid(self) -> Optional[str]:
        return self._signed_in_uid

    # ========================================================================
    # Profiles
    # ========================================================================

    async def get_profile(self, uid: str) -> Optional[UserProfile]:
        try:
            async with self.db.session() as session:
                user = await UserRepository(session).get_by_id(uid)
        except SQLAlchemyError as e:
            raise PersistenceError("get_profile", e) from e
        return _to_profile(user) if user is not None else None

    async def create_profile(
        self,
        uid: str,
        email: str = "",
        full_name: str = "",
        youtube_channel_name: str = "",
        address: str = "",
        phone_number: str = "",
    ) -> UserProfile:
        """Create the signup profile with the starting credit grant"""
        if not uid:
            raise ValidationError("User id is required", field="uid")

        try:
            async with self.db.session() as session:
                repo = UserRepository(session)
                if await repo.get_by_id(uid) is not None:
                    raise ValidationError(f"Profile already exists: {uid}", field="uid")
                user = await repo.create_profile(
                    uid=uid,
                    credits=self.starting_credits,
                    email=email,
                    full_name=full_name,
                    youtube_channel_name=youtube_channel_name,
                    address=address,
                    phone_number=phone_number,
                )
        except SQLAlchemyError as e:
            raise PersistenceError("create_profile", e) from e

        profile = _to_profile(user)
        logger.info(f"👤 Created profile {uid} with {profile.credits} credits")
        self._notify(uid, profile)
        return profile

    async def update_profile(self, uid: str, **fields: Any) -> Optional[UserProfile]:
        """Generic profile update; credits cannot be written here"""
        fields.pop("credits", None)
        try:
            async with self.db.session() as session:
                user = await UserRepository(session).update_profile(uid, **fields)
        except SQLAlchemyError as e:
            raise PersistenceError("update_profile", e) from e

        if user is None:
            return None
        profile = _to_profile(user)
        self._notify(uid, profile)
        return profile

    async def deduct_credit(self, uid: str) -> bool:
        """Decrement with a floor of zero; True only if a credit was taken"""
        try:
            async with self.db.session() as session:
                repo = UserRepository(session)
                deducted = await repo.deduct_credit(uid)
                user = await repo.get_by_id(uid) if deducted else None
                if user is not None:
                    await session.refresh(user)
        except SQLAlchemyError as e:
            raise PersistenceError("deduct_credit", e) from e

        if user is not None:
            self._notify(uid, _to_profile(user))
        return deducted

    # ========================================================================
    # Identity session
    # ========================================================================

    async def sign_in(self, uid: str) -> Optional[UserProfile]:
        """Switch the live stream to ``uid`` and publish its profile"""
        self._signed_in_uid = uid
        profile = await self.get_profile(uid)
        self.stream.publish(profile)
        logger.info(f"🔑 Signed in {uid}")
        return profile

    def sign_out(self) -> None:
        uid, self._signed_in_uid = self._signed_in_uid, None
        self.stream.publish(None)
        if uid:
            logger.info(f"👋 Signed out {uid}")

    def _notify(self, uid: str, profile: UserProfile) -> None:
        if uid == self._signed_in_uid:
            self.stream.publish(profile)

    # ========================================================================
    # Reports
    # ========================================================================

    async def save_report(
        self,
        user_id: str,
        video_id: str,
        video_title: str,
        video_url: str,
        report_data: Dict[str, Any],
    ) -> str:
        """Store a report under ``user_id`` and return its generated id"""
        try:
            async with self.db.session() as session:
                record = await ReportRepository(session).save_report(
                    user_id=user_id,
                    video_id=video_id,
                    video_title=video_title,
                    video_url=video_url,
                    report_data=report_data,
                )
        except SQLAlchemyError as e:
            raise PersistenceError("save_report", e) from e

        logger.info(f"💾 Saved report {record.id} for {user_id} (video {video_id})")
        return record.id

    async def get_reports(self, user_id: str) -> List[Report]:
        """All reports of ``user_id``, newest first"""
        try:
            async with self.db.session() as session:
                records = await ReportRepository(session).get_for_user(user_id)
        except SQLAlchemyError as e:
            raise PersistenceError("get_reports", e) from e
        return [_to_report(r) for r in records]

    async def get_report(self, user_id: str, report_id: str) -> Optional[Report]:
        try:
            async with self.db.session() as session:
                record = await ReportRepository(session).get_user_report(
                    user_id, report_id
                )
        except SQLAlchemyError as e:
            raise PersistenceError("get_report", e) from e
        return _to_report(record) if record is not None else None
