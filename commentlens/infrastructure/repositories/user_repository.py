# commentlens/infrastructure/repositories/user_repository.py
"""
User Repository
Profile documents and the credit balance
"""

import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from commentlens.app.models import User

logger = logging.getLogger(__name__)

# Fields a generic profile update may touch; credits move only via deduct_credit
PROFILE_FIELDS = frozenset(
    {"email", "full_name", "youtube_channel_name", "address", "phone_number"}
)


class UserRepository(BaseRepository[User]):
    """Repository for creator profiles"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User, id_field="uid")

    async def create_profile(
        self,
        uid: str,
        credits: int,
        email: str = "",
        full_name: str = "",
        youtube_channel_name: str = "",
        address: str = "",
        phone_number: str = "",
    ) -> User:
        """Create a profile with the starting credit grant"""
        return await self.create(
            uid=uid,
            email=email,
            full_name=full_name,
            youtube_channel_name=youtube_channel_name,
            address=address,
            phone_number=phone_number,
            credits=credits,
        )

    async def update_profile(self, uid: str, **fields) -> Optional[User]:
        """Update editable profile fields, ignoring anything else"""
        values = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if not values:
            return await self.get_by_id(uid)
        return await self.update(uid, **values)

    async def deduct_credit(self, uid: str) -> bool:
        """
        Take one credit if the balance allows it

        A single conditional UPDATE, so concurrent runs for the same user
        cannot both spend the last credit.

        Returns:
            True if a credit was taken, False if the profile is missing or empty
        """
        try:
            stmt = (
                update(User)
                .where(User.uid == uid, User.credits >= 1)
                .values(credits=User.credits - 1)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to deduct credit for {uid}: {e}")
            raise

        deducted = result.rowcount == 1
        if deducted:
            logger.info(f"💳 Deducted 1 credit from {uid}")
        else:
            logger.warning(f"⚠️ No credit deducted for {uid} (missing profile or zero balance)")
        return deducted
