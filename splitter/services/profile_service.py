"""Service for roommate profiles."""

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from splitter.database.models import Account, Profile


class ProfileService:
    """Service for profile lookups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_profiles(self) -> List[Profile]:
        """Get all profiles ordered by name."""
        result = await self.session.execute(
            select(Profile).order_by(Profile.name)
        )
        return list(result.scalars().all())

    async def get_profile(self, profile_id: uuid.UUID) -> Optional[Profile]:
        return await self.session.get(Profile, profile_id)

    async def get_profile_by_account(self, account_id: uuid.UUID) -> Optional[Profile]:
        """Get the profile linked to a login account."""
        result = await self.session.execute(
            select(Profile).where(Profile.user_id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_telegram_user_id(self, profile_id: uuid.UUID) -> Optional[int]:
        """Telegram user currently signed in to the profile's account, if any."""
        result = await self.session.execute(
            select(Account.telegram_user_id)
            .join(Profile, Profile.user_id == Account.id)
            .where(Profile.id == profile_id)
        )
        return result.scalar_one_or_none()
