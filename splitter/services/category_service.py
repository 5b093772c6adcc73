"""Service for expense categories."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from splitter.database.models import ExpenseCategory
from splitter.utils.constants import DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category lookups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_categories(self) -> List[ExpenseCategory]:
        """Get all categories ordered by name."""
        result = await self.session.execute(
            select(ExpenseCategory).order_by(ExpenseCategory.name)
        )
        return list(result.scalars().all())

    async def get_category(self, category_id: uuid.UUID) -> Optional[ExpenseCategory]:
        return await self.session.get(ExpenseCategory, category_id)

    async def ensure_default_categories(self) -> int:
        """
        Insert default categories that are missing.

        Returns:
            Number of categories created
        """
        result = await self.session.execute(select(ExpenseCategory.name))
        existing = set(result.scalars().all())

        created = 0
        for name, icon, color in DEFAULT_CATEGORIES:
            if name in existing:
                continue
            self.session.add(ExpenseCategory(name=name, icon=icon, color=color))
            created += 1

        if created:
            await self.session.flush()
            logger.info("Seeded %d expense categories", created)

        return created
