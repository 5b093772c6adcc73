"""Service for recording settlements."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from splitter.database.models import Profile, Repayment
from splitter.utils.constants import SettlementScheme
from splitter.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class RepaymentService:
    """Service for repayment operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_repayments(self) -> List[Repayment]:
        """Get all repayments with both profiles loaded, newest first."""
        result = await self.session.execute(
            select(Repayment)
            .options(
                selectinload(Repayment.from_user),
                selectinload(Repayment.to_user)
            )
            .order_by(Repayment.repayment_date.desc(), Repayment.created_at.desc())
        )
        return list(result.scalars().all())

    async def add_repayment(
            self,
            from_profile: Optional[Profile],
            amount: Decimal,
            to_profile_id: Optional[uuid.UUID] = None,
            description: Optional[str] = None,
            scheme: SettlementScheme = SettlementScheme.SELF,
            repayment_date: Optional[date] = None
    ) -> Repayment:
        """
        Record a repayment from the current user's profile.

        Under the SELF scheme the payee is always the payer. Under the
        PEER scheme a payee other than the payer is required.

        Raises:
            ValidationError: missing profile, amount or payee
            NotFoundError: payee profile does not exist
        """
        if from_profile is None:
            raise ValidationError("You must be logged in to add a repayment")

        if amount is None:
            raise ValidationError("Please fill in all required fields")

        if amount <= 0:
            raise ValidationError("Amount must be greater than 0")

        if scheme == SettlementScheme.SELF:
            to_profile_id = from_profile.id
        else:
            if to_profile_id is None:
                raise ValidationError("Please fill in all required fields")
            if to_profile_id == from_profile.id:
                raise ValidationError("You cannot repay yourself")
            if await self.session.get(Profile, to_profile_id) is None:
                raise NotFoundError("Roommate not found")

        repayment = Repayment(
            from_user_id=from_profile.id,
            to_user_id=to_profile_id,
            amount=amount,
            description=(description or "").strip() or None,
            repayment_date=repayment_date or date.today()
        )
        self.session.add(repayment)
        await self.session.flush()

        logger.info(
            "Repayment %s recorded: %s from %s to %s",
            repayment.id, amount, from_profile.id, to_profile_id
        )

        result = await self.session.execute(
            select(Repayment)
            .where(Repayment.id == repayment.id)
            .options(
                selectinload(Repayment.from_user),
                selectinload(Repayment.to_user)
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
