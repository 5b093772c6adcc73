"""Service for managing expenses."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from splitter.database.models import Expense
from splitter.utils.constants import ALL_CATEGORIES, PaymentMethod
from splitter.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "description",
    "amount",
    "currency",
    "expense_date",
    "category_id",
    "paid_by_id",
    "payment_method",
)


def filter_expenses(
        expenses: Iterable[Expense],
        search_term: str = "",
        category_id: str = ALL_CATEGORIES
) -> List[Expense]:
    """
    Filter expenses by search term and category.

    The term matches case-insensitively against the description or the
    payer's name. category_id must match exactly unless it is "all".
    """
    term = (search_term or "").lower()
    category_id = str(category_id) if category_id is not None else ALL_CATEGORIES

    result = []
    for expense in expenses:
        payer_name = expense.paid_by.name if expense.paid_by else ""
        matches_search = term in (expense.description or "").lower() or term in payer_name.lower()
        matches_category = (
            category_id == ALL_CATEGORIES
            or (expense.category_id is not None and str(expense.category_id) == category_id)
        )
        if matches_search and matches_category:
            result.append(expense)

    return result


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def month_label(day: date) -> str:
    return day.strftime("%B %Y")


def group_expenses_by_month(
        expenses: Iterable[Expense],
        today: Optional[date] = None
) -> Tuple[List[Expense], Dict[str, Dict]]:
    """
    Split expenses into the current month and historical months.

    Args:
        expenses: Expenses to group (usually already filtered)
        today: Reference date for "current month", defaults to today

    Returns:
        Tuple of (current_month_expenses, history) where history maps
        "YYYY-MM" to {"expenses", "total", "label"}, most recent month first
    """
    today = today or date.today()
    current_key = month_key(today)

    current = []
    groups: Dict[str, Dict] = {}

    for expense in expenses:
        key = month_key(expense.expense_date)
        if key == current_key:
            current.append(expense)
            continue

        if key not in groups:
            groups[key] = {
                "expenses": [],
                "total": Decimal(0),
                "label": month_label(expense.expense_date),
            }
        groups[key]["expenses"].append(expense)
        groups[key]["total"] += expense.amount

    history = {key: groups[key] for key in sorted(groups, reverse=True)}
    return current, history


class ExpenseService:
    """Service for expense operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_expenses(self) -> List[Expense]:
        """Get all expenses with category and payer, newest first."""
        result = await self.session.execute(
            select(Expense)
            .options(
                selectinload(Expense.category),
                selectinload(Expense.paid_by)
            )
            .order_by(Expense.expense_date.desc(), Expense.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_expense(self, expense_id: uuid.UUID) -> Optional[Expense]:
        """Get expense by ID with category and payer loaded."""
        result = await self.session.execute(
            select(Expense)
            .where(Expense.id == expense_id)
            .options(
                selectinload(Expense.category),
                selectinload(Expense.paid_by)
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_expense(
            self,
            description: str,
            amount: Decimal,
            expense_date: date,
            currency: str = "AED",
            category_id: Optional[uuid.UUID] = None,
            paid_by_id: Optional[uuid.UUID] = None,
            payment_method: str = PaymentMethod.CASH.value
    ) -> Expense:
        """
        Create a new expense.

        Raises:
            ValidationError: description, amount or date is missing
        """
        if not description or amount is None or expense_date is None:
            raise ValidationError("Please fill in description, amount, and date.")

        expense = Expense(
            description=description,
            amount=amount,
            currency=currency,
            expense_date=expense_date,
            category_id=category_id,
            paid_by_id=paid_by_id,
            payment_method=payment_method
        )

        self.session.add(expense)
        await self.session.flush()
        logger.info("Expense %s created: %s %s", expense.id, amount, currency)

        return await self.get_expense(expense.id)

    async def update_expense(
            self,
            expense_id: uuid.UUID,
            **fields
    ) -> Optional[Expense]:
        """Update expense details. Returns None if the expense is gone."""
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        for required in ("description", "amount", "expense_date"):
            if required in fields and not fields[required]:
                raise ValidationError("Please fill in description, amount, and date.")

        expense = await self.get_expense(expense_id)
        if not expense:
            return None

        for name, value in fields.items():
            setattr(expense, name, value)

        await self.session.flush()
        logger.info("Expense %s updated: %s", expense.id, ", ".join(sorted(fields)))

        return await self.get_expense(expense.id)

    async def delete_expense(self, expense_id: uuid.UUID) -> bool:
        """Delete an expense by id."""
        expense = await self.session.get(Expense, expense_id)
        if not expense:
            return False

        await self.session.delete(expense)
        await self.session.flush()
        logger.info("Expense %s deleted", expense_id)

        return True
