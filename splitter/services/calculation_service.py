"""Service for calculating balances and settlements."""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from splitter.config.settings import settings
from splitter.services.expense_service import ExpenseService
from splitter.services.profile_service import ProfileService
from splitter.services.repayment_service import RepaymentService
from splitter.utils.constants import DEFAULT_GROUP_SIZE, SettlementScheme


def _amount(value) -> Decimal:
    """Coerce an optional amount to Decimal, treating None as zero."""
    if value is None:
        return Decimal(0)
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute_user_balances(
        expenses: Iterable,
        profiles: Iterable,
        repayments: Iterable,
        group_size: int = DEFAULT_GROUP_SIZE,
        scheme: SettlementScheme = SettlementScheme.SELF
) -> List[Dict]:
    """
    Calculate paid / owed / net balance for each profile.

    Every expense is split equally over group_size members, so the share
    each profile owes is the same: total / group_size.

    Balance = paid - owes + settlement adjustment
    Positive balance = group owes them
    Negative balance = they owe the group

    Settlement adjustment depends on the scheme:
    - SELF: credit of repayments where from == to == profile
    - PEER: + repayments made to others - repayments received from others.
      The sign is intentional: repaying moves the payer towards zero and
      the receiver by the same amount, so transfers stay zero-sum.

    owes is not rounded, so when the total does not divide evenly the sum
    of balances differs from the settlement credits by a residue far
    below 0.01. Round to cents for display or comparison.

    Args:
        expenses: Objects with amount and paid_by_id
        profiles: Objects with id and name
        repayments: Objects with amount, from_user_id and to_user_id
        group_size: Number of people sharing every expense
        scheme: Settlement scheme

    Returns:
        One dict per profile, in profile order, with keys:
        profile_id, name, paid, owes, balance, settlements_amount,
        repayments_made, repayments_received
    """
    if group_size < 1:
        raise ValueError("group_size must be a positive integer")

    expenses = list(expenses)
    repayments = list(repayments)

    total_expenses = sum((_amount(e.amount) for e in expenses), Decimal(0))
    owes = total_expenses / group_size

    result = []
    for profile in profiles:
        paid = sum(
            (_amount(e.amount) for e in expenses if e.paid_by_id == profile.id),
            Decimal(0)
        )

        settlements_amount = Decimal(0)
        repayments_made = Decimal(0)
        repayments_received = Decimal(0)

        for repayment in repayments:
            from_id = repayment.from_user_id
            to_id = repayment.to_user_id
            amount = _amount(repayment.amount)

            if from_id == profile.id and to_id == profile.id:
                settlements_amount += amount
            elif from_id == profile.id:
                repayments_made += amount
            elif to_id == profile.id:
                repayments_received += amount

        if scheme == SettlementScheme.SELF:
            balance = paid - owes + settlements_amount
        else:
            balance = paid - owes + repayments_made - repayments_received

        result.append({
            "profile_id": profile.id,
            "name": profile.name,
            "paid": paid,
            "owes": owes,
            "balance": balance,
            "settlements_amount": settlements_amount,
            "repayments_made": repayments_made,
            "repayments_received": repayments_received,
        })

    return result


def balance_status(balance: Decimal) -> str:
    """Human label for the sign of a balance."""
    if balance > 0:
        return "Gets back"
    if balance < 0:
        return "Owes"
    return "Even"


def compute_dashboard_stats(
        expenses: Iterable,
        group_size: int = DEFAULT_GROUP_SIZE,
        today: Optional[date] = None
) -> Dict:
    """
    Totals shown above the balances.

    Returns:
        Dict with:
        - total_expenses: All time spending
        - monthly_total: Spending in today's calendar month
        - expense_count: Number of expense entries
        - per_person: Average share each
    """
    if group_size < 1:
        raise ValueError("group_size must be a positive integer")

    today = today or date.today()
    expenses = list(expenses)

    total_expenses = sum((_amount(e.amount) for e in expenses), Decimal(0))
    monthly_total = sum(
        (
            _amount(e.amount) for e in expenses
            if e.expense_date.year == today.year and e.expense_date.month == today.month
        ),
        Decimal(0)
    )

    return {
        "total_expenses": total_expenses,
        "monthly_total": monthly_total,
        "expense_count": len(expenses),
        "per_person": total_expenses / group_size,
    }


class CalculationService:
    """Service for balance calculations."""

    def __init__(
            self,
            session: AsyncSession,
            group_size: Optional[int] = None,
            scheme: Optional[SettlementScheme] = None
    ):
        self.session = session
        self.group_size = group_size or settings.group_size
        self.scheme = scheme or settings.settlement_scheme

    async def get_user_balances(self) -> List[Dict]:
        """Fetch expenses, profiles and repayments and compute balances."""
        expenses = await ExpenseService(self.session).list_expenses()
        profiles = await ProfileService(self.session).list_profiles()
        repayments = await RepaymentService(self.session).list_repayments()

        return compute_user_balances(
            expenses,
            profiles,
            repayments,
            group_size=self.group_size,
            scheme=self.scheme
        )

    async def get_dashboard_stats(self, today: Optional[date] = None) -> Dict:
        """Compute dashboard totals from the stored expenses."""
        expenses = await ExpenseService(self.session).list_expenses()
        return compute_dashboard_stats(expenses, self.group_size, today)
