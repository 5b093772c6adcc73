"""Database models for the roommate splitter."""

from splitter.database.models.profile import Account, Profile
from splitter.database.models.expense import Expense, ExpenseCategory
from splitter.database.models.repayment import Repayment

__all__ = [
    "Account",
    "Profile",
    "Expense",
    "ExpenseCategory",
    "Repayment",
]
