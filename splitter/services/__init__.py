"""Services package."""

from splitter.services.auth_service import AuthService, AuthSession, SessionContext
from splitter.services.profile_service import ProfileService
from splitter.services.category_service import CategoryService
from splitter.services.expense_service import ExpenseService
from splitter.services.repayment_service import RepaymentService
from splitter.services.calculation_service import CalculationService
from splitter.services.notification_service import Notification, NotificationService

__all__ = [
    "AuthService",
    "AuthSession",
    "SessionContext",
    "ProfileService",
    "CategoryService",
    "ExpenseService",
    "RepaymentService",
    "CalculationService",
    "Notification",
    "NotificationService"
]
