"""States package."""

from splitter.states.forms import (
    SignUpForm,
    LoginForm,
    ExpenseForm,
    EditExpenseForm,
    RepaymentForm
)

__all__ = [
    "SignUpForm",
    "LoginForm",
    "ExpenseForm",
    "EditExpenseForm",
    "RepaymentForm"
]
