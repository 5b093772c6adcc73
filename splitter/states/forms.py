"""FSM states for multi-step forms."""

from aiogram.fsm.state import State, StatesGroup


class SignUpForm(StatesGroup):
    """States for creating an account."""
    email = State()
    name = State()
    password = State()  # never written to FSM storage


class LoginForm(StatesGroup):
    """States for signing in."""
    email = State()
    password = State()


class ExpenseForm(StatesGroup):
    """States for adding an expense."""
    description = State()
    amount = State()
    currency = State()
    expense_date = State()
    category = State()  # Optional
    paid_by = State()  # Optional, "Anonymous/Unknown"
    payment_method = State()
    confirm = State()


class EditExpenseForm(StatesGroup):
    """States for editing an expense."""
    select_field = State()
    new_value = State()


class RepaymentForm(StatesGroup):
    """States for recording a repayment."""
    amount = State()
    to_user = State()  # Peer scheme only
    description = State()  # Optional
    confirm = State()
