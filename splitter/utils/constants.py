"""Constants used throughout the bot."""

from enum import Enum


DEFAULT_GROUP_SIZE = 3

# Sentinel for "no category filter"
ALL_CATEGORIES = "all"


class SettlementScheme(str, Enum):
    """How repayment records adjust balances."""
    SELF = "self"  # from == to, credit to the payer
    PEER = "peer"  # from != to, transfer between members


class PaymentMethod(str, Enum):
    """How an expense was paid."""
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"


class Currency(str, Enum):
    """Currencies an expense can be tagged with."""
    AED = "AED"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


class Severity(str, Enum):
    """Notification severity."""
    DEFAULT = "default"
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


class AuthEvent(str, Enum):
    """Session change events."""
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "💵 Cash",
    PaymentMethod.CREDIT_CARD: "💳 Credit Card",
    PaymentMethod.DEBIT_CARD: "💳 Debit Card",
    PaymentMethod.BANK_TRANSFER: "🏦 Bank Transfer",
}

# (name, icon, color)
DEFAULT_CATEGORIES = [
    ("Groceries", "🛒", "#22c55e"),
    ("Utilities", "💡", "#eab308"),
    ("Rent", "🏠", "#3b82f6"),
    ("Dining Out", "🍽", "#f97316"),
    ("Transport", "🚕", "#06b6d4"),
    ("Household", "🧽", "#a855f7"),
    ("Entertainment", "🎬", "#ec4899"),
    ("Other", "📦", "#6b7280"),
]

# Bot commands
CMD_START = "start"
CMD_HELP = "help"
CMD_SIGNUP = "signup"
CMD_LOGIN = "login"
CMD_LOGOUT = "logout"
CMD_ADD_EXPENSE = "add_expense"
CMD_EXPENSES = "expenses"
CMD_HISTORY = "history"
CMD_REPAY = "repay"
CMD_BALANCE = "balance"

# Callback data prefixes
CB_EXPENSE = "expense"
CB_CATEGORY = "category"
CB_PAYER = "payer"
CB_METHOD = "method"
CB_CURRENCY = "currency"
CB_MONTH = "month"
CB_FILTER = "filter"
CB_REPAY = "repay"
CB_CONFIRM = "confirm"
CB_CANCEL = "cancel"

# Callback value for an expense with no payer
NO_PAYER = "none"

# Reply keyboard buttons
BTN_CANCEL = "❌ Cancel"
BTN_SKIP = "⏭ Skip"
BTN_TODAY = "📅 Today"
BTN_ADD_EXPENSE = "💰 Add expense"
BTN_EXPENSES = "📋 Expenses"
BTN_BALANCE = "⚖️ Balances"
BTN_REPAY = "💸 Settle up"
BTN_HELP = "ℹ️ Help"

# Messages
MSG_WELCOME = """
👋 Welcome to <b>RoomMate Splitter</b>!

I keep track of the flat's shared expenses:
• Record who paid for what
• Split everything equally between roommates
• Show who gets money back and who owes
• Record settlements when debts are paid

Use /signup to create an account or /login if you already have one.
"""

MSG_HELP = """
📖 <b>Available commands:</b>

<b>Account:</b>
/signup - create an account
/login - sign in
/logout - sign out

<b>Expenses:</b>
/add_expense - record an expense
/expenses - this month's expenses (add a word to search)
/history - previous months

<b>Balances:</b>
/balance - who owes whom
/repay - record a settlement
"""

# Error messages
ERR_LOGIN_REQUIRED = "🔒 Please /login first"
ERR_NO_PROFILE = "❌ Your account has no roommate profile"
ERR_NO_EXPENSE = "❌ Expense not found"
