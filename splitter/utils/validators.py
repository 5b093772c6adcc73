"""Validators for user input."""

import re
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Tuple

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_amount(text: str) -> Tuple[bool, Optional[Decimal], Optional[str]]:
    """
    Validate and parse amount from text.

    Args:
        text: User input text

    Returns:
        Tuple of (is_valid, amount, error_message)
    """
    # Remove spaces and replace comma with dot
    text = (text or "").strip().replace(" ", "").replace(",", ".")

    try:
        amount = Decimal(text)
    except (InvalidOperation, ValueError):
        return False, None, "❌ Invalid amount. Use numbers, for example: 100 or 150.50"

    if not amount.is_finite():
        return False, None, "❌ Invalid amount. Use numbers, for example: 100 or 150.50"

    if amount <= 0:
        return False, None, "❌ Amount must be greater than 0"

    if amount > Decimal("1000000"):
        return False, None, "❌ Amount is too large (maximum 1,000,000)"

    # Round to 2 decimal places
    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    if amount == 0:
        return False, None, "❌ Amount is too small (minimum 0.01)"

    return True, amount, None


def validate_description(description: str) -> Tuple[bool, Optional[str]]:
    """
    Validate expense description.

    Returns:
        Tuple of (is_valid, error_message)
    """
    description = (description or "").strip()

    if not description:
        return False, "❌ Description cannot be empty"

    if len(description) > 200:
        return False, "❌ Description is too long (maximum 200 characters)"

    return True, None


def validate_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate roommate name.

    Returns:
        Tuple of (is_valid, error_message)
    """
    name = (name or "").strip()

    if not name:
        return False, "❌ Name cannot be empty"

    if len(name) < 2:
        return False, "❌ Name is too short (minimum 2 characters)"

    if len(name) > 50:
        return False, "❌ Name is too long (maximum 50 characters)"

    return True, None


def validate_email(email: str) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate and normalize an email address.

    Returns:
        Tuple of (is_valid, cleaned_email, error_message)
    """
    email = (email or "").strip().lower()

    if not EMAIL_RE.match(email):
        return False, None, "❌ Invalid email address. Example: name@example.com"

    return True, email, None


def validate_password(password: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a new password.

    Returns:
        Tuple of (is_valid, error_message)
    """
    password = password or ""

    if len(password) < 6:
        return False, "❌ Password should be at least 6 characters"

    # bcrypt only looks at the first 72 bytes
    if len(password.encode("utf-8")) > 72:
        return False, "❌ Password is too long (maximum 72 bytes)"

    return True, None


def validate_date(text: str, today: Optional[date] = None) -> Tuple[bool, Optional[date], Optional[str]]:
    """
    Parse an expense date.

    Accepts YYYY-MM-DD, DD.MM.YYYY, "today" and "yesterday".

    Returns:
        Tuple of (is_valid, date, error_message)
    """
    today = today or date.today()
    text = (text or "").strip().lower()

    if text in ("today", "📅 today"):
        return True, today, None
    if text == "yesterday":
        return True, today - timedelta(days=1), None

    for fmt in ("%Y-%m-%d", "%d.%m.%Y"):
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            continue
        if parsed > today:
            return False, None, "❌ Date cannot be in the future"
        return True, parsed, None

    return False, None, "❌ Invalid date. Use YYYY-MM-DD, for example: 2024-05-31"
