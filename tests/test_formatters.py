"""Tests for message formatting."""

import uuid
from datetime import date
from decimal import Decimal

from splitter.database.models import Expense, ExpenseCategory, Profile, Repayment
from splitter.utils.formatters import (
    format_amount,
    format_balances,
    format_dashboard_stats,
    format_date,
    format_expense,
    format_expenses_list,
    format_history,
    format_payment_method,
    format_repayment,
    truncate_text,
)


def make_expense(payer=None, category=None):
    return Expense(
        id=uuid.uuid4(),
        description="Pizza <night>",
        amount=Decimal("90.00"),
        currency="AED",
        expense_date=date(2024, 5, 3),
        payment_method="credit_card",
        paid_by=payer,
        category=category,
    )


def test_format_amount():
    assert format_amount(Decimal("10"), "USD") == "10.00 USD"
    assert format_amount(Decimal("33.333")) == "33.33 AED"


def test_format_date():
    assert format_date(date(2024, 5, 3)) == "May 03, 2024"


def test_format_payment_method():
    assert format_payment_method("bank_transfer") == "🏦 Bank Transfer"
    assert format_payment_method("crypto") == "crypto"


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("a" * 20, 10) == "aaaaaaa..."


def test_format_expense_escapes_and_splits():
    category = ExpenseCategory(id=uuid.uuid4(), name="Dining Out", icon="🍽", color="#f97316")
    text = format_expense(make_expense(Profile(id=uuid.uuid4(), name="Alice"), category), group_size=3)

    assert "Pizza &lt;night&gt;" in text
    assert "90.00 AED" in text
    assert "🍽 Dining Out" in text
    assert "Paid by: Alice" in text
    assert "💳 Credit Card" in text
    assert "30.00 AED per person" in text


def test_format_expense_unknown_payer():
    assert "Paid by: Unknown" in format_expense(make_expense())


def test_format_expenses_list():
    assert "No expenses found." in format_expenses_list([], "May 2024")

    text = format_expenses_list([make_expense(), make_expense()], "May 2024")
    assert "May 2024" in text
    assert "1. " in text and "2. " in text


def test_format_history():
    assert "No historical expenses yet." in format_history({})

    history = {
        "2024-04": {"expenses": [make_expense()], "total": Decimal("90"), "label": "April 2024"},
        "2024-03": {"expenses": [make_expense(), make_expense()], "total": Decimal("180"), "label": "March 2024"},
    }
    text = format_history(history)

    assert text.index("April 2024") < text.index("March 2024")
    assert "90.00 AED (1 expense)" in text
    assert "180.00 AED (2 expenses)" in text


def test_format_dashboard_stats():
    text = format_dashboard_stats({
        "total_expenses": Decimal("180"),
        "monthly_total": Decimal("120"),
        "expense_count": 3,
        "per_person": Decimal("60"),
    })

    assert "180.00 AED" in text
    assert "120.00 AED" in text
    assert "<b>Total Records:</b> 3" in text
    assert "60.00 AED" in text


def test_format_balances():
    balances = [
        {
            "profile_id": uuid.uuid4(),
            "name": "Alice",
            "paid": Decimal("90"),
            "owes": Decimal("30"),
            "balance": Decimal("60"),
            "settlements_amount": Decimal("0"),
            "repayments_made": Decimal("0"),
            "repayments_received": Decimal("0"),
        },
        {
            "profile_id": uuid.uuid4(),
            "name": "Bob",
            "paid": Decimal("0"),
            "owes": Decimal("30"),
            "balance": Decimal("-20"),
            "settlements_amount": Decimal("10"),
            "repayments_made": Decimal("0"),
            "repayments_received": Decimal("0"),
        },
    ]

    text = format_balances(balances, "AED", group_size=3)

    assert "🟢 <b>Alice</b>: Gets back 60.00 AED" in text
    assert "🔴 <b>Bob</b>: Owes 20.00 AED" in text
    assert "Settled: 10.00 AED" in text
    assert "Repaid:" not in text
    assert "equal 3-way splits" in text


def test_format_balances_empty():
    assert "No roommates yet." in format_balances([])


def test_format_repayment():
    alice = Profile(id=uuid.uuid4(), name="Alice")
    bob = Profile(id=uuid.uuid4(), name="Bob")

    settled = Repayment(
        from_user_id=bob.id, to_user_id=bob.id, from_user=bob, to_user=bob,
        amount=Decimal("30"), repayment_date=date(2024, 5, 3)
    )
    repaid = Repayment(
        from_user_id=bob.id, to_user_id=alice.id, from_user=bob, to_user=alice,
        amount=Decimal("30"), repayment_date=date(2024, 5, 3), description="May rent"
    )

    assert format_repayment(settled) == "💸 <b>Bob</b> settled 30.00 AED on May 03, 2024"
    assert "<b>Bob</b> repaid <b>Alice</b> 30.00 AED" in format_repayment(repaid)
    assert "May rent" in format_repayment(repaid)


def test_format_expenses_list_escapes_title():
    title = "Recent Expenses matching “Tom & Jerry <3”"

    assert format_expenses_list([], title).startswith(
        "<b>📅 Recent Expenses matching “Tom &amp; Jerry &lt;3”</b>"
    )
    assert "Tom &amp; Jerry &lt;3" in format_expenses_list([make_expense()], title)
