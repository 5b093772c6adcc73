"""Formatters for displaying data in messages."""

from datetime import date
from decimal import Decimal
from html import escape
from typing import Dict, List

from splitter.database.models import Expense, Repayment
from splitter.services.calculation_service import balance_status
from splitter.utils.constants import DEFAULT_GROUP_SIZE, PAYMENT_METHOD_LABELS, PaymentMethod


def format_amount(amount: Decimal, currency: str = "AED") -> str:
    """Format amount with currency."""
    return f"{amount:.2f} {currency}"


def format_date(day: date) -> str:
    """Format date for display."""
    return day.strftime("%b %d, %Y")


def format_payment_method(method: str) -> str:
    try:
        return PAYMENT_METHOD_LABELS[PaymentMethod(method)]
    except ValueError:
        return method


def truncate_text(text: str, max_length: int = 50) -> str:
    """Truncate text to max length."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def format_expense(expense: Expense, group_size: int = DEFAULT_GROUP_SIZE) -> str:
    """Format a single expense card."""
    payer = expense.paid_by.name if expense.paid_by else "Unknown"

    message = f"<b>{escape(expense.description)}</b>\n"
    message += f"   {format_amount(expense.amount, expense.currency)}"
    message += f" · {format_date(expense.expense_date)}\n"

    if expense.category:
        message += f"   {expense.category.icon} {escape(expense.category.name)}\n"

    message += f"   Paid by: {escape(payer)} · {format_payment_method(expense.payment_method)}\n"
    message += (
        f"   Split equally: "
        f"{format_amount(expense.amount / group_size, expense.currency)} per person\n"
    )
    return message


def format_expenses_list(
        expenses: List[Expense],
        title: str = "Recent Expenses",
        group_size: int = DEFAULT_GROUP_SIZE
) -> str:
    """Format list of expenses. The title is plain text and gets escaped."""
    header = f"<b>📅 {escape(title)}</b>\n\n"
    if not expenses:
        return header + "No expenses found."

    message = header
    for i, expense in enumerate(expenses, 1):
        message += f"{i}. {format_expense(expense, group_size)}\n"

    return message


def format_history(history: Dict[str, Dict], currency: str = "AED") -> str:
    """Format historical months with totals."""
    if not history:
        return "<b>🗂 Expense History</b>\n\nNo historical expenses yet."

    message = "<b>🗂 Expense History</b>\n\n"
    for group in history.values():
        count = len(group["expenses"])
        noun = "expense" if count == 1 else "expenses"
        message += (
            f"• <b>{group['label']}</b>: "
            f"{format_amount(group['total'], currency)} ({count} {noun})\n"
        )

    return message


def format_dashboard_stats(stats: Dict, currency: str = "AED") -> str:
    """Format dashboard totals."""
    message = "<b>📊 Dashboard</b>\n\n"
    message += f"<b>Total Expenses:</b> {format_amount(stats['total_expenses'], currency)}\n"
    message += f"<b>This Month:</b> {format_amount(stats['monthly_total'], currency)}\n"
    message += f"<b>Total Records:</b> {stats['expense_count']}\n"
    message += f"<b>Per Person:</b> {format_amount(stats['per_person'], currency)}\n"
    return message


def format_balances(
        balances: List[Dict],
        currency: str = "AED",
        group_size: int = DEFAULT_GROUP_SIZE
) -> str:
    """Format settlement balances of every roommate."""
    message = "<b>👥 Settlement Balances</b>\n\n"

    if not balances:
        return message + "No roommates yet."

    status_icons = {"Gets back": "🟢", "Owes": "🔴", "Even": "⚪"}

    for info in balances:
        status = balance_status(info["balance"])
        message += (
            f"{status_icons[status]} <b>{escape(info['name'])}</b>: "
            f"{status} {format_amount(abs(info['balance']), currency)}\n"
        )
        message += (
            f"   Paid: {format_amount(info['paid'], currency)} · "
            f"Share: {format_amount(info['owes'], currency)}\n"
        )

        if info.get("settlements_amount"):
            message += f"   Settled: {format_amount(info['settlements_amount'], currency)}\n"
        if info.get("repayments_made"):
            message += f"   Repaid: {format_amount(info['repayments_made'], currency)}\n"
        if info.get("repayments_received"):
            message += f"   Received: {format_amount(info['repayments_received'], currency)}\n"

        message += "\n"

    message += f"<i>Balances are calculated based on equal {group_size}-way splits including repayments</i>"
    return message


def format_repayment(repayment: Repayment, currency: str = "AED") -> str:
    """Format a recorded repayment."""
    amount = format_amount(repayment.amount, currency)

    if repayment.is_self_settlement:
        message = f"💸 <b>{escape(repayment.from_user.name)}</b> settled {amount}"
    else:
        message = (
            f"💸 <b>{escape(repayment.from_user.name)}</b> repaid "
            f"<b>{escape(repayment.to_user.name)}</b> {amount}"
        )

    message += f" on {format_date(repayment.repayment_date)}"
    if repayment.description:
        message += f"\n   {escape(repayment.description)}"
    return message
