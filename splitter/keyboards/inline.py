"""Inline keyboards for the bot."""

from typing import Dict, List, Optional

from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton
from aiogram.utils.keyboard import InlineKeyboardBuilder

from splitter.utils.constants import (
    ALL_CATEGORIES,
    CB_CANCEL,
    CB_CATEGORY,
    CB_CONFIRM,
    CB_CURRENCY,
    CB_EXPENSE,
    CB_FILTER,
    CB_METHOD,
    CB_MONTH,
    CB_PAYER,
    CB_REPAY,
    NO_PAYER,
    PAYMENT_METHOD_LABELS,
    Currency,
)
from splitter.utils.formatters import truncate_text


def get_currency_keyboard(action: str = "add", default: Optional[str] = None) -> InlineKeyboardMarkup:
    """
    Create keyboard for selecting currency.

    Args:
        action: Action prefix for callback data
        default: Currency listed first
    """
    builder = InlineKeyboardBuilder()

    currencies = [c.value for c in Currency]
    if default in currencies:
        currencies.remove(default)
        currencies.insert(0, default)

    for currency in currencies:
        builder.button(
            text=currency,
            callback_data=f"{CB_CURRENCY}:{action}:{currency}"
        )

    builder.adjust(4)
    return builder.as_markup()


def get_categories_keyboard(categories: List[tuple], action: str = "add") -> InlineKeyboardMarkup:
    """
    Create keyboard with list of categories.

    Args:
        categories: List of (category_id, icon, name) tuples
        action: Action prefix for callback data
    """
    builder = InlineKeyboardBuilder()

    for category_id, icon, name in categories:
        builder.button(
            text=f"{icon} {name}",
            callback_data=f"{CB_CATEGORY}:{action}:{category_id}"
        )

    builder.button(
        text="⏭ No category",
        callback_data=f"{CB_CATEGORY}:{action}:none"
    )

    builder.adjust(2)
    return builder.as_markup()


def get_payers_keyboard(profiles: List[tuple], action: str = "add") -> InlineKeyboardMarkup:
    """
    Create keyboard for selecting who paid.

    Args:
        profiles: List of (profile_id, name) tuples
        action: Action prefix for callback data
    """
    builder = InlineKeyboardBuilder()

    for profile_id, name in profiles:
        builder.button(
            text=name,
            callback_data=f"{CB_PAYER}:{action}:{profile_id}"
        )

    builder.button(
        text="❔ Anonymous/Unknown",
        callback_data=f"{CB_PAYER}:{action}:{NO_PAYER}"
    )

    builder.adjust(2)
    return builder.as_markup()


def get_payment_methods_keyboard(action: str = "add") -> InlineKeyboardMarkup:
    """Create keyboard for selecting payment method."""
    builder = InlineKeyboardBuilder()

    for method, label in PAYMENT_METHOD_LABELS.items():
        builder.button(
            text=label,
            callback_data=f"{CB_METHOD}:{action}:{method.value}"
        )

    builder.adjust(2)
    return builder.as_markup()


def get_confirmation_keyboard(action: str, item_id: str = "") -> InlineKeyboardMarkup:
    """
    Create confirmation keyboard.

    Args:
        action: Action prefix (e.g., 'expense', 'repayment')
        item_id: ID of item to confirm action for
    """
    builder = InlineKeyboardBuilder()

    builder.button(
        text="✅ Confirm",
        callback_data=f"{CB_CONFIRM}:{action}:{item_id}"
    )
    builder.button(
        text="❌ Cancel",
        callback_data=f"{CB_CANCEL}:{action}:{item_id}"
    )

    builder.adjust(2)
    return builder.as_markup()


def get_expenses_keyboard(
        expenses: List[tuple],
        categories: List[tuple],
        selected_category: str = ALL_CATEGORIES,
        show_history: bool = True
) -> InlineKeyboardMarkup:
    """
    Create keyboard for the expense list.

    Args:
        expenses: List of (expense_id, description) tuples
        categories: List of (category_id, icon, name) tuples for the filter
        selected_category: Category id of the active filter or "all"
        show_history: Whether to show the history button
    """
    builder = InlineKeyboardBuilder()

    for i, (expense_id, description) in enumerate(expenses, 1):
        builder.row(
            InlineKeyboardButton(
                text=f"{i}. {truncate_text(description, 24)}",
                callback_data=f"{CB_EXPENSE}:view:{expense_id}"
            ),
            InlineKeyboardButton(
                text="✏️",
                callback_data=f"{CB_EXPENSE}:edit:{expense_id}"
            ),
            InlineKeyboardButton(
                text="🗑",
                callback_data=f"{CB_EXPENSE}:delete:{expense_id}"
            ),
        )

    filters = [(ALL_CATEGORIES, "🗂", "All Categories")] + list(categories)
    filter_buttons = []
    for category_id, icon, name in filters:
        mark = "• " if str(category_id) == selected_category else ""
        filter_buttons.append(
            InlineKeyboardButton(
                text=f"{mark}{icon} {name}",
                callback_data=f"{CB_FILTER}:set:{category_id}"
            )
        )

    for start in range(0, len(filter_buttons), 3):
        builder.row(*filter_buttons[start:start + 3])

    if show_history:
        builder.row(
            InlineKeyboardButton(
                text="🗂 History",
                callback_data=f"{CB_MONTH}:list:"
            )
        )

    return builder.as_markup()


def get_months_keyboard(history: Dict[str, Dict]) -> InlineKeyboardMarkup:
    """
    Create keyboard with one button per historical month.

    Args:
        history: Result of group_expenses_by_month()[1]
    """
    builder = InlineKeyboardBuilder()

    for key, group in history.items():
        builder.button(
            text=f"{group['label']} ({len(group['expenses'])})",
            callback_data=f"{CB_MONTH}:show:{key}"
        )

    builder.adjust(1)
    return builder.as_markup()


def get_edit_fields_keyboard(expense_id: str) -> InlineKeyboardMarkup:
    """Create keyboard with editable expense fields."""
    builder = InlineKeyboardBuilder()

    fields = [
        ("📝 Description", "description"),
        ("💵 Amount", "amount"),
        ("💱 Currency", "currency"),
        ("📅 Date", "expense_date"),
        ("🏷 Category", "category_id"),
        ("👤 Paid by", "paid_by_id"),
        ("💳 Payment method", "payment_method"),
    ]
    for text, field in fields:
        builder.button(
            text=text,
            callback_data=f"{CB_EXPENSE}:field:{field}"
        )

    builder.button(
        text="🗑 Delete",
        callback_data=f"{CB_EXPENSE}:delete:{expense_id}"
    )
    builder.button(
        text="❌ Cancel",
        callback_data=f"{CB_CANCEL}:edit:"
    )

    builder.adjust(2)
    return builder.as_markup()


def get_profiles_keyboard(profiles: List[tuple], action: str = "to") -> InlineKeyboardMarkup:
    """
    Create keyboard with roommates to repay.

    Args:
        profiles: List of (profile_id, name) tuples
        action: Action prefix for callback data
    """
    builder = InlineKeyboardBuilder()

    for profile_id, name in profiles:
        builder.button(
            text=name,
            callback_data=f"{CB_REPAY}:{action}:{profile_id}"
        )

    builder.adjust(2)
    return builder.as_markup()
