"""Reply keyboards for the bot."""

from aiogram.types import ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

from splitter.utils.constants import (
    BTN_ADD_EXPENSE,
    BTN_BALANCE,
    BTN_CANCEL,
    BTN_EXPENSES,
    BTN_HELP,
    BTN_REPAY,
    BTN_SKIP,
    BTN_TODAY,
)


def get_main_menu_keyboard() -> ReplyKeyboardMarkup:
    """Create main menu keyboard."""
    builder = ReplyKeyboardBuilder()

    builder.button(text=BTN_ADD_EXPENSE)
    builder.button(text=BTN_EXPENSES)
    builder.button(text=BTN_BALANCE)
    builder.button(text=BTN_REPAY)
    builder.button(text=BTN_HELP)

    builder.adjust(2, 2, 1)  # 2-2-1 layout
    return builder.as_markup(resize_keyboard=True)


def get_cancel_keyboard() -> ReplyKeyboardMarkup:
    """Create keyboard with cancel button."""
    builder = ReplyKeyboardBuilder()
    builder.button(text=BTN_CANCEL)
    return builder.as_markup(resize_keyboard=True)


def get_skip_keyboard() -> ReplyKeyboardMarkup:
    """Create keyboard with skip button."""
    builder = ReplyKeyboardBuilder()
    builder.button(text=BTN_SKIP)
    builder.button(text=BTN_CANCEL)
    builder.adjust(2)
    return builder.as_markup(resize_keyboard=True)


def get_date_keyboard() -> ReplyKeyboardMarkup:
    """Create keyboard with a shortcut for today's date."""
    builder = ReplyKeyboardBuilder()
    builder.button(text=BTN_TODAY)
    builder.button(text=BTN_CANCEL)
    builder.adjust(2)
    return builder.as_markup(resize_keyboard=True)
