"""Handlers for expense management."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from html import escape
from typing import Optional

from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from splitter.config.settings import settings
from splitter.handlers.common import ensure_profile, show_notification
from splitter.keyboards.inline import (
    get_categories_keyboard,
    get_confirmation_keyboard,
    get_currency_keyboard,
    get_edit_fields_keyboard,
    get_expenses_keyboard,
    get_months_keyboard,
    get_payers_keyboard,
    get_payment_methods_keyboard,
)
from splitter.keyboards.reply import get_cancel_keyboard, get_date_keyboard, get_main_menu_keyboard
from splitter.services.auth_service import SessionContext
from splitter.services.category_service import CategoryService
from splitter.services.expense_service import (
    ExpenseService,
    filter_expenses,
    group_expenses_by_month,
)
from splitter.services.notification_service import Notification
from splitter.services.profile_service import ProfileService
from splitter.states.forms import EditExpenseForm, ExpenseForm
from splitter.utils.constants import (
    ALL_CATEGORIES,
    BTN_ADD_EXPENSE,
    BTN_EXPENSES,
    CB_CATEGORY,
    CB_CONFIRM,
    CB_CURRENCY,
    CB_EXPENSE,
    CB_FILTER,
    CB_METHOD,
    CB_MONTH,
    CB_PAYER,
    ERR_NO_EXPENSE,
    NO_PAYER,
)
from splitter.utils.exceptions import ValidationError
from splitter.utils.formatters import (
    format_amount,
    format_date,
    format_expense,
    format_expenses_list,
    format_history,
    format_payment_method,
)
from splitter.utils.validators import validate_amount, validate_date, validate_description

logger = logging.getLogger(__name__)

router = Router()


def _parse_id(value: str) -> Optional[uuid.UUID]:
    if value in ("", "none", NO_PAYER):
        return None
    return uuid.UUID(value)


async def _category_choices(session: AsyncSession) -> list:
    categories = await CategoryService(session).list_categories()
    return [(c.id, c.icon, c.name) for c in categories]


async def _payer_choices(session: AsyncSession) -> list:
    profiles = await ProfileService(session).list_profiles()
    return [(p.id, p.name) for p in profiles]


# Adding


@router.message(Command("add_expense"))
@router.message(F.text == BTN_ADD_EXPENSE)
async def cmd_add_expense(
        message: Message,
        state: FSMContext,
        auth: SessionContext
):
    """Start adding an expense."""
    if not await ensure_profile(message, auth):
        return

    await state.clear()
    await state.set_state(ExpenseForm.description)
    await message.answer(
        "💰 <b>Add New Expense</b>\n\n"
        "What was it for? (e.g. 'Groceries at Carrefour')",
        reply_markup=get_cancel_keyboard(),
        parse_mode="HTML"
    )


@router.message(ExpenseForm.description)
async def process_expense_description(message: Message, state: FSMContext):
    """Process expense description."""
    is_valid, error = validate_description(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(description=message.text.strip())
    await state.set_state(ExpenseForm.amount)
    await message.answer("💵 Enter the amount (e.g. 120 or 45.50):")


@router.message(ExpenseForm.amount)
async def process_expense_amount(message: Message, state: FSMContext):
    """Process expense amount."""
    is_valid, amount, error = validate_amount(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(amount=str(amount))
    await state.set_state(ExpenseForm.currency)
    await message.answer(
        "💱 Currency:",
        reply_markup=get_currency_keyboard("add", default=settings.default_currency)
    )


@router.callback_query(ExpenseForm.currency, F.data.startswith(f"{CB_CURRENCY}:add:"))
async def callback_expense_currency(callback: CallbackQuery, state: FSMContext):
    currency = callback.data.split(":")[2]
    await state.update_data(currency=currency)
    await state.set_state(ExpenseForm.expense_date)

    await callback.message.edit_text(f"💱 Currency: {currency}")
    await callback.message.answer(
        "📅 Date of the expense (YYYY-MM-DD, or press Today):",
        reply_markup=get_date_keyboard()
    )
    await callback.answer()


@router.message(ExpenseForm.expense_date)
async def process_expense_date(message: Message, state: FSMContext, session: AsyncSession):
    is_valid, expense_date, error = validate_date(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(expense_date=expense_date.isoformat())
    await state.set_state(ExpenseForm.category)

    await message.answer(f"📅 Date: {format_date(expense_date)}", reply_markup=get_cancel_keyboard())
    await message.answer(
        "🏷 <b>Category</b>",
        reply_markup=get_categories_keyboard(await _category_choices(session), "add"),
        parse_mode="HTML"
    )


@router.callback_query(ExpenseForm.category, F.data.startswith(f"{CB_CATEGORY}:add:"))
async def callback_expense_category(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession
):
    category_id = callback.data.split(":")[2]
    await state.update_data(category_id=None if category_id == "none" else category_id)
    await state.set_state(ExpenseForm.paid_by)

    await callback.message.edit_text(
        "👤 <b>Paid by</b>",
        reply_markup=get_payers_keyboard(await _payer_choices(session), "add"),
        parse_mode="HTML"
    )
    await callback.answer()


@router.callback_query(ExpenseForm.paid_by, F.data.startswith(f"{CB_PAYER}:add:"))
async def callback_expense_payer(callback: CallbackQuery, state: FSMContext):
    paid_by_id = callback.data.split(":")[2]
    await state.update_data(paid_by_id=None if paid_by_id == NO_PAYER else paid_by_id)
    await state.set_state(ExpenseForm.payment_method)

    await callback.message.edit_text(
        "💳 <b>Payment method</b>",
        reply_markup=get_payment_methods_keyboard("add"),
        parse_mode="HTML"
    )
    await callback.answer()


@router.callback_query(ExpenseForm.payment_method, F.data.startswith(f"{CB_METHOD}:add:"))
async def callback_expense_method(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession
):
    await state.update_data(payment_method=callback.data.split(":")[2])
    await state.set_state(ExpenseForm.confirm)

    data = await state.get_data()
    category = None
    if data.get("category_id"):
        category = await CategoryService(session).get_category(uuid.UUID(data["category_id"]))
    payer = None
    if data.get("paid_by_id"):
        payer = await ProfileService(session).get_profile(uuid.UUID(data["paid_by_id"]))

    category_text = f"{category.icon} {escape(category.name)}" if category else "—"
    payer_text = escape(payer.name) if payer else "Anonymous/Unknown"

    summary = (
        "📋 <b>Check the expense</b>\n\n"
        f"<b>Description:</b> {escape(data.get('description', ''))}\n"
        f"<b>Amount:</b> {format_amount(Decimal(data['amount']), data['currency'])}\n"
        f"<b>Date:</b> {format_date(date.fromisoformat(data['expense_date']))}\n"
        f"<b>Category:</b> {category_text}\n"
        f"<b>Paid by:</b> {payer_text}\n"
        f"<b>Payment method:</b> {format_payment_method(data['payment_method'])}"
    )

    await callback.message.edit_text(
        summary,
        reply_markup=get_confirmation_keyboard("expense"),
        parse_mode="HTML"
    )
    await callback.answer()


@router.callback_query(ExpenseForm.confirm, F.data.startswith(f"{CB_CONFIRM}:expense:"))
async def callback_confirm_expense(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession
):
    """Save the expense."""
    data = await state.get_data()
    await state.clear()

    try:
        expense = await ExpenseService(session).create_expense(
            description=data.get("description"),
            amount=Decimal(data["amount"]) if data.get("amount") else None,
            expense_date=date.fromisoformat(data["expense_date"]) if data.get("expense_date") else None,
            currency=data.get("currency", settings.default_currency),
            category_id=_parse_id(data.get("category_id") or ""),
            paid_by_id=_parse_id(data.get("paid_by_id") or ""),
            payment_method=data.get("payment_method", "cash")
        )
    except ValidationError as e:
        await callback.message.edit_text("❌ Expense was not saved")
        await show_notification(
            callback,
            Notification.error(e.message, title=e.title),
            reply_markup=get_main_menu_keyboard()
        )
        await callback.answer()
        return

    await callback.message.edit_text(format_expense(expense, settings.group_size), parse_mode="HTML")
    await show_notification(
        callback,
        Notification.success(
            "Expense Added",
            f"{expense.description} for {format_amount(expense.amount, expense.currency)} has been recorded."
        ),
        reply_markup=get_main_menu_keyboard()
    )
    await callback.answer()


# Listing


async def _render_current_month(session: AsyncSession, state: FSMContext) -> tuple:
    data = await state.get_data()
    search = data.get("search_term", "")
    category_id = data.get("category_filter", ALL_CATEGORIES)

    expenses = await ExpenseService(session).list_expenses()
    filtered = filter_expenses(expenses, search, category_id)
    current, _ = group_expenses_by_month(filtered)

    title = "Recent Expenses"
    if search:
        title += f" matching “{search}”"

    text = format_expenses_list(current, title, settings.group_size)
    keyboard = get_expenses_keyboard(
        [(e.id, e.description) for e in current],
        await _category_choices(session),
        selected_category=category_id
    )
    return text, keyboard


@router.message(Command("expenses"))
@router.message(F.text == BTN_EXPENSES)
async def cmd_expenses(
        message: Message,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext,
        command: Optional[CommandObject] = None
):
    """Show this month's expenses, optionally searched."""
    if not await ensure_profile(message, auth):
        return

    await state.clear()
    search = (command.args or "").strip() if command else ""
    await state.update_data(search_term=search, category_filter=ALL_CATEGORIES)

    text, keyboard = await _render_current_month(session, state)
    await message.answer(text, reply_markup=keyboard, parse_mode="HTML")


@router.callback_query(F.data.startswith(f"{CB_FILTER}:set:"))
async def callback_filter_category(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext
):
    """Filter the list by category."""
    if not await ensure_profile(callback, auth):
        return

    await state.update_data(category_filter=callback.data.split(":")[2])

    text, keyboard = await _render_current_month(session, state)
    await callback.message.edit_text(text, reply_markup=keyboard, parse_mode="HTML")
    await callback.answer()


async def _render_history(session: AsyncSession, state: FSMContext) -> tuple:
    data = await state.get_data()
    expenses = await ExpenseService(session).list_expenses()
    filtered = filter_expenses(
        expenses,
        data.get("search_term", ""),
        data.get("category_filter", ALL_CATEGORIES)
    )
    _, history = group_expenses_by_month(filtered)
    return history


@router.message(Command("history"))
async def cmd_history(
        message: Message,
        session: AsyncSession,
        state: FSMContext,
        auth: SessionContext
):
    """Show previous months."""
    if not await ensure_profile(message, auth):
        return

    history = await _render_history(session, state)
    await message.answer(
        format_history(history, settings.default_currency),
        reply_markup=get_months_keyboard(history),
        parse_mode="HTML"
    )


@router.callback_query(F.data.startswith(f"{CB_MONTH}:list:"))
async def callback_history(
        callback: CallbackQuery,
        session: AsyncSession,
        state: FSMContext,
        auth: SessionContext
):
    if not await ensure_profile(callback, auth):
        return

    history = await _render_history(session, state)
    await callback.message.answer(
        format_history(history, settings.default_currency),
        reply_markup=get_months_keyboard(history),
        parse_mode="HTML"
    )
    await callback.answer()


@router.callback_query(F.data.startswith(f"{CB_MONTH}:show:"))
async def callback_show_month(
        callback: CallbackQuery,
        session: AsyncSession,
        state: FSMContext,
        auth: SessionContext
):
    """Show the expenses of one historical month."""
    if not await ensure_profile(callback, auth):
        return

    key = callback.data.split(":")[2]
    history = await _render_history(session, state)
    group = history.get(key)

    if group is None:
        await callback.answer("No expenses in this month", show_alert=True)
        return

    text = format_expenses_list(group["expenses"], group["label"], settings.group_size)
    text += f"\n<b>Total:</b> {format_amount(group['total'], settings.default_currency)}"
    await callback.message.answer(text, parse_mode="HTML")
    await callback.answer()


@router.callback_query(F.data.startswith(f"{CB_EXPENSE}:view:"))
async def callback_view_expense(
        callback: CallbackQuery,
        session: AsyncSession,
        auth: SessionContext
):
    if not await ensure_profile(callback, auth):
        return

    expense = await ExpenseService(session).get_expense(uuid.UUID(callback.data.split(":")[2]))
    if not expense:
        await callback.answer(ERR_NO_EXPENSE, show_alert=True)
        return

    await callback.message.answer(
        format_expense(expense, settings.group_size),
        reply_markup=get_edit_fields_keyboard(str(expense.id)),
        parse_mode="HTML"
    )
    await callback.answer()


# Deleting


@router.callback_query(F.data.startswith(f"{CB_EXPENSE}:delete:"))
async def callback_delete_expense(
        callback: CallbackQuery,
        session: AsyncSession,
        auth: SessionContext
):
    """Ask to confirm deletion."""
    if not await ensure_profile(callback, auth):
        return

    expense_id = callback.data.split(":")[2]
    expense = await ExpenseService(session).get_expense(uuid.UUID(expense_id))
    if not expense:
        await callback.answer(ERR_NO_EXPENSE, show_alert=True)
        return

    await callback.message.answer(
        f"🗑 Delete <b>{escape(expense.description)}</b> "
        f"({format_amount(expense.amount, expense.currency)})?",
        reply_markup=get_confirmation_keyboard("delete", expense_id),
        parse_mode="HTML"
    )
    await callback.answer()


@router.callback_query(F.data.startswith(f"{CB_CONFIRM}:delete:"))
async def callback_confirm_delete(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext
):
    if not await ensure_profile(callback, auth):
        return

    await state.set_state(None)
    expense_id = uuid.UUID(callback.data.split(":")[2])
    deleted = await ExpenseService(session).delete_expense(expense_id)

    if deleted:
        notification = Notification.success("Expense Deleted", "The expense has been removed.")
    else:
        logger.warning("Expense %s was already deleted", expense_id)
        notification = Notification.error("Failed to delete expense.")

    await callback.message.edit_text(notification.render(), parse_mode="HTML")
    await callback.answer()


# Editing


@router.callback_query(F.data.startswith(f"{CB_EXPENSE}:edit:"))
async def callback_edit_expense(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext
):
    """Choose which field to edit."""
    if not await ensure_profile(callback, auth):
        return

    expense_id = callback.data.split(":")[2]
    expense = await ExpenseService(session).get_expense(uuid.UUID(expense_id))
    if not expense:
        await callback.answer(ERR_NO_EXPENSE, show_alert=True)
        return

    await state.set_state(EditExpenseForm.select_field)
    await state.update_data(expense_id=expense_id)

    await callback.message.answer(
        "✏️ <b>Edit expense</b>\n\n" + format_expense(expense, settings.group_size) + "\nWhat do you want to change?",
        reply_markup=get_edit_fields_keyboard(expense_id),
        parse_mode="HTML"
    )
    await callback.answer()


@router.callback_query(F.data.startswith(f"{CB_EXPENSE}:field:"))
async def callback_edit_field(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext
):
    if not await ensure_profile(callback, auth):
        return

    expense_id = _expense_id_from_markup(callback)
    if expense_id is None:
        await callback.answer(ERR_NO_EXPENSE, show_alert=True)
        return

    field = callback.data.split(":")[2]
    await state.update_data(expense_id=expense_id, field=field)

    if field == "currency":
        keyboard = get_currency_keyboard("edit")
    elif field == "category_id":
        keyboard = get_categories_keyboard(await _category_choices(session), "edit")
    elif field == "paid_by_id":
        keyboard = get_payers_keyboard(await _payer_choices(session), "edit")
    elif field == "payment_method":
        keyboard = get_payment_methods_keyboard("edit")
    else:
        await state.set_state(EditExpenseForm.new_value)
        prompts = {
            "description": "📝 Enter the new description:",
            "amount": "💵 Enter the new amount:",
            "expense_date": "📅 Enter the new date (YYYY-MM-DD):",
        }
        await callback.message.answer(prompts[field], reply_markup=get_cancel_keyboard())
        await callback.answer()
        return

    await state.set_state(EditExpenseForm.select_field)
    await callback.message.answer("Choose the new value:", reply_markup=keyboard)
    await callback.answer()


def _expense_id_from_markup(callback: CallbackQuery) -> Optional[str]:
    """Find the expense id in the delete button of the same keyboard."""
    markup = callback.message.reply_markup if callback.message else None
    if not markup:
        return None
    for row in markup.inline_keyboard:
        for button in row:
            if button.callback_data and button.callback_data.startswith(f"{CB_EXPENSE}:delete:"):
                return button.callback_data.split(":")[2]
    return None


async def _apply_edit(
        event,
        state: FSMContext,
        session: AsyncSession,
        value
):
    data = await state.get_data()
    await state.clear()

    try:
        expense = await ExpenseService(session).update_expense(
            uuid.UUID(data["expense_id"]),
            **{data["field"]: value}
        )
    except ValidationError as e:
        await show_notification(event, Notification.error(e.message, title=e.title),
                                reply_markup=get_main_menu_keyboard())
        return

    if expense is None:
        await show_notification(event, Notification.error("Failed to update expense."),
                                reply_markup=get_main_menu_keyboard())
        return

    await show_notification(
        event,
        Notification.success("Expense Updated", f"{expense.description} has been updated successfully."),
        reply_markup=get_main_menu_keyboard()
    )


@router.message(EditExpenseForm.new_value)
async def process_edit_value(message: Message, state: FSMContext, session: AsyncSession):
    data = await state.get_data()
    field = data.get("field")

    if field == "amount":
        is_valid, value, error = validate_amount(message.text)
    elif field == "expense_date":
        is_valid, value, error = validate_date(message.text)
    else:
        is_valid, error = validate_description(message.text)
        value = (message.text or "").strip()

    if not is_valid:
        await message.answer(error)
        return

    await _apply_edit(message, state, session, value)


@router.callback_query(
    EditExpenseForm.select_field,
    F.data.regexp(rf"^({CB_CURRENCY}|{CB_CATEGORY}|{CB_PAYER}|{CB_METHOD}):edit:")
)
async def callback_edit_choice(callback: CallbackQuery, state: FSMContext, session: AsyncSession):
    prefix, _, raw = callback.data.split(":", 2)

    if prefix in (CB_CATEGORY, CB_PAYER):
        value = _parse_id(raw)
    else:
        value = raw

    await callback.message.edit_reply_markup(reply_markup=None)
    await _apply_edit(callback, state, session, value)
    await callback.answer()
