"""Handlers for recording settlements."""

import uuid
from decimal import Decimal
from html import escape

from aiogram import Bot, Router, F
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from splitter.config.settings import settings
from splitter.handlers.common import ensure_profile, show_notification
from splitter.keyboards.inline import get_confirmation_keyboard, get_profiles_keyboard
from splitter.keyboards.reply import get_cancel_keyboard, get_main_menu_keyboard, get_skip_keyboard
from splitter.services.auth_service import SessionContext
from splitter.services.calculation_service import CalculationService, balance_status
from splitter.services.notification_service import Notification, NotificationService
from splitter.services.profile_service import ProfileService
from splitter.services.repayment_service import RepaymentService
from splitter.states.forms import RepaymentForm
from splitter.utils.constants import BTN_REPAY, BTN_SKIP, CB_CONFIRM, CB_REPAY, SettlementScheme
from splitter.utils.exceptions import SplitterError
from splitter.utils.formatters import format_amount, format_repayment
from splitter.utils.validators import validate_amount

router = Router()


@router.message(Command("repay"))
@router.message(F.text == BTN_REPAY)
async def cmd_repay(
        message: Message,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext
):
    """Start recording a repayment."""
    if not await ensure_profile(message, auth):
        return

    await state.clear()

    balances = await CalculationService(session).get_user_balances()
    own = next((b for b in balances if b["profile_id"] == auth.profile_id), None)

    text = "💸 <b>Add Repayment</b>\n\n"
    if own is not None:
        text += (
            f"Your balance: {balance_status(own['balance'])} "
            f"{format_amount(abs(own['balance']), settings.default_currency)}\n\n"
        )
    text += "Enter the amount you paid back:"

    await state.set_state(RepaymentForm.amount)
    await message.answer(text, reply_markup=get_cancel_keyboard(), parse_mode="HTML")


@router.message(RepaymentForm.amount)
async def process_repayment_amount(
        message: Message,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext
):
    is_valid, amount, error = validate_amount(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(amount=str(amount))

    if settings.settlement_scheme == SettlementScheme.PEER:
        profiles = await ProfileService(session).list_profiles()
        others = [(p.id, p.name) for p in profiles if p.id != auth.profile_id]
        if not others:
            await state.clear()
            await message.answer(
                "❌ There is nobody to repay yet",
                reply_markup=get_main_menu_keyboard()
            )
            return

        await state.set_state(RepaymentForm.to_user)
        await message.answer(
            "👤 Who are you repaying?",
            reply_markup=get_profiles_keyboard(others, "to")
        )
        return

    await state.set_state(RepaymentForm.description)
    await message.answer(
        "📝 What is this repayment for? (optional)",
        reply_markup=get_skip_keyboard()
    )


@router.callback_query(RepaymentForm.to_user, F.data.startswith(f"{CB_REPAY}:to:"))
async def callback_repayment_to(callback: CallbackQuery, state: FSMContext):
    await state.update_data(to_user_id=callback.data.split(":")[2])
    await state.set_state(RepaymentForm.description)

    await callback.message.delete_reply_markup()
    await callback.message.answer(
        "📝 What is this repayment for? (optional)",
        reply_markup=get_skip_keyboard()
    )
    await callback.answer()


@router.message(RepaymentForm.description)
async def process_repayment_description(
        message: Message,
        state: FSMContext,
        session: AsyncSession
):
    description = None if message.text == BTN_SKIP else (message.text or "").strip()
    await state.update_data(description=description)
    await state.set_state(RepaymentForm.confirm)

    data = await state.get_data()
    text = (
        "📋 <b>Check the repayment</b>\n\n"
        f"<b>Amount:</b> {format_amount(Decimal(data['amount']), settings.default_currency)}\n"
    )
    if data.get("to_user_id"):
        payee = await ProfileService(session).get_profile(uuid.UUID(data["to_user_id"]))
        payee_name = escape(payee.name) if payee else "—"
        text += f"<b>To:</b> {payee_name}\n"
    if description:
        text += f"<b>Description:</b> {escape(description)}\n"

    await message.answer("Almost done.", reply_markup=get_main_menu_keyboard())
    await message.answer(
        text,
        reply_markup=get_confirmation_keyboard("repayment"),
        parse_mode="HTML"
    )


@router.callback_query(RepaymentForm.confirm, F.data.startswith(f"{CB_CONFIRM}:repayment:"))
async def callback_confirm_repayment(
        callback: CallbackQuery,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext,
        bot: Bot
):
    """Save the repayment."""
    if not await ensure_profile(callback, auth):
        return

    data = await state.get_data()
    await state.clear()

    from_profile = await ProfileService(session).get_profile(auth.profile_id)

    try:
        repayment = await RepaymentService(session).add_repayment(
            from_profile,
            Decimal(data["amount"]) if data.get("amount") else None,
            to_profile_id=uuid.UUID(data["to_user_id"]) if data.get("to_user_id") else None,
            description=data.get("description"),
            scheme=settings.settlement_scheme
        )
    except SplitterError as e:
        await callback.message.edit_text("❌ Repayment was not saved")
        await show_notification(callback, Notification.error(e.message, title=e.title))
        await callback.answer()
        return

    await callback.message.edit_text(
        format_repayment(repayment, settings.default_currency),
        parse_mode="HTML"
    )
    await show_notification(
        callback,
        Notification.success("Repayment added successfully!", "Balances have been updated.")
    )

    if not repayment.is_self_settlement:
        payee_chat_id = await ProfileService(session).get_telegram_user_id(repayment.to_user_id)
        if payee_chat_id and payee_chat_id != callback.from_user.id:
            await NotificationService(bot).notify(
                payee_chat_id,
                Notification(
                    title="Repayment received",
                    description=(
                        f"{escape(repayment.from_user.name)} paid you back "
                        f"{format_amount(repayment.amount, settings.default_currency)}."
                    )
                )
            )

    await callback.answer()
