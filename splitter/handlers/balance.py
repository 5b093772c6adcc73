"""Handlers for balances and dashboard totals."""

from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from splitter.config.settings import settings
from splitter.handlers.common import ensure_profile
from splitter.services.auth_service import SessionContext
from splitter.services.calculation_service import CalculationService
from splitter.utils.constants import BTN_BALANCE
from splitter.utils.formatters import format_balances, format_dashboard_stats

router = Router()


@router.message(Command("balance"))
@router.message(F.text == BTN_BALANCE)
async def cmd_balance(
        message: Message,
        session: AsyncSession,
        auth: SessionContext
):
    """Show dashboard totals and everyone's balance."""
    if not await ensure_profile(message, auth):
        return

    calculation_service = CalculationService(session)
    stats = await calculation_service.get_dashboard_stats()
    balances = await calculation_service.get_user_balances()

    text = format_dashboard_stats(stats, settings.default_currency)
    text += "\n"
    text += format_balances(balances, settings.default_currency, calculation_service.group_size)

    await message.answer(text, parse_mode="HTML")
