"""Handlers for start, help and cancel."""

from aiogram import Router, F
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, CallbackQuery

from splitter.keyboards.reply import get_main_menu_keyboard
from splitter.services.auth_service import SessionContext
from splitter.utils.constants import BTN_CANCEL, BTN_HELP, CB_CANCEL, MSG_HELP, MSG_WELCOME

router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message, auth: SessionContext):
    """Handle /start command."""
    text = MSG_WELCOME
    if auth.is_authenticated:
        text += f"\nWelcome back, <b>{auth.session.profile_name or auth.session.email}</b>!"

    await message.answer(
        text,
        reply_markup=get_main_menu_keyboard(),
        parse_mode="HTML"
    )


@router.message(Command("help"))
@router.message(F.text == BTN_HELP)
async def cmd_help(message: Message):
    """Handle /help command."""
    await message.answer(MSG_HELP, parse_mode="HTML")


@router.message(Command("cancel"))
@router.message(F.text == BTN_CANCEL)
async def cmd_cancel(message: Message, state: FSMContext):
    """Abort whatever form is in progress."""
    await state.clear()
    await message.answer("❌ Cancelled", reply_markup=get_main_menu_keyboard())


@router.callback_query(F.data.startswith(f"{CB_CANCEL}:"))
async def callback_cancel(callback: CallbackQuery, state: FSMContext):
    """Inline cancel button of any form."""
    await state.clear()
    await callback.message.edit_text("❌ Cancelled")
    await callback.answer()
