"""Handlers for sign-up, login and logout."""

import logging

from aiogram import Router
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from splitter.handlers.common import show_notification
from splitter.keyboards.reply import get_cancel_keyboard, get_main_menu_keyboard
from splitter.services.auth_service import AuthService, SessionContext
from splitter.services.notification_service import Notification
from splitter.states.forms import LoginForm, SignUpForm
from splitter.utils.exceptions import AuthError
from splitter.utils.validators import validate_email, validate_name, validate_password

logger = logging.getLogger(__name__)

router = Router()


async def _delete_secret(message: Message):
    """Remove a message containing a password from the chat."""
    try:
        await message.delete()
    except TelegramAPIError as e:
        logger.warning("Could not delete password message: %s", e)


@router.message(Command("signup"))
async def cmd_signup(message: Message, state: FSMContext, auth: SessionContext):
    """Start creating an account."""
    if auth.is_authenticated:
        await message.answer(f"You are already signed in as {auth.session.email}. Use /logout first.")
        return

    await state.set_state(SignUpForm.email)
    await message.answer(
        "📝 <b>Create account</b>\n\nEnter your email:",
        reply_markup=get_cancel_keyboard(),
        parse_mode="HTML"
    )


@router.message(SignUpForm.email)
async def process_signup_email(message: Message, state: FSMContext):
    is_valid, email, error = validate_email(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(email=email)
    await state.set_state(SignUpForm.name)
    await message.answer("👤 What's your name? Your roommates will see it.")


@router.message(SignUpForm.name)
async def process_signup_name(message: Message, state: FSMContext):
    is_valid, error = validate_name(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(name=message.text.strip())
    await state.set_state(SignUpForm.password)
    await message.answer("🔑 Choose a password (at least 6 characters):")


@router.message(SignUpForm.password)
async def process_signup_password(
        message: Message,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext,
        user_id: int
):
    password = message.text or ""
    await _delete_secret(message)

    is_valid, error = validate_password(password)
    if not is_valid:
        await message.answer(error)
        return

    data = await state.get_data()
    await state.clear()

    try:
        auth_session = await AuthService(session).sign_up(
            data.get("email"),
            password,
            data.get("name"),
            telegram_user_id=user_id
        )
    except AuthError as e:
        await show_notification(
            message,
            Notification.error(e.message, title=e.title),
            reply_markup=get_main_menu_keyboard()
        )
        return

    auth.set_session(auth_session)
    await show_notification(
        message,
        Notification.success("Account created", f"Welcome, {auth_session.profile_name}!"),
        reply_markup=get_main_menu_keyboard()
    )


@router.message(Command("login"))
async def cmd_login(message: Message, state: FSMContext):
    """Start signing in."""
    await state.set_state(LoginForm.email)
    await message.answer(
        "🔐 <b>Sign in</b>\n\nEnter your email:",
        reply_markup=get_cancel_keyboard(),
        parse_mode="HTML"
    )


@router.message(LoginForm.email)
async def process_login_email(message: Message, state: FSMContext):
    is_valid, email, error = validate_email(message.text)
    if not is_valid:
        await message.answer(error)
        return

    await state.update_data(email=email)
    await state.set_state(LoginForm.password)
    await message.answer("🔑 Enter your password:")


@router.message(LoginForm.password)
async def process_login_password(
        message: Message,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext,
        user_id: int
):
    password = message.text or ""
    await _delete_secret(message)

    data = await state.get_data()
    await state.clear()

    try:
        auth_session = await AuthService(session).sign_in(data.get("email"), password, user_id)
    except AuthError as e:
        await show_notification(
            message,
            Notification.error(e.message, title=e.title),
            reply_markup=get_main_menu_keyboard()
        )
        return

    auth.set_session(auth_session)
    await show_notification(
        message,
        Notification.success(
            "Signed in",
            f"Welcome, {auth_session.profile_name or auth_session.email}!"
        ),
        reply_markup=get_main_menu_keyboard()
    )


@router.message(Command("logout"))
async def cmd_logout(
        message: Message,
        state: FSMContext,
        session: AsyncSession,
        auth: SessionContext,
        user_id: int
):
    """Sign out."""
    await state.clear()

    if not auth.is_authenticated:
        await message.answer("You are not signed in.")
        return

    await AuthService(session).sign_out(user_id)
    auth.clear()
    await message.answer("👋 Signed out. Use /login to sign in again.")
