"""Helpers shared by handlers."""

from typing import Union

from aiogram.types import CallbackQuery, Message

from splitter.services.auth_service import SessionContext
from splitter.services.notification_service import Notification
from splitter.utils.constants import ERR_LOGIN_REQUIRED, ERR_NO_PROFILE


async def ensure_profile(event: Union[Message, CallbackQuery], auth: SessionContext) -> bool:
    """Answer with an error unless the user is signed in with a profile."""
    if not auth.is_authenticated:
        text = ERR_LOGIN_REQUIRED
    elif auth.profile_id is None:
        text = ERR_NO_PROFILE
    else:
        return True

    if isinstance(event, CallbackQuery):
        await event.answer(text, show_alert=True)
    else:
        await event.answer(text)
    return False


async def show_notification(event: Union[Message, CallbackQuery], notification: Notification, **kwargs):
    """Send a notification as a reply to the event."""
    message = event.message if isinstance(event, CallbackQuery) else event
    await message.answer(notification.render(), parse_mode="HTML", **kwargs)
