"""Middleware turning database failures into notifications."""

import logging
from typing import Callable, Dict, Any, Awaitable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery
from sqlalchemy.exc import SQLAlchemyError

from splitter.services.notification_service import Notification

logger = logging.getLogger(__name__)


class ErrorsMiddleware(BaseMiddleware):
    """Middleware to report backend failures to the user."""

    async def __call__(
            self,
            handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
            event: TelegramObject,
            data: Dict[str, Any],
    ) -> Any:
        try:
            return await handler(event, data)
        except SQLAlchemyError:
            logger.exception("Database error while handling %s", type(event).__name__)

        notification = Notification.error("Something went wrong while talking to the database. Please try again.")

        if isinstance(event, CallbackQuery):
            await event.answer(notification.title, show_alert=False)
            if event.message:
                await event.message.answer(notification.render(), parse_mode="HTML")
        elif isinstance(event, Message):
            await event.answer(notification.render(), parse_mode="HTML")

        return None
