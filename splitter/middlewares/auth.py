"""Authentication middleware."""

import logging
from typing import Callable, Dict, Any, Awaitable, Optional

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery

from splitter.services.auth_service import AuthService, AuthSession, SessionContext
from splitter.utils.constants import AuthEvent

logger = logging.getLogger(__name__)


def log_auth_change(event: AuthEvent, session: Optional[AuthSession]):
    """Log session state changes."""
    logger.debug(
        "Auth state change: %s %s",
        event.value,
        session.account_id if session else None
    )


class AuthMiddleware(BaseMiddleware):
    """Middleware to inject the session context of the current user."""

    async def __call__(
            self,
            handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
            event: TelegramObject,
            data: Dict[str, Any],
    ) -> Any:
        """
        Build the session context and inject user data.

        Args:
            handler: Handler function
            event: Telegram event
            data: Handler data dictionary

        Returns:
            Handler result
        """
        # Extract user from event
        user = None
        if isinstance(event, Message):
            user = event.from_user
        elif isinstance(event, CallbackQuery):
            user = event.from_user

        context = SessionContext()
        unsubscribe = context.subscribe(log_auth_change)

        if user:
            data["user_id"] = user.id
            data["username"] = user.username
            data["full_name"] = user.full_name
            await context.init(AuthService(data["session"]), user.id)

        data["auth"] = context
        try:
            return await handler(event, data)
        finally:
            unsubscribe()
            context.teardown()
