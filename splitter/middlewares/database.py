"""Database middleware for injecting session into handlers."""

from typing import Callable, Dict, Any, Awaitable, Optional

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from splitter.database.session import DatabaseSessionManager, sessionmanager


class DatabaseMiddleware(BaseMiddleware):
    """Middleware to open one database session per update.

    The session commits when the handler returns and rolls back when it
    raises, so a failed handler leaves no partial writes behind.
    """

    def __init__(self, manager: Optional[DatabaseSessionManager] = None):
        self.manager = manager or sessionmanager

    async def __call__(
            self,
            handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
            event: TelegramObject,
            data: Dict[str, Any],
    ) -> Any:
        async with self.manager.session() as session:
            data["session"] = session
            return await handler(event, data)
