"""Service for sending notifications."""

import logging
from dataclasses import dataclass

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from splitter.utils.constants import Severity

logger = logging.getLogger(__name__)

SEVERITY_ICONS = {
    Severity.DEFAULT: "ℹ️",
    Severity.SUCCESS: "✅",
    Severity.DESTRUCTIVE: "❌",
}


@dataclass(frozen=True)
class Notification:
    """Transient message shown after an action."""

    title: str
    description: str
    severity: Severity = Severity.DEFAULT

    def render(self) -> str:
        icon = SEVERITY_ICONS.get(self.severity, "ℹ️")
        return f"{icon} <b>{self.title}</b>\n{self.description}"

    @classmethod
    def error(cls, description: str, title: str = "Error") -> "Notification":
        return cls(title=title, description=description, severity=Severity.DESTRUCTIVE)

    @classmethod
    def success(cls, title: str, description: str) -> "Notification":
        return cls(title=title, description=description, severity=Severity.SUCCESS)


class NotificationService:
    """Service for sending notifications to users."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def notify(self, chat_id: int, notification: Notification) -> bool:
        """
        Send a notification to a chat.

        Delivery failures are logged and reported as False.
        """
        try:
            await self.bot.send_message(chat_id, notification.render(), parse_mode="HTML")
        except TelegramAPIError as e:
            # User might have blocked the bot or not started conversation
            logger.warning("Failed to send notification to %s: %s", chat_id, e)
            return False
        return True
