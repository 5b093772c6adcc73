"""Tests for notifications and the update middlewares."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message, User
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from splitter.database.models import Profile
from splitter.database.session import DatabaseSessionManager
from splitter.middlewares import AuthMiddleware, DatabaseMiddleware, ErrorsMiddleware
from splitter.services.auth_service import AuthService
from splitter.services.notification_service import Notification, NotificationService
from splitter.utils.constants import Severity


def make_message(user_id=7):
    message = MagicMock(spec=Message)
    message.from_user = User(id=user_id, is_bot=False, first_name="Dana", username="dana")
    message.answer = AsyncMock()
    return message


class TestNotification:

    def test_render(self):
        notification = Notification.success("Expense Added", "Rent has been recorded.")

        assert notification.severity == Severity.SUCCESS
        assert notification.render() == "✅ <b>Expense Added</b>\nRent has been recorded."

    def test_error_defaults(self):
        notification = Notification.error("Please fill in all required fields")

        assert notification.title == "Error"
        assert notification.severity == Severity.DESTRUCTIVE
        assert notification.render().startswith("❌")


class TestNotificationService:

    async def test_notify(self):
        bot = MagicMock()
        bot.send_message = AsyncMock()

        assert await NotificationService(bot).notify(1, Notification("Hi", "there"))
        bot.send_message.assert_awaited_once_with(1, "ℹ️ <b>Hi</b>\nthere", parse_mode="HTML")

    async def test_delivery_failure(self):
        bot = MagicMock()
        bot.send_message = AsyncMock(side_effect=TelegramAPIError(MagicMock(), "Forbidden: bot was blocked"))

        assert await NotificationService(bot).notify(1, Notification("Hi", "there")) is False


class TestErrorsMiddleware:

    async def test_passes_result_through(self):
        handler = AsyncMock(return_value="ok")

        assert await ErrorsMiddleware()(handler, make_message(), {}) == "ok"

    async def test_reports_database_errors(self):
        message = make_message()
        handler = AsyncMock(side_effect=SQLAlchemyError("connection lost"))

        assert await ErrorsMiddleware()(handler, message, {}) is None
        message.answer.assert_awaited_once()
        assert message.answer.await_args.args[0].startswith("❌")

    async def test_other_errors_propagate(self):
        handler = AsyncMock(side_effect=KeyError("boom"))

        with pytest.raises(KeyError):
            await ErrorsMiddleware()(handler, make_message(), {})


@pytest.fixture
async def manager():
    manager = DatabaseSessionManager()
    manager.init(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    await manager.create_all()
    yield manager
    await manager.close()


class TestDatabaseMiddleware:

    async def _count_profiles(self, manager):
        async with manager.session() as session:
            return await session.scalar(select(func.count()).select_from(Profile))

    async def test_commits_on_success(self, manager):
        async def handler(event, data):
            data["session"].add(Profile(name="Alice"))

        await DatabaseMiddleware(manager)(handler, make_message(), {})

        assert await self._count_profiles(manager) == 1

    async def test_rolls_back_on_error(self, manager):
        async def handler(event, data):
            data["session"].add(Profile(name="Alice"))
            await data["session"].flush()
            raise RuntimeError("handler failed")

        with pytest.raises(RuntimeError):
            await DatabaseMiddleware(manager)(handler, make_message(), {})

        assert await self._count_profiles(manager) == 0


class TestAuthMiddleware:

    async def test_injects_signed_in_context(self, session, account_with_profile):
        await AuthService(session).sign_in("dana@example.com", "secret1", 7)
        seen = {}

        async def handler(event, data):
            seen.update(data)
            return data["auth"].is_authenticated

        result = await AuthMiddleware()(handler, make_message(7), {"session": session})

        assert result is True
        assert seen["user_id"] == 7
        assert seen["username"] == "dana"
        assert seen["auth"].profile_id == account_with_profile.profile.id

    async def test_anonymous_user(self, session):
        async def handler(event, data):
            return data["auth"]

        context = await AuthMiddleware()(handler, make_message(8), {"session": session})

        assert not context.is_authenticated
        assert not context.loading


async def test_session_manager_requires_init():
    manager = DatabaseSessionManager()

    with pytest.raises(RuntimeError):
        async with manager.session():
            pass

    await manager.close()
