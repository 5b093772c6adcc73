"""Main entry point for the bot."""

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage
from aiogram.types import BotCommand
from redis.asyncio import Redis
from redis.exceptions import RedisError

from splitter.config.settings import settings
from splitter.database.session import sessionmanager
from splitter.handlers import start, auth, expense, repayment, balance
from splitter.middlewares import AuthMiddleware, DatabaseMiddleware, ErrorsMiddleware
from splitter.services.category_service import CategoryService
from splitter.utils.constants import (
    CMD_ADD_EXPENSE,
    CMD_BALANCE,
    CMD_EXPENSES,
    CMD_HELP,
    CMD_HISTORY,
    CMD_LOGIN,
    CMD_LOGOUT,
    CMD_REPAY,
    CMD_SIGNUP,
    CMD_START,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def on_startup(bot: Bot):
    """Actions to perform on bot startup."""
    logger.info("Bot starting up...")

    # Initialize database
    sessionmanager.init(
        settings.database_url,
        echo=settings.debug,
        pool_size=20,
        max_overflow=10
    )
    await sessionmanager.create_all()
    async with sessionmanager.session() as session:
        await CategoryService(session).ensure_default_categories()
    logger.info("Database session manager initialized")

    commands = [
        BotCommand(command=CMD_START, description="Start the bot"),
        BotCommand(command=CMD_HELP, description="Show help"),
        BotCommand(command=CMD_SIGNUP, description="Create an account"),
        BotCommand(command=CMD_LOGIN, description="Sign in"),
        BotCommand(command=CMD_LOGOUT, description="Sign out"),
        BotCommand(command=CMD_ADD_EXPENSE, description="Add an expense"),
        BotCommand(command=CMD_EXPENSES, description="This month's expenses"),
        BotCommand(command=CMD_HISTORY, description="Expenses of previous months"),
        BotCommand(command=CMD_REPAY, description="Record a repayment"),
        BotCommand(command=CMD_BALANCE, description="Show balances"),
    ]

    await bot.set_my_commands(commands)
    logger.info("Bot commands set")

    bot_info = await bot.get_me()
    logger.info("Bot started: @%s", bot_info.username)


async def on_shutdown(bot: Bot):
    """Actions to perform on bot shutdown."""
    logger.info("Bot shutting down...")

    await sessionmanager.close()
    logger.info("Database connections closed")


async def create_storage():
    """Use Redis for FSM data when it is reachable, memory otherwise."""
    redis = Redis.from_url(settings.redis_url)
    try:
        await redis.ping()
    except (RedisError, OSError) as e:
        logger.warning("Could not connect to Redis: %s. Using memory storage.", e)
        await redis.aclose()
        return MemoryStorage()

    logger.info("Using Redis storage for FSM")
    return RedisStorage(redis=redis)


async def main():
    """Main function to run the bot."""
    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )

    dp = Dispatcher(storage=await create_storage())

    # Errors outermost so commit failures are reported too
    for observer in (dp.message, dp.callback_query):
        observer.middleware(ErrorsMiddleware())
        observer.middleware(DatabaseMiddleware())
        observer.middleware(AuthMiddleware())

    dp.include_router(start.router)
    dp.include_router(auth.router)
    dp.include_router(expense.router)
    dp.include_router(repayment.router)
    dp.include_router(balance.router)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    try:
        logger.info("Starting bot polling...")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await dp.storage.close()
        await bot.session.close()


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    run()
