"""Bot process entrypoint."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.types import BotCommand

from src.app import create_app
from src.bot.router import router
from src.config.logging import configure_logging
from src.config.settings import load_settings

logger = logging.getLogger(__name__)

BOT_COMMANDS: tuple[BotCommand, ...] = (
    BotCommand(command="analyze", description="Analyze and store a string"),
    BotCommand(command="get", description="Show a stored string"),
    BotCommand(command="list", description="List strings (key=value filters)"),
    BotCommand(command="delete", description="Delete a stored string"),
    BotCommand(command="help", description="Usage"),
)


async def main() -> None:
    """Open the DB pool, publish the command menu and run the polling loop."""

    settings = load_settings()
    configure_logging()

    app = create_app(settings)
    await app.pool.open(wait=True)

    bot = Bot(token=settings.telegram_bot_token, default=DefaultBotProperties(parse_mode=None))
    dp = Dispatcher()
    dp.include_router(router)

    try:
        await bot.set_my_commands(list(BOT_COMMANDS))
        logger.info("starting polling pool_max_size=%d", settings.db_pool_max_size)
        await dp.start_polling(bot, app=app)
    finally:
        logger.info("shutting down")
        await app.pool.close()


def run() -> None:
    """Console-script entry point."""

    asyncio.run(main())


if __name__ == "__main__":
    run()
