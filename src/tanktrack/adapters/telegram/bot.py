"""
Telegram adapter — implements PlatformAdapter using aiogram 3.x.

Runs a single bot identity from TELEGRAM_BOT_TOKEN in polling mode.
"""

import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.types import BotCommand

from tanktrack.adapters.base import PlatformAdapter
from tanktrack.adapters.telegram.handlers import router as handlers_router
from tanktrack.adapters.telegram.report_handlers import router as report_router
from tanktrack.adapters.telegram.tank_handlers import router as tank_router
from tanktrack.config import settings

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand(command="tanks", description="Browse tanks and update progress"),
    BotCommand(command="inspection", description="Tanks ready for inspection"),
    BotCommand(command="status", description="Progress overview"),
    BotCommand(command="export", description="Progress spreadsheet (CSV)"),
    BotCommand(command="help", description="Help"),
]


class TelegramAdapter(PlatformAdapter):
    """Telegram implementation of the platform adapter."""

    def __init__(self) -> None:
        self.dp = Dispatcher()
        self._bot: Bot | None = None
        self._register_routers()

    def _register_routers(self) -> None:
        """Attach all handler routers to the dispatcher."""
        self.dp.include_router(handlers_router)
        self.dp.include_router(tank_router)
        self.dp.include_router(report_router)

    async def start(self) -> None:
        """Start polling for Telegram updates."""
        if not settings.telegram_bot_token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is not set in .env")

        logger.info("Starting Telegram bot (polling mode)...")
        self._bot = Bot(
            token=settings.telegram_bot_token,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        )
        me = await self._bot.me()
        logger.info("Bot identity: @%s (id=%d)", me.username, me.id)

        try:
            await self._bot.set_my_commands(BOT_COMMANDS)
        except Exception as e:
            logger.warning("Failed to set bot commands: %s", e)

        await self.dp.start_polling(self._bot)

    async def stop(self) -> None:
        """Close the bot session."""
        logger.info("Stopping Telegram bot...")
        if self._bot is not None:
            await self._bot.session.close()
