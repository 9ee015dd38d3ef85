"""
Telegram message handlers — welcome and help.

Tank browsing lives in tank_handlers, reports in report_handlers.
"""

import logging

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

logger = logging.getLogger(__name__)
router = Router(name="telegram_handlers")

HELP_TEXT = (
    "<b>Commands:</b>\n"
    "/tanks — browse levels and update stage progress\n"
    "/inspection — tanks ready for inspection\n"
    "/status — progress overview per level\n"
    "/export — progress spreadsheet (CSV)\n"
    "/help — this message"
)


@router.message(CommandStart())
async def handle_start(message: Message) -> None:
    """Handle /start — greet the user and list the commands."""
    tg_user = message.from_user
    if tg_user is not None:
        logger.info("/start from %s (tg_id=%d)", tg_user.full_name, tg_user.id)

    await message.answer(
        "👋 <b>Tank progress tracker</b>\n\n"
        "Track stage-by-stage progress of every tank on site.\n\n"
        + HELP_TEXT
    )


@router.message(Command("help"))
async def handle_help(message: Message) -> None:
    await message.answer(HELP_TEXT)
