"""
Telegram handlers for reports.

Commands:
  /inspection — tanks ready for inspection, per level
  /status     — progress overview per level
  /export     — progress spreadsheet as a CSV document
"""

import logging
from datetime import datetime, timezone

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import BufferedInputFile, Message

from tanktrack.adapters.telegram.formatters import format_inspection_report, format_status_report
from tanktrack.core.report_service import (
    build_inspection_report,
    build_status_report,
    export_progress_csv,
)
from tanktrack.db.repositories import get_tanks_data
from tanktrack.db.session import async_session_factory

logger = logging.getLogger(__name__)
router = Router(name="reports")


@router.message(Command("inspection"))
async def cmd_inspection(message: Message) -> None:
    """/inspection — tanks at an inspection stage and not yet complete."""
    async with async_session_factory() as session:
        data = await get_tanks_data(session)
    await message.answer(format_inspection_report(build_inspection_report(data)))


@router.message(Command("status"))
async def cmd_status(message: Message) -> None:
    """/status — counts per level and overall completion."""
    async with async_session_factory() as session:
        data = await get_tanks_data(session)
    await message.answer(format_status_report(build_status_report(data)))


@router.message(Command("export"))
async def cmd_export(message: Message) -> None:
    """/export — one row per tank / sub-tank, one column per stage."""
    async with async_session_factory() as session:
        data = await get_tanks_data(session)

    stamp = datetime.now(tz=timezone.utc).strftime("%Y-%m-%d")
    document = BufferedInputFile(
        export_progress_csv(data).encode("utf-8"),
        filename=f"tank-progress-{stamp}.csv",
    )
    await message.answer_document(document, caption="📄 Tank progress")
    logger.info("Progress export sent to chat %d", message.chat.id)
