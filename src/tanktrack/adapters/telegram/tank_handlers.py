"""
Telegram handlers for browsing tanks and updating stage progress.

Commands:
  /tanks — pick a level, then a tank (and a sub-tank for grouped tanks)

The stage keyboard is the progress editor: tapping the open stage
completes it, tapping a completed stage asks for confirmation and then
reopens it. Everything else is ignored. All decisions come from
tanktrack.core.group_service; this module only loads, saves and renders.
"""

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from tanktrack.adapters.telegram.formatters import format_tank_detail, format_undo_prompt
from tanktrack.adapters.telegram.fsm_states import TankBrowsing
from tanktrack.adapters.telegram.keyboards import (
    confirm_undo_keyboard,
    levels_keyboard,
    stages_keyboard,
    sub_tanks_keyboard,
    tanks_keyboard,
)
from tanktrack.core.group_service import (
    advance_tank,
    click_action,
    profile_for,
    undo_tank,
)
from tanktrack.core.progress_service import ClickAction
from tanktrack.core.records import Level, Tank
from tanktrack.core.stages import STAGE_CATALOG, Stage
from tanktrack.db.repositories import get_level_tanks, get_tank, get_tanks_data, save_tank
from tanktrack.db.session import async_session_factory

logger = logging.getLogger(__name__)
router = Router(name="tanks")

SESSION_EXPIRED = "❌ Selection expired. Send /tanks again."


# ═══════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════


async def _selection(state: FSMContext) -> tuple[Level | None, str | None, int | None]:
    """Level, tank id and sub-tank index stored in FSM data."""
    data = await state.get_data()
    level = Level(data["level"]) if data.get("level") else None
    return level, data.get("tank_id"), data.get("sub_index")


async def _show_levels(target: Message, state: FSMContext, edit: bool = False) -> None:
    async with async_session_factory() as session:
        data = await get_tanks_data(session)

    counts = {level: len(data.for_level(level)) for level in Level}
    text = "🏢 <b>Select a level</b>"
    if edit:
        await target.edit_text(text, reply_markup=levels_keyboard(counts))
    else:
        await target.answer(text, reply_markup=levels_keyboard(counts))

    await state.set_state(TankBrowsing.selecting_level)
    await state.set_data({})


async def _show_tanks(target: Message, state: FSMContext, level: Level) -> None:
    async with async_session_factory() as session:
        tanks = await get_level_tanks(session, level)

    text = f"🏢 <b>Level {level.label}</b>\n\n"
    text += "Select a tank:" if tanks else "No tanks on this level."
    await target.edit_text(text, reply_markup=tanks_keyboard(tanks))

    await state.set_state(TankBrowsing.selecting_tank)
    await state.update_data(level=level.value, tank_id=None, sub_index=None)


async def _show_sub_tanks(target: Message, state: FSMContext, tank: Tank) -> None:
    await target.edit_text(
        f"🧩 <b>{tank.name or tank.id}</b>\n\nThis tank has {len(tank.sub_tanks)} sub-tanks. "
        "Select one:",
        reply_markup=sub_tanks_keyboard(tank),
    )
    await state.set_state(TankBrowsing.selecting_sub_tank)
    await state.update_data(tank_id=tank.id, sub_index=None)


async def _show_stages(
    target: Message,
    state: FSMContext,
    level: Level,
    tank: Tank,
    sub_index: int | None,
) -> None:
    record = tank.sub_tanks[sub_index] if sub_index is not None else tank
    profile = profile_for(tank, sub_index)

    await target.edit_text(
        format_tank_detail(tank, level, record, profile, sub_index),
        reply_markup=stages_keyboard(record, profile, grouped=tank.has_sub_tanks),
    )
    await state.set_state(TankBrowsing.viewing_stages)
    await state.update_data(tank_id=tank.id, sub_index=sub_index, pending_stage=None)


# ═══════════════════════════════════════════════════════════════
# ENTRY POINT & NAVIGATION
# ═══════════════════════════════════════════════════════════════


@router.message(Command("tanks"))
async def cmd_tanks(message: Message, state: FSMContext) -> None:
    """/tanks — start browsing at the level list."""
    await state.clear()
    await _show_levels(message, state)


@router.callback_query(F.data.startswith("level:"))
async def select_level(callback: CallbackQuery, state: FSMContext) -> None:
    await callback.answer()
    level = Level(callback.data.split(":", 1)[1])  # type: ignore[union-attr]
    await _show_tanks(callback.message, state, level)  # type: ignore[arg-type]


@router.callback_query(F.data.startswith("tank:"))
async def select_tank(callback: CallbackQuery, state: FSMContext) -> None:
    tank_id = callback.data.split(":", 1)[1]  # type: ignore[union-attr]
    level, _, _ = await _selection(state)
    if level is None:
        await callback.answer(SESSION_EXPIRED, show_alert=True)
        return

    async with async_session_factory() as session:
        tank = await get_tank(session, level, tank_id)
    if tank is None:
        await callback.answer("❌ Tank not found", show_alert=True)
        return

    await callback.answer()
    if tank.has_sub_tanks:
        await _show_sub_tanks(callback.message, state, tank)  # type: ignore[arg-type]
    else:
        await _show_stages(callback.message, state, level, tank, None)  # type: ignore[arg-type]


@router.callback_query(F.data.startswith("sub:"))
async def select_sub_tank(callback: CallbackQuery, state: FSMContext) -> None:
    sub_index = int(callback.data.split(":", 1)[1])  # type: ignore[union-attr]
    level, tank_id, _ = await _selection(state)
    if level is None or tank_id is None:
        await callback.answer(SESSION_EXPIRED, show_alert=True)
        return

    async with async_session_factory() as session:
        tank = await get_tank(session, level, tank_id)
    if tank is None or not 0 <= sub_index < len(tank.sub_tanks):
        await callback.answer("❌ Sub-tank not found", show_alert=True)
        return

    await callback.answer()
    await _show_stages(callback.message, state, level, tank, sub_index)  # type: ignore[arg-type]


@router.callback_query(F.data.startswith("nav:"))
async def navigate_back(callback: CallbackQuery, state: FSMContext) -> None:
    """Back buttons: nav:levels, nav:tanks, nav:subs."""
    await callback.answer()
    target = callback.data.split(":", 1)[1]  # type: ignore[union-attr]
    level, tank_id, _ = await _selection(state)

    if target == "levels" or level is None:
        await _show_levels(callback.message, state, edit=True)  # type: ignore[arg-type]
        return

    if target == "subs" and tank_id is not None:
        async with async_session_factory() as session:
            tank = await get_tank(session, level, tank_id)
        if tank is not None and tank.has_sub_tanks:
            await _show_sub_tanks(callback.message, state, tank)  # type: ignore[arg-type]
            return

    await _show_tanks(callback.message, state, level)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════
# STAGE TAPS: ADVANCE / UNDO
# ═══════════════════════════════════════════════════════════════


@router.callback_query(TankBrowsing.viewing_stages, F.data.startswith("stage:"))
async def tap_stage(callback: CallbackQuery, state: FSMContext) -> None:
    """Advance the open stage, or ask to undo a completed one."""
    idx = int(callback.data.split(":", 1)[1])  # type: ignore[union-attr]
    if not 0 <= idx < len(STAGE_CATALOG):
        await callback.answer()
        return
    stage = STAGE_CATALOG[idx]

    level, tank_id, sub_index = await _selection(state)
    if level is None or tank_id is None:
        await callback.answer(SESSION_EXPIRED, show_alert=True)
        return

    async with async_session_factory() as session:
        tank = await get_tank(session, level, tank_id)
        if tank is None:
            await callback.answer("❌ Tank not found", show_alert=True)
            return

        action = click_action(tank, stage, sub_index)

        if action is ClickAction.ADVANCE:
            updated = advance_tank(tank, stage, sub_index)
            await save_tank(session, level, updated)
            await session.commit()
            await callback.answer(f"✅ {stage.value} completed")
            await _show_stages(callback.message, state, level, updated, sub_index)  # type: ignore[arg-type]
            return

    if action is ClickAction.CONFIRM_UNDO:
        await callback.answer()
        record = tank.sub_tanks[sub_index] if sub_index is not None else tank
        await state.set_state(TankBrowsing.confirming_undo)
        await state.update_data(pending_stage=stage.value)
        await callback.message.edit_text(  # type: ignore[union-attr]
            format_undo_prompt(record, stage),
            reply_markup=confirm_undo_keyboard(),
        )
        return

    await callback.answer("Complete the earlier stages first.")


@router.callback_query(TankBrowsing.confirming_undo, F.data.startswith("undo:"))
async def confirm_undo(callback: CallbackQuery, state: FSMContext) -> None:
    answer = callback.data.split(":", 1)[1]  # type: ignore[union-attr]
    level, tank_id, sub_index = await _selection(state)
    pending = (await state.get_data()).get("pending_stage")
    if level is None or tank_id is None:
        await callback.answer(SESSION_EXPIRED, show_alert=True)
        return

    async with async_session_factory() as session:
        tank = await get_tank(session, level, tank_id)
        if tank is None:
            await callback.answer("❌ Tank not found", show_alert=True)
            return

        if answer == "yes" and pending:
            stage = Stage(pending)
            updated = undo_tank(tank, stage, sub_index)
            if updated is not tank:
                await save_tank(session, level, updated)
                await session.commit()
                logger.info(
                    "Undo by tg_id=%d: %s %s", callback.from_user.id, tank_id, stage.value,
                )
            tank = updated
            await callback.answer(f"↩️ {stage.value} reopened")
        else:
            await callback.answer("Cancelled")

    await _show_stages(callback.message, state, level, tank, sub_index)  # type: ignore[arg-type]
