"""
Telegram inline keyboard builders for browsing tanks and updating stages.

These helpers produce aiogram InlineKeyboardMarkup objects. They are
Telegram-specific and belong in the adapter layer.

Callback data stays short (Telegram allows 64 bytes): the selected level,
tank and sub-tank live in FSM data, and stages are referenced by their
catalog index.
"""

from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from tanktrack.core.categories import StageProfile
from tanktrack.core.completion_service import STATUS_ICONS as TANK_STATUS_ICONS
from tanktrack.core.completion_service import color_status, has_completed_ladder_installation
from tanktrack.core.records import Level, ProgressRecord, Tank
from tanktrack.core.stages import STATUS_ICONS, catalog_index

LADDER_ICON = "🪜"


def levels_keyboard(counts: dict[Level, int] | None = None) -> InlineKeyboardMarkup:
    """One button per building level, two per row."""
    counts = counts or {}
    buttons = [
        InlineKeyboardButton(
            text=f"🏢 {level.label} ({counts.get(level, 0)})",
            callback_data=f"level:{level.label}",
        )
        for level in Level
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def tank_button_text(tank: Tank) -> str:
    """Status colour icon, tank id, and a ladder mark when installed."""
    icon = TANK_STATUS_ICONS[color_status(tank)]
    ladder = f" {LADDER_ICON}" if has_completed_ladder_installation(tank) else ""
    return f"{icon} {tank.id}{ladder}"


def tanks_keyboard(tanks: Sequence[Tank]) -> InlineKeyboardMarkup:
    """Tanks of one level, one per row, with a back button."""
    rows = [
        [InlineKeyboardButton(text=tank_button_text(tank), callback_data=f"tank:{tank.id}")]
        for tank in tanks
    ]
    rows.append([InlineKeyboardButton(text="↩️ Levels", callback_data="nav:levels")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def sub_tanks_keyboard(tank: Tank) -> InlineKeyboardMarkup:
    """Pick the active sub-tank of a grouped tank."""
    rows = []
    for idx, sub in enumerate(tank.sub_tanks):
        stage = sub.current_stage.value if sub.current_stage else "—"
        rows.append([
            InlineKeyboardButton(
                text=f"{sub.name or sub.id} · {stage}",
                callback_data=f"sub:{idx}",
            )
        ])
    rows.append([InlineKeyboardButton(text="↩️ Tanks", callback_data="nav:tanks")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def stages_keyboard(
    record: ProgressRecord,
    profile: StageProfile,
    grouped: bool = False,
) -> InlineKeyboardMarkup:
    """
    Applicable stages with status icons.

    Tapping a stage advances it; tapping a completed stage asks to undo it.
    """
    rows: list[list[InlineKeyboardButton]] = []
    for stage in profile.stages:
        icon = STATUS_ICONS[record.status_of(stage)]
        rows.append([
            InlineKeyboardButton(
                text=f"{icon} {stage.value}",
                callback_data=f"stage:{catalog_index(stage)}",
            )
        ])

    back = "nav:subs" if grouped else "nav:tanks"
    rows.append([InlineKeyboardButton(text="↩️ Back", callback_data=back)])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def confirm_undo_keyboard() -> InlineKeyboardMarkup:
    """Yes / No for reopening a completed stage."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [
            InlineKeyboardButton(text="✅ Yes, undo", callback_data="undo:yes"),
            InlineKeyboardButton(text="❌ No", callback_data="undo:no"),
        ],
    ])
