"""
Telegram-specific message formatters — HTML output.

Core services return records and report dicts. All HTML formatting
belongs here, never in core/.
"""

from html import escape

from tanktrack.core.categories import StageProfile
from tanktrack.core.completion_service import (
    STATUS_ICONS as TANK_STATUS_ICONS,
    TankStatus,
    color_status,
    has_completed_ladder_installation,
)
from tanktrack.core.group_service import display_stage
from tanktrack.core.records import Level, ProgressRecord, Tank
from tanktrack.core.stages import STATUS_ICONS, STATUS_LABELS, Stage, StageStatus

TANK_STATUS_LABELS: dict[TankStatus, str] = {
    TankStatus.COMPLETE: "Complete",
    TankStatus.IN_INSPECTION: "In inspection",
    TankStatus.IN_PROGRESS: "In progress",
}


# ── Tank formatting ───────────────────────────────────────────


def format_tank_header(tank: Tank, level: Level, sub_index: int | None = None) -> str:
    """Name, level, location, derived status and stage shown on the plan."""
    status = color_status(tank)
    stage = display_stage(tank, sub_index or 0)

    lines = [
        f"{TANK_STATUS_ICONS[status]} <b>{escape(tank.name or tank.id)}</b>",
        f"🏢 Level {level.label}" + (f" · 📍 {escape(tank.location)}" if tank.location else ""),
        f"Status: {TANK_STATUS_LABELS[status]}",
        f"Current stage: {stage.value if stage else '—'}",
    ]
    if has_completed_ladder_installation(tank):
        lines.append("🪜 Ladder installed")
    if tank.has_sub_tanks and sub_index is not None:
        sub = tank.sub_tanks[sub_index]
        lines.append(f"Sub-tank: <b>{escape(sub.name or sub.id)}</b>")
    return "\n".join(lines)


def format_stage_list(record: ProgressRecord, profile: StageProfile) -> str:
    """Applicable stages with status icons, in order."""
    lines = []
    for idx, stage in enumerate(profile.stages, start=1):
        status = record.status_of(stage)
        marker = " ◀" if stage == record.current_stage else ""
        lines.append(f"{STATUS_ICONS[status]} {idx}. {stage.value}{marker}")
    return "\n".join(lines)


def format_tank_detail(
    tank: Tank,
    level: Level,
    record: ProgressRecord,
    profile: StageProfile,
    sub_index: int | None = None,
) -> str:
    return "\n".join([
        format_tank_header(tank, level, sub_index),
        "",
        format_stage_list(record, profile),
        "",
        "<i>Tap a stage to complete it. Tap a completed stage to undo.</i>",
    ])


def format_undo_prompt(record: ProgressRecord, stage: Stage) -> str:
    return (
        f"↩️ Undo <b>{stage.value}</b> on <b>{escape(record.name or record.id)}</b>?\n"
        f"It goes back to {STATUS_LABELS[StageStatus.IN_PROGRESS]} "
        "and every later stage is reset."
    )


# ── Report formatting ─────────────────────────────────────────


def format_inspection_report(report: dict) -> str:
    """Tanks ready for inspection, grouped by level."""
    lines = [f"🔍 <b>Ready for inspection: {report['total']}</b>"]

    for label, items in report["levels"].items():
        if not items:
            continue
        lines.append("")
        lines.append(f"<b>{label}</b>")
        for item in items:
            if item["sub_tanks"]:
                lines.append(f"  🟣 {escape(item['id'])}")
                for sub in item["sub_tanks"]:
                    lines.append(f"      {escape(sub['name'] or sub['id'])} · {sub['stage'] or '—'}")
                continue
            stage = item["stage"] or "—"
            lines.append(f"  🟣 {escape(item['id'])} · {stage}")

    if report["total"] == 0:
        lines.append("")
        lines.append("No tanks are waiting for inspection.")
    return "\n".join(lines)


def format_status_report(report: dict) -> str:
    """Per-level counts plus overall completion."""
    lines = [
        "📊 <b>Progress overview</b>",
        f"Complete: {report['completed']}/{report['total']} ({report['progress_pct']:.0f}%)",
    ]
    for label, counts in report["levels"].items():
        if counts["total"] == 0:
            continue
        lines.append("")
        lines.append(f"<b>{label}</b> · {counts['total']} tank(s)")
        lines.append(
            f"  {TANK_STATUS_ICONS[TankStatus.COMPLETE]} {counts[TankStatus.COMPLETE.value]}"
            f"  {TANK_STATUS_ICONS[TankStatus.IN_INSPECTION]} {counts[TankStatus.IN_INSPECTION.value]}"
            f"  {TANK_STATUS_ICONS[TankStatus.IN_PROGRESS]} {counts[TankStatus.IN_PROGRESS.value]}"
            f"  🪜 {counts['ladders_installed']}"
        )
    return "\n".join(lines)
