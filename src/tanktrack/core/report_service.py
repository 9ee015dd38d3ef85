"""
Core report service — platform-agnostic.

Builds structured report data from the tanks of every level. Platform
adapters (HTTP API, Telegram) consume the report dicts and format them
into their own markup.

This module never imports platform-specific code.
"""

import csv
import io
import logging
from datetime import datetime, timezone

from tanktrack.core.completion_service import (
    TankStatus,
    color_status,
    has_completed_ladder_installation,
    is_ready_for_inspection,
    record_completed,
    record_in_inspection,
)
from tanktrack.core.group_service import display_stage, iter_entities
from tanktrack.core.records import Level, Tank, TanksData
from tanktrack.core.stages import STAGE_CATALOG

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "N/A"


# ── Report types ─────────────────────────────────────────────


def _ready_sub_tanks(tank: Tank) -> list[dict]:
    """Sub-tanks of a grouped tank that are waiting for inspection."""
    ready = [
        record
        for record, profile in iter_entities(tank)
        if record_in_inspection(record) and not record_completed(record, profile)
    ]
    return [
        {
            "id": record.id,
            "name": record.name,
            "stage": record.current_stage.value if record.current_stage else None,
        }
        for record in ready
    ]


def build_inspection_report(data: TanksData) -> dict:
    """
    Tanks ready for inspection, per level.

    Returns:
    {
        "generated_at": datetime,
        "levels": {"N00": [ {id, name, type, location, stage, sub_tanks}, ... ], ...},
        "total": int,
    }
    Every level appears, even when empty. For grouped tanks `sub_tanks`
    lists each sub-tank waiting for inspection and `stage` is the first
    of them; plain tanks have an empty `sub_tanks`.
    """
    levels: dict[str, list[dict]] = {level.label: [] for level in Level}

    for level, tank in data.iter_tanks():
        if not is_ready_for_inspection(tank):
            continue
        sub_tanks = _ready_sub_tanks(tank) if tank.has_sub_tanks else []
        if sub_tanks:
            stage_value = sub_tanks[0]["stage"]
        else:
            stage = display_stage(tank)
            stage_value = stage.value if stage else None
        levels[level.label].append({
            "id": tank.id,
            "name": tank.name,
            "type": tank.type,
            "location": tank.location,
            "stage": stage_value,
            "sub_tanks": sub_tanks,
        })

    total = sum(len(items) for items in levels.values())
    logger.debug("Inspection report: %d tank(s) ready", total)
    return {
        "generated_at": datetime.now(tz=timezone.utc),
        "levels": levels,
        "total": total,
    }


def build_status_report(data: TanksData) -> dict:
    """
    Counts per status for each level plus overall completion.

    Returns:
    {
        "generated_at": datetime,
        "levels": {"N00": {"total": int, "complete": int, "in_inspection": int,
                           "in_progress": int, "ladders_installed": int}, ...},
        "total": int,
        "completed": int,
        "progress_pct": float,
    }
    """
    levels: dict[str, dict[str, int]] = {}
    for level in Level:
        counts = {"total": 0, "ladders_installed": 0}
        counts.update({status.value: 0 for status in TankStatus})
        levels[level.label] = counts

    for level, tank in data.iter_tanks():
        counts = levels[level.label]
        counts["total"] += 1
        counts[color_status(tank).value] += 1
        if has_completed_ladder_installation(tank):
            counts["ladders_installed"] += 1

    total = sum(c["total"] for c in levels.values())
    completed = sum(c[TankStatus.COMPLETE.value] for c in levels.values())
    progress_pct = (completed / total * 100) if total > 0 else 0

    return {
        "generated_at": datetime.now(tz=timezone.utc),
        "levels": levels,
        "total": total,
        "completed": completed,
        "progress_pct": progress_pct,
    }


# ── Spreadsheet export ───────────────────────────────────────

EXPORT_HEADER: list[str] = ["Level", "Type of Tank", "ID", *(s.value for s in STAGE_CATALOG)]


def export_progress_rows(data: TanksData) -> list[list[str]]:
    """One row per tank (or per sub-tank for grouped tanks)."""
    rows: list[list[str]] = []
    for level, tank in data.iter_tanks():
        for record, profile in iter_entities(tank):
            row_id = tank.id if record is tank else f"{tank.id} / {record.id}"
            row = [level.label, tank.type, row_id]
            for stage in STAGE_CATALOG:
                if stage in profile:
                    row.append(record.status_of(stage).value)
                else:
                    row.append(NOT_APPLICABLE)
            rows.append(row)
    return rows


def export_progress_csv(data: TanksData) -> str:
    """Progress spreadsheet as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    writer.writerows(export_progress_rows(data))
    return buffer.getvalue()
