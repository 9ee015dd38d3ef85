"""
Completion aggregator — derived status of a tank for display and reports.

For grouped tanks everything is computed over the sub-tanks; the parent's
own progress array is ignored.
"""

import enum

from tanktrack.core.categories import StageProfile
from tanktrack.core.group_service import iter_entities
from tanktrack.core.records import ProgressRecord, Tank
from tanktrack.core.stages import Stage, StageStatus, is_inspection_stage


class TankStatus(str, enum.Enum):
    COMPLETE = "complete"
    IN_INSPECTION = "in_inspection"
    IN_PROGRESS = "in_progress"


# Marker colours on the level plan
STATUS_COLORS: dict[TankStatus, str] = {
    TankStatus.COMPLETE: "green",
    TankStatus.IN_INSPECTION: "purple",
    TankStatus.IN_PROGRESS: "red",
}

STATUS_ICONS: dict[TankStatus, str] = {
    TankStatus.COMPLETE: "🟢",
    TankStatus.IN_INSPECTION: "🟣",
    TankStatus.IN_PROGRESS: "🔴",
}


def record_completed(record: ProgressRecord, profile: StageProfile) -> bool:
    """Every applicable stage of this record is completed."""
    return all(record.status_of(stage) is StageStatus.COMPLETED for stage in profile.stages)


def record_in_inspection(record: ProgressRecord) -> bool:
    """Current stage is an inspection, or an inspection entry is in progress."""
    if is_inspection_stage(record.current_stage):
        return True
    return any(
        is_inspection_stage(entry.stage) and entry.status is StageStatus.IN_PROGRESS
        for entry in record.progress
    )


def is_fully_completed(tank: Tank) -> bool:
    """All applicable stages completed (on every sub-tank when grouped)."""
    return all(record_completed(record, profile) for record, profile in iter_entities(tank))


def is_in_inspection(tank: Tank) -> bool:
    """The tank, or any of its sub-tanks, is at an inspection stage."""
    return any(record_in_inspection(record) for record, _ in iter_entities(tank))


def color_status(tank: Tank) -> TankStatus:
    """Complete beats in-inspection; everything else is in progress."""
    if is_fully_completed(tank):
        return TankStatus.COMPLETE
    if is_in_inspection(tank):
        return TankStatus.IN_INSPECTION
    return TankStatus.IN_PROGRESS


def is_ready_for_inspection(tank: Tank) -> bool:
    """At an inspection stage and not yet fully completed."""
    return is_in_inspection(tank) and not is_fully_completed(tank)


def has_completed_ladder_installation(tank: Tank) -> bool:
    """
    Ladder installed: the ladder entry exists and is completed.

    Grouped tanks need every sub-tank to satisfy this. Independent of
    color_status — used as a secondary marker only.
    """
    return all(
        (entry := record.entry_for(Stage.LADDER_INSTALLATION)) is not None
        and entry.status is StageStatus.COMPLETED
        for record, _ in iter_entities(tank)
    )
