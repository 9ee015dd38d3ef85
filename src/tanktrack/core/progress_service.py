"""
Progress tracker — advancing and undoing stages on one tank or sub-tank.

Contains platform-agnostic business logic. Every operation takes a record
plus its resolved StageProfile and returns a record; inputs are never
mutated. Stale or impossible requests (stage not applicable, missing from
the progress array, already completed, out of turn) are no-ops that return
the record unchanged, so a front-end can never crash on an outdated click.

Persistence is the caller's job.
"""

import enum
import logging
from collections.abc import Iterable
from typing import TypeVar

from tanktrack.core.categories import StageProfile
from tanktrack.core.records import ProgressRecord, StageProgress
from tanktrack.core.stages import Stage, StageStatus, catalog_index

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=ProgressRecord)


class ClickAction(str, enum.Enum):
    """What a tap on a stage in the UI should do."""

    ADVANCE = "advance"
    CONFIRM_UNDO = "confirm_undo"   # completed stage: undo after confirmation
    IGNORE = "ignore"


# ── Seeding ──────────────────────────────────────────────────


def initial_progress(stages: Iterable[Stage]) -> list[StageProgress]:
    """Seed progress: first stage in progress, every other stage not started."""
    return [
        StageProgress(
            stage=stage,
            status=StageStatus.IN_PROGRESS if idx == 0 else StageStatus.NOT_STARTED,
        )
        for idx, stage in enumerate(stages)
    ]


def _sort_key(profile: StageProfile):
    offset = len(profile.stages)

    def key(entry: StageProgress) -> int:
        idx = profile.index_of(entry.stage)
        return idx if idx is not None else offset + catalog_index(entry.stage)

    return key


def normalize_progress(record: R, profile: StageProfile) -> R:
    """
    Back-fill missing entries for applicable stages and sort into order.

    Used when loading documents written with an older stage list. A record
    with no progress at all gets the seed array.
    """
    if not record.progress:
        seeded = record.model_copy(deep=True)
        seeded.progress = initial_progress(profile.stages)
        seeded.current_stage = profile.stages[0] if profile.stages else None
        return seeded

    present = {entry.stage for entry in record.progress}
    missing = [stage for stage in profile.stages if stage not in present]
    if not missing and record.progress == sorted(record.progress, key=_sort_key(profile)):
        return record

    updated = record.model_copy(deep=True)
    updated.progress.extend(StageProgress(stage=stage) for stage in missing)
    updated.progress.sort(key=_sort_key(profile))
    return updated


# ── Queries ──────────────────────────────────────────────────


def frontier_stage(record: ProgressRecord, profile: StageProfile) -> Stage | None:
    """First applicable stage that is not completed (None when all are)."""
    for stage in profile.stages:
        if record.status_of(stage) is not StageStatus.COMPLETED:
            return stage
    return None


def classify_click(record: ProgressRecord, stage: Stage, profile: StageProfile) -> ClickAction:
    """Decide whether a tap on `stage` advances it or asks to undo it."""
    if stage not in profile or record.entry_for(stage) is None:
        return ClickAction.IGNORE
    if record.status_of(stage) is StageStatus.COMPLETED:
        return ClickAction.CONFIRM_UNDO
    if stage == frontier_stage(record, profile):
        return ClickAction.ADVANCE
    return ClickAction.IGNORE


def _next_stage(record: ProgressRecord, stage: Stage, profile: StageProfile) -> Stage | None:
    """Stage that becomes in-progress once `stage` is completed."""
    if stage is Stage.LADDER_INSTALLATION:
        return None

    # Repair and cleaning hands over straight to the first inspection once
    # nothing between them is still open.
    if stage is Stage.REPAIR_AND_CLEANING and Stage.INSPECTION_STAGE_1 in profile:
        start = profile.index_of(stage) + 1
        end = profile.index_of(Stage.INSPECTION_STAGE_1)
        between = profile.stages[start:end]
        if all(record.status_of(s) is StageStatus.COMPLETED for s in between):
            return Stage.INSPECTION_STAGE_1

    if profile.is_pump_pit:
        if stage is Stage.INSPECTION_STAGE_3:
            return Stage.LADDER_INSTALLATION
        if stage is Stage.INSPECTION_STAGE_2 and Stage.INSPECTION_STAGE_3 not in profile:
            return Stage.LADDER_INSTALLATION

    return profile.next_after(stage)


def _set_status(record: ProgressRecord, stage: Stage, status: StageStatus) -> bool:
    entry = record.entry_for(stage)
    if entry is None:
        return False
    entry.status = status
    return True


# ── Transitions ──────────────────────────────────────────────


def advance_stage(record: R, stage: Stage, profile: StageProfile) -> R:
    """
    Complete `stage` and move the next applicable stage to in-progress.

    Only the first non-completed applicable stage can be advanced. Returns
    a new record, or the same record unchanged when the request is stale.
    """
    if stage not in profile:
        logger.warning("Advance ignored: %s is not applicable to %s", stage.value, record.id)
        return record
    if record.entry_for(stage) is None:
        logger.warning("Advance ignored: %s has no progress entry for %s", stage.value, record.id)
        return record
    if record.status_of(stage) is StageStatus.COMPLETED:
        logger.debug("Advance ignored: %s already completed on %s", stage.value, record.id)
        return record
    if stage != frontier_stage(record, profile):
        logger.warning(
            "Advance ignored: %s is not the open stage of %s", stage.value, record.id,
        )
        return record

    updated = record.model_copy(deep=True)
    _set_status(updated, stage, StageStatus.COMPLETED)

    nxt = _next_stage(updated, stage, profile)
    if nxt is None:
        # Terminal stage: pointer stays on it
        updated.current_stage = stage
        logger.info("%s: %s completed (final stage)", record.id, stage.value)
        return updated

    if not _set_status(updated, nxt, StageStatus.IN_PROGRESS):
        updated.progress.append(StageProgress(stage=nxt, status=StageStatus.IN_PROGRESS))
        updated.progress.sort(key=_sort_key(profile))
    updated.current_stage = nxt

    logger.info("%s: %s completed, %s in progress", record.id, stage.value, nxt.value)
    return updated


def undo_stage(record: R, stage: Stage, profile: StageProfile) -> R:
    """
    Reopen `stage`: it goes back to in-progress and every later applicable
    stage to not started. Earlier stages keep their status.

    Callers must confirm with the user first. Returns the record unchanged
    when the stage is not applicable, missing, or not started.
    """
    if stage not in profile:
        logger.warning("Undo ignored: %s is not applicable to %s", stage.value, record.id)
        return record
    if record.entry_for(stage) is None:
        logger.warning("Undo ignored: %s has no progress entry for %s", stage.value, record.id)
        return record
    if record.status_of(stage) is StageStatus.NOT_STARTED:
        logger.debug("Undo ignored: %s not started on %s", stage.value, record.id)
        return record

    updated = record.model_copy(deep=True)
    _set_status(updated, stage, StageStatus.IN_PROGRESS)
    for later in profile.stages_after(stage):
        _set_status(updated, later, StageStatus.NOT_STARTED)
    updated.current_stage = stage

    logger.info("%s: %s reopened", record.id, stage.value)
    return updated
