"""
Group coordinator — routes progress operations for grouped tanks.

A grouped tank owns a fixed list of sub-tanks, each with its own progress.
The front-end picks one "active" sub-tank by index and every advance/undo
goes to that sub-tank. The parent's stage for display is a projection of
the active sub-tank (`display_stage`), computed on read and never written
back to the parent record.

Non-grouped tanks are handled by the same entry points, so callers can use
`advance_tank` / `undo_tank` without caring which kind of tank they hold.
"""

import logging

from tanktrack.core.categories import StageProfile, TankDescriptor, resolve_profile
from tanktrack.core.progress_service import (
    ClickAction,
    advance_stage,
    classify_click,
    normalize_progress,
    undo_stage,
)
from tanktrack.core.records import ProgressRecord, SubTank, Tank
from tanktrack.core.stages import Stage

logger = logging.getLogger(__name__)


def descriptor_for(tank: Tank, index: int | None = None) -> TankDescriptor:
    """Descriptor of the tank itself, or of its sub-tank at `index`."""
    if index is None or not tank.has_sub_tanks:
        return TankDescriptor(id=tank.id, type=tank.type)
    sub = tank.sub_tanks[index]
    return TankDescriptor(id=sub.id, type=tank.type, parent_id=tank.id, index=index)


def profile_for(tank: Tank, index: int | None = None) -> StageProfile:
    return resolve_profile(descriptor_for(tank, index))


def active_sub_tank(tank: Tank, index: int = 0) -> SubTank | None:
    """The selected sub-tank, or None for plain tanks and bad indexes."""
    if not tank.has_sub_tanks or not 0 <= index < len(tank.sub_tanks):
        return None
    return tank.sub_tanks[index]


def display_stage(tank: Tank, index: int = 0) -> Stage | None:
    """Stage to show for a tank: the active sub-tank's stage when grouped."""
    if not tank.has_sub_tanks:
        return tank.current_stage
    sub = active_sub_tank(tank, index)
    return sub.current_stage if sub else None


def iter_entities(tank: Tank) -> list[tuple[ProgressRecord, StageProfile]]:
    """
    Every record that carries real progress, with its profile.

    For grouped tanks that is each sub-tank (the parent is skipped);
    otherwise the tank itself.
    """
    if tank.has_sub_tanks:
        return [(sub, profile_for(tank, idx)) for idx, sub in enumerate(tank.sub_tanks)]
    return [(tank, profile_for(tank))]


def _target(
    tank: Tank, sub_index: int | None,
) -> tuple[ProgressRecord, StageProfile, int | None] | None:
    """Record an operation applies to, its profile and sub-tank index."""
    if not tank.has_sub_tanks:
        return tank, profile_for(tank), None
    index = 0 if sub_index is None else sub_index
    if not 0 <= index < len(tank.sub_tanks):
        logger.warning("Tank %s has no sub-tank #%s", tank.id, sub_index)
        return None
    return tank.sub_tanks[index], profile_for(tank, index), index


def _apply(tank: Tank, sub_index: int | None, operation, stage: Stage) -> Tank:
    target = _target(tank, sub_index)
    if target is None:
        return tank

    record, profile, index = target
    updated_record = operation(record, stage, profile)
    if updated_record is record or index is None:
        return updated_record

    updated = tank.model_copy(deep=True)
    updated.sub_tanks[index] = updated_record
    return updated


def advance_tank(tank: Tank, stage: Stage, sub_index: int | None = None) -> Tank:
    """Advance `stage` on a plain tank or on the selected sub-tank."""
    return _apply(tank, sub_index, advance_stage, stage)


def undo_tank(tank: Tank, stage: Stage, sub_index: int | None = None) -> Tank:
    """Undo `stage` on a plain tank or on the selected sub-tank."""
    return _apply(tank, sub_index, undo_stage, stage)


def click_action(tank: Tank, stage: Stage, sub_index: int | None = None) -> ClickAction:
    """What tapping `stage` should do for this tank / sub-tank."""
    target = _target(tank, sub_index)
    if target is None:
        return ClickAction.IGNORE
    record, profile, _ = target
    return classify_click(record, stage, profile)


def applicable_stages(tank: Tank, sub_index: int | None = None) -> list[Stage]:
    """Applicable stages of the tank, or of its selected sub-tank."""
    target = _target(tank, sub_index)
    if target is None:
        return []
    return list(target[1].stages)


def normalize_tank(tank: Tank) -> Tank:
    """Back-fill progress of the tank or each of its sub-tanks."""
    if not tank.has_sub_tanks:
        return normalize_progress(tank, profile_for(tank))

    subs = [
        normalize_progress(sub, profile_for(tank, idx))
        for idx, sub in enumerate(tank.sub_tanks)
    ]
    if all(new is old for new, old in zip(subs, tank.sub_tanks)):
        return tank
    updated = tank.model_copy(deep=True)
    updated.sub_tanks = subs
    return updated
