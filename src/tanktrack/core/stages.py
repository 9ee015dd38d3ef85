"""
Stage catalog — every construction stage a tank can go through.

The catalog order is the canonical order of work on site. Each tank
category uses a subsequence of it (see tanktrack.core.categories).
Enum values are the labels stored in the
tank JSON documents, so they must never be renamed.
"""

import enum


class Stage(str, enum.Enum):
    FORMWORK_REMOVAL = "Formwork Removal"
    REPAIR_AND_CLEANING = "Repair and Cleaning"
    DWALL_ANCHORAGE_REMOVAL = "Dwall anchorage removal"
    DWALL_ANCHORAGE_WATERPROOFING = "Dwall anchorage waterproofing"
    GROUT_OPENINGS_IN_WALL = "Grout openings in wall"
    PUMP_ANCHORS = "Pump Anchors"
    SLOPE = "Slope"
    INSPECTION_STAGE_1 = "Inspection Stage 1"
    WATERPROOFING = "Waterproofing"
    WATERPROOFING_OF_WALLS = "Waterproofing of walls"
    INSPECTION_STAGE_2 = "Inspection Stage 2"
    WATERPROOFING_OF_FLOOR = "Waterproofing of floor"
    INSPECTION_STAGE_3 = "Inspection Stage 3"
    LADDER_INSTALLATION = "Ladder installation"


class StageStatus(str, enum.Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


# ── Catalog ──────────────────────────────────────────────────
# Enum definition order is the catalog order.

STAGE_CATALOG: tuple[Stage, ...] = tuple(Stage)

INSPECTION_STAGES: frozenset[Stage] = frozenset({
    Stage.INSPECTION_STAGE_1,
    Stage.INSPECTION_STAGE_2,
    Stage.INSPECTION_STAGE_3,
})

_CATALOG_INDEX: dict[Stage, int] = {stage: idx for idx, stage in enumerate(STAGE_CATALOG)}


# ── Per-category stage lists ─────────────────────────────────

STANDARD_STAGES: tuple[Stage, ...] = (
    Stage.FORMWORK_REMOVAL,
    Stage.REPAIR_AND_CLEANING,
    Stage.PUMP_ANCHORS,
    Stage.SLOPE,
    Stage.INSPECTION_STAGE_1,
    Stage.WATERPROOFING,
    Stage.INSPECTION_STAGE_2,
)

# Fire water, sanitary water, deposit and rain-water valve tanks: no pump
# anchors and no slope.
LIMITED_STAGES: tuple[Stage, ...] = (
    Stage.FORMWORK_REMOVAL,
    Stage.REPAIR_AND_CLEANING,
    Stage.INSPECTION_STAGE_1,
    Stage.WATERPROOFING,
    Stage.INSPECTION_STAGE_2,
)

# Large (primary) tank of the dwall-anchored family: waterproofing is split
# into walls and floor, with a third inspection after the floor.
DWALL_PRIMARY_STAGES: tuple[Stage, ...] = (
    Stage.FORMWORK_REMOVAL,
    Stage.REPAIR_AND_CLEANING,
    Stage.DWALL_ANCHORAGE_REMOVAL,
    Stage.DWALL_ANCHORAGE_WATERPROOFING,
    Stage.GROUT_OPENINGS_IN_WALL,
    Stage.INSPECTION_STAGE_1,
    Stage.WATERPROOFING_OF_WALLS,
    Stage.INSPECTION_STAGE_2,
    Stage.WATERPROOFING_OF_FLOOR,
    Stage.INSPECTION_STAGE_3,
)

DWALL_SECONDARY_STAGES: tuple[Stage, ...] = (
    Stage.FORMWORK_REMOVAL,
    Stage.REPAIR_AND_CLEANING,
    Stage.DWALL_ANCHORAGE_REMOVAL,
    Stage.DWALL_ANCHORAGE_WATERPROOFING,
    Stage.GROUT_OPENINGS_IN_WALL,
    Stage.INSPECTION_STAGE_1,
    Stage.WATERPROOFING,
    Stage.INSPECTION_STAGE_2,
    Stage.INSPECTION_STAGE_3,
)


def catalog_index(stage: Stage) -> int:
    """Position of a stage in the canonical catalog."""
    return _CATALOG_INDEX[stage]


def is_inspection_stage(stage: Stage | None) -> bool:
    return stage in INSPECTION_STAGES


# ── Display helpers ──────────────────────────────────────────

STATUS_ICONS: dict[StageStatus, str] = {
    StageStatus.NOT_STARTED: "⬜",
    StageStatus.IN_PROGRESS: "🔨",
    StageStatus.COMPLETED: "✅",
}

STATUS_LABELS: dict[StageStatus, str] = {
    StageStatus.NOT_STARTED: "⬜ Not started",
    StageStatus.IN_PROGRESS: "🔨 In progress",
    StageStatus.COMPLETED: "✅ Completed",
}
