"""
Applicability resolver — which stages apply to a tank or sub-tank.

A tank's category is looked up once in an explicit id → category table
(by its own id, then by its parent id for sub-tanks). Ids that are not in
the table fall back to pattern rules on the id / parent id / type strings.
Pump pits are a separate, independent table: when an entity is a pump pit,
ladder installation is appended to whichever stage list applies.

Resolution never fails — an unknown id simply resolves to STANDARD.
"""

import enum
import logging
from dataclasses import dataclass
from functools import lru_cache

from tanktrack.config import settings
from tanktrack.core.stages import (
    DWALL_PRIMARY_STAGES,
    DWALL_SECONDARY_STAGES,
    LIMITED_STAGES,
    STANDARD_STAGES,
    Stage,
)

logger = logging.getLogger(__name__)


class TankCategory(str, enum.Enum):
    DWALL_ANCHORED = "dwall_anchored"
    LIMITED_NO_ANCHORS = "limited_no_anchors"
    STANDARD = "standard"


# ── Configuration tables ─────────────────────────────────────
# Keys are upper-cased tank ids. Sub-tanks inherit through their parent id.

CATEGORY_TABLE: dict[str, TankCategory] = {
    "EB16-STE-089":   TankCategory.DWALL_ANCHORED,
    "EB1-EXTERIOR":   TankCategory.LIMITED_NO_ANCHORS,
    "EB1-INTERIOR":   TankCategory.LIMITED_NO_ANCHORS,
    "EB1-INTERIOR-1": TankCategory.LIMITED_NO_ANCHORS,
    "EB1-INTERIOR-2": TankCategory.LIMITED_NO_ANCHORS,
    "EB9":            TankCategory.LIMITED_NO_ANCHORS,
}

PUMP_PIT_IDS: frozenset[str] = frozenset({
    "S2-PB-03",
    "S2-PB-04",
    "S2-PB-05",
    "S2-PB-06",
    "S2-PB-07",
    "S2-PB-15",
    "PBP-S2-01",
    "FEC-PB-08",
})

PUMP_PIT_TYPE_MARKER = "chiller room"

# Pattern fallbacks for ids missing from CATEGORY_TABLE
DWALL_MARKER = "EB16"
PRIMARY_SUBTANK_MARKERS: tuple[str, ...] = ("TANK-01", "LARGE TANK-01")
LIMITED_TYPE_MARKERS: tuple[str, ...] = ("fire water", "sanitary water", "water deposit")


@dataclass(frozen=True)
class TankDescriptor:
    """Identity of a tank or sub-tank, as far as stage applicability goes."""

    id: str
    type: str = ""
    parent_id: str | None = None
    index: int | None = None    # position within the parent's sub-tanks

    @property
    def is_sub_tank(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True)
class StageProfile:
    """Resolved category and ordered applicable stages for one entity."""

    category: TankCategory
    is_pump_pit: bool
    is_primary: bool
    stages: tuple[Stage, ...]

    def __contains__(self, stage: object) -> bool:
        return stage in self.stages

    def index_of(self, stage: Stage) -> int | None:
        """Position of a stage in this profile, or None if not applicable."""
        try:
            return self.stages.index(stage)
        except ValueError:
            return None

    def next_after(self, stage: Stage) -> Stage | None:
        """The applicable stage that follows `stage`, if any."""
        idx = self.index_of(stage)
        if idx is None or idx + 1 >= len(self.stages):
            return None
        return self.stages[idx + 1]

    def stages_after(self, stage: Stage) -> tuple[Stage, ...]:
        idx = self.index_of(stage)
        if idx is None:
            return ()
        return self.stages[idx + 1:]


# ── Classification ───────────────────────────────────────────


def _in_limited_family(tank_id: str) -> bool:
    if "EB1" in tank_id and ("EXTERIOR" in tank_id or "INTERIOR" in tank_id):
        return True
    return "EB9" in tank_id


def infer_category(descriptor: TankDescriptor) -> TankCategory:
    """Pattern-based category for ids that are not in CATEGORY_TABLE."""
    ids = [descriptor.id.upper()]
    if descriptor.parent_id:
        ids.append(descriptor.parent_id.upper())
    tank_type = descriptor.type.lower()

    if any(DWALL_MARKER in x for x in ids):
        return TankCategory.DWALL_ANCHORED
    if any(_in_limited_family(x) for x in ids):
        return TankCategory.LIMITED_NO_ANCHORS
    if any(marker in tank_type for marker in LIMITED_TYPE_MARKERS):
        return TankCategory.LIMITED_NO_ANCHORS
    if "rain water" in tank_type and "valve" in tank_type:
        return TankCategory.LIMITED_NO_ANCHORS
    return TankCategory.STANDARD


def categorize(descriptor: TankDescriptor) -> TankCategory:
    """Category from the lookup table, falling back to pattern rules."""
    for key in (descriptor.id, descriptor.parent_id):
        if key and key.upper() in CATEGORY_TABLE:
            return CATEGORY_TABLE[key.upper()]
    return infer_category(descriptor)


def is_primary_sub_tank(descriptor: TankDescriptor) -> bool:
    """Whether this is the large (first) tank of its group."""
    tank_id = descriptor.id.upper()
    if any(marker in tank_id for marker in PRIMARY_SUBTANK_MARKERS):
        return True
    return descriptor.is_sub_tank and descriptor.index == 0


def is_pump_pit(
    descriptor: TankDescriptor,
    extra_ids: frozenset[str] = frozenset(),
) -> bool:
    """Membership test against the pump-pit table or a chiller-room type."""
    known = PUMP_PIT_IDS | extra_ids
    for key in (descriptor.id, descriptor.parent_id):
        if key and key.upper() in known:
            return True
    return PUMP_PIT_TYPE_MARKER in descriptor.type.lower()


def stages_for(category: TankCategory, *, primary: bool, pump_pit: bool) -> tuple[Stage, ...]:
    """Ordered applicable stages for a category."""
    if category is TankCategory.DWALL_ANCHORED:
        stages = DWALL_PRIMARY_STAGES if primary else DWALL_SECONDARY_STAGES
    elif category is TankCategory.LIMITED_NO_ANCHORS:
        stages = LIMITED_STAGES
    else:
        stages = STANDARD_STAGES

    if pump_pit:
        stages = stages + (Stage.LADDER_INSTALLATION,)
    return stages


@lru_cache(maxsize=1024)
def resolve_profile(descriptor: TankDescriptor) -> StageProfile:
    """
    Resolve the stage profile for a tank or sub-tank.

    Cached per descriptor: a given entity keeps the same profile for the
    lifetime of the process.
    """
    category = categorize(descriptor)
    pump_pit = is_pump_pit(descriptor, settings.pump_pit_ids)
    primary = category is TankCategory.DWALL_ANCHORED and is_primary_sub_tank(descriptor)

    profile = StageProfile(
        category=category,
        is_pump_pit=pump_pit,
        is_primary=primary,
        stages=stages_for(category, primary=primary, pump_pit=pump_pit),
    )
    logger.debug(
        "Resolved %s (parent=%s) → %s, pump_pit=%s, %d stages",
        descriptor.id, descriptor.parent_id, category.value, pump_pit, len(profile.stages),
    )
    return profile


def resolve_stages(descriptor: TankDescriptor) -> list[Stage]:
    """Ordered list of stages applicable to the described entity."""
    return list(resolve_profile(descriptor).stages)
