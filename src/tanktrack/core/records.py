"""
Tank record schema — the JSON documents the tracker reads and mutates.

Records are stored and exchanged with camelCase keys (currentStage,
isGrouped, subTanks, n00Tanks …). Python code uses snake_case attributes;
pydantic maps between the two.
"""

import enum
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tanktrack.core.stages import Stage, StageStatus


class RecordModel(BaseModel):
    """Base for all tank documents: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """JSON-ready dict with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Level(str, enum.Enum):
    """Building levels. Closed set — unknown level keys are rejected."""

    N00 = "n00Tanks"
    N10 = "n10Tanks"
    N20 = "n20Tanks"
    N30 = "n30Tanks"

    @classmethod
    def _missing_(cls, value):
        # Accept short labels too: "N10", "n10"
        if isinstance(value, str):
            for level in cls:
                if value.lower() in (level.value.lower(), level.label.lower()):
                    return level
        return None

    @property
    def label(self) -> str:
        """Short display label, e.g. 'N00'."""
        return self.value[:3].upper()


class StageProgress(RecordModel):
    stage: Stage
    status: StageStatus = StageStatus.NOT_STARTED


class Coordinates(RecordModel):
    """Marker position on the level plan (pixels)."""

    top: float = 0
    left: float = 0
    width: float = 20
    height: float = 20


class ProgressRecord(RecordModel):
    """Anything that carries its own stage progress (tank or sub-tank)."""

    id: str
    name: str = ""
    current_stage: Stage | None = None
    progress: list[StageProgress] = Field(default_factory=list)

    def entry_for(self, stage: Stage) -> StageProgress | None:
        for entry in self.progress:
            if entry.stage == stage:
                return entry
        return None

    def status_of(self, stage: Stage) -> StageStatus:
        """Status of a stage; missing entries count as not started."""
        entry = self.entry_for(stage)
        return entry.status if entry else StageStatus.NOT_STARTED


class SubTank(ProgressRecord):
    """One compartment of a grouped tank. Owns its own progress."""


class Tank(ProgressRecord):
    """
    A physical tank on a level.

    When `is_grouped` is set, real progress lives in `sub_tanks`; the tank's
    own `progress` and `current_stage` are not used by the tracker.
    """

    type: str = ""
    location: str = ""
    coordinates: Coordinates | None = None
    is_grouped: bool = False
    sub_tanks: list[SubTank] = Field(default_factory=list)

    @property
    def has_sub_tanks(self) -> bool:
        return self.is_grouped and bool(self.sub_tanks)


class TanksData(RecordModel):
    """All tanks, keyed by level then by tank id."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )

    n00_tanks: dict[str, Tank] = Field(default_factory=dict, alias="n00Tanks")
    n10_tanks: dict[str, Tank] = Field(default_factory=dict, alias="n10Tanks")
    n20_tanks: dict[str, Tank] = Field(default_factory=dict, alias="n20Tanks")
    n30_tanks: dict[str, Tank] = Field(default_factory=dict, alias="n30Tanks")

    def for_level(self, level: Level) -> dict[str, Tank]:
        return getattr(self, f"{level.label.lower()}_tanks")

    def iter_tanks(self) -> Iterator[tuple[Level, Tank]]:
        """Every tank with its level, levels in N00 → N30 order."""
        for level in Level:
            for tank in self.for_level(level).values():
                yield level, tank
