"""
Built-in tank list for every level.

These templates define the tanks created when the store is seeded. Only
static metadata lives here; progress is generated from each tank's (or
sub-tank's) applicable stages, so every entity starts with its first stage
in progress.

SAMPLE_PROGRESS holds the site state used for demos: seeding with
`sample_progress=True` moves those tanks forward to the listed stage.
"""

import logging

from tanktrack.core.group_service import advance_tank, normalize_tank, profile_for
from tanktrack.core.progress_service import frontier_stage
from tanktrack.core.records import Coordinates, Level, SubTank, Tank, TanksData
from tanktrack.core.stages import Stage

logger = logging.getLogger(__name__)

# ── Tank metadata per level ──────────────────────────────────
# (id, type, location, top, left)

LEVEL_TANKS: dict[Level, list[tuple[str, str, str, int, int]]] = {
    Level.N00: [
        ("PBF-S3-03",            "SEWAGE WATER", "West Section",        495,  100),
        ("PBF-S3-02",            "SEWAGE WATER", "Center",              655,  615),
        ("PBF-S3-01",            "SEWAGE WATER", "East Section",        530,  780),
        ("CHILLER-ROOM-INSIDE",  "SEWAGE WATER", "Far East",            670, 1160),
        ("GARDENTONA-SMALL",     "RAIN WATER",   "Top Center",          500,  670),
        ("GARDENTONA-BIG",       "RAIN WATER",   "Center Right",        550,  735),
        ("CHILLER-ROOM-OUTSIDE", "CHILLER ROOM", "Bottom Right",        780, 1150),
    ],
    Level.N10: [
        ("PBF-S2-01",      "SEWAGE WATER", "Bottom Right",        570,  860),
        ("PBF-S2-11",      "SEWAGE WATER", "Middle Left",         220,  300),
        ("PBF-S2-12",      "SEWAGE WATER", "Left",                300,  260),
        ("PBF-S2-13",      "SEWAGE WATER", "Bottom Left",         420,  275),
        ("S2-PB-04",       "SEWAGE WATER", "Top Center",           90,  515),
        ("S2-PB-05",       "SEWAGE WATER", "Top Left",            120,  420),
        ("PBF-S2-03",      "SEWAGE WATER", "Top Right",            90,  780),
        ("S2-PB-06",       "SEWAGE WATER", "Bottom Center",       585,  470),
        ("S2-PB-07",       "SEWAGE WATER", "Bottom Center-Right", 560,  780),
        ("PBP-S2-01",      "SEWAGE WATER", "Bottom Center",       720,  650),
        ("S2-PB-15",       "SEWAGE WATER", "Bottom Center",       765,  665),
        ("FEC-PB-08",      "WATER TANKS",  "Bottom Left",         685,  425),
        ("EB16-STE-089",   "WATER TANKS",  "Left Center",         455,  280),
        ("EB1-INTERIOR-1", "WATER TANKS",  "Right Center Upper",  370,  950),
        ("EB1-INTERIOR-2", "WATER TANKS",  "Right Center Lower",  405,  950),
        ("EB1-EXTERIOR",   "WATER TANKS",  "Right Upper",         350, 1015),
        ("EB9",            "WATER TANKS",  "Bottom Right",        715,  980),
    ],
    Level.N20: [
        ("PBF-S1-05", "RAIN WATER", "Top Left",     130,  540),
        ("PBF-S1-04", "RAIN WATER", "Top Right",    130,  710),
        ("PBF-S1-03", "RAIN WATER", "Middle Left",  420,  165),
        ("PBF-S1-02", "RAIN WATER", "Bottom Left",  575,  170),
        ("PBF-S1-08", "RAIN WATER", "Bottom Right", 605, 1080),
    ],
    Level.N30: [],
}


# ── Grouped tanks ────────────────────────────────────────────
# Parent id → (sub-tank id, display name). The first entry is the primary
# (largest) compartment.

GROUPED_TANKS: dict[str, list[tuple[str, str]]] = {
    "EB16-STE-089": [
        ("EB16-STE-089-TANK-01", "LARGE TANK-01"),
        ("EB16-STE-089-TANK-02", "TANK-02"),
        ("EB16-STE-089-TANK-03", "TANK-03"),
    ],
    "EB1-INTERIOR-1": [
        ("EB1-INTERIOR-1-TANK-01", "Interior Tank 1"),
        ("EB1-INTERIOR-1-TANK-02", "Interior Tank 2"),
    ],
    "EB1-INTERIOR-2": [
        ("EB1-INTERIOR-2-TANK-01", "Interior Tank 1"),
        ("EB1-INTERIOR-2-TANK-02", "Interior Tank 2"),
    ],
    "EB1-EXTERIOR": [
        ("EB1-EXTERIOR-TANK-01", "Exterior Tank 1"),
        ("EB1-EXTERIOR-TANK-02", "Exterior Tank 2"),
    ],
    "EB9": [
        ("EB9-INTERIOR", "Interior Tank"),
        ("EB9-EXTERIOR", "Exterior Tank"),
    ],
}


# ── Sample site state ────────────────────────────────────────
# Tank id → stage that is in progress. Earlier stages are completed.

SAMPLE_PROGRESS: dict[str, Stage] = {
    "PBF-S3-03":           Stage.WATERPROOFING,
    "PBF-S3-02":           Stage.INSPECTION_STAGE_1,
    "PBF-S3-01":           Stage.REPAIR_AND_CLEANING,
    "CHILLER-ROOM-INSIDE": Stage.SLOPE,
    "GARDENTONA-SMALL":    Stage.WATERPROOFING,
    "CHILLER-ROOM-OUTSIDE": Stage.INSPECTION_STAGE_1,
    "PBF-S2-01":           Stage.WATERPROOFING,
    "PBF-S2-12":           Stage.PUMP_ANCHORS,
    "PBF-S2-13":           Stage.INSPECTION_STAGE_1,
    "S2-PB-04":            Stage.SLOPE,
    "S2-PB-06":            Stage.WATERPROOFING,
    "S2-PB-07":            Stage.REPAIR_AND_CLEANING,
    "S2-PB-15":            Stage.INSPECTION_STAGE_1,
    "PBF-S1-05":           Stage.INSPECTION_STAGE_1,
    "PBF-S1-04":           Stage.SLOPE,
    "PBF-S1-03":           Stage.WATERPROOFING,
    "PBF-S1-02":           Stage.REPAIR_AND_CLEANING,
}


def build_tank(
    tank_id: str,
    tank_type: str,
    location: str,
    top: int,
    left: int,
) -> Tank:
    """Create a tank with seed progress for itself or its sub-tanks."""
    display = tank_id.replace("-", " ") if tank_id.startswith("CHILLER") else tank_id
    name = display if tank_type == "CHILLER ROOM" else f"{tank_type} | {display}"

    sub_tanks = [
        SubTank(id=sub_id, name=sub_name)
        for sub_id, sub_name in GROUPED_TANKS.get(tank_id, [])
    ]
    tank = Tank(
        id=tank_id,
        name=name,
        type=tank_type,
        location=location,
        coordinates=Coordinates(top=top, left=left),
        is_grouped=bool(sub_tanks),
        sub_tanks=sub_tanks,
    )
    # Empty progress arrays are filled with the seed array
    return normalize_tank(tank)


def advance_to(tank: Tank, stage: Stage) -> Tank:
    """Complete every stage before `stage` on a plain tank."""
    profile = profile_for(tank)
    if stage not in profile:
        logger.warning("Sample stage %s does not apply to %s", stage.value, tank.id)
        return tank

    while tank.current_stage != stage:
        frontier = frontier_stage(tank, profile)
        if frontier is None:
            break
        tank = advance_tank(tank, frontier)
    return tank


def build_seed_data(sample_progress: bool = False) -> TanksData:
    """Every built-in tank, keyed by level and id."""
    data = TanksData()
    for level, rows in LEVEL_TANKS.items():
        tanks = data.for_level(level)
        for row in rows:
            tank = build_tank(*row)
            if sample_progress and tank.id in SAMPLE_PROGRESS:
                tank = advance_to(tank, SAMPLE_PROGRESS[tank.id])
            tanks[tank.id] = tank
    return data
