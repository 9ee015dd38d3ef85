"""
Completion aggregator tests — derived tank status and the ladder marker.
"""

from conftest import advance_through, complete_all, make_tank

from tanktrack.core.completion_service import (
    TankStatus,
    color_status,
    has_completed_ladder_installation,
    is_fully_completed,
    is_in_inspection,
    is_ready_for_inspection,
    record_in_inspection,
)
from tanktrack.core.group_service import advance_tank, profile_for
from tanktrack.core.records import StageProgress, Tank
from tanktrack.core.stages import STANDARD_STAGES, Stage, StageStatus
from tanktrack.core.tank_templates import build_tank

TO_INSPECTION_1 = [
    Stage.FORMWORK_REMOVAL,
    Stage.REPAIR_AND_CLEANING,
    Stage.PUMP_ANCHORS,
    Stage.SLOPE,
]


def complete_group(tank: Tank) -> Tank:
    for idx in range(len(tank.sub_tanks)):
        for stage in profile_for(tank, idx).stages:
            tank = advance_tank(tank, stage, idx)
    return tank


class TestPlainTank:
    def test_fresh_tank_in_progress(self, standard_profile):
        tank = make_tank()
        assert color_status(tank) is TankStatus.IN_PROGRESS
        assert not is_ready_for_inspection(tank)

    def test_at_inspection(self, standard_profile):
        tank = advance_through(make_tank(), standard_profile, TO_INSPECTION_1)
        assert tank.current_stage is Stage.INSPECTION_STAGE_1
        assert color_status(tank) is TankStatus.IN_INSPECTION
        assert is_ready_for_inspection(tank)

    def test_complete_wins_over_inspection(self, standard_profile):
        tank = complete_all(make_tank(), standard_profile)
        # Pointer stays on the final inspection
        assert is_in_inspection(tank)
        assert is_fully_completed(tank)
        assert color_status(tank) is TankStatus.COMPLETE
        assert not is_ready_for_inspection(tank)

    def test_inspection_entry_in_progress_counts(self):
        tank = Tank(
            id="X",
            current_stage=Stage.WATERPROOFING,
            progress=[StageProgress(stage=Stage.INSPECTION_STAGE_2, status=StageStatus.IN_PROGRESS)],
        )
        assert record_in_inspection(tank)


class TestGroupedTank:
    def test_one_sub_tank_in_inspection(self):
        tank = build_tank("EB9", "WATER TANKS", "Bottom Right", 715, 980)
        tank = advance_tank(tank, Stage.FORMWORK_REMOVAL, 1)
        tank = advance_tank(tank, Stage.REPAIR_AND_CLEANING, 1)

        assert tank.sub_tanks[1].current_stage is Stage.INSPECTION_STAGE_1
        assert color_status(tank) is TankStatus.IN_INSPECTION

    def test_complete_only_when_all_sub_tanks_done(self):
        tank = build_tank("EB9", "WATER TANKS", "Bottom Right", 715, 980)
        for stage in profile_for(tank, 0).stages:
            tank = advance_tank(tank, stage, 0)
        assert not is_fully_completed(tank)

        tank = complete_group(tank)
        assert is_fully_completed(tank)
        assert color_status(tank) is TankStatus.COMPLETE

    def test_parent_progress_ignored(self):
        tank = build_tank("EB9", "WATER TANKS", "Bottom Right", 715, 980)
        tank = tank.model_copy(update={
            "current_stage": Stage.INSPECTION_STAGE_1,
            "progress": [StageProgress(stage=s, status=StageStatus.COMPLETED) for s in STANDARD_STAGES],
        })
        assert color_status(tank) is TankStatus.IN_PROGRESS


class TestLadder:
    def test_pump_pit_ladder_installed(self):
        tank = build_tank("S2-PB-04", "SEWAGE WATER", "Top Center", 90, 515)
        assert not has_completed_ladder_installation(tank)

        tank = complete_all(tank, profile_for(tank))
        assert has_completed_ladder_installation(tank)
        assert color_status(tank) is TankStatus.COMPLETE

    def test_no_ladder_entry(self, standard_profile):
        tank = complete_all(make_tank(), standard_profile)
        assert not has_completed_ladder_installation(tank)

    def test_independent_of_color_status(self):
        tank = Tank(
            id="X",
            current_stage=Stage.FORMWORK_REMOVAL,
            progress=[
                StageProgress(stage=Stage.FORMWORK_REMOVAL, status=StageStatus.IN_PROGRESS),
                StageProgress(stage=Stage.LADDER_INSTALLATION, status=StageStatus.COMPLETED),
            ],
        )
        assert has_completed_ladder_installation(tank)
        assert color_status(tank) is TankStatus.IN_PROGRESS


class TestMixedGroup:
    def test_two_complete_one_in_progress(self):
        tank = build_tank("EB16-STE-089", "WATER TANKS", "Left Center", 455, 280)
        for idx in (0, 1):
            for stage in profile_for(tank, idx).stages:
                tank = advance_tank(tank, stage, idx)

        assert tank.sub_tanks[2].status_of(Stage.FORMWORK_REMOVAL) is StageStatus.IN_PROGRESS
        assert not is_fully_completed(tank)
        assert color_status(tank) is not TankStatus.COMPLETE
