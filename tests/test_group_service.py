"""
Group coordinator tests — routing progress to sub-tanks of grouped tanks.
"""

import pytest

from tanktrack.core.group_service import (
    active_sub_tank,
    advance_tank,
    applicable_stages,
    click_action,
    descriptor_for,
    display_stage,
    iter_entities,
    normalize_tank,
    profile_for,
    undo_tank,
)
from tanktrack.core.progress_service import ClickAction
from tanktrack.core.records import SubTank, Tank
from tanktrack.core.stages import (
    DWALL_PRIMARY_STAGES,
    DWALL_SECONDARY_STAGES,
    STANDARD_STAGES,
    Stage,
    StageStatus,
)
from tanktrack.core.tank_templates import build_tank


@pytest.fixture
def eb16() -> Tank:
    return build_tank("EB16-STE-089", "WATER TANKS", "Left Center", 455, 280)


@pytest.fixture
def plain() -> Tank:
    return build_tank("PBF-S2-01", "SEWAGE WATER", "Bottom Right", 570, 860)


class TestDescriptors:
    def test_sub_tank_descriptor_uses_parent(self, eb16):
        d = descriptor_for(eb16, 1)
        assert d.id == "EB16-STE-089-TANK-02"
        assert d.parent_id == "EB16-STE-089"
        assert d.type == "WATER TANKS"
        assert d.index == 1

    def test_plain_tank_ignores_index(self, plain):
        assert descriptor_for(plain, 3).parent_id is None

    def test_sub_tank_profiles(self, eb16):
        assert profile_for(eb16, 0).stages == DWALL_PRIMARY_STAGES
        assert profile_for(eb16, 1).stages == DWALL_SECONDARY_STAGES
        assert profile_for(eb16, 2).stages == DWALL_SECONDARY_STAGES


class TestSeededGroup:
    def test_each_sub_tank_seeded(self, eb16):
        assert eb16.is_grouped
        assert len(eb16.sub_tanks) == 3
        for idx, sub in enumerate(eb16.sub_tanks):
            assert [p.stage for p in sub.progress] == list(profile_for(eb16, idx).stages)
            assert sub.current_stage is Stage.FORMWORK_REMOVAL

    def test_parent_progress_unused(self, eb16):
        assert eb16.progress == []
        assert eb16.current_stage is None

    def test_iter_entities(self, eb16, plain):
        assert [r.id for r, _ in iter_entities(eb16)] == [s.id for s in eb16.sub_tanks]
        assert [r for r, _ in iter_entities(plain)] == [plain]


class TestRouting:
    def test_advance_only_touches_selected_sub_tank(self, eb16):
        updated = advance_tank(eb16, Stage.FORMWORK_REMOVAL, 1)

        assert updated.sub_tanks[1].current_stage is Stage.REPAIR_AND_CLEANING
        assert updated.sub_tanks[0] == eb16.sub_tanks[0]
        assert updated.sub_tanks[2] == eb16.sub_tanks[2]
        # Original untouched
        assert eb16.sub_tanks[1].current_stage is Stage.FORMWORK_REMOVAL

    def test_parent_stage_not_written(self, eb16):
        updated = advance_tank(eb16, Stage.FORMWORK_REMOVAL, 0)
        assert updated.current_stage is None

    def test_display_stage_follows_active_sub_tank(self, eb16):
        updated = advance_tank(eb16, Stage.FORMWORK_REMOVAL, 2)
        assert display_stage(updated, 2) is Stage.REPAIR_AND_CLEANING
        assert display_stage(updated, 0) is Stage.FORMWORK_REMOVAL
        assert display_stage(updated, 9) is None

    def test_default_sub_index_is_first(self, eb16):
        updated = advance_tank(eb16, Stage.FORMWORK_REMOVAL)
        assert updated.sub_tanks[0].current_stage is Stage.REPAIR_AND_CLEANING

    def test_bad_index_is_noop(self, eb16):
        assert advance_tank(eb16, Stage.FORMWORK_REMOVAL, 7) is eb16
        assert undo_tank(eb16, Stage.FORMWORK_REMOVAL, -1) is eb16
        assert click_action(eb16, Stage.FORMWORK_REMOVAL, 7) is ClickAction.IGNORE
        assert applicable_stages(eb16, 7) == []

    def test_stale_request_returns_same_tank(self, eb16):
        assert advance_tank(eb16, Stage.SLOPE, 0) is eb16

    def test_undo_on_sub_tank(self, eb16):
        updated = advance_tank(eb16, Stage.FORMWORK_REMOVAL, 1)
        assert click_action(updated, Stage.FORMWORK_REMOVAL, 1) is ClickAction.CONFIRM_UNDO

        reverted = undo_tank(updated, Stage.FORMWORK_REMOVAL, 1)
        sub = reverted.sub_tanks[1]
        assert sub.status_of(Stage.FORMWORK_REMOVAL) is StageStatus.IN_PROGRESS
        assert sub.status_of(Stage.REPAIR_AND_CLEANING) is StageStatus.NOT_STARTED
        assert sub.current_stage is Stage.FORMWORK_REMOVAL

    def test_plain_tank(self, plain):
        updated = advance_tank(plain, Stage.FORMWORK_REMOVAL)
        assert updated.current_stage is Stage.REPAIR_AND_CLEANING
        assert display_stage(updated) is Stage.REPAIR_AND_CLEANING
        assert applicable_stages(plain) == list(STANDARD_STAGES)
        assert active_sub_tank(plain) is None


class TestNormalizeTank:
    def test_backfills_sub_tanks(self):
        tank = Tank(
            id="EB9",
            type="WATER TANKS",
            is_grouped=True,
            sub_tanks=[SubTank(id="EB9-INTERIOR"), SubTank(id="EB9-EXTERIOR")],
        )
        updated = normalize_tank(tank)
        assert all(sub.progress for sub in updated.sub_tanks)
        assert tank.sub_tanks[0].progress == []

    def test_already_normalized_returns_same(self, eb16):
        assert normalize_tank(eb16) is eb16

    def test_grouped_flag_without_sub_tanks_acts_as_plain(self):
        tank = normalize_tank(Tank(id="EB9", type="WATER TANKS", is_grouped=True))
        assert tank.progress
        assert display_stage(tank) is Stage.FORMWORK_REMOVAL
