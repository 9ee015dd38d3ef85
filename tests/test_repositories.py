"""
Repository tests against an in-memory SQLite database.
"""

from tanktrack.core.group_service import advance_tank
from tanktrack.core.records import Level, Tank
from tanktrack.core.stages import Stage
from tanktrack.db.repositories import (
    delete_tank,
    get_level_tanks,
    get_tank,
    get_tanks_data,
    save_tank,
    seed_tanks,
)


class TestSeed:
    async def test_seed_writes_every_tank(self, db_session, seed_data):
        written = await seed_tanks(db_session, seed_data)
        await db_session.commit()

        assert written == 29
        data = await get_tanks_data(db_session)
        assert data == seed_data

    async def test_seed_keeps_existing(self, db_session, seed_data):
        await seed_tanks(db_session, seed_data)
        tank = advance_tank(seed_data.n10_tanks["PBF-S2-01"], Stage.FORMWORK_REMOVAL)
        await save_tank(db_session, Level.N10, tank)

        assert await seed_tanks(db_session, seed_data) == 0
        stored = await get_tank(db_session, Level.N10, "PBF-S2-01")
        assert stored.current_stage is Stage.REPAIR_AND_CLEANING

    async def test_seed_overwrite(self, db_session, seed_data):
        await seed_tanks(db_session, seed_data)
        assert await seed_tanks(db_session, seed_data, overwrite=True) == 29


class TestTankDocuments:
    async def test_save_and_get(self, db_session):
        tank = Tank(id="T-1", name="Test", type="SEWAGE WATER")
        await save_tank(db_session, Level.N20, tank)
        await db_session.commit()

        stored = await get_tank(db_session, Level.N20, "T-1")
        assert stored.name == "Test"
        # Loading back-fills progress for the applicable stages
        assert stored.current_stage is Stage.FORMWORK_REMOVAL

    async def test_same_id_on_different_levels(self, db_session):
        await save_tank(db_session, Level.N00, Tank(id="T-1", name="low"))
        await save_tank(db_session, Level.N10, Tank(id="T-1", name="high"))

        assert (await get_tank(db_session, Level.N00, "T-1")).name == "low"
        assert (await get_tank(db_session, Level.N10, "T-1")).name == "high"

    async def test_update_replaces_document(self, db_session, seed_data):
        await seed_tanks(db_session, seed_data)
        tank = advance_tank(seed_data.n10_tanks["EB9"], Stage.FORMWORK_REMOVAL, 1)
        await save_tank(db_session, Level.N10, tank)
        await db_session.commit()

        stored = await get_tank(db_session, Level.N10, "EB9")
        assert stored.sub_tanks[1].current_stage is Stage.REPAIR_AND_CLEANING
        assert stored.sub_tanks[0].current_stage is Stage.FORMWORK_REMOVAL

    async def test_missing_tank(self, db_session):
        assert await get_tank(db_session, Level.N30, "nope") is None

    async def test_level_tanks_sorted(self, db_session, seed_data):
        await seed_tanks(db_session, seed_data)
        tanks = await get_level_tanks(db_session, Level.N20)
        ids = [t.id for t in tanks]
        assert ids == sorted(seed_data.n20_tanks)

    async def test_delete(self, db_session, seed_data):
        await seed_tanks(db_session, seed_data)
        assert await delete_tank(db_session, Level.N20, "PBF-S1-02")
        assert not await delete_tank(db_session, Level.N20, "PBF-S1-02")
        assert await get_tank(db_session, Level.N20, "PBF-S1-02") is None
