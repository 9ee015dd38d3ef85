"""
Database repository for tank documents.

All raw database queries live here. Core business logic and the adapters
call these functions instead of touching SQLAlchemy directly. Documents
are validated into pydantic records on the way out and serialized back
to their camelCase wire form on the way in.

Functions flush but never commit; the caller owns the transaction.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tanktrack.core.group_service import normalize_tank
from tanktrack.core.records import Level, Tank, TanksData
from tanktrack.db.models import TankDocument

logger = logging.getLogger(__name__)


def _load(row: TankDocument) -> Tank:
    """Validate a stored document and back-fill progress for new stages."""
    return normalize_tank(Tank.model_validate(row.document))


async def get_tanks_data(session: AsyncSession) -> TanksData:
    """Every stored tank, grouped by level."""
    result = await session.execute(
        select(TankDocument).order_by(TankDocument.level, TankDocument.tank_id)
    )
    data = TanksData()
    for row in result.scalars():
        data.for_level(row.level)[row.tank_id] = _load(row)
    return data


async def get_level_tanks(session: AsyncSession, level: Level) -> list[Tank]:
    """Tanks of one level, ordered by id."""
    result = await session.execute(
        select(TankDocument)
        .where(TankDocument.level == level)
        .order_by(TankDocument.tank_id)
    )
    return [_load(row) for row in result.scalars()]


async def get_tank(session: AsyncSession, level: Level, tank_id: str) -> Tank | None:
    """Fetch one tank, or None if it is not stored."""
    row = await session.get(TankDocument, (level, tank_id))
    if row is None:
        return None
    return _load(row)


async def save_tank(session: AsyncSession, level: Level, tank: Tank) -> Tank:
    """Insert or replace a tank document."""
    row = await session.get(TankDocument, (level, tank.id))
    document = tank.to_document()
    if row is None:
        session.add(TankDocument(level=level, tank_id=tank.id, document=document))
        logger.info("Stored new tank %s on %s", tank.id, level.label)
    else:
        row.document = document
        logger.debug("Updated tank %s on %s", tank.id, level.label)
    await session.flush()
    return tank


async def delete_tank(session: AsyncSession, level: Level, tank_id: str) -> bool:
    """Remove a tank. Returns False if nothing was stored under that key."""
    result = await session.execute(
        delete(TankDocument).where(
            TankDocument.level == level,
            TankDocument.tank_id == tank_id,
        )
    )
    await session.flush()
    deleted = result.rowcount > 0
    if deleted:
        logger.info("Deleted tank %s on %s", tank_id, level.label)
    return deleted


async def seed_tanks(
    session: AsyncSession,
    data: TanksData,
    *,
    overwrite: bool = False,
) -> int:
    """
    Store every tank in `data`.

    Existing documents are kept unless `overwrite` is set, so seeding an
    already populated store only adds missing tanks. Returns the number of
    documents written.
    """
    written = 0
    for level, tank in data.iter_tanks():
        existing = await session.get(TankDocument, (level, tank.id))
        if existing is not None and not overwrite:
            continue
        await save_tank(session, level, tank)
        written += 1

    logger.info("Seeded %d tank document(s)", written)
    return written
