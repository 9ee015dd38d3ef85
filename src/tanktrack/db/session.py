"""
Async SQLAlchemy engine and session factory.

Usage:
    async with async_session_factory() as session:
        data = await get_tanks_data(session)

FastAPI endpoints receive a session through `Depends(get_session)`.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tanktrack.config import settings


def _engine_options(url: str) -> dict:
    # SQLite uses a static pool; sizing options are rejected there
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 5, "max_overflow": 10}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,  # log SQL statements when DEBUG=true
    **_engine_options(settings.database_url),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional async session scope."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
