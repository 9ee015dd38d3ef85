"""
Main entry point for the tank progress tracker.

Run with:  python -m tanktrack          (Telegram bot)
           python -m tanktrack seed     (store the built-in tank list)
           python -m tanktrack seed --sample   (with the demo site state)

The HTTP API runs separately:  uvicorn tanktrack.api:app
"""

import asyncio
import logging
import sys

from tanktrack.config import settings


def setup_logging() -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def seed(sample_progress: bool = False) -> None:
    """Store every built-in tank that is not stored yet."""
    from tanktrack.core.tank_templates import build_seed_data
    from tanktrack.db.repositories import seed_tanks
    from tanktrack.db.session import async_session_factory

    async with async_session_factory() as session:
        written = await seed_tanks(session, build_seed_data(sample_progress))
        await session.commit()
    logging.getLogger(__name__).info("Seed finished: %d new tank(s)", written)


async def main() -> None:
    """Initialize and start the bot."""
    setup_logging()
    logger = logging.getLogger(__name__)

    args = sys.argv[1:]
    if args[:1] == ["seed"]:
        await seed(sample_progress="--sample" in args[1:])
        return

    logger.info("Starting tank progress tracker...")
    logger.info("Database: %s", settings.database_url.split("@")[-1])

    # Import adapter here to avoid loading aiogram before logging is configured
    from tanktrack.adapters.telegram.bot import TelegramAdapter

    adapter = TelegramAdapter()

    try:
        await adapter.start()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        await adapter.stop()


if __name__ == "__main__":
    asyncio.run(main())
