"""
SQLAlchemy ORM models for the tank tracker.

Each tank is stored as one JSON document (its wire form, camelCase keys)
in `tank_documents`, keyed by level and tank id. The document holds the
tank's progress and any sub-tanks, so a progress update is a single row
write.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from tanktrack.core.records import Level


# ── Base ──────────────────────────────────────────────────────


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# ── Models ────────────────────────────────────────────────────


class TankDocument(Base):
    """A tank record as stored: one row per (level, tank id)."""

    __tablename__ = "tank_documents"

    level: Mapped[Level] = mapped_column(Enum(Level, name="tank_level"), primary_key=True)
    tank_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    document: Mapped[dict] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
