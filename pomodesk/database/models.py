"""SQLAlchemy ORM models for PomoDesk."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Float
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class FocusSession(Base):
    """One focus segment that ran down to zero.

    Timestamps are naive local datetimes so that calendar-day grouping
    matches what the user sees on their clock.
    """

    __tablename__ = "focus_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_type = Column(String(20), nullable=False, default="focus")
    started_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    planned_duration_ms = Column(Float, nullable=False)

    @property
    def planned_minutes(self) -> float:
        return self.planned_duration_ms / 60000

    def __repr__(self) -> str:
        return (
            f"<FocusSession id={self.id} ended_at={self.ended_at} "
            f"planned={self.planned_duration_ms}ms>"
        )
