"""Completed-focus history: appends and summary queries.

All day boundaries are local calendar days.  Timestamps go into the
database as naive local datetimes (see :class:`FocusSession`).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from sqlalchemy import func

from .db import get_session
from .models import FocusSession


logger = logging.getLogger(__name__)

_MS_PER_MINUTE = 60000


@dataclass(frozen=True)
class TodaySummary:
    date: date
    pomodoros: int
    focus_minutes: float


@dataclass(frozen=True)
class RangeSummary:
    from_date: date
    to_date: date
    days: int
    pomodoros: int
    focus_minutes: float


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _count_and_total(start: datetime, end: datetime, *, end_inclusive: bool):
    """Return ``(pomodoros, total_planned_ms)`` for sessions ending in range."""
    with get_session() as db:
        upper = (
            FocusSession.ended_at <= end if end_inclusive
            else FocusSession.ended_at < end
        )
        count, total_ms = (
            db.query(
                func.count(FocusSession.id),
                func.coalesce(func.sum(FocusSession.planned_duration_ms), 0),
            )
            .filter(FocusSession.ended_at >= start, upper)
            .one()
        )
    return count, total_ms


# ── writes ────────────────────────────────────────────────────────────────


def append_focus_session(
    ended_at_ms: float, planned_duration_ms: float,
) -> FocusSession:
    """Record one naturally completed focus segment.

    *ended_at_ms* is a wall-clock epoch timestamp in milliseconds.  The
    start time is derived as ``ended_at - planned_duration``.
    """
    if not (
        isinstance(ended_at_ms, (int, float))
        and isinstance(planned_duration_ms, (int, float))
        and math.isfinite(ended_at_ms)
        and math.isfinite(planned_duration_ms)
    ):
        raise ValueError("Invalid session payload")
    if planned_duration_ms <= 0:
        raise ValueError("Invalid planned_duration_ms")

    ended_at = datetime.fromtimestamp(ended_at_ms / 1000)
    started_at = ended_at - timedelta(milliseconds=planned_duration_ms)

    with get_session() as db:
        record = FocusSession(
            session_type="focus",
            started_at=started_at,
            ended_at=ended_at,
            planned_duration_ms=planned_duration_ms,
        )
        db.add(record)
        db.flush()

    logger.info(
        "Recorded focus session %d (%.1f min)",
        record.id, planned_duration_ms / _MS_PER_MINUTE,
    )
    return record


# ── reads ─────────────────────────────────────────────────────────────────


def get_today_summary(now: datetime | None = None) -> TodaySummary:
    now = now or datetime.now()
    today = now.date()
    start = _start_of_day(today)
    count, total_ms = _count_and_total(
        start, start + timedelta(days=1), end_inclusive=False,
    )
    return TodaySummary(
        date=today,
        pomodoros=count,
        focus_minutes=total_ms / _MS_PER_MINUTE,
    )


def get_range_summary(days: int, now: datetime | None = None) -> RangeSummary:
    """Totals from the start of the day ``days - 1`` days ago up to *now*."""
    now = now or datetime.now()
    normalized_days = max(1, math.floor(days))
    range_start = _start_of_day(now.date()) - timedelta(days=normalized_days - 1)

    count, total_ms = _count_and_total(range_start, now, end_inclusive=True)
    return RangeSummary(
        from_date=range_start.date(),
        to_date=now.date(),
        days=normalized_days,
        pomodoros=count,
        focus_minutes=total_ms / _MS_PER_MINUTE,
    )


def list_recent_sessions(
    limit: int = 5, day: date | None = None,
) -> list[FocusSession]:
    """Most recent sessions first, optionally only those ending on *day*."""
    with get_session() as db:
        query = db.query(FocusSession)
        if day is not None:
            start = _start_of_day(day)
            query = query.filter(
                FocusSession.ended_at >= start,
                FocusSession.ended_at < start + timedelta(days=1),
            )
        return (
            query.order_by(FocusSession.ended_at.desc(), FocusSession.id.desc())
            .limit(limit)
            .all()
        )
