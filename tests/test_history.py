"""Tests for the focus history store: appends and summaries.

Covers:
- append_focus_session validation and derived start time
- get_today_summary on local calendar-day boundaries
- get_range_summary window and day normalisation
- list_recent_sessions ordering, limit and day filter
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

import pytest

from pomodesk.database.db import get_session
from pomodesk.database.history import (
    append_focus_session,
    get_range_summary,
    get_today_summary,
    list_recent_sessions,
)
from pomodesk.database.models import FocusSession

FOCUS_MS = 25 * 60_000
NOW = datetime(2026, 3, 10, 14, 30)


def _ms(dt: datetime) -> float:
    """Local naive datetime → epoch milliseconds."""
    return dt.timestamp() * 1000


def _add(ended: datetime, planned_ms: float = FOCUS_MS) -> FocusSession:
    return append_focus_session(_ms(ended), planned_ms)


# ═══════════════════════════════════════════════════════════════════════
#  APPEND
# ═══════════════════════════════════════════════════════════════════════


class TestAppend:
    def test_append_returns_record_with_id(self):
        record = _add(NOW)
        assert record.id is not None
        assert record.session_type == "focus"
        assert record.ended_at == NOW
        assert record.started_at == NOW - timedelta(minutes=25)
        assert record.planned_duration_ms == FOCUS_MS

    def test_ids_are_distinct(self):
        a = _add(NOW)
        b = _add(NOW)
        assert a.id != b.id

    def test_persisted(self):
        _add(NOW)
        with get_session() as db:
            assert db.query(FocusSession).count() == 1

    def test_planned_minutes(self):
        assert _add(NOW, 90_000).planned_minutes == 1.5

    @pytest.mark.parametrize("ended,planned", [
        (math.nan, FOCUS_MS),
        (math.inf, FOCUS_MS),
        (_ms(NOW), math.nan),
        (_ms(NOW), 0),
        (_ms(NOW), -1),
        ("now", FOCUS_MS),
    ])
    def test_invalid_payload_rejected(self, ended, planned):
        with pytest.raises(ValueError):
            append_focus_session(ended, planned)
        with get_session() as db:
            assert db.query(FocusSession).count() == 0


# ═══════════════════════════════════════════════════════════════════════
#  TODAY SUMMARY
# ═══════════════════════════════════════════════════════════════════════


class TestTodaySummary:
    def test_empty(self):
        summary = get_today_summary(NOW)
        assert summary.date == NOW.date()
        assert summary.pomodoros == 0
        assert summary.focus_minutes == 0

    def test_counts_only_today(self):
        _add(NOW - timedelta(hours=3))
        _add(NOW - timedelta(hours=1), 50 * 60_000)
        _add(datetime(2026, 3, 9, 23, 30))
        summary = get_today_summary(NOW)
        assert summary.pomodoros == 2
        assert summary.focus_minutes == pytest.approx(75)

    def test_midnight_belongs_to_new_day(self):
        _add(datetime(2026, 3, 10, 0, 0, 0))
        _add(datetime(2026, 3, 9, 23, 59, 59))
        assert get_today_summary(NOW).pomodoros == 1

    def test_later_today_still_counts(self):
        # today means the calendar day, not "up to now"
        _add(datetime(2026, 3, 10, 23, 0))
        assert get_today_summary(NOW).pomodoros == 1

    def test_default_now(self):
        append_focus_session(datetime.now().timestamp() * 1000, FOCUS_MS)
        summary = get_today_summary()
        assert summary.date == date.today()
        assert summary.pomodoros == 1


# ═══════════════════════════════════════════════════════════════════════
#  RANGE SUMMARY
# ═══════════════════════════════════════════════════════════════════════


class TestRangeSummary:
    def test_seven_day_window(self):
        _add(datetime(2026, 3, 4, 0, 5))      # 6 days ago, inside
        _add(datetime(2026, 3, 3, 23, 0))     # 7 days ago, outside
        _add(NOW - timedelta(minutes=1))      # inside
        _add(NOW + timedelta(hours=1))        # after now, outside

        summary = get_range_summary(7, NOW)
        assert summary.days == 7
        assert summary.from_date == date(2026, 3, 4)
        assert summary.to_date == date(2026, 3, 10)
        assert summary.pomodoros == 2
        assert summary.focus_minutes == pytest.approx(50)

    def test_end_is_inclusive(self):
        _add(NOW)
        assert get_range_summary(1, NOW).pomodoros == 1

    @pytest.mark.parametrize("days,expected", [(0, 1), (-4, 1), (2.9, 2), (30, 30)])
    def test_days_normalised(self, days, expected):
        summary = get_range_summary(days, NOW)
        assert summary.days == expected
        assert summary.from_date == NOW.date() - timedelta(days=expected - 1)

    def test_one_day_equals_today_so_far(self):
        _add(NOW - timedelta(hours=2))
        _add(datetime(2026, 3, 9, 12, 0))
        assert get_range_summary(1, NOW).pomodoros == 1


# ═══════════════════════════════════════════════════════════════════════
#  RECENT SESSIONS
# ═══════════════════════════════════════════════════════════════════════


class TestRecentSessions:
    def test_most_recent_first(self):
        _add(NOW - timedelta(hours=2))
        latest = _add(NOW)
        _add(NOW - timedelta(hours=1))
        sessions = list_recent_sessions()
        assert sessions[0].id == latest.id
        assert [s.ended_at for s in sessions] == sorted(
            (s.ended_at for s in sessions), reverse=True,
        )

    def test_limit(self):
        for i in range(8):
            _add(NOW - timedelta(minutes=30 * i))
        assert len(list_recent_sessions(5)) == 5

    def test_day_filter(self):
        _add(NOW)
        _add(datetime(2026, 3, 9, 12, 0))
        sessions = list_recent_sessions(day=NOW.date())
        assert len(sessions) == 1
        assert sessions[0].ended_at.date() == NOW.date()

    def test_attributes_available_after_session_closes(self):
        _add(NOW)
        (sess,) = list_recent_sessions()
        assert sess.planned_duration_ms == FOCUS_MS
