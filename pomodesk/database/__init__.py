"""Database package."""

from .db import get_session, init_db
from .models import FocusSession
from .history import (
    RangeSummary,
    TodaySummary,
    append_focus_session,
    get_range_summary,
    get_today_summary,
    list_recent_sessions,
)

__all__ = [
    "get_session",
    "init_db",
    "FocusSession",
    "RangeSummary",
    "TodaySummary",
    "append_focus_session",
    "get_range_summary",
    "get_today_summary",
    "list_recent_sessions",
]
