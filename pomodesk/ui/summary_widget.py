"""Summary widget: today's pomodoros, last-week totals, recent sessions."""

from __future__ import annotations

from datetime import date

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
)

from ..bridge import TimerBridge
from ..database.history import list_recent_sessions
from ..database.models import FocusSession


def format_minutes(minutes: float) -> str:
    """``125`` → ``"2h 5m"``; fractions are rounded to whole minutes."""
    total = max(0, round(minutes))
    hours, mins = divmod(total, 60)
    if hours:
        return f"{hours}h {mins}m"
    return f"{mins}m"


class SummaryWidget(QWidget):
    """Displays history totals below the timer."""

    RECENT_LIMIT = 5
    RANGE_DAYS = 7

    def __init__(self, bridge: TimerBridge, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._bridge = bridge
        self._row_widgets: list[QWidget] = []
        self._build_ui()
        bridge.history_changed.connect(self.refresh)
        self.refresh()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(6)

        self._today_label = QLabel()
        self._today_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._today_label.setStyleSheet("font-size: 13px; font-weight: 600;")
        layout.addWidget(self._today_label)

        self._range_label = QLabel()
        self._range_label.setObjectName("metaLabel")
        self._range_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._range_label)

        self._rows_container = QVBoxLayout()
        self._rows_container.setSpacing(4)
        layout.addLayout(self._rows_container)

        self._empty_label = QLabel("No pomodoros yet today")
        self._empty_label.setObjectName("metaLabel")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._empty_label)

    # ── refresh ───────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Reload totals and today's recent sessions from the database."""
        today = self._bridge.get_today_summary()
        week = self._bridge.get_range_summary(self.RANGE_DAYS)

        self._today_label.setText(
            f"Today: {today.pomodoros} pomodoros · "
            f"{format_minutes(today.focus_minutes)} focus"
        )
        self._range_label.setText(
            f"Last {week.days} days: {week.pomodoros} pomodoros · "
            f"{format_minutes(week.focus_minutes)}"
        )

        for w in self._row_widgets:
            w.setParent(None)
            w.deleteLater()
        self._row_widgets.clear()

        sessions = list_recent_sessions(self.RECENT_LIMIT, day=date.today())
        self._empty_label.setVisible(not sessions)
        for sess in sessions:
            row = self._make_row(sess)
            self._rows_container.addWidget(row)
            self._row_widgets.append(row)

    def _make_row(self, sess: FocusSession) -> QWidget:
        frame = QWidget(self)
        row = QHBoxLayout(frame)
        row.setContentsMargins(8, 2, 8, 2)

        when = QLabel(
            f"{sess.started_at:%H:%M} – {sess.ended_at:%H:%M}", frame,
        )
        dur = QLabel(format_minutes(sess.planned_minutes), frame)
        dur.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)

        row.addWidget(when)
        row.addWidget(dur)
        return frame

    # ── accessors ─────────────────────────────────────────────────────

    @property
    def today_text(self) -> str:
        return self._today_label.text()

    @property
    def range_text(self) -> str:
        return self._range_label.text()

    @property
    def row_count(self) -> int:
        return len(self._row_widgets)
