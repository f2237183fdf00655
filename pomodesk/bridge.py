"""Command boundary between the GUI and the timer engine.

The GUI never touches :class:`TimerEngine` directly.  It calls the
methods here, which validate input, forward to the engine, and keep the
settings file and the focus history in step with what the engine does.

Failures to persist are logged and otherwise ignored: the countdown
keeps going even when the disk does not cooperate.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy.exc import SQLAlchemyError

from .database.history import (
    RangeSummary,
    TodaySummary,
    append_focus_session,
    get_range_summary,
    get_today_summary,
)
from .settings import SettingsError, TimerSettings, save_settings, validate_settings_patch
from .timer.engine import FocusCompleted, TimerEngine, TimerMode, TimerState


logger = logging.getLogger(__name__)


class CommandRejected(ValueError):
    """A command was refused because its input is invalid."""


class TimerBridge(QObject):
    """Validated command surface over a :class:`TimerEngine`.

    Signals
    -------
    state_changed(state: TimerState)
        Re-broadcast of every engine state change.
    history_changed()
        A completed focus segment was written to the history.
    """

    state_changed = pyqtSignal(object)
    history_changed = pyqtSignal()

    def __init__(
        self,
        engine: TimerEngine,
        parent: QObject | None = None,
        *,
        settings_path: Path | None = None,
        persist: bool = True,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._settings_path = settings_path
        self._persist = persist

        self._unsubscribe = engine.on_state_changed(self.state_changed.emit)
        engine.focus_completed.connect(self._on_focus_completed)

    # ══════════════════════════════════════════════════════════════════
    #  TIMER COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def get_state(self) -> TimerState:
        return self._engine.get_state()

    def start(self) -> TimerState:
        return self._engine.start()

    def pause(self) -> TimerState:
        return self._engine.pause()

    def reset(self) -> TimerState:
        return self._engine.reset()

    def skip(self) -> TimerState:
        return self._engine.skip()

    def set_mode(self, mode: Any) -> TimerState:
        try:
            parsed = TimerMode(mode)
        except ValueError:
            raise CommandRejected(f"Invalid timer mode: {mode!r}") from None
        return self._engine.set_mode(parsed)

    def update_settings(self, patch: Any) -> TimerState:
        try:
            clean = validate_settings_patch(patch)
        except SettingsError as exc:
            raise CommandRejected(str(exc)) from exc

        state = self._engine.update_settings(clean)
        self._save_settings(state.settings)
        return state

    # ══════════════════════════════════════════════════════════════════
    #  QUERIES
    # ══════════════════════════════════════════════════════════════════

    def get_settings(self) -> TimerSettings:
        return self._engine.settings

    def get_today_summary(self) -> TodaySummary:
        return get_today_summary()

    def get_range_summary(self, days: int = 7) -> RangeSummary:
        return get_range_summary(days)

    def close(self) -> None:
        """Stop listening to the engine."""
        self._unsubscribe()
        try:
            self._engine.focus_completed.disconnect(self._on_focus_completed)
        except TypeError:
            pass  # engine already disposed

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — persistence
    # ══════════════════════════════════════════════════════════════════

    def _save_settings(self, settings: TimerSettings) -> None:
        if not self._persist:
            return
        try:
            save_settings(settings, self._settings_path)
        except OSError:
            logger.exception("Could not save settings")

    def _on_focus_completed(self, event: FocusCompleted) -> None:
        if not self._persist:
            return
        try:
            append_focus_session(event.ended_at_ms, event.planned_duration_ms)
        except (SQLAlchemyError, ValueError):
            logger.exception("Could not record completed focus session")
            return
        self.history_changed.emit()
