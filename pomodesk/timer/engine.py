"""Timer state machine for PomoDesk.

Modes
-----
FOCUS         Work segment.
SHORT_BREAK   Short rest after a focus segment.
LONG_BREAK    Long rest, every ``long_break_every`` completed focus segments.

Statuses
--------
IDLE          Segment loaded at full length, waiting for start.
RUNNING       Counting down against an absolute end timestamp.
PAUSED        Frozen with whatever time was left.

Transitions
-----------
IDLE | PAUSED → RUNNING                     (start)
RUNNING → PAUSED                            (pause)
Any → IDLE, same mode                       (reset)
Any → next segment, idle or running         (skip)
Any → chosen mode, IDLE                     (set_mode)
RUNNING → next segment, idle or running     (countdown reaches 0)

Remaining time is never decremented per tick.  A running segment stores
its wall-clock end and every observation recomputes
``max(0, end - now)``, so a late or skipped tick cannot make the
countdown drift.
"""

from __future__ import annotations

import itertools
import logging
import math
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Mapping

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..settings import DEFAULT_TIMER_SETTINGS, MS_PER_MINUTE, TimerSettings


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 250


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerState:
    """Immutable snapshot handed to listeners and returned by commands."""

    mode: TimerMode
    status: TimerStatus
    duration_ms: float
    remaining_ms: float
    completed_focus: int
    settings: TimerSettings


@dataclass(frozen=True)
class FocusCompleted:
    """Payload of ``TimerEngine.focus_completed``."""

    ended_at_ms: float
    planned_duration_ms: float


StateListener = Callable[[TimerState], None]


def _wall_clock_ms() -> float:
    return time.time() * 1000


def _normalize_minutes(value: Any, fallback: float) -> float:
    if (
        not isinstance(value, (int, float))
        or isinstance(value, bool)
        or not math.isfinite(value)
        or value <= 0
    ):
        return fallback
    return value


def _normalize_positive_int(value: Any, fallback: int) -> int:
    if (
        not isinstance(value, (int, float))
        or isinstance(value, bool)
        or not math.isfinite(value)
    ):
        return fallback
    return max(1, math.floor(value))


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-driven Pomodoro countdown with drift correction.

    Listeners registered with :meth:`on_state_changed` receive a fresh
    :class:`TimerState` after every change.

    Signals
    -------
    focus_completed(event: FocusCompleted)
        Emitted once per focus segment that runs down to zero.  Never
        emitted for ``skip`` or ``set_mode``.
    """

    focus_completed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: TimerSettings | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(parent)

        self._clock: Callable[[], float] = clock or _wall_clock_ms
        self._settings: TimerSettings = settings or DEFAULT_TIMER_SETTINGS

        # ── segment state ─────────────────────────────────────────────
        self._mode: TimerMode = TimerMode.FOCUS
        self._status: TimerStatus = TimerStatus.IDLE
        self._completed_focus: int = 0
        self._remaining_ms: float = self._mode_duration_ms(TimerMode.FOCUS)
        self._end_at_ms: float | None = None

        # ── observers ─────────────────────────────────────────────────
        self._listeners: dict[int, StateListener] = {}
        self._listener_ids = itertools.count()
        self._disposed: bool = False

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def completed_focus(self) -> int:
        return self._completed_focus

    @property
    def is_ticking(self) -> bool:
        """True while the periodic re-check timer is active."""
        return self._qt_timer.isActive()

    # ══════════════════════════════════════════════════════════════════
    #  COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def get_state(self) -> TimerState:
        if self._sync_running_state():
            self._emit_state()
        return self._snapshot()

    def start(self) -> TimerState:
        if self._status == TimerStatus.RUNNING:
            return self._snapshot()

        if self._status == TimerStatus.IDLE or self._remaining_ms <= 0:
            self._remaining_ms = self._mode_duration_ms(self._mode)

        self._status = TimerStatus.RUNNING
        self._end_at_ms = self._clock() + self._remaining_ms
        self._ensure_ticker()
        self._emit_state()
        return self._snapshot()

    def pause(self) -> TimerState:
        if self._status != TimerStatus.RUNNING:
            return self._snapshot()

        self._sync_running_state()
        # The reconcile above may have finished the segment into idle.
        if self._status == TimerStatus.RUNNING:
            self._status = TimerStatus.PAUSED
            self._end_at_ms = None
            self._stop_ticker()
        self._emit_state()
        return self._snapshot()

    def reset(self) -> TimerState:
        self._stop_ticker()
        self._status = TimerStatus.IDLE
        self._end_at_ms = None
        self._remaining_ms = self._mode_duration_ms(self._mode)
        self._emit_state()
        return self._snapshot()

    def skip(self) -> TimerState:
        """Advance to the next segment without counting this one.

        A skipped focus segment still occupies its slot in the cycle, so
        the break is chosen as if it had been the next completion.
        """
        if self._mode == TimerMode.FOCUS:
            next_mode = self._next_break_mode(self._completed_focus + 1)
        else:
            next_mode = TimerMode.FOCUS
        self._switch_segment(next_mode, self._settings.auto_start_next)
        self._emit_state()
        return self._snapshot()

    def set_mode(self, mode: TimerMode) -> TimerState:
        """Jump straight to *mode*, idle, bypassing the cycle rules."""
        self._switch_segment(TimerMode(mode), auto_start=False)
        self._emit_state()
        return self._snapshot()

    def update_settings(self, patch: Mapping[str, Any]) -> TimerState:
        """Merge *patch* onto the current settings.

        Bad values fall back to the current setting instead of raising;
        callers are expected to have validated already.
        """
        current = self._settings
        self._settings = replace(
            current,
            focus_minutes=_normalize_minutes(
                patch.get("focus_minutes"), current.focus_minutes,
            ),
            short_break_minutes=_normalize_minutes(
                patch.get("short_break_minutes"), current.short_break_minutes,
            ),
            long_break_minutes=_normalize_minutes(
                patch.get("long_break_minutes"), current.long_break_minutes,
            ),
            long_break_every=_normalize_positive_int(
                patch.get("long_break_every"), current.long_break_every,
            ),
            auto_start_next=(
                patch["auto_start_next"]
                if isinstance(patch.get("auto_start_next"), bool)
                else current.auto_start_next
            ),
        )

        duration_ms = self._mode_duration_ms(self._mode)
        if self._status == TimerStatus.IDLE:
            self._remaining_ms = duration_ms
        elif self._status == TimerStatus.PAUSED:
            # never hand a paused segment more time than it had
            self._remaining_ms = min(self._remaining_ms, duration_ms)
        else:
            self._sync_running_state()
            if self._status == TimerStatus.RUNNING:
                duration_ms = self._mode_duration_ms(self._mode)
                self._remaining_ms = min(self._remaining_ms, duration_ms)
                self._end_at_ms = self._clock() + self._remaining_ms

        self._emit_state()
        return self._snapshot()

    # ── observers ─────────────────────────────────────────────────────

    def on_state_changed(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        key = next(self._listener_ids)
        self._listeners[key] = listener

        def unsubscribe() -> None:
            self._listeners.pop(key, None)

        return unsubscribe

    def dispose(self) -> None:
        """Stop the timer and drop every observer.  Irreversible."""
        self._disposed = True
        self._stop_ticker()
        self._end_at_ms = None
        self._listeners.clear()
        try:
            self.focus_completed.disconnect()
        except TypeError:
            pass  # nothing was connected

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if self._sync_running_state():
            self._emit_state()

    def _sync_running_state(self) -> bool:
        """Recompute remaining time from the end timestamp.

        Returns True when anything observable changed, including a
        natural completion.
        """
        if self._status != TimerStatus.RUNNING or self._end_at_ms is None:
            return False

        remaining = max(0.0, self._end_at_ms - self._clock())
        if remaining > 0:
            if remaining == self._remaining_ms:
                return False
            self._remaining_ms = remaining
            return True

        self._complete_current_segment()
        return True

    def _complete_current_segment(self) -> None:
        ended_at_ms = self._end_at_ms
        if self._mode == TimerMode.FOCUS:
            planned_ms = self._mode_duration_ms(TimerMode.FOCUS)
            self._completed_focus += 1
            logger.debug("Focus segment #%d completed", self._completed_focus)
            self._switch_segment(
                self._next_break_mode(self._completed_focus),
                self._settings.auto_start_next,
            )
            self.focus_completed.emit(FocusCompleted(
                ended_at_ms=ended_at_ms,
                planned_duration_ms=planned_ms,
            ))
            return

        logger.debug("%s segment completed", self._mode.value)
        self._switch_segment(TimerMode.FOCUS, self._settings.auto_start_next)

    def _switch_segment(self, mode: TimerMode, auto_start: bool) -> None:
        self._stop_ticker()
        self._mode = mode
        self._remaining_ms = self._mode_duration_ms(mode)
        self._end_at_ms = None

        if auto_start:
            self._status = TimerStatus.RUNNING
            self._end_at_ms = self._clock() + self._remaining_ms
            self._ensure_ticker()
            return

        self._status = TimerStatus.IDLE

    def _next_break_mode(self, focus_count: int) -> TimerMode:
        if focus_count % self._settings.long_break_every == 0:
            return TimerMode.LONG_BREAK
        return TimerMode.SHORT_BREAK

    def _mode_duration_ms(self, mode: TimerMode) -> float:
        s = self._settings
        if mode == TimerMode.FOCUS:
            return s.focus_minutes * MS_PER_MINUTE
        if mode == TimerMode.SHORT_BREAK:
            return s.short_break_minutes * MS_PER_MINUTE
        return s.long_break_minutes * MS_PER_MINUTE

    def _ensure_ticker(self) -> None:
        if self._disposed or self._qt_timer.isActive():
            return
        self._qt_timer.start()

    def _stop_ticker(self) -> None:
        if self._qt_timer.isActive():
            self._qt_timer.stop()

    # ── notification ──────────────────────────────────────────────────

    def _emit_state(self) -> None:
        state = self._snapshot()
        # copy: listeners may unsubscribe while we iterate
        for listener in list(self._listeners.values()):
            listener(state)

    def _snapshot(self) -> TimerState:
        return TimerState(
            mode=self._mode,
            status=self._status,
            duration_ms=self._mode_duration_ms(self._mode),
            remaining_ms=self._remaining_ms,
            completed_focus=self._completed_focus,
            settings=self._settings,
        )
