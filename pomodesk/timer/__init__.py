"""Timer package."""

from .engine import (
    TimerEngine,
    TimerMode,
    TimerStatus,
    TimerState,
    FocusCompleted,
    TICK_INTERVAL_MS,
)

__all__ = [
    "TimerEngine",
    "TimerMode",
    "TimerStatus",
    "TimerState",
    "FocusCompleted",
    "TICK_INTERVAL_MS",
]
