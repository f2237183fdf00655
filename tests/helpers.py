"""Shared test helpers for PomoDesk."""

from pomodesk.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture signal emissions / listener calls into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Wall clock in epoch milliseconds that only moves when told to."""

    START_MS = 1_767_225_600_000  # 2026-01-01T00:00:00Z

    def __init__(self, now_ms: float = START_MS):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


def complete_segment(engine: TimerEngine, clock: FakeClock) -> None:
    """Run the current segment to zero and deliver one periodic tick."""
    if engine.status.value != "running":
        engine.start()
    clock.advance(engine.get_state().remaining_ms)
    engine._on_tick()
