"""Main timer display widget.

Layout (top → bottom):
    - Mode tabs (Focus / Short Break / Long Break)
    - Mode title and MM:SS countdown
    - Progress bar and status line
    - Reset / Start|Pause / Skip
    - Inline error line for rejected commands
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QFrame, QProgressBar,
)

from ..bridge import CommandRejected, TimerBridge
from ..timer.engine import TimerMode, TimerState, TimerStatus


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.FOCUS:       "Focus",
    TimerMode.SHORT_BREAK: "Short Break",
    TimerMode.LONG_BREAK:  "Long Break",
}


def format_remaining(remaining_ms: float) -> str:
    """``90500`` → ``"01:30"``.  Partial seconds are dropped."""
    total_seconds = int(max(0, remaining_ms) // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


class TimerWidget(QWidget):
    """The countdown card."""

    def __init__(self, bridge: TimerBridge, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._bridge = bridge
        self._state: TimerState | None = None
        self._build_ui()
        self._connect_signals()
        self.render(bridge.get_state())

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 20, 32, 24)
        layout.setSpacing(8)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── mode tabs ────────────────────────────────────────────────
        tab_row = QHBoxLayout()
        tab_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode in TimerMode:
            btn = QPushButton(MODE_LABELS[mode], card)
            btn.setObjectName("modeTab")
            btn.setCheckable(True)
            self._mode_buttons[mode] = btn
            tab_row.addWidget(btn)
        layout.addLayout(tab_row)

        layout.addSpacing(12)

        # ── display ──────────────────────────────────────────────────
        self._title_label = QLabel(card)
        self._title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._title_label)

        self._time_label = QLabel(card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        self._meta_label = QLabel(card)
        self._meta_label.setObjectName("metaLabel")
        self._meta_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._meta_label)

        layout.addSpacing(12)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("Reset", card)
        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")
        self._skip_btn = QPushButton("Skip", card)

        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._skip_btn)
        layout.addLayout(btn_row)

        self._error_label = QLabel(card)
        self._error_label.setObjectName("errorLabel")
        self._error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._error_label.setVisible(False)
        layout.addWidget(self._error_label)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self.toggle_start_pause)
        self._reset_btn.clicked.connect(lambda: self._run(self._bridge.reset))
        self._skip_btn.clicked.connect(lambda: self._run(self._bridge.skip))
        for mode, btn in self._mode_buttons.items():
            btn.clicked.connect(
                lambda _checked, m=mode: self._run(lambda: self._bridge.set_mode(m))
            )
        self._bridge.state_changed.connect(self.render)

    # ── slots ─────────────────────────────────────────────────────────────

    def toggle_start_pause(self) -> None:
        if self._state is not None and self._state.status == TimerStatus.RUNNING:
            self._run(self._bridge.pause)
        else:
            self._run(self._bridge.start)

    def _run(self, command) -> None:
        try:
            self.render(command())
        except CommandRejected as exc:
            self.show_error(str(exc))
            return
        self.show_error("")

    def show_error(self, message: str) -> None:
        self._error_label.setText(message)
        self._error_label.setVisible(bool(message))

    def render(self, state: TimerState) -> None:
        self._state = state

        for mode, btn in self._mode_buttons.items():
            btn.setChecked(mode == state.mode)

        self._title_label.setText(MODE_LABELS[state.mode])
        self._time_label.setText(format_remaining(state.remaining_ms))

        if state.duration_ms > 0:
            elapsed = 1 - state.remaining_ms / state.duration_ms
            self._progress.setValue(int(max(0.0, min(1.0, elapsed)) * 1000))

        self._meta_label.setText(
            f"Status: {state.status.value} | Completed focus: {state.completed_focus}"
        )
        self._start_pause_btn.setText(
            "Pause" if state.status == TimerStatus.RUNNING else "Start"
        )

    # ── accessors (used by the window and tests) ─────────────────────────

    @property
    def state(self) -> TimerState | None:
        return self._state

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def start_pause_text(self) -> str:
        return self._start_pause_btn.text()

    @property
    def error_text(self) -> str:
        return self._error_label.text()
