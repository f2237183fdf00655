"""Main application window for PomoDesk."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QStatusBar, QMessageBox,
)

from .bridge import CommandRejected, TimerBridge
from .timer.engine import TimerMode, TimerState, TimerStatus
from .ui.settings_dialog import SettingsDialog
from .ui.styles import build_stylesheet
from .ui.summary_widget import SummaryWidget
from .ui.timer_widget import MODE_LABELS, TimerWidget, format_remaining


logger = logging.getLogger(__name__)


class PomoDeskApp(QMainWindow):
    """Main application window."""

    def __init__(self, bridge: TimerBridge) -> None:
        super().__init__()
        self.setWindowTitle("PomoDesk")
        self.setMinimumSize(420, 560)

        self._bridge = bridge
        self._mode: TimerMode | None = None

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(8)

        self._timer_widget = TimerWidget(bridge, central)
        root_layout.addWidget(self._timer_widget)

        self._summary = SummaryWidget(bridge, central)
        root_layout.addWidget(self._summary)
        root_layout.addStretch()

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        # ── menu bar ──────────────────────────────────────────────────
        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        bridge.state_changed.connect(self._on_state_changed)
        self._on_state_changed(bridge.get_state())

    # ══════════════════════════════════════════════════════════════════
    #  MENU
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        timer_menu = self.menuBar().addMenu("Timer")

        settings_action = QAction("Settings…", self)
        settings_action.setShortcut(QKeySequence("Ctrl+,"))
        settings_action.triggered.connect(self.open_settings)
        timer_menu.addAction(settings_action)

        timer_menu.addSeparator()
        for mode in TimerMode:
            action = QAction(MODE_LABELS[mode], self)
            action.triggered.connect(
                lambda _checked=False, m=mode: self._bridge.set_mode(m)
            )
            timer_menu.addAction(action)

    # ══════════════════════════════════════════════════════════════════
    #  STATE
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        if state.mode != self._mode:
            self._mode = state.mode
            self.setStyleSheet(build_stylesheet(state.mode))

        label = MODE_LABELS[state.mode]
        if state.status == TimerStatus.RUNNING:
            self.setWindowTitle(f"{format_remaining(state.remaining_ms)} · {label}")
        else:
            self.setWindowTitle("PomoDesk")
        self._status_bar.showMessage(f"{label} · {state.status.value}")

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def open_settings(self) -> None:
        dlg = SettingsDialog(self._bridge.get_settings(), parent=self)
        if dlg.exec() != SettingsDialog.DialogCode.Accepted:
            return
        self.apply_settings_patch(dlg.patch())

    def apply_settings_patch(self, patch: dict) -> bool:
        """Send *patch* through the bridge; warn the user if it is refused."""
        try:
            self._bridge.update_settings(patch)
        except CommandRejected as exc:
            logger.warning("Settings rejected: %s", exc)
            QMessageBox.warning(self, "Settings", str(exc))
            return False
        return True

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD SHORTCUTS
    # ══════════════════════════════════════════════════════════════════

    def _on_space(self) -> None:
        """Start or pause the timer."""
        self._timer_widget.toggle_start_pause()

    def _on_escape(self) -> None:
        """Reset the timer (no-op when idle)."""
        if self._bridge.get_state().status != TimerStatus.IDLE:
            self._bridge.reset()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (start/pause) and Escape (reset) globally."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._on_escape()
            event.accept()
            return
        super().keyPressEvent(event)
