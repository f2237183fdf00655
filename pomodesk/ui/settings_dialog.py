"""Settings dialog for PomoDesk.

A modal dialog for the timer durations, the long-break interval and
auto-start.  It does not save anything itself: the caller reads
:meth:`SettingsDialog.patch` after ``exec()`` and sends it through the
bridge, which validates, applies and persists it.
"""

from __future__ import annotations

from typing import Any

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QDoubleSpinBox, QCheckBox, QPushButton, QWidget,
)

from ..settings import TimerSettings


class SettingsDialog(QDialog):
    """Modal dialog for the timer settings."""

    def __init__(
        self,
        settings: TimerSettings,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(360)
        self.setModal(True)

        self._settings = settings

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        header = QLabel("Timer")
        header.setStyleSheet("font-size: 15px; font-weight: 700;")
        root.addWidget(header)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(10)

        self._focus_spin = self._minutes_spin(600)
        form.addRow("Focus:", self._focus_spin)

        self._short_spin = self._minutes_spin(120)
        form.addRow("Short break:", self._short_spin)

        self._long_spin = self._minutes_spin(240)
        form.addRow("Long break:", self._long_spin)

        self._every_spin = QSpinBox()
        self._every_spin.setRange(1, 99)
        self._every_spin.setPrefix("every ")
        self._every_spin.setSuffix(" focus")
        form.addRow("Long break:", self._every_spin)

        self._auto_start_cb = QCheckBox("Start the next segment automatically")
        form.addRow("", self._auto_start_cb)

        root.addLayout(form)
        root.addStretch()

        # ── buttons ──────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        save_btn = QPushButton("Save")
        save_btn.setObjectName("primaryButton")
        save_btn.setDefault(True)
        save_btn.clicked.connect(self.accept)
        btn_row.addWidget(cancel_btn)
        btn_row.addWidget(save_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _minutes_spin(maximum: int) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setDecimals(1)
        spin.setRange(0.1, maximum)
        spin.setSingleStep(1.0)
        spin.setSuffix(" min")
        return spin

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE / READ BACK
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        s = self._settings
        self._focus_spin.setValue(s.focus_minutes)
        self._short_spin.setValue(s.short_break_minutes)
        self._long_spin.setValue(s.long_break_minutes)
        self._every_spin.setValue(s.long_break_every)
        self._auto_start_cb.setChecked(s.auto_start_next)
        # spin boxes round and clamp; only what the user touches goes back
        self._shown = self._values()

    def _values(self) -> dict[str, Any]:
        return {
            "focus_minutes": self._focus_spin.value(),
            "short_break_minutes": self._short_spin.value(),
            "long_break_minutes": self._long_spin.value(),
            "long_break_every": self._every_spin.value(),
            "auto_start_next": self._auto_start_cb.isChecked(),
        }

    def patch(self) -> dict[str, Any]:
        """The fields the user changed, as a partial settings patch."""
        return {
            key: value for key, value in self._values().items()
            if value != self._shown[key]
        }
