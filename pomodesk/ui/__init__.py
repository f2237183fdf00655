"""UI package."""

from .timer_widget import TimerWidget
from .summary_widget import SummaryWidget
from .settings_dialog import SettingsDialog

__all__ = [
    "TimerWidget",
    "SummaryWidget",
    "SettingsDialog",
]
