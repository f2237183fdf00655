"""Timer settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/PomoDesk/settings.json

Usage::

    settings = load_settings()
    patch = validate_settings_patch({"focus_minutes": 50})
    save_settings(replace(settings, **patch))
"""

from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoDesk"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

MS_PER_MINUTE = 60 * 1000

SETTINGS_KEYS = (
    "focus_minutes",
    "short_break_minutes",
    "long_break_minutes",
    "long_break_every",
    "auto_start_next",
)

_MINUTE_KEYS = ("focus_minutes", "short_break_minutes", "long_break_minutes")


class SettingsError(ValueError):
    """A settings payload was rejected at the boundary."""


@dataclass(frozen=True)
class TimerSettings:
    """The timer configuration.  Frozen: replace it, don't mutate it."""

    focus_minutes: float = 25
    short_break_minutes: float = 5
    long_break_minutes: float = 15
    long_break_every: int = 4          # every Nth focus earns a long break
    auto_start_next: bool = False


DEFAULT_TIMER_SETTINGS = TimerSettings()


# ── validation ────────────────────────────────────────────────────────────


def _is_number(value: Any) -> bool:
    # bool is an int subclass; True is not a duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positive_number(value: Any, field_name: str) -> float:
    if not _is_number(value) or not math.isfinite(value) or value <= 0:
        raise SettingsError(f"Invalid {field_name}: must be a number > 0")
    return value


def _positive_integer(value: Any, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise SettingsError(f"Invalid {field_name}: must be an integer > 0")
    return value


def _boolean(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise SettingsError(f"Invalid {field_name}: must be boolean")
    return value


def validate_settings_patch(data: Any) -> dict[str, Any]:
    """Check a partial settings payload and return it as a clean patch.

    Raises :class:`SettingsError` for anything that is not a dict, for
    unknown keys, and for out-of-range values.
    """
    if not isinstance(data, dict):
        raise SettingsError("Invalid settings payload: expected object")

    for key in data:
        if key not in SETTINGS_KEYS:
            raise SettingsError(f"Unknown settings key: {key}")

    patch: dict[str, Any] = {}
    for key in _MINUTE_KEYS:
        if key in data:
            patch[key] = _positive_number(data[key], key)
    if "long_break_every" in data:
        patch["long_break_every"] = _positive_integer(
            data["long_break_every"], "long_break_every",
        )
    if "auto_start_next" in data:
        patch["auto_start_next"] = _boolean(
            data["auto_start_next"], "auto_start_next",
        )
    return patch


# ── persistence ───────────────────────────────────────────────────────────


def load_settings(path: Path | None = None) -> TimerSettings:
    """Load settings from disk, falling back to (and re-saving) defaults.

    Never raises: if even the defaults cannot be written, the failure is
    logged and the defaults are used for this run.
    """
    path = path or SETTINGS_PATH
    if not path.exists():
        _restore_defaults(path)
        return DEFAULT_TIMER_SETTINGS

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        patch = validate_settings_patch(data)
    except (OSError, ValueError) as exc:
        # JSONDecodeError and SettingsError are both ValueErrors
        logger.warning("Discarding unreadable settings at %s: %s", path, exc)
        _restore_defaults(path)
        return DEFAULT_TIMER_SETTINGS

    return TimerSettings(**patch)


def _restore_defaults(path: Path) -> None:
    try:
        save_settings(DEFAULT_TIMER_SETTINGS, path)
    except OSError:
        logger.exception("Could not write default settings to %s", path)


def save_settings(settings: TimerSettings, path: Path | None = None) -> None:
    """Write settings to disk as JSON, atomically."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(asdict(settings), indent=2) + "\n"

    fd, tmp_name = tempfile.mkstemp(
        prefix=f"{path.name}.", suffix=".tmp", dir=path.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
