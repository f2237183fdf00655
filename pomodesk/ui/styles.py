"""QSS stylesheet and per-mode colours for PomoDesk."""

from __future__ import annotations

from ..timer.engine import TimerMode

# ── mode accents ──────────────────────────────────────────────────────────

MODE_COLORS: dict[TimerMode, str] = {
    TimerMode.FOCUS:       "#FF6B6B",   # warm coral
    TimerMode.SHORT_BREAK: "#4ECDC4",   # cool teal
    TimerMode.LONG_BREAK:  "#A18CD1",   # calm purple
}

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def accent_for(mode: TimerMode) -> str:
    return MODE_COLORS.get(mode, MODE_COLORS[TimerMode.FOCUS])


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(mode: TimerMode, palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    accent = accent_for(mode)
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {accent};
    }}

    QPushButton#primaryButton {{
        background-color: {accent};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#modeTab {{
        background-color: transparent;
        color: {p['text_muted']};
        border: none;
        border-bottom: 2px solid transparent;
        border-radius: 0px;
        padding: 8px 16px;
    }}

    QPushButton#modeTab:checked {{
        color: {accent};
        border-bottom: 2px solid {accent};
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    QLabel#timeLabel {{
        font-size: 64px;
        font-weight: 700;
        color: {accent};
    }}

    QLabel#metaLabel {{
        font-size: 12px;
        color: {p['text_muted']};
    }}

    QLabel#errorLabel {{
        font-size: 12px;
        color: {p['danger']};
    }}

    QProgressBar {{
        background-color: {p['bg']};
        border: none;
        border-radius: 3px;
        max-height: 6px;
    }}

    QProgressBar::chunk {{
        background-color: {accent};
        border-radius: 3px;
    }}
    """
