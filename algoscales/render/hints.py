"""Key-hint footers per screen kind."""

from __future__ import annotations

from ..state import (
    DAILY,
    HOME,
    PATTERN_SELECTION,
    PROBLEM_DETAIL,
    PROBLEM_LIST,
    SESSION,
    SETTINGS,
    STATS,
)

KEY_HINTS: dict[str, tuple[tuple[str, str], ...]] = {
    HOME: (("j/k", "move"), ("enter", "select"), ("q", "quit")),
    PATTERN_SELECTION: (("j/k", "move"), ("enter", "select"), ("esc", "back")),
    PROBLEM_LIST: (("j/k", "move"), ("enter", "open"), ("esc", "back")),
    PROBLEM_DETAIL: (
        ("enter", "start"),
        ("m", "mode"),
        ("h", "hint"),
        ("i", "info"),
        ("j/k", "scroll"),
        ("esc", "back"),
    ),
    SESSION: (
        ("e", "edit"),
        ("t", "test"),
        ("enter", "submit"),
        ("h", "hint"),
        ("s", "solution"),
        ("p", "pause"),
        ("n", "skip"),
        ("q", "quit"),
        ("j/k", "scroll"),
        ("esc", "back"),
    ),
    STATS: (("r", "refresh"), ("esc", "back")),
    DAILY: (("enter", "practice"), ("n", "skip"), ("r", "reset"), ("esc", "back")),
    SETTINGS: (("j/k", "move"), ("enter/l", "change"), ("h", "previous"), ("esc", "back")),
}

EDITING_HINTS: tuple[tuple[str, str], ...] = (("type", "edit"), ("enter", "save"), ("esc", "cancel"))
CONFIRM_HINTS: tuple[tuple[str, str], ...] = (("y", "yes"), ("n", "no"))


def format_hints(hints: tuple[tuple[str, str], ...], width: int, key_code: str, reset: str) -> list[str]:
    """Lay hints out left to right, starting a new row when one would overflow ``width``."""
    rows: list[str] = []
    row: list[str] = []
    used = 0
    for key, label in hints:
        cell = len(key) + 1 + len(label)
        gap = 2 if row else 0
        if row and used + gap + cell > width:
            rows.append("  ".join(row))
            row, used, gap = [], 0, 0
        styled = f"{key_code}{key}{reset}" if key_code else key
        row.append(f"{styled} {label}")
        used += gap + cell
    if row:
        rows.append("  ".join(row))
    return rows
