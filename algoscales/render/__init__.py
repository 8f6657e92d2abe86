"""Frame composition and terminal output.

``render`` is pure: it maps app state to a list of display lines sized to
the terminal. ``write_frame`` is the only function here with side effects.
"""

from __future__ import annotations

import os
import sys

from ..animation import apply
from ..ansi import clip_ansi_line
from ..session import needs_confirmation
from ..state import (
    LEVEL_ERROR,
    LEVEL_WARNING,
    PROBLEM_DETAIL,
    PROBLEM_LIST,
    SESSION,
    AppState,
    SessionScreen,
    SettingsScreen,
)
from ..ui_theme import PLAIN_THEME, UITheme, paint
from .hints import CONFIRM_HINTS, EDITING_HINTS, KEY_HINTS, format_hints
from .views import VIEWS, pattern_label

__all__ = ["render", "write_frame", "body_rows", "max_scroll", "pattern_label"]


# Hint rows beyond this are dropped so narrow terminals keep a body.
MAX_HINT_ROWS = 2


def _header(state: AppState, theme: UITheme) -> str:
    crumbs = ["Algo Scales"]
    if state.selected_pattern is not None and state.kind in (PROBLEM_LIST, PROBLEM_DETAIL, SESSION):
        crumbs.append(pattern_label(state.selected_pattern))
    return paint(theme.title, " > ".join(crumbs), theme.reset)


def _status(state: AppState, theme: UITheme, now: float) -> str | None:
    status = state.status
    if status is None or status.until <= now:
        return None
    code = theme.status_info
    if status.level == LEVEL_ERROR:
        code = theme.status_error
    elif status.level == LEVEL_WARNING:
        code = theme.status_warning
    return paint(code, status.text.splitlines()[0] if status.text else "", theme.reset)


def _hint_rows(state: AppState, theme: UITheme, width: int) -> list[str]:
    screen = state.screen
    hints = KEY_HINTS[state.kind]
    if isinstance(screen, SessionScreen) and screen.session.confirm_quit and needs_confirmation(screen.session):
        hints = CONFIRM_HINTS
    elif isinstance(screen, SettingsScreen) and screen.editing:
        hints = EDITING_HINTS
    return format_hints(hints, width, theme.key_hint, theme.reset)[:MAX_HINT_ROWS]


def _footer(state: AppState, theme: UITheme, now: float, width: int) -> list[str]:
    footer = []
    status = _status(state, theme, now)
    if status is not None:
        footer.append(status)
    footer.extend(_hint_rows(state, theme, width))
    return footer


def _scroll(screen: object) -> int:
    return getattr(screen, "scroll", 0)


def body_rows(state: AppState, now: float) -> int:
    """Rows left for the screen body once header and footer are placed."""
    width = max(1, state.width)
    height = max(1, state.height)
    return max(0, height - 2 - len(_footer(state, PLAIN_THEME, now, width)))


def max_scroll(state: AppState, now: float) -> int:
    """Largest useful scroll offset for the current screen body."""
    width = max(1, state.width)
    body = VIEWS[type(state.screen)](state, state.screen, PLAIN_THEME, now, width)
    return max(0, len(body) - body_rows(state, now))


def render(state: AppState, theme: UITheme, now: float) -> list[str]:
    """Compose exactly ``state.height`` lines no wider than ``state.width``."""
    width = max(1, state.width)
    height = max(1, state.height)
    header = [_header(state, theme), ""]
    footer = _footer(state, theme, now, width)

    rows = max(0, height - len(header) - len(footer))
    body = VIEWS[type(state.screen)](state, state.screen, theme, now, width)
    start = max(0, min(_scroll(state.screen), len(body) - rows))
    body = body[start : start + rows]
    body = apply(state.animation, "\n".join(body), width, rows).split("\n")[:rows]
    body.extend([""] * (rows - len(body)))

    lines = (header + body + footer)[:height]
    return [clip_ansi_line(line, width) for line in lines]


def write_frame(lines: list[str]) -> None:
    out = ["\033[H\033[J", "\r\n".join(lines)]
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))
