"""UI theme definitions and selection helpers.

A theme is an immutable ANSI palette chosen once at startup and passed to the
renderer. Syntax highlighting style for code blocks is a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    title: str
    heading: str
    cursor: str
    selected: str
    dim: str
    key_hint: str
    easy: str
    medium: str
    hard: str
    timer_ok: str
    timer_warn: str
    timer_over: str
    passed: str
    failed: str
    status_info: str
    status_warning: str
    status_error: str
    confirm: str
    pygments_style: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    title="\033[1;38;5;62m",
    heading="\033[1;38;5;212m",
    cursor="\033[1;38;5;212m",
    selected="\033[1;38;5;229m",
    dim="\033[2;38;5;250m",
    key_hint="\033[38;5;241m",
    easy="\033[1;38;5;46m",
    medium="\033[1;38;5;214m",
    hard="\033[1;38;5;196m",
    timer_ok="\033[1;38;5;46m",
    timer_warn="\033[1;38;5;214m",
    timer_over="\033[1;38;5;196m",
    passed="\033[38;5;46m",
    failed="\033[38;5;196m",
    status_info="\033[38;5;81m",
    status_warning="\033[1;38;5;214m",
    status_error="\033[1;38;5;196m",
    confirm="\033[1;38;5;196m",
    pygments_style="monokai",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    title="\033[1;38;5;39m",
    heading="\033[1;38;5;45m",
    cursor="\033[1;38;5;45m",
    selected="\033[1;38;5;153m",
    dim="\033[2;38;5;110m",
    key_hint="\033[38;5;67m",
    easy="\033[1;38;5;84m",
    medium="\033[1;38;5;215m",
    hard="\033[1;38;5;203m",
    timer_ok="\033[1;38;5;84m",
    timer_warn="\033[1;38;5;215m",
    timer_over="\033[1;38;5;203m",
    passed="\033[38;5;84m",
    failed="\033[38;5;203m",
    status_info="\033[38;5;117m",
    status_warning="\033[1;38;5;215m",
    status_error="\033[1;38;5;203m",
    confirm="\033[1;38;5;203m",
    pygments_style="native",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    title="",
    heading="",
    cursor="",
    selected="",
    dim="",
    key_hint="",
    easy="",
    medium="",
    hard="",
    timer_ok="",
    timer_warn="",
    timer_over="",
    passed="",
    failed="",
    status_info="",
    status_warning="",
    status_error="",
    confirm="",
    pygments_style="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


def paint(theme_code: str, text: str, reset: str) -> str:
    """Wrap ``text`` in a palette code, leaving it bare for the plain theme."""
    if not theme_code or not text:
        return text
    return f"{theme_code}{text}{reset}"


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "paint",
    "resolve_theme",
]
