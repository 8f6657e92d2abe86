"""Application state values.

Every screen is a frozen dataclass tagged with its kind; ``AppState`` holds
exactly one of them. State changes go through ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .animation import Animation
from .config import Settings
from .daily import DailyProgress
from .problems import Problem
from .session import Session
from .stats import Summary

HOME = "home"
PATTERN_SELECTION = "pattern_selection"
PROBLEM_LIST = "problem_list"
PROBLEM_DETAIL = "problem_detail"
SESSION = "session"
STATS = "stats"
DAILY = "daily"
SETTINGS = "settings"

SCREEN_KINDS: tuple[str, ...] = (
    HOME,
    PATTERN_SELECTION,
    PROBLEM_LIST,
    PROBLEM_DETAIL,
    SESSION,
    STATS,
    DAILY,
    SETTINGS,
)

LEVEL_INFO = "info"
LEVEL_WARNING = "warning"
LEVEL_ERROR = "error"

HOME_MENU: tuple[str, ...] = (
    "Start Practice Session",
    "Daily Scales",
    "View Statistics",
    "Settings",
    "Quit",
)

SETTINGS_FIELDS: tuple[str, ...] = ("language", "mode", "timer", "editor", "theme")


@dataclass(frozen=True)
class HomeScreen:
    kind: ClassVar[str] = HOME

    selected: int = 0


@dataclass(frozen=True)
class PatternSelectionScreen:
    kind: ClassVar[str] = PATTERN_SELECTION

    selected: int = 0


@dataclass(frozen=True)
class ProblemListScreen:
    kind: ClassVar[str] = PROBLEM_LIST

    pattern: str | None = None
    selected: int = 0


@dataclass(frozen=True)
class ProblemDetailScreen:
    kind: ClassVar[str] = PROBLEM_DETAIL

    problem_id: str
    mode: str = "practice"
    show_info: bool = False
    show_hint: bool = False
    scroll: int = 0


@dataclass(frozen=True)
class SessionScreen:
    kind: ClassVar[str] = SESSION

    session: Session
    scroll: int = 0


@dataclass(frozen=True)
class StatsScreen:
    kind: ClassVar[str] = STATS

    summary: Summary | None = None
    earned: tuple[str, ...] = ()
    loading: bool = True


@dataclass(frozen=True)
class DailyScreen:
    kind: ClassVar[str] = DAILY

    pattern: str | None = None
    progress: DailyProgress | None = None
    loading: bool = True


@dataclass(frozen=True)
class SettingsScreen:
    kind: ClassVar[str] = SETTINGS

    selected: int = 0
    editing: bool = False
    edit_value: str = ""


Screen = (
    HomeScreen
    | PatternSelectionScreen
    | ProblemListScreen
    | ProblemDetailScreen
    | SessionScreen
    | StatsScreen
    | DailyScreen
    | SettingsScreen
)

SCREEN_TYPES: tuple[type, ...] = (
    HomeScreen,
    PatternSelectionScreen,
    ProblemListScreen,
    ProblemDetailScreen,
    SessionScreen,
    StatsScreen,
    DailyScreen,
    SettingsScreen,
)


@dataclass(frozen=True)
class StatusLine:
    text: str
    level: str = LEVEL_INFO
    until: float = 0.0


@dataclass(frozen=True)
class AppState:
    screen: Screen
    settings: Settings
    previous: str | None = None
    animation: Animation | None = None
    problems: tuple[Problem, ...] = ()
    problems_loaded: bool = False
    selected_pattern: str | None = None
    selected_problem_id: str | None = None
    daily_pattern: str | None = None
    status: StatusLine | None = None
    width: int = 80
    height: int = 24
    quitting: bool = False

    @property
    def kind(self) -> str:
        return self.screen.kind


def check_exhaustive(table: dict[type, object], what: str) -> None:
    """Fail at import time when ``table`` misses a screen type."""
    missing = [screen_type.__name__ for screen_type in SCREEN_TYPES if screen_type not in table]
    if missing:
        raise RuntimeError(f"{what} has no entry for: {', '.join(missing)}")
