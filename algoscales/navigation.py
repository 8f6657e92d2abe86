"""Screen stack rules: depth, default parents, forward and back moves."""

from __future__ import annotations

from dataclasses import replace

from .animation import ANIMATION_SLIDE_LEFT, ANIMATION_SLIDE_RIGHT, Animation, new_animation
from .errors import NavigationError
from .problems import problems_for_pattern, scale_ordered_patterns
from .state import (
    DAILY,
    HOME,
    PATTERN_SELECTION,
    PROBLEM_DETAIL,
    PROBLEM_LIST,
    SESSION,
    SETTINGS,
    STATS,
    AppState,
    DailyScreen,
    HomeScreen,
    PatternSelectionScreen,
    ProblemDetailScreen,
    ProblemListScreen,
    Screen,
    SettingsScreen,
    StatsScreen,
)

DEPTH: dict[str, int] = {
    HOME: 0,
    PATTERN_SELECTION: 1,
    STATS: 1,
    DAILY: 1,
    SETTINGS: 1,
    PROBLEM_LIST: 2,
    PROBLEM_DETAIL: 3,
    SESSION: 4,
}

DEFAULT_PARENTS: dict[str, str] = {
    HOME: HOME,
    PATTERN_SELECTION: HOME,
    STATS: HOME,
    DAILY: HOME,
    SETTINGS: HOME,
    PROBLEM_LIST: PATTERN_SELECTION,
    PROBLEM_DETAIL: PROBLEM_LIST,
    SESSION: PROBLEM_DETAIL,
}


def pattern_choices(state: AppState) -> tuple[str | None, ...]:
    """Pattern menu entries; ``None`` stands for every problem."""
    return (None, *scale_ordered_patterns(state.problems))


def rebuild_screen(state: AppState, kind: str) -> Screen | None:
    """Recreate a screen from app-level selections, or ``None`` if impossible."""
    if kind == HOME:
        return HomeScreen()
    if kind == PATTERN_SELECTION:
        choices = pattern_choices(state)
        selected = choices.index(state.selected_pattern) if state.selected_pattern in choices else 0
        return PatternSelectionScreen(selected=selected)
    if kind == PROBLEM_LIST:
        ids = [problem.id for problem in problems_for_pattern(state.problems, state.selected_pattern)]
        selected = ids.index(state.selected_problem_id) if state.selected_problem_id in ids else 0
        return ProblemListScreen(pattern=state.selected_pattern, selected=selected)
    if kind == PROBLEM_DETAIL:
        if state.selected_problem_id is None:
            return None
        return ProblemDetailScreen(problem_id=state.selected_problem_id, mode=state.settings.mode)
    if kind == STATS:
        return StatsScreen()
    if kind == DAILY:
        return DailyScreen()
    if kind == SETTINGS:
        return SettingsScreen()
    # A session only exists while its screen is up.
    return None


def _transition(state: AppState, kind: str, now: float) -> Animation | None:
    animation = new_animation(kind, state.settings.animation_ms / 1000.0, now)
    return None if animation.complete else animation


def navigate(state: AppState, screen: Screen, now: float) -> AppState:
    """Show ``screen``, remembering the current kind as ``previous``."""
    current = state.kind
    if screen.kind == current:
        raise NavigationError(f"Already on the {current} screen")
    kind = ANIMATION_SLIDE_RIGHT if DEPTH[screen.kind] > DEPTH[current] else ANIMATION_SLIDE_LEFT
    return replace(state, screen=screen, previous=current, animation=_transition(state, kind, now))


def back_target(state: AppState) -> Screen:
    current = state.kind
    previous = state.previous
    if previous is not None and previous != current:
        screen = rebuild_screen(state, previous)
        if screen is not None:
            return screen
    kind = DEFAULT_PARENTS[current]
    while True:
        screen = rebuild_screen(state, kind)
        if screen is not None:
            return screen
        kind = DEFAULT_PARENTS[kind]


def handle_back(state: AppState, now: float) -> AppState:
    """Return to the previous screen, else to the default parent.

    ``previous`` is left equal to the new current kind, so a second back
    always follows the parent table and the walk ends at home.
    """
    current = state.kind
    target = back_target(state)
    if target.kind == current:
        return replace(state, previous=current)
    return replace(
        state,
        screen=target,
        previous=target.kind,
        animation=_transition(state, ANIMATION_SLIDE_LEFT, now),
    )
