"""Per-screen views.

Each view maps ``(state, screen, theme, now, width)`` to body lines. Views are
presentation-only: they read state and never change it.
"""

from __future__ import annotations

from collections.abc import Callable

from ..ansi import wrap_plain_text
from ..config import DEFAULT_TIMER_MINUTES
from ..daily import SCALES, scale_for_pattern
from ..highlight import colorize_code
from ..navigation import pattern_choices
from ..problems import Problem, find_problem, problems_for_pattern
from ..session import Session, elapsed, format_clock, remaining
from ..stats import ACHIEVEMENTS
from ..state import (
    HOME_MENU,
    SETTINGS_FIELDS,
    AppState,
    DailyScreen,
    HomeScreen,
    PatternSelectionScreen,
    ProblemDetailScreen,
    ProblemListScreen,
    SessionScreen,
    SettingsScreen,
    StatsScreen,
    check_exhaustive,
)
from ..ui_theme import UITheme, paint

LOGO = "Algo Scales"
TAGLINE = "Practice algorithm patterns like a musician practices scales."

PATTERN_LABELS: dict[str, str] = {
    "sliding-window": "Sliding Window",
    "two-pointers": "Two Pointers",
    "fast-slow-pointers": "Fast & Slow Pointers",
    "hash-map": "Hash Map",
    "binary-search": "Binary Search",
    "dfs": "Depth-First Search",
    "bfs": "Breadth-First Search",
    "dynamic-programming": "Dynamic Programming",
    "greedy": "Greedy",
    "union-find": "Union-Find",
    "heap": "Heap / Priority Queue",
}

SETTINGS_LABELS: dict[str, str] = {
    "language": "Language",
    "mode": "Default mode",
    "timer": "Timer (minutes)",
    "editor": "Editor",
    "theme": "Theme",
}


def pattern_label(pattern: str | None) -> str:
    if pattern is None:
        return "All Problems"
    return PATTERN_LABELS.get(pattern, pattern.replace("-", " ").title())


def _menu(items: list[str], selected: int, theme: UITheme) -> list[str]:
    lines = []
    for index, item in enumerate(items):
        if index == selected:
            lines.append(paint(theme.cursor, "> ", theme.reset) + paint(theme.selected, item, theme.reset))
        else:
            lines.append(f"  {item}")
    return lines


def _difficulty(problem: Problem, theme: UITheme) -> str:
    code = {"easy": theme.easy, "medium": theme.medium, "hard": theme.hard}.get(problem.difficulty, theme.dim)
    return paint(code, problem.difficulty.capitalize(), theme.reset)


def _wrapped(text: str, width: int, indent: str = "") -> list[str]:
    return [indent + line for line in wrap_plain_text(text, max(10, width - len(indent)))]


def home_view(state: AppState, screen: HomeScreen, theme: UITheme, now: float, width: int) -> list[str]:
    lines = [
        paint(theme.title, LOGO, theme.reset),
        paint(theme.dim, TAGLINE, theme.reset),
        "",
    ]
    lines.extend(_menu(list(HOME_MENU), screen.selected, theme))
    if not state.problems_loaded:
        lines.extend(["", paint(theme.dim, "Loading problems...", theme.reset)])
    return lines


def pattern_view(
    state: AppState, screen: PatternSelectionScreen, theme: UITheme, now: float, width: int
) -> list[str]:
    choices = pattern_choices(state)
    items = []
    for pattern in choices:
        count = len(problems_for_pattern(state.problems, pattern))
        items.append(f"{pattern_label(pattern)} ({count})")
    lines = [paint(theme.heading, "Select a Pattern", theme.reset), ""]
    lines.extend(_menu(items, screen.selected, theme))
    return lines


def problem_list_view(
    state: AppState, screen: ProblemListScreen, theme: UITheme, now: float, width: int
) -> list[str]:
    problems = problems_for_pattern(state.problems, screen.pattern)
    lines = [paint(theme.heading, f"Problems: {pattern_label(screen.pattern)}", theme.reset), ""]
    if not problems:
        lines.append(paint(theme.dim, "No problems found.", theme.reset))
        return lines
    for index, problem in enumerate(problems):
        marker = paint(theme.cursor, "> ", theme.reset) if index == screen.selected else "  "
        title = paint(theme.selected, problem.title, theme.reset) if index == screen.selected else problem.title
        minutes = f"  ~{problem.estimated_minutes}m" if problem.estimated_minutes else ""
        lines.append(f"{marker}{title}  {_difficulty(problem, theme)}{paint(theme.dim, minutes, theme.reset)}")
    return lines


def _examples(problem: Problem, width: int) -> list[str]:
    lines: list[str] = []
    for number, example in enumerate(problem.examples, 1):
        lines.append(f"Example {number}:")
        lines.append(f"  Input:  {example.input}")
        lines.append(f"  Output: {example.output}")
        if example.explanation:
            lines.extend(_wrapped(f"Explanation: {example.explanation}", width, "  "))
    return lines


def problem_detail_view(
    state: AppState, screen: ProblemDetailScreen, theme: UITheme, now: float, width: int
) -> list[str]:
    problem = find_problem(state.problems, screen.problem_id)
    if problem is None:
        return [paint(theme.status_error, f"Problem not found: {screen.problem_id}", theme.reset)]
    patterns = ", ".join(pattern_label(tag) for tag in problem.patterns)
    lines = [
        f"{paint(theme.title, problem.title, theme.reset)}  {_difficulty(problem, theme)}",
        paint(theme.dim, f"Patterns: {patterns}", theme.reset),
        f"Mode: {paint(theme.selected, screen.mode, theme.reset)}",
        "",
    ]
    lines.extend(_wrapped(problem.description, width))
    if problem.examples:
        lines.append("")
        lines.extend(_examples(problem, width))
    if screen.show_info:
        lines.append("")
        lines.append(paint(theme.heading, "Constraints", theme.reset))
        lines.extend(f"  - {item}" for item in problem.constraints)
        if problem.estimated_minutes:
            lines.append(f"Estimated time: {problem.estimated_minutes} minutes")
        lines.append(f"Test cases: {len(problem.test_cases)}")
    if screen.show_hint and problem.pattern_explanation:
        lines.append("")
        lines.append(paint(theme.heading, "Pattern Hint", theme.reset))
        lines.extend(_wrapped(problem.pattern_explanation, width))
    return lines


def _timer(session: Session, theme: UITheme, now: float) -> str:
    left = remaining(session, now)
    if left <= 0:
        code = theme.timer_over
    elif left <= session.budget * 0.25:
        code = theme.timer_warn
    else:
        code = theme.timer_ok
    text = f"{format_clock(elapsed(session, now))} / {format_clock(session.budget)}"
    if session.paused:
        text += " (paused)"
    return paint(code, text, theme.reset)


def _results(session: Session, theme: UITheme) -> list[str]:
    passed = sum(1 for result in session.test_results if result.passed)
    lines = [paint(theme.heading, f"Tests {passed}/{len(session.test_results)}", theme.reset)]
    for result in session.test_results:
        mark = paint(theme.passed, "PASS", theme.reset) if result.passed else paint(theme.failed, "FAIL", theme.reset)
        line = f"  {mark} {result.input}  expected {result.expected}"
        if not result.passed:
            line += f"  got {result.actual}"
        lines.append(line)
    return lines


def session_view(state: AppState, screen: SessionScreen, theme: UITheme, now: float, width: int) -> list[str]:
    session = screen.session
    problem = session.problem
    lines = [
        f"{paint(theme.title, problem.title, theme.reset)}  {_difficulty(problem, theme)}  {_timer(session, theme, now)}",
        paint(theme.dim, f"Mode: {session.mode}  Language: {session.language}  Status: {session.status}", theme.reset),
    ]
    if session.busy is not None:
        lines.append(paint(theme.status_warning, "Running tests...", theme.reset))
    if session.confirm_quit:
        lines.append(paint(theme.confirm, session.message, theme.reset))
    elif session.message and session.busy is None:
        lines.extend(session.message.splitlines())
    lines.append("")
    lines.extend(_wrapped(problem.description, width))
    if problem.examples:
        lines.append("")
        lines.extend(_examples(problem, width))
    if session.test_results:
        lines.append("")
        lines.extend(_results(session, theme))
    lines.append("")
    lines.append(paint(theme.heading, f"Your Code ({session.language})", theme.reset))
    lines.extend(colorize_code(session.code, session.language, theme.pygments_style))
    if session.hint.shown and problem.pattern_explanation:
        lines.append("")
        lines.append(paint(theme.heading, "Hint", theme.reset))
        lines.extend(_wrapped(problem.pattern_explanation, width))
    if session.solution.shown:
        lines.append("")
        lines.append(paint(theme.heading, "Solution", theme.reset))
        for step in problem.solution_walkthrough:
            lines.extend(_wrapped(f"- {step}", width))
        solution = problem.solutions.get(session.language)
        if solution:
            lines.extend(colorize_code(solution, session.language, theme.pygments_style))
    return lines


def stats_view(state: AppState, screen: StatsScreen, theme: UITheme, now: float, width: int) -> list[str]:
    lines = [paint(theme.heading, "Statistics", theme.reset), ""]
    if screen.loading:
        lines.append(paint(theme.dim, "Loading statistics...", theme.reset))
        return lines
    summary = screen.summary
    if summary is None or summary.attempted == 0:
        lines.append("No attempts yet. Solve a problem to start your record.")
        return lines
    lines.extend(
        [
            f"Attempted:      {summary.attempted}",
            f"Solved:         {summary.solved}",
            f"Success rate:   {summary.success_rate * 100:.0f}%",
            f"Average solve:  {format_clock(summary.average_solve_seconds)}",
            f"Current streak: {summary.streak_days} day(s)",
        ]
    )
    if summary.fastest_problem_id:
        lines.append(f"Fastest solve:  {summary.fastest_problem_id} in {format_clock(summary.fastest_seconds)}")
    if screen.earned:
        lines.append("")
        lines.append(paint(theme.heading, "Achievements", theme.reset))
        titles = {achievement.key: achievement.title for achievement in ACHIEVEMENTS}
        lines.extend(f"  * {titles.get(key, key)}" for key in screen.earned)
    return lines


def daily_view(state: AppState, screen: DailyScreen, theme: UITheme, now: float, width: int) -> list[str]:
    lines = [paint(theme.heading, "Daily Scales", theme.reset), ""]
    if screen.loading or screen.pattern is None:
        lines.append(paint(theme.dim, "Loading daily scale...", theme.reset))
        return lines
    scale = scale_for_pattern(screen.pattern)
    name = scale.musical_name if scale is not None else screen.pattern
    lines.append(f"Today's scale: {paint(theme.selected, name, theme.reset)} ({pattern_label(screen.pattern)})")
    if scale is not None:
        lines.append(paint(theme.dim, scale.description, theme.reset))
    progress = screen.progress
    if progress is not None:
        lines.append("")
        lines.append(f"Progress: {len(progress.completed)}/{len(SCALES)} scales today")
        lines.append(f"Streak: {progress.streak} day(s)  Longest: {progress.longest_streak}")
        for entry in SCALES:
            done = entry.pattern in progress.completed
            mark = paint(theme.passed, "x", theme.reset) if done else " "
            lines.append(f"  [{mark}] {entry.musical_name:<9} {pattern_label(entry.pattern)}")
    return lines


def settings_view(state: AppState, screen: SettingsScreen, theme: UITheme, now: float, width: int) -> list[str]:
    settings = state.settings
    lines = [paint(theme.heading, "Settings", theme.reset), ""]
    for index, field_name in enumerate(SETTINGS_FIELDS):
        if field_name == "timer":
            default = DEFAULT_TIMER_MINUTES.get(settings.mode, 0)
            value = f"{settings.timer_minutes.get(settings.mode, default)} ({settings.mode})"
        elif field_name == "editor":
            value = settings.editor or "$VISUAL / $EDITOR"
        else:
            value = str(getattr(settings, field_name))
        if index == screen.selected and screen.editing:
            value = paint(theme.reverse, screen.edit_value + " ", theme.reset)
        label = f"{SETTINGS_LABELS[field_name]:<16}"
        if index == screen.selected:
            lines.append(paint(theme.cursor, "> ", theme.reset) + paint(theme.selected, label, theme.reset) + value)
        else:
            lines.append(f"  {label}{value}")
    lines.append("")
    lines.append(paint(theme.dim, "Theme changes apply on next start.", theme.reset))
    return lines


VIEWS: dict[type, Callable[..., list[str]]] = {
    HomeScreen: home_view,
    PatternSelectionScreen: pattern_view,
    ProblemListScreen: problem_list_view,
    ProblemDetailScreen: problem_detail_view,
    SessionScreen: session_view,
    StatsScreen: stats_view,
    DailyScreen: daily_view,
    SettingsScreen: settings_view,
}
check_exhaustive(VIEWS, "render dispatch")
