"""Application update function.

``update(state, message, services)`` is the only place state changes. It
never performs I/O: side effects are returned as ``Command`` values for the
scheduler. Key handling is dispatched per screen type and message handling per
message type; both tables are checked for completeness at import time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from . import commands
from . import messages as msg
from . import session as sessions
from .animation import ANIMATION_FADE_IN, FRAME_INTERVAL_SECONDS, advance, new_animation
from .commands import Command, Services
from .config import LANGUAGES, MODES, Settings
from .errors import NavigationError
from .navigation import handle_back, navigate, pattern_choices, rebuild_screen
from .problems import Problem, find_problem, normalize_pattern, problems_for_pattern
from .render import body_rows, max_scroll
from .session import Session
from .state import (
    HOME_MENU,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_WARNING,
    PATTERN_SELECTION,
    PROBLEM_LIST,
    SETTINGS_FIELDS,
    AppState,
    DailyScreen,
    HomeScreen,
    PatternSelectionScreen,
    ProblemDetailScreen,
    ProblemListScreen,
    Screen,
    SessionScreen,
    SettingsScreen,
    StatsScreen,
    StatusLine,
    check_exhaustive,
)
from .ui_theme import available_theme_names

Update = tuple[AppState, tuple[Command, ...]]

UP_KEYS = ("UP", "k")
DOWN_KEYS = ("DOWN", "j")
SELECT_KEYS = ("ENTER", "RIGHT", "l")
PREVIOUS_KEYS = ("LEFT", "h")
PAGE_KEYS = ("PAGE_UP", "PAGE_DOWN")

# Pause between a cram timeout and loading the next problem.
ADVANCE_DELAY_SECONDS = 1.5


def init(services: Services, settings: Settings, now: float) -> Update:
    """Initial state: home screen fading in, problem list loading."""
    animation = new_animation(ANIMATION_FADE_IN, settings.animation_ms / 1000.0, now)
    state = AppState(
        screen=HomeScreen(),
        settings=settings,
        animation=None if animation.complete else animation,
    )
    cmds: list[Command] = [commands.load_problems(services.repository)]
    if state.animation is not None:
        cmds.append(commands.animation_frame(services.clock, FRAME_INTERVAL_SECONDS))
    return state, tuple(cmds)


def update(state: AppState, message: object, services: Services) -> Update:
    handler = _MESSAGE_HANDLERS.get(type(message))
    if handler is None:
        return state, ()
    now = _message_time(message, services)
    try:
        new_state, cmds = handler(state, message, services, now)
    except NavigationError as exc:
        logger.warning("Navigation refused: {}", exc)
        return state, ()
    extra = _leave_session_commands(state, new_state) + _animation_commands(state, new_state, services)
    return new_state, tuple(cmds) + extra


def _message_time(message: object, services: Services) -> float:
    if isinstance(message, msg.KeyPressed):
        return message.at
    if isinstance(message, (msg.AnimationFrame, msg.SessionTick)):
        return message.now
    return services.clock()


def _leave_session_commands(old: AppState, new: AppState) -> tuple[Command, ...]:
    """Clean up the workspace of a session that is no longer on screen."""
    if not isinstance(old.screen, SessionScreen):
        return ()
    left = old.screen.session
    if isinstance(new.screen, SessionScreen) and new.screen.session.session_id == left.session_id:
        if new.quitting and not old.quitting:
            return (commands.cleanup_workspace(left.workspace),)
        return ()
    logger.info("Session {} closed ({})", left.session_id, left.outcome or left.status)
    return (commands.cleanup_workspace(left.workspace),)


def _animation_commands(old: AppState, new: AppState, services: Services) -> tuple[Command, ...]:
    # One frame command is in flight for as long as an animation runs.
    if new.animation is not None and old.animation is None:
        return (commands.animation_frame(services.clock, FRAME_INTERVAL_SECONDS),)
    return ()


def with_status(state: AppState, text: str, level: str, now: float) -> AppState:
    return replace(state, status=StatusLine(text=text, level=level, until=now + state.settings.status_seconds))


def _fade_in(state: AppState, now: float):
    animation = new_animation(ANIMATION_FADE_IN, state.settings.animation_ms / 1000.0, now)
    return None if animation.complete else animation


def _entry_commands(screen: Screen, services: Services) -> tuple[Command, ...]:
    if isinstance(screen, StatsScreen):
        return (commands.load_stats(services.stats),)
    if isinstance(screen, DailyScreen):
        return (commands.load_daily(services.daily),)
    return ()


def _go(state: AppState, screen: Screen, now: float, services: Services) -> Update:
    new_state = navigate(state, screen, now)
    return new_state, _entry_commands(new_state.screen, services)


def _back(state: AppState, now: float, services: Services) -> Update:
    new_state = handle_back(state, now)
    if new_state.screen is state.screen:
        return new_state, ()
    return new_state, _entry_commands(new_state.screen, services)


def _quit(state: AppState) -> Update:
    return replace(state, quitting=True), ()


def _move(selected: int, delta: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(count - 1, selected + delta))


def _cycle(values: tuple[str, ...], current: str, delta: int) -> str:
    if current not in values:
        return values[0]
    return values[(values.index(current) + delta) % len(values)]


# Keys


def _on_key(state: AppState, message: msg.KeyPressed, services: Services, now: float) -> Update:
    if message.key == "CTRL_C":
        return _quit(state)
    if state.status is not None:
        state = replace(state, status=None)
    handler = _KEY_HANDLERS[type(state.screen)]
    return handler(state, state.screen, message.key, services, now)


def _common_key(state: AppState, key: str, services: Services, now: float) -> Update:
    if key == "q" and isinstance(state.screen, HomeScreen):
        return _quit(state)
    if key in ("ESC", "q"):
        return _back(state, now, services)
    return state, ()


def _home_key(state: AppState, screen: HomeScreen, key: str, services: Services, now: float) -> Update:
    if key in UP_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, -1, len(HOME_MENU)))), ()
    if key in DOWN_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, 1, len(HOME_MENU)))), ()
    if key in SELECT_KEYS:
        choice = HOME_MENU[screen.selected]
        if choice == "Start Practice Session":
            target = rebuild_screen(state, PATTERN_SELECTION)
            assert target is not None
            return _go(state, target, now, services)
        if choice == "Daily Scales":
            return _go(state, DailyScreen(), now, services)
        if choice == "View Statistics":
            return _go(state, StatsScreen(), now, services)
        if choice == "Settings":
            return _go(state, SettingsScreen(), now, services)
        return _quit(state)
    return _common_key(state, key, services, now)


def _pattern_key(
    state: AppState, screen: PatternSelectionScreen, key: str, services: Services, now: float
) -> Update:
    choices = pattern_choices(state)
    if key in UP_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, -1, len(choices)))), ()
    if key in DOWN_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, 1, len(choices)))), ()
    if key in SELECT_KEYS:
        pattern = choices[min(screen.selected, len(choices) - 1)]
        state = replace(state, selected_pattern=pattern, daily_pattern=None)
        return _go(state, ProblemListScreen(pattern=pattern), now, services)
    return _common_key(state, key, services, now)


def _problem_list_key(
    state: AppState, screen: ProblemListScreen, key: str, services: Services, now: float
) -> Update:
    problems = problems_for_pattern(state.problems, screen.pattern)
    if key in UP_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, -1, len(problems)))), ()
    if key in DOWN_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, 1, len(problems)))), ()
    if key in SELECT_KEYS:
        if not problems:
            return with_status(state, "No problems for this pattern", LEVEL_WARNING, now), ()
        problem = problems[min(screen.selected, len(problems) - 1)]
        state = replace(state, selected_problem_id=problem.id)
        return _go(state, ProblemDetailScreen(problem_id=problem.id, mode=state.settings.mode), now, services)
    return _common_key(state, key, services, now)


def _scrolled(
    state: AppState, screen: ProblemDetailScreen | SessionScreen, key: str, now: float
) -> ProblemDetailScreen | SessionScreen | None:
    """Return ``screen`` moved by a scroll key, or ``None`` for other keys."""
    if key in UP_KEYS:
        step = -1
    elif key in DOWN_KEYS:
        step = 1
    elif key in PAGE_KEYS:
        page = max(1, body_rows(state, now) - 1)
        step = -page if key == "PAGE_UP" else page
    else:
        return None
    scroll = max(0, min(max_scroll(state, now), screen.scroll + step))
    return replace(screen, scroll=scroll)


def _problem_detail_key(
    state: AppState, screen: ProblemDetailScreen, key: str, services: Services, now: float
) -> Update:
    if key == "ENTER":
        problem = find_problem(state.problems, screen.problem_id)
        if problem is None:
            return with_status(state, f"Problem not found: {screen.problem_id}", LEVEL_ERROR, now), ()
        state = with_status(state, f"Starting {screen.mode} session...", LEVEL_INFO, now)
        return state, (commands.start_session(problem, screen.mode, state.settings.language, services),)
    if key == "m":
        return replace(state, screen=replace(screen, mode=_cycle(MODES, screen.mode, 1))), ()
    if key == "i":
        return replace(state, screen=replace(screen, show_info=not screen.show_info)), ()
    if key == "h":
        return replace(state, screen=replace(screen, show_hint=not screen.show_hint)), ()
    scrolled = _scrolled(state, screen, key, now)
    if scrolled is not None:
        return replace(state, screen=scrolled), ()
    return _common_key(state, key, services, now)


def _set_session(state: AppState, session: Session) -> AppState:
    screen = state.screen
    if isinstance(screen, SessionScreen) and screen.session.session_id == session.session_id:
        return replace(state, screen=replace(screen, session=session))
    return replace(state, screen=SessionScreen(session=session))


def _test_command(session: Session, services: Services) -> Command:
    return commands.run_tests(services.runner, session.session_id, session.language, session.code, session.problem)


def _session_key(state: AppState, screen: SessionScreen, key: str, services: Services, now: float) -> Update:
    session = screen.session
    if session.confirm_quit:
        if key in ("y", "Y"):
            session, exit_kind = sessions.confirm_exit(session, True, now)
            return _after_exit(_set_session(state, session), session, exit_kind, services, now)
        if key in ("n", "N", "ESC"):
            session, _ = sessions.confirm_exit(session, False, now)
            return _set_session(state, session), ()
        return state, ()

    if key == "ESC":
        return _exit_session(state, session, sessions.EXIT_BACK, services, now)
    if key == "q":
        return _exit_session(state, session, sessions.EXIT_QUIT, services, now)
    if key == "n":
        return _exit_session(state, session, sessions.EXIT_SKIP, services, now)
    if key == "ENTER":
        session, run = sessions.submit(session)
        state = _set_session(state, session)
        return state, ((_test_command(session, services),) if run else ())
    scrolled = _scrolled(state, screen, key, now)
    if scrolled is not None:
        return replace(state, screen=scrolled), ()
    if session.finished:
        return state, ()
    if key == "t":
        session, accepted = sessions.request_tests(session)
        state = _set_session(state, session)
        if not accepted:
            return with_status(state, session.message, LEVEL_WARNING, now), ()
        return state, (_test_command(session, services),)
    if key == "e":
        logger.info("Opening editor for {}", session.session_id)
        cmd = commands.open_editor(
            session.session_id,
            session.code,
            session.workspace,
            session.language,
            state.settings.editor,
            services,
        )
        return _set_session(state, replace(session, message="Editing...")), (cmd,)
    if key == "p":
        return _set_session(state, sessions.toggle_pause(session, now)), ()
    if key == "h":
        return _set_session(state, sessions.reveal_hint(session)), ()
    if key == "s":
        return _set_session(state, sessions.reveal_solution(session)), ()
    return state, ()


def _exit_session(state: AppState, session: Session, kind: str, services: Services, now: float) -> Update:
    session, exit_kind = sessions.request_exit(session, kind, now)
    state = _set_session(state, session)
    return _after_exit(state, session, exit_kind, services, now)


def _after_exit(state: AppState, session: Session, exit_kind: str | None, services: Services, now: float) -> Update:
    if exit_kind is None:
        return state, ()
    if exit_kind == sessions.EXIT_QUIT:
        return _go(state, HomeScreen(), now, services)
    if exit_kind == sessions.EXIT_SKIP:
        return _advance(state, session, services, now)
    return _back(state, now, services)


def _advance(state: AppState, session: Session, services: Services, now: float) -> Update:
    """Start the next problem of the active list in place, or return to the list."""
    problems = problems_for_pattern(state.problems, state.selected_pattern)
    ids = [problem.id for problem in problems]
    following: Problem | None = None
    if session.problem.id in ids:
        index = ids.index(session.problem.id) + 1
        if index < len(problems):
            following = problems[index]
    if following is None:
        state = replace(state, selected_problem_id=session.problem.id)
        target = rebuild_screen(state, PROBLEM_LIST)
        assert target is not None
        state, cmds = _go(state, target, now, services)
        done = "Cram round complete" if session.mode == sessions.MODE_CRAM else "No more problems in this list"
        return with_status(state, done, LEVEL_INFO, now), cmds
    state = replace(state, selected_problem_id=following.id)
    return state, (commands.start_session(following, session.mode, session.language, services),)


def _stats_key(state: AppState, screen: StatsScreen, key: str, services: Services, now: float) -> Update:
    if key == "r":
        return replace(state, screen=replace(screen, loading=True)), (commands.load_stats(services.stats),)
    return _common_key(state, key, services, now)


def _daily_key(state: AppState, screen: DailyScreen, key: str, services: Services, now: float) -> Update:
    if screen.loading:
        return _common_key(state, key, services, now)
    if key == "ENTER" and screen.pattern is not None:
        pattern = screen.pattern
        state = replace(state, selected_pattern=pattern, daily_pattern=pattern)
        return _go(state, ProblemListScreen(pattern=pattern), now, services)
    if key == "n" and screen.pattern is not None:
        return replace(state, screen=replace(screen, loading=True)), (
            commands.load_daily(services.daily, skip_pattern=screen.pattern),
        )
    if key == "r":
        return replace(state, screen=replace(screen, loading=True)), (commands.reset_daily(services.daily),)
    return _common_key(state, key, services, now)


def _settings_value(settings: Settings, field_name: str) -> str:
    if field_name == "timer":
        return str(settings.timer_minutes.get(settings.mode, 0))
    return str(getattr(settings, field_name))


def _apply_settings(state: AppState, settings: Settings, field_name: str, services: Services) -> Update:
    # Only the edited field is written back; CLI overrides stay in memory.
    key = "timer_minutes" if field_name == "timer" else field_name
    return replace(state, settings=settings), (commands.save_settings(settings, services.config_path, (key,)),)


def _settings_key(state: AppState, screen: SettingsScreen, key: str, services: Services, now: float) -> Update:
    settings = state.settings
    field_name = SETTINGS_FIELDS[screen.selected]
    if screen.editing:
        if key == "ESC":
            return replace(state, screen=replace(screen, editing=False, edit_value="")), ()
        if key == "BACKSPACE":
            return replace(state, screen=replace(screen, edit_value=screen.edit_value[:-1])), ()
        if key == "ENTER":
            value = screen.edit_value.strip()
            state = replace(state, screen=replace(screen, editing=False, edit_value=""))
            if field_name == "timer":
                if not value.isdigit():
                    return with_status(state, "Timer must be a whole number of minutes", LEVEL_WARNING, now), ()
                return _apply_settings(state, settings.with_timer(settings.mode, int(value)), field_name, services)
            return _apply_settings(state, replace(settings, editor=value), field_name, services)
        if len(key) == 1 and key.isprintable():
            if field_name == "timer" and not key.isdigit():
                return state, ()
            return replace(state, screen=replace(screen, edit_value=screen.edit_value + key)), ()
        return state, ()

    if key in UP_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, -1, len(SETTINGS_FIELDS)))), ()
    if key in DOWN_KEYS:
        return replace(state, screen=replace(screen, selected=_move(screen.selected, 1, len(SETTINGS_FIELDS)))), ()
    if key in SELECT_KEYS or key in PREVIOUS_KEYS:
        delta = -1 if key in PREVIOUS_KEYS else 1
        if field_name == "language":
            language = _cycle(LANGUAGES, settings.language, delta)
            return _apply_settings(state, replace(settings, language=language), field_name, services)
        if field_name == "mode":
            mode = _cycle(MODES, settings.mode, delta)
            return _apply_settings(state, replace(settings, mode=mode), field_name, services)
        if field_name == "theme":
            theme = _cycle(available_theme_names(), settings.theme, delta)
            return _apply_settings(state, replace(settings, theme=theme), field_name, services)
        if key in SELECT_KEYS:
            value = _settings_value(settings, field_name)
            return replace(state, screen=replace(screen, editing=True, edit_value=value)), ()
        return state, ()
    return _common_key(state, key, services, now)


_KEY_HANDLERS: dict[type, Callable[..., Update]] = {
    HomeScreen: _home_key,
    PatternSelectionScreen: _pattern_key,
    ProblemListScreen: _problem_list_key,
    ProblemDetailScreen: _problem_detail_key,
    SessionScreen: _session_key,
    StatsScreen: _stats_key,
    DailyScreen: _daily_key,
    SettingsScreen: _settings_key,
}
check_exhaustive(_KEY_HANDLERS, "key dispatch")


# Messages


def _live_session(state: AppState, session_id: str) -> Session | None:
    """The on-screen session when it matches ``session_id``."""
    screen = state.screen
    if isinstance(screen, SessionScreen) and screen.session.session_id == session_id:
        return screen.session
    return None


def _on_resized(state: AppState, message: msg.Resized, services: Services, now: float) -> Update:
    return replace(state, width=max(1, message.width), height=max(1, message.height)), ()


def _on_animation_frame(state: AppState, message: msg.AnimationFrame, services: Services, now: float) -> Update:
    if state.animation is None:
        return state, ()
    animation = advance(state.animation, message.now)
    if animation.complete:
        return replace(state, animation=None), ()
    return replace(state, animation=animation), (commands.animation_frame(services.clock, FRAME_INTERVAL_SECONDS),)


def _on_quit(state: AppState, message: msg.QuitRequested, services: Services, now: float) -> Update:
    return _quit(state)


def _on_problems_loaded(state: AppState, message: msg.ProblemsLoaded, services: Services, now: float) -> Update:
    logger.info("Loaded {} problems", len(message.problems))
    return replace(state, problems=tuple(message.problems), problems_loaded=True), ()


def _on_problems_failed(state: AppState, message: msg.ProblemsLoadFailed, services: Services, now: float) -> Update:
    logger.error("Problem load failed: {}", message.error)
    return with_status(state, f"Could not load problems: {message.error}", LEVEL_ERROR, now), ()


def _on_session_started(state: AppState, message: msg.SessionStarted, services: Services, now: float) -> Update:
    orphan = (commands.cleanup_workspace(message.workspace),)
    problem = find_problem(state.problems, message.problem_id)
    if problem is None:
        return state, orphan
    session = sessions.start(
        problem,
        message.mode,
        message.language,
        message.session_id,
        message.workspace,
        state.settings,
        message.started_at,
    )
    ticker = commands.tick(session.session_id, services.clock)
    screen = state.screen
    if isinstance(screen, ProblemDetailScreen) and screen.problem_id == problem.id:
        state = replace(state, selected_problem_id=problem.id, status=None)
        state, cmds = _go(state, SessionScreen(session=session), now, services)
        return state, cmds + (ticker,)
    if isinstance(screen, SessionScreen) and screen.session.finished:
        state = replace(
            _set_session(state, session),
            selected_problem_id=problem.id,
            animation=_fade_in(state, now),
        )
        return state, (ticker,)
    logger.info("Dropping session {} started off-screen", message.session_id)
    return state, orphan


def _on_session_start_failed(
    state: AppState, message: msg.SessionStartFailed, services: Services, now: float
) -> Update:
    return with_status(state, f"Could not start session: {message.error}", LEVEL_ERROR, now), ()


def _on_tick(state: AppState, message: msg.SessionTick, services: Services, now: float) -> Update:
    screen = state.screen
    if not isinstance(screen, SessionScreen) or not sessions.accepts_tick(screen.session, message.session_id):
        return state, ()
    session, timed_out = sessions.tick(screen.session, message.now)
    cmds: list[Command] = [commands.tick(session.session_id, services.clock)]
    if timed_out:
        cmds.append(commands.emit(msg.SessionTimeout(session_id=session.session_id)))
    return _set_session(state, session), tuple(cmds)


def _on_timeout(state: AppState, message: msg.SessionTimeout, services: Services, now: float) -> Update:
    session = _live_session(state, message.session_id)
    if session is None or session.finished:
        return state, ()
    session = sessions.time_out(session, now)
    state = _set_session(state, session)
    if session.mode != sessions.MODE_CRAM:
        return with_status(state, session.message, LEVEL_WARNING, now), ()
    logger.info("Session {} timed out", session.session_id)
    cmds = (
        commands.record_attempt(
            services.stats,
            session.problem,
            False,
            session.accumulated,
            mode=session.mode,
            hints_used=session.hints_used,
            solution_used=session.solution_used,
        ),
        commands.emit(
            msg.AdvanceProblem(session_id=session.session_id, problem_id=session.problem.id),
            delay=ADVANCE_DELAY_SECONDS,
        ),
    )
    return with_status(state, "Time is up! Moving to the next problem", LEVEL_WARNING, now), cmds


def _on_advance(state: AppState, message: msg.AdvanceProblem, services: Services, now: float) -> Update:
    session = _live_session(state, message.session_id)
    if session is None:
        return state, ()
    return _advance(state, session, services, now)


def _on_tests_finished(state: AppState, message: msg.TestsFinished, services: Services, now: float) -> Update:
    session = _live_session(state, message.session_id)
    if session is None or session.busy is None:
        return state, ()
    session = sessions.record_results(session, message.results, now)
    state = _set_session(state, session)
    if session.outcome != sessions.OUTCOME_SOLVED:
        return state, ()
    logger.info("Session {} solved in {:.1f}s", session.session_id, session.accumulated)
    cmds = [
        commands.record_attempt(
            services.stats,
            session.problem,
            True,
            session.accumulated,
            mode=session.mode,
            hints_used=session.hints_used,
            solution_used=session.solution_used,
        )
    ]
    daily = state.daily_pattern
    if daily is not None and daily in (normalize_pattern(tag) for tag in session.problem.patterns):
        cmds.append(commands.complete_daily(services.daily, daily))
    return with_status(state, session.message, LEVEL_INFO, now), tuple(cmds)


def _on_tests_failed(state: AppState, message: msg.TestsFailed, services: Services, now: float) -> Update:
    session = _live_session(state, message.session_id)
    if session is None or session.busy is None:
        return state, ()
    state = _set_session(state, sessions.record_test_error(session, message.error))
    return with_status(state, "Tests could not run", LEVEL_ERROR, now), ()


def _on_editor_finished(state: AppState, message: msg.EditorFinished, services: Services, now: float) -> Update:
    session = _live_session(state, message.session_id)
    if session is None or session.finished:
        return state, ()
    if message.code == session.code:
        return _set_session(state, replace(session, message="No changes")), ()
    return _set_session(state, replace(session, code=message.code, test_results=(), message="Code updated")), ()


def _on_editor_failed(state: AppState, message: msg.EditorFailed, services: Services, now: float) -> Update:
    session = _live_session(state, message.session_id)
    if session is not None:
        state = _set_session(state, replace(session, message=str(message.error)))
    return with_status(state, f"Editor failed: {message.error}", LEVEL_ERROR, now), ()


def _on_attempt_recorded(state: AppState, message: msg.AttemptRecorded, services: Services, now: float) -> Update:
    if not message.solved:
        return state, ()
    return state, (commands.check_achievements(services.stats),)


def _on_attempt_failed(state: AppState, message: msg.AttemptRecordFailed, services: Services, now: float) -> Update:
    return with_status(state, f"Could not record attempt: {message.error}", LEVEL_ERROR, now), ()


def _on_achievements(state: AppState, message: msg.AchievementsUnlocked, services: Services, now: float) -> Update:
    if not message.achievements:
        return state, ()
    titles = ", ".join(achievement.title for achievement in message.achievements)
    return with_status(state, f"Achievement unlocked: {titles}", LEVEL_INFO, now), ()


def _on_stats_loaded(state: AppState, message: msg.StatsLoaded, services: Services, now: float) -> Update:
    screen = state.screen
    if not isinstance(screen, StatsScreen):
        return state, ()
    screen = replace(screen, summary=message.summary, earned=tuple(message.earned), loading=False)
    return replace(state, screen=screen), ()


def _on_stats_failed(state: AppState, message: msg.StatsLoadFailed, services: Services, now: float) -> Update:
    if isinstance(state.screen, StatsScreen):
        state = replace(state, screen=replace(state.screen, loading=False))
    return with_status(state, f"Could not load stats: {message.error}", LEVEL_ERROR, now), ()


def _on_daily_loaded(state: AppState, message: msg.DailyLoaded, services: Services, now: float) -> Update:
    screen = state.screen
    if not isinstance(screen, DailyScreen):
        return state, ()
    screen = replace(screen, pattern=message.pattern, progress=message.progress, loading=False)
    return replace(state, screen=screen), ()


def _on_daily_failed(state: AppState, message: msg.DailyLoadFailed, services: Services, now: float) -> Update:
    if isinstance(state.screen, DailyScreen):
        state = replace(state, screen=replace(state.screen, loading=False))
    return with_status(state, f"Could not load daily progress: {message.error}", LEVEL_ERROR, now), ()


def _on_settings_saved(state: AppState, message: msg.SettingsSaved, services: Services, now: float) -> Update:
    return with_status(state, "Settings saved", LEVEL_INFO, now), ()


def _on_settings_failed(state: AppState, message: msg.SettingsSaveFailed, services: Services, now: float) -> Update:
    return with_status(state, f"Could not save settings: {message.error}", LEVEL_ERROR, now), ()


def _on_workspace_cleaned(state: AppState, message: msg.WorkspaceCleaned, services: Services, now: float) -> Update:
    logger.debug("Removed workspace {}", message.workspace)
    return state, ()


def _on_command_failed(state: AppState, message: msg.CommandFailed, services: Services, now: float) -> Update:
    screen = state.screen
    if isinstance(screen, SessionScreen) and message.command == "TestsFinished" and screen.session.busy is not None:
        state = _set_session(state, sessions.record_test_error(screen.session, message.error))
    elif isinstance(screen, (StatsScreen, DailyScreen)) and screen.loading:
        state = replace(state, screen=replace(screen, loading=False))
    return with_status(state, f"{message.command} failed: {message.error}", LEVEL_ERROR, now), ()


_MESSAGE_HANDLERS: dict[type, Callable[..., Update]] = {
    msg.KeyPressed: _on_key,
    msg.Resized: _on_resized,
    msg.AnimationFrame: _on_animation_frame,
    msg.QuitRequested: _on_quit,
    msg.ProblemsLoaded: _on_problems_loaded,
    msg.ProblemsLoadFailed: _on_problems_failed,
    msg.SessionStarted: _on_session_started,
    msg.SessionStartFailed: _on_session_start_failed,
    msg.SessionTick: _on_tick,
    msg.SessionTimeout: _on_timeout,
    msg.AdvanceProblem: _on_advance,
    msg.TestsFinished: _on_tests_finished,
    msg.TestsFailed: _on_tests_failed,
    msg.EditorFinished: _on_editor_finished,
    msg.EditorFailed: _on_editor_failed,
    msg.AttemptRecorded: _on_attempt_recorded,
    msg.AttemptRecordFailed: _on_attempt_failed,
    msg.AchievementsUnlocked: _on_achievements,
    msg.StatsLoaded: _on_stats_loaded,
    msg.StatsLoadFailed: _on_stats_failed,
    msg.DailyLoaded: _on_daily_loaded,
    msg.DailyLoadFailed: _on_daily_failed,
    msg.SettingsSaved: _on_settings_saved,
    msg.SettingsSaveFailed: _on_settings_failed,
    msg.WorkspaceCleaned: _on_workspace_cleaned,
    msg.CommandFailed: _on_command_failed,
}
