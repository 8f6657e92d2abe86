"""Commands: units of background work whose result re-enters ``update``.

A command runs exactly once and returns exactly one message. ``execute`` is
the command boundary; any exception escaping ``run`` is logged and turned
into ``CommandFailed`` so one broken command never takes the loop down.
"""

from __future__ import annotations

import shutil
import threading
import time
import uuid
from collections import deque
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from queue import Empty, Queue

from loguru import logger

from . import messages as msg
from .config import Settings, save_settings as _save_settings
from .daily import DailyScheduler
from .editor import edit_code, resolve_editor_command, scratch_path
from .errors import AlgoScalesError
from .problems import Problem, ProblemRepository
from .stats import StatsStore
from .testrunner import TestRunner

SESSION_TICK_SECONDS = 1.0


@dataclass(frozen=True)
class Command:
    """Deferred work named after the message type it produces."""

    name: str
    run: Callable[[], object]
    delay: float = 0.0
    foreground: bool = False


@dataclass(frozen=True)
class Services:
    """Collaborators handed to command factories by ``update``."""

    repository: ProblemRepository
    stats: StatsStore
    daily: DailyScheduler
    runner: TestRunner
    workspace_root: Path
    config_path: Path | None = None
    clock: Callable[[], float] = time.monotonic
    disable_tui_mode: Callable[[], None] = lambda: None
    enable_tui_mode: Callable[[], None] = lambda: None
    run_process: Callable[..., object] | None = None


def execute(command: Command) -> object:
    """Run ``command`` and return its message, converting faults to ``CommandFailed``."""
    try:
        return command.run()
    except Exception as exc:
        logger.opt(exception=exc).error("Command {} failed", command.name)
        return msg.CommandFailed(command=command.name, error=exc)


def emit(message: object, delay: float = 0.0) -> Command:
    return Command(name=type(message).__name__, run=lambda: message, delay=delay)


def tick(session_id: str, clock: Callable[[], float], interval: float = SESSION_TICK_SECONDS) -> Command:
    return Command(
        name="SessionTick",
        run=lambda: msg.SessionTick(session_id=session_id, now=clock()),
        delay=interval,
    )


def animation_frame(clock: Callable[[], float], interval: float) -> Command:
    return Command(name="AnimationFrame", run=lambda: msg.AnimationFrame(now=clock()), delay=interval)


def load_problems(repository: ProblemRepository) -> Command:
    def run() -> object:
        try:
            return msg.ProblemsLoaded(problems=repository.reload())
        except AlgoScalesError as exc:
            return msg.ProblemsLoadFailed(error=exc)

    return Command(name="ProblemsLoaded", run=run)


def start_session(problem: Problem, mode: str, language: str, services: Services) -> Command:
    """Create the session workspace directory and report the start time."""

    def run() -> object:
        session_id = f"{problem.id}-{int(time.time())}-{uuid.uuid4().hex[:6]}"
        workspace = services.workspace_root / session_id
        try:
            workspace.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return msg.SessionStartFailed(problem_id=problem.id, error=exc)
        logger.info("Session {} started ({}, {})", session_id, mode, language)
        return msg.SessionStarted(
            session_id=session_id,
            problem_id=problem.id,
            mode=mode,
            language=language,
            workspace=workspace,
            started_at=services.clock(),
        )

    return Command(name="SessionStarted", run=run)


def run_tests(
    runner: TestRunner,
    session_id: str,
    language: str,
    code: str,
    problem: Problem,
) -> Command:
    """Test a snapshot of the code; the live session is never shared."""
    cases = problem.test_cases
    function = problem.function

    def run() -> object:
        try:
            results = runner.run(language, code, cases, function=function)
        except AlgoScalesError as exc:
            logger.info("Test run for {} failed: {}", session_id, exc)
            return msg.TestsFailed(session_id=session_id, error=exc)
        return msg.TestsFinished(session_id=session_id, results=tuple(results))

    return Command(name="TestsFinished", run=run)


def open_editor(
    session_id: str,
    code: str,
    workspace: Path,
    language: str,
    configured_editor: str,
    services: Services,
) -> Command:
    """Foreground command: the loop runs it with the terminal released."""

    def run() -> object:
        try:
            editor_cmd = resolve_editor_command(configured_editor)
            kwargs = {} if services.run_process is None else {"run": services.run_process}
            new_code = edit_code(
                code,
                scratch_path(workspace, language),
                editor_cmd,
                services.disable_tui_mode,
                services.enable_tui_mode,
                **kwargs,
            )
        except AlgoScalesError as exc:
            logger.warning("Editor failed for {}: {}", session_id, exc)
            return msg.EditorFailed(session_id=session_id, error=exc)
        return msg.EditorFinished(session_id=session_id, code=new_code)

    return Command(name="EditorFinished", run=run, foreground=True)


def record_attempt(
    stats: StatsStore,
    problem: Problem,
    solved: bool,
    duration_seconds: float,
    *,
    mode: str,
    hints_used: bool,
    solution_used: bool,
) -> Command:
    def run() -> object:
        try:
            summary = stats.record_attempt(
                problem.id,
                solved,
                duration_seconds,
                mode=mode,
                hints_used=hints_used,
                solution_used=solution_used,
                patterns=problem.patterns,
            )
        except AlgoScalesError as exc:
            return msg.AttemptRecordFailed(problem_id=problem.id, error=exc)
        return msg.AttemptRecorded(problem_id=problem.id, solved=solved, summary=summary)

    return Command(name="AttemptRecorded", run=run)


def check_achievements(stats: StatsStore) -> Command:
    return Command(
        name="AchievementsUnlocked",
        run=lambda: msg.AchievementsUnlocked(achievements=stats.check_achievements()),
    )


def load_stats(stats: StatsStore) -> Command:
    def run() -> object:
        try:
            return msg.StatsLoaded(summary=stats.get_summary(), earned=stats.earned_achievements())
        except AlgoScalesError as exc:
            return msg.StatsLoadFailed(error=exc)

    return Command(name="StatsLoaded", run=run)


def load_daily(daily: DailyScheduler, skip_pattern: str | None = None) -> Command:
    def run() -> object:
        try:
            if skip_pattern is not None:
                pattern, progress = daily.skip(skip_pattern)
            else:
                pattern, progress = daily.current()
        except AlgoScalesError as exc:
            return msg.DailyLoadFailed(error=exc)
        return msg.DailyLoaded(pattern=pattern, progress=progress)

    return Command(name="DailyLoaded", run=run)


def reset_daily(daily: DailyScheduler) -> Command:
    def run() -> object:
        try:
            pattern, progress = daily.reset()
        except AlgoScalesError as exc:
            return msg.DailyLoadFailed(error=exc)
        return msg.DailyLoaded(pattern=pattern, progress=progress)

    return Command(name="DailyLoaded", run=run)


def complete_daily(daily: DailyScheduler, pattern: str) -> Command:
    def run() -> object:
        try:
            daily.complete(pattern)
            pattern_now, progress = daily.current()
        except AlgoScalesError as exc:
            return msg.DailyLoadFailed(error=exc)
        return msg.DailyLoaded(pattern=pattern_now, progress=progress)

    return Command(name="DailyLoaded", run=run)


def save_settings(
    settings: Settings,
    config_path: Path | None,
    keys: tuple[str, ...] | None = None,
) -> Command:
    def run() -> object:
        error = _save_settings(settings, config_path, keys)
        if error is not None:
            return msg.SettingsSaveFailed(error=error)
        return msg.SettingsSaved(settings=settings)

    return Command(name="SettingsSaved", run=run)


def cleanup_workspace(workspace: Path) -> Command:
    def run() -> object:
        shutil.rmtree(workspace, ignore_errors=True)
        return msg.WorkspaceCleaned(workspace=workspace)

    return Command(name="WorkspaceCleaned", run=run)


@dataclass
class CommandScheduler:
    """Run background commands on a thread pool and queue their results.

    Results are drained by the loop thread one message at a time, so state is
    only ever touched from that thread. Foreground commands are parked for
    the loop to run itself.
    """

    max_workers: int = 8
    _executor: ThreadPoolExecutor | None = None
    _results: Queue = field(default_factory=Queue)
    _foreground: deque = field(default_factory=deque)
    _futures: set = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _closed: threading.Event = field(default_factory=threading.Event)

    def __post_init__(self) -> None:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="algoscales-cmd")

    def _worker(self, command: Command) -> None:
        if command.delay > 0 and self._closed.wait(command.delay):
            return
        if self._closed.is_set():
            return
        self._results.put(execute(command))

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def submit(self, commands: Iterable[Command]) -> None:
        for command in commands:
            if self._closed.is_set():
                return
            if command.foreground:
                self._foreground.append(command)
                continue
            assert self._executor is not None
            future = self._executor.submit(self._worker, command)
            with self._lock:
                self._futures.add(future)
            future.add_done_callback(self._forget)

    def pop_foreground(self) -> Command | None:
        try:
            return self._foreground.popleft()
        except IndexError:
            return None

    def post(self, message: object) -> None:
        """Queue a message produced on the loop thread (e.g. by a foreground command)."""
        self._results.put(message)

    def drain(self) -> list[object]:
        out: list[object] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def wait(self, timeout: float) -> object | None:
        """Block up to ``timeout`` seconds for the next result."""
        try:
            return self._results.get(timeout=timeout)
        except Empty:
            return None

    def pending(self) -> int:
        with self._lock:
            return len(self._futures)

    def shutdown(self) -> None:
        self._closed.set()
        with self._lock:
            futures = list(self._futures)
        for future in futures:
            future.cancel()
        assert self._executor is not None
        self._executor.shutdown(wait=False, cancel_futures=True)
