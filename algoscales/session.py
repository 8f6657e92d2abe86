"""Practice session lifecycle.

A ``Session`` is an immutable value owned by the session screen. Every
operation returns a new value; the caller (``app.update``) turns the
returned flags into commands. Elapsed time is derived from loop timestamps so
nothing here reads a clock.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from .config import Settings
from .errors import TestExecutionError
from .problems import Problem
from .testrunner import TestResult, all_passed

MODE_LEARN = "learn"
MODE_PRACTICE = "practice"
MODE_CRAM = "cram"

STATUS_ACTIVE = "active"
STATUS_PAUSED = "paused"
STATUS_COMPLETED = "completed"
STATUS_ABANDONED = "abandoned"
TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_ABANDONED)

EXIT_QUIT = "quit"
EXIT_SKIP = "skip"
EXIT_BACK = "back"

OUTCOME_SOLVED = "solved"
OUTCOME_TIMEOUT = "timeout"
OUTCOME_QUIT = "quit"
OUTCOME_SKIPPED = "skipped"

BUSY_TESTS = "tests"

TESTS_ALREADY_RUNNING = "Tests already running"


@dataclass(frozen=True, order=True)
class Reveal:
    """Two-point lattice for hint/solution visibility: hidden < shown."""

    level: int = 0

    @property
    def shown(self) -> bool:
        return self.level > 0

    def join(self, other: Reveal) -> Reveal:
        return self if self.level >= other.level else other


HIDDEN = Reveal(0)
SHOWN = Reveal(1)


@dataclass(frozen=True)
class Session:
    session_id: str
    problem: Problem
    mode: str
    language: str
    code: str
    workspace: Path
    started_at: float
    budget: float
    accumulated: float = 0.0
    resumed_at: float = 0.0
    paused: bool = False
    hint: Reveal = HIDDEN
    solution: Reveal = HIDDEN
    test_results: tuple[TestResult, ...] = ()
    status: str = STATUS_ACTIVE
    busy: str | None = None
    confirm_quit: bool = False
    pending_exit: str | None = None
    message: str = ""
    timeout_warned: bool = False
    outcome: str | None = None

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def hints_used(self) -> bool:
        return self.mode != MODE_LEARN and self.hint.shown

    @property
    def solution_used(self) -> bool:
        return self.mode != MODE_LEARN and self.solution.shown


def template_code(problem: Problem, language: str) -> str:
    """Starter code for ``language``, or a minimal generated stub."""
    starter = problem.starter_code.get(language)
    if starter:
        return starter
    name = problem.function or "solve"
    if language == "python":
        return f"def {name}(*args):\n    # {problem.title}\n    pass\n"
    if language == "javascript":
        return f"// {problem.title}\nfunction {name}(...args) {{\n}}\n\nmodule.exports = {{ {name} }};\n"
    if language == "go":
        return f"package main\n\n// {problem.title}\nfunc {name}() {{\n}}\n"
    return f"{problem.title}\n"


def start(
    problem: Problem,
    mode: str,
    language: str,
    session_id: str,
    workspace: Path,
    settings: Settings,
    now: float,
) -> Session:
    reveal = SHOWN if mode == MODE_LEARN else HIDDEN
    return Session(
        session_id=session_id,
        problem=problem,
        mode=mode,
        language=language,
        code=template_code(problem, language),
        workspace=workspace,
        started_at=now,
        budget=settings.budget_seconds(mode),
        resumed_at=now,
        hint=reveal,
        solution=reveal,
        status=STATUS_ACTIVE,
    )


def elapsed(session: Session, now: float) -> float:
    if session.paused or session.finished:
        return session.accumulated
    return session.accumulated + max(0.0, now - session.resumed_at)


def remaining(session: Session, now: float) -> float:
    return session.budget - elapsed(session, now)


def accepts_tick(session: Session, session_id: str) -> bool:
    """Ticks for other sessions or finished sessions are dropped."""
    return session.session_id == session_id and not session.finished


def tick(session: Session, now: float) -> tuple[Session, bool]:
    """Return ``(session, timed_out)``; ``timed_out`` is reported once."""
    if session.finished or session.paused or session.timeout_warned:
        return session, False
    if elapsed(session, now) < session.budget:
        return session, False
    return replace(session, timeout_warned=True), True


def toggle_pause(session: Session, now: float) -> Session:
    if session.finished:
        return session
    if session.paused:
        return replace(session, paused=False, resumed_at=now, status=STATUS_ACTIVE, message="")
    return replace(
        session,
        paused=True,
        accumulated=elapsed(session, now),
        status=STATUS_PAUSED,
        message="Paused",
    )


def reveal_hint(session: Session) -> Session:
    return replace(session, hint=session.hint.join(SHOWN))


def reveal_solution(session: Session) -> Session:
    return replace(session, solution=session.solution.join(SHOWN), hint=session.hint.join(SHOWN))


def request_tests(session: Session) -> tuple[Session, bool]:
    """Mark the session busy; ``False`` means the request was rejected."""
    if session.busy is not None:
        return replace(session, message=TESTS_ALREADY_RUNNING), False
    if session.finished:
        return replace(session, message="Session is over"), False
    return replace(session, busy=BUSY_TESTS, message="Running tests..."), True


def record_results(session: Session, results: tuple[TestResult, ...], now: float) -> Session:
    passed = sum(1 for result in results if result.passed)
    updated = replace(session, busy=None, test_results=tuple(results))
    if all_passed(results):
        return replace(
            updated,
            accumulated=elapsed(session, now),
            paused=False,
            status=STATUS_COMPLETED,
            outcome=OUTCOME_SOLVED,
            message=f"All {passed} tests passed. Solved in {format_clock(elapsed(session, now))}",
        )
    return replace(updated, message=f"{passed}/{len(results)} tests passed")


def record_test_error(session: Session, error: Exception) -> Session:
    """Keep the runner output verbatim so compile errors are readable."""
    text = str(error)
    if isinstance(error, TestExecutionError) and error.output.strip():
        text = f"{text}\n{error.output.rstrip()}"
    return replace(session, busy=None, message=text)


def submit(session: Session) -> tuple[Session, bool]:
    """Return ``(session, run_tests)``.

    A completed session only redisplays its outcome; without results the
    submission runs the tests first.
    """
    if session.finished:
        return replace(session, message=outcome_message(session)), False
    if session.busy is not None:
        return replace(session, message=TESTS_ALREADY_RUNNING), False
    if not session.test_results:
        return request_tests(session)
    passed = sum(1 for result in session.test_results if result.passed)
    total = len(session.test_results)
    return replace(session, message=f"Not accepted: {passed}/{total} tests passed"), False


def needs_confirmation(session: Session) -> bool:
    return session.mode == MODE_CRAM and not session.finished


def request_exit(session: Session, kind: str, now: float) -> tuple[Session, str | None]:
    """Return ``(session, exit_kind)``; ``None`` while waiting for y/n."""
    if needs_confirmation(session):
        prompt = "Skip this problem?" if kind == EXIT_SKIP else "Quit this session?"
        return replace(session, confirm_quit=True, pending_exit=kind, message=f"{prompt} (y/n)"), None
    return abandon(session, kind, now), kind


def confirm_exit(session: Session, yes: bool, now: float) -> tuple[Session, str | None]:
    kind = session.pending_exit
    cleared = replace(session, confirm_quit=False, pending_exit=None, message="")
    if not yes or kind is None:
        return cleared, None
    return abandon(cleared, kind, now), kind


def abandon(session: Session, kind: str, now: float) -> Session:
    if session.finished:
        return session
    outcome = OUTCOME_SKIPPED if kind == EXIT_SKIP else OUTCOME_QUIT
    return replace(
        session,
        accumulated=elapsed(session, now),
        status=STATUS_ABANDONED,
        outcome=outcome,
        busy=None,
    )


def time_out(session: Session, now: float) -> Session:
    """Cram-mode forced end; other modes only get a warning."""
    if session.finished:
        return session
    if session.mode != MODE_CRAM:
        return replace(session, message="Time is up! Keep going or submit when ready.")
    return replace(
        session,
        accumulated=elapsed(session, now),
        status=STATUS_ABANDONED,
        outcome=OUTCOME_TIMEOUT,
        busy=None,
        confirm_quit=False,
        pending_exit=None,
        message="Time is up!",
    )


def outcome_message(session: Session) -> str:
    if session.outcome == OUTCOME_SOLVED:
        return f"Solved in {format_clock(session.accumulated)}"
    if session.outcome == OUTCOME_TIMEOUT:
        return "Time ran out"
    if session.outcome == OUTCOME_SKIPPED:
        return "Skipped"
    if session.outcome == OUTCOME_QUIT:
        return "Session abandoned"
    return ""


def format_clock(seconds: float) -> str:
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"
