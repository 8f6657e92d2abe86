"""Practice statistics and achievements.

Attempts are appended to a JSON-lines file so a crash mid-write can only
lose the last record. Summaries are recomputed from the full history.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path

from .errors import DataLoadError

ATTEMPTS_FILENAME = "attempts.jsonl"
ACHIEVEMENTS_FILENAME = "achievements.json"


@dataclass(frozen=True)
class Attempt:
    problem_id: str
    solved: bool
    duration_seconds: float
    mode: str = "practice"
    hints_used: bool = False
    solution_used: bool = False
    patterns: tuple[str, ...] = ()
    recorded_on: str = ""


@dataclass(frozen=True)
class Summary:
    attempted: int = 0
    solved: int = 0
    success_rate: float = 0.0
    average_solve_seconds: float = 0.0
    fastest_problem_id: str = ""
    fastest_seconds: float = 0.0
    streak_days: int = 0


@dataclass(frozen=True)
class Achievement:
    key: str
    title: str
    description: str


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("first-solve", "First Note", "Solve your first problem."),
    Achievement("ten-solves", "Practiced Hands", "Solve ten problems."),
    Achievement("cram-finisher", "Under Pressure", "Solve a problem in cram mode."),
    Achievement("clean-solve", "No Peeking", "Solve a problem without revealing the hint or solution."),
    Achievement("streak-3", "Daily Rhythm", "Solve problems three days in a row."),
)


def _attempt_from_dict(data: dict[str, object]) -> Attempt | None:
    problem_id = data.get("problem_id")
    if not isinstance(problem_id, str):
        return None
    duration = data.get("duration_seconds", 0.0)
    patterns = data.get("patterns")
    return Attempt(
        problem_id=problem_id,
        solved=bool(data.get("solved", False)),
        duration_seconds=float(duration) if isinstance(duration, (int, float)) else 0.0,
        mode=str(data.get("mode", "practice")),
        hints_used=bool(data.get("hints_used", False)),
        solution_used=bool(data.get("solution_used", False)),
        patterns=tuple(str(p) for p in patterns) if isinstance(patterns, list) else (),
        recorded_on=str(data.get("recorded_on", "")),
    )


def streak_days(attempts: list[Attempt], today: date) -> int:
    """Count consecutive days ending today (or yesterday) with a solve."""
    solved_days: set[date] = set()
    for attempt in attempts:
        if not attempt.solved or not attempt.recorded_on:
            continue
        try:
            solved_days.add(date.fromisoformat(attempt.recorded_on))
        except ValueError:
            continue
    cursor = today if today in solved_days else today - timedelta(days=1)
    count = 0
    while cursor in solved_days:
        count += 1
        cursor -= timedelta(days=1)
    return count


def summarize(attempts: list[Attempt], today: date) -> Summary:
    solved = [attempt for attempt in attempts if attempt.solved]
    if not attempts:
        return Summary()
    fastest = min(solved, key=lambda attempt: attempt.duration_seconds, default=None)
    average = sum(attempt.duration_seconds for attempt in solved) / len(solved) if solved else 0.0
    return Summary(
        attempted=len(attempts),
        solved=len(solved),
        success_rate=len(solved) / len(attempts),
        average_solve_seconds=average,
        fastest_problem_id=fastest.problem_id if fastest is not None else "",
        fastest_seconds=fastest.duration_seconds if fastest is not None else 0.0,
        streak_days=streak_days(attempts, today),
    )


class StatsStore:
    """File-backed attempt history.

    Commands call into the store from worker threads, so appends and reads
    are serialized with a lock.
    """

    def __init__(self, root: Path, clock=None) -> None:
        self.root = root
        self._clock = clock if clock is not None else datetime.now
        self._lock = threading.Lock()

    @property
    def attempts_path(self) -> Path:
        return self.root / ATTEMPTS_FILENAME

    @property
    def achievements_path(self) -> Path:
        return self.root / ACHIEVEMENTS_FILENAME

    def _today(self) -> date:
        return self._clock().date()

    def _read_attempts(self) -> list[Attempt]:
        try:
            raw = self.attempts_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise DataLoadError(f"Cannot read statistics: {exc}") from exc
        attempts: list[Attempt] = []
        for line in raw.splitlines():
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict):
                attempt = _attempt_from_dict(data)
                if attempt is not None:
                    attempts.append(attempt)
        return attempts

    def attempts(self) -> list[Attempt]:
        with self._lock:
            return self._read_attempts()

    def record_attempt(
        self,
        problem_id: str,
        solved: bool,
        duration_seconds: float,
        *,
        mode: str = "practice",
        hints_used: bool = False,
        solution_used: bool = False,
        patterns: tuple[str, ...] = (),
    ) -> Summary:
        """Append one attempt and return the refreshed summary."""
        record = {
            "problem_id": problem_id,
            "solved": bool(solved),
            "duration_seconds": round(max(0.0, float(duration_seconds)), 3),
            "mode": mode,
            "hints_used": bool(hints_used),
            "solution_used": bool(solution_used),
            "patterns": list(patterns),
            "recorded_on": self._today().isoformat(),
        }
        with self._lock:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
                with self.attempts_path.open("a", encoding="utf-8") as handle:
                    handle.write(json.dumps(record) + "\n")
            except OSError as exc:
                raise DataLoadError(f"Cannot save statistics: {exc}") from exc
            return summarize(self._read_attempts(), self._today())

    def get_summary(self) -> Summary:
        with self._lock:
            return summarize(self._read_attempts(), self._today())

    def reset(self) -> None:
        with self._lock:
            for path in (self.attempts_path, self.achievements_path):
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    raise DataLoadError(f"Cannot reset statistics: {exc}") from exc

    def earned_achievements(self) -> tuple[str, ...]:
        with self._lock:
            return self._read_earned()

    def _read_earned(self) -> tuple[str, ...]:
        try:
            data = json.loads(self.achievements_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return ()
        if not isinstance(data, list):
            return ()
        return tuple(item for item in data if isinstance(item, str))

    def check_achievements(self) -> tuple[Achievement, ...]:
        """Evaluate achievement rules, persist and return newly earned ones."""
        with self._lock:
            attempts = self._read_attempts()
            earned = set(self._read_earned())
            solved = [attempt for attempt in attempts if attempt.solved]
            satisfied = {
                "first-solve": len(solved) >= 1,
                "ten-solves": len(solved) >= 10,
                "cram-finisher": any(attempt.mode == "cram" for attempt in solved),
                "clean-solve": any(not attempt.hints_used and not attempt.solution_used for attempt in solved),
                "streak-3": streak_days(attempts, self._today()) >= 3,
            }
            new = tuple(
                achievement
                for achievement in ACHIEVEMENTS
                if satisfied.get(achievement.key) and achievement.key not in earned
            )
            if new:
                earned.update(achievement.key for achievement in new)
                try:
                    self.root.mkdir(parents=True, exist_ok=True)
                    self.achievements_path.write_text(
                        json.dumps(sorted(earned), indent=2) + "\n",
                        encoding="utf-8",
                    )
                except OSError as exc:
                    raise DataLoadError(f"Cannot save achievements: {exc}") from exc
            return new
