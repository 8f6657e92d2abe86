"""Daily scales: a fixed rotation of algorithm patterns practiced one per day.

Progress (patterns done today, streak, last practice date) persists as JSON.
A new day clears the completed set; when every scale is done the rotation
restarts from the top.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from pathlib import Path

from .errors import DataLoadError

PROGRESS_FILENAME = "daily.json"


@dataclass(frozen=True)
class Scale:
    pattern: str
    musical_name: str
    description: str


SCALES: tuple[Scale, ...] = (
    Scale("sliding-window", "C Major", "The fundamental scale, elegant and versatile"),
    Scale("two-pointers", "G Major", "Balanced and efficient, the workhorse of array manipulation"),
    Scale("fast-slow-pointers", "D Major", "The cycle detector, bright and revealing"),
    Scale("hash-map", "A Major", "The lookup accelerator, crisp and direct"),
    Scale("binary-search", "E Major", "The divider and conqueror, precise and logarithmic"),
    Scale("dfs", "B Major", "The deep explorer, rich and thorough"),
    Scale("bfs", "F# Major", "The level-by-level discoverer, methodical and complete"),
    Scale("dynamic-programming", "Db Major", "The optimizer, complex and powerful"),
    Scale("greedy", "Ab Major", "The local maximizer, bold and decisive"),
    Scale("union-find", "Eb Major", "The connector, structured and organized"),
    Scale("heap", "Bb Major", "The sorter, flexible and maintaining order"),
)


@dataclass(frozen=True)
class DailyProgress:
    completed: tuple[str, ...] = ()
    completed_on: str = ""
    last_practiced: str = ""
    streak: int = 0
    longest_streak: int = 0


def scale_for_pattern(pattern: str) -> Scale | None:
    for scale in SCALES:
        if scale.pattern == pattern:
            return scale
    return None


def next_pattern(completed: tuple[str, ...] | list[str] | set[str]) -> str | None:
    """First scale pattern not in ``completed``, or ``None`` when all are done."""
    done = set(completed)
    for scale in SCALES:
        if scale.pattern not in done:
            return scale.pattern
    return None


def mark_practiced(progress: DailyProgress, pattern: str, today: date) -> DailyProgress:
    """Record ``pattern`` as done today and roll the streak forward."""
    completed = progress.completed if progress.completed_on == today.isoformat() else ()
    if pattern not in completed:
        completed = (*completed, pattern)
    streak = progress.streak
    if progress.last_practiced != today.isoformat():
        yesterday = (today - timedelta(days=1)).isoformat()
        streak = streak + 1 if progress.last_practiced == yesterday else 1
    return DailyProgress(
        completed=completed,
        completed_on=today.isoformat(),
        last_practiced=today.isoformat(),
        streak=streak,
        longest_streak=max(progress.longest_streak, streak),
    )


class DailyScheduler:
    """Loads and stores daily progress; safe to call from command threads."""

    def __init__(self, root: Path, clock=None) -> None:
        self.root = root
        self._clock = clock if clock is not None else datetime.now
        self._lock = threading.Lock()

    @property
    def progress_path(self) -> Path:
        return self.root / PROGRESS_FILENAME

    def _today(self) -> date:
        return self._clock().date()

    def load_progress(self) -> DailyProgress:
        """Read stored progress; patterns completed on an earlier day are dropped."""
        with self._lock:
            try:
                data = json.loads(self.progress_path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                return DailyProgress()
            except (OSError, json.JSONDecodeError) as exc:
                raise DataLoadError(f"Cannot read daily progress: {exc}") from exc
        if not isinstance(data, dict):
            return DailyProgress()
        completed = data.get("completed")
        progress = DailyProgress(
            completed=tuple(str(item) for item in completed) if isinstance(completed, list) else (),
            completed_on=str(data.get("completed_on", "") or ""),
            last_practiced=str(data.get("last_practiced", "") or ""),
            streak=_coerce_count(data.get("streak")),
            longest_streak=_coerce_count(data.get("longest_streak")),
        )
        if progress.completed_on != self._today().isoformat():
            progress = replace(progress, completed=())
        return progress

    def save_progress(self, progress: DailyProgress) -> None:
        payload = {
            "completed": list(progress.completed),
            "completed_on": progress.completed_on,
            "last_practiced": progress.last_practiced,
            "streak": progress.streak,
            "longest_streak": progress.longest_streak,
        }
        with self._lock:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
                self.progress_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
            except OSError as exc:
                raise DataLoadError(f"Cannot save daily progress: {exc}") from exc

    def next_pattern(self, completed: tuple[str, ...]) -> str | None:
        return next_pattern(completed)

    def current(self) -> tuple[str, DailyProgress]:
        """Return today's pattern, restarting the rotation when all are done."""
        progress = self.load_progress()
        pattern = next_pattern(progress.completed)
        if pattern is None:
            progress = replace(progress, completed=())
            pattern = SCALES[0].pattern
        return pattern, progress

    def skip(self, pattern: str) -> tuple[str, DailyProgress]:
        """Set ``pattern`` aside for today without touching the streak."""
        progress = self.load_progress()
        if pattern not in progress.completed:
            progress = replace(
                progress,
                completed=(*progress.completed, pattern),
                completed_on=self._today().isoformat(),
            )
        self.save_progress(progress)
        return self.current()

    def complete(self, pattern: str) -> DailyProgress:
        """Record a solved practice of ``pattern`` today."""
        progress = mark_practiced(self.load_progress(), pattern, self._today())
        self.save_progress(progress)
        return progress

    def reset(self) -> tuple[str, DailyProgress]:
        """Forget the rotation for today; streak history is kept."""
        progress = replace(self.load_progress(), completed=(), completed_on="")
        self.save_progress(progress)
        return self.current()


def _coerce_count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)
