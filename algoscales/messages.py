"""Typed messages delivered to ``update``.

Input events come from the runtime loop; everything else is the result of a
command. Messages are immutable and carry only plain data.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import Settings
from .daily import DailyProgress
from .problems import Problem
from .stats import Achievement, Summary
from .testrunner import TestResult


@dataclass(frozen=True)
class KeyPressed:
    key: str
    at: float


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class AnimationFrame:
    now: float


@dataclass(frozen=True)
class QuitRequested:
    pass


@dataclass(frozen=True)
class ProblemsLoaded:
    problems: tuple[Problem, ...]


@dataclass(frozen=True)
class ProblemsLoadFailed:
    error: Exception


@dataclass(frozen=True)
class SessionStarted:
    session_id: str
    problem_id: str
    mode: str
    language: str
    workspace: Path
    started_at: float


@dataclass(frozen=True)
class SessionStartFailed:
    problem_id: str
    error: Exception


@dataclass(frozen=True)
class SessionTick:
    session_id: str
    now: float


@dataclass(frozen=True)
class SessionTimeout:
    session_id: str


@dataclass(frozen=True)
class AdvanceProblem:
    session_id: str
    problem_id: str


@dataclass(frozen=True)
class TestsFinished:
    __test__ = False

    session_id: str
    results: tuple[TestResult, ...]


@dataclass(frozen=True)
class TestsFailed:
    __test__ = False

    session_id: str
    error: Exception


@dataclass(frozen=True)
class EditorFinished:
    session_id: str
    code: str


@dataclass(frozen=True)
class EditorFailed:
    session_id: str
    error: Exception


@dataclass(frozen=True)
class AttemptRecorded:
    problem_id: str
    solved: bool
    summary: Summary


@dataclass(frozen=True)
class AttemptRecordFailed:
    problem_id: str
    error: Exception


@dataclass(frozen=True)
class AchievementsUnlocked:
    achievements: tuple[Achievement, ...]


@dataclass(frozen=True)
class StatsLoaded:
    summary: Summary
    earned: tuple[str, ...]


@dataclass(frozen=True)
class StatsLoadFailed:
    error: Exception


@dataclass(frozen=True)
class DailyLoaded:
    pattern: str
    progress: DailyProgress


@dataclass(frozen=True)
class DailyLoadFailed:
    error: Exception


@dataclass(frozen=True)
class SettingsSaved:
    settings: Settings


@dataclass(frozen=True)
class SettingsSaveFailed:
    error: str


@dataclass(frozen=True)
class WorkspaceCleaned:
    workspace: Path


@dataclass(frozen=True)
class CommandFailed:
    command: str
    error: Exception
