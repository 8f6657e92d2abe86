"""Error taxonomy shared by collaborators, commands and the update loop.

Collaborators raise these; command thunks turn them into failure messages so
nothing unwinds past the event loop.
"""

from __future__ import annotations


class AlgoScalesError(Exception):
    """Base class for all recoverable application errors."""


class DataLoadError(AlgoScalesError):
    """Problem, statistics or progress data could not be loaded."""


class EditorError(AlgoScalesError):
    """External editor failed to start or exited abnormally."""

    def __init__(self, message: str, exit_status: int | None = None) -> None:
        super().__init__(message)
        self.exit_status = exit_status


class TestExecutionError(AlgoScalesError):
    """Solution could not be compiled or run (distinct from a failing test)."""

    __test__ = False

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class NavigationError(AlgoScalesError):
    """Requested screen transition is undefined."""
