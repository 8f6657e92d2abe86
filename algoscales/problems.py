"""Problem model and repository.

Problems are JSON documents, one per file, anywhere below the problems
directory. When no directory exists the built-in catalog is served so the
practice loop works out of the box.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .builtin_problems import BUILTIN_PROBLEMS
from .daily import SCALES
from .errors import DataLoadError


@dataclass(frozen=True)
class Example:
    input: str
    output: str
    explanation: str = ""


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    input: str
    expected: str


@dataclass(frozen=True)
class Problem:
    id: str
    title: str
    difficulty: str = "medium"
    patterns: tuple[str, ...] = ()
    description: str = ""
    examples: tuple[Example, ...] = ()
    constraints: tuple[str, ...] = ()
    pattern_explanation: str = ""
    solution_walkthrough: tuple[str, ...] = ()
    starter_code: dict[str, str] = field(default_factory=dict)
    solutions: dict[str, str] = field(default_factory=dict)
    test_cases: tuple[TestCase, ...] = ()
    estimated_minutes: int = 0
    function: str = ""


def _string_tuple(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if isinstance(item, (str, int, float)))


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): text for key, text in value.items() if isinstance(text, str)}


def problem_from_dict(data: dict[str, object], source: str = "<memory>") -> Problem:
    """Validate one decoded problem document.

    ``id`` and ``title`` are required; every other field is optional and
    silently dropped when it has the wrong shape.
    """
    problem_id = data.get("id")
    title = data.get("title")
    if not isinstance(problem_id, str) or not problem_id.strip():
        raise DataLoadError(f"{source}: problem is missing an 'id'")
    if not isinstance(title, str) or not title.strip():
        raise DataLoadError(f"{source}: problem {problem_id!r} is missing a 'title'")

    examples: list[Example] = []
    raw_examples = data.get("examples")
    for raw in raw_examples if isinstance(raw_examples, list) else []:
        if isinstance(raw, dict):
            examples.append(
                Example(
                    input=str(raw.get("input", "")),
                    output=str(raw.get("output", "")),
                    explanation=str(raw.get("explanation", "") or ""),
                )
            )

    test_cases: list[TestCase] = []
    raw_cases = data.get("test_cases")
    for raw in raw_cases if isinstance(raw_cases, list) else []:
        if isinstance(raw, dict) and "input" in raw and "expected" in raw:
            test_cases.append(TestCase(input=str(raw["input"]), expected=str(raw["expected"])))

    estimated = data.get("estimated_time")
    return Problem(
        id=problem_id.strip(),
        title=title.strip(),
        difficulty=str(data.get("difficulty") or "medium").lower(),
        patterns=_string_tuple(data.get("patterns")),
        description=str(data.get("description") or ""),
        examples=tuple(examples),
        constraints=_string_tuple(data.get("constraints")),
        pattern_explanation=str(data.get("pattern_explanation") or ""),
        solution_walkthrough=_string_tuple(data.get("solution_walkthrough")),
        starter_code=_string_map(data.get("starter_code")),
        solutions=_string_map(data.get("solutions")),
        test_cases=tuple(test_cases),
        estimated_minutes=estimated if isinstance(estimated, int) and not isinstance(estimated, bool) else 0,
        function=str(data.get("function") or ""),
    )


class ProblemRepository:
    """Read-only problem catalog backed by a directory or in-memory documents."""

    def __init__(self, root: Path | None = None, documents: Iterable[dict[str, object]] | None = None) -> None:
        self.root = root
        self._documents = list(BUILTIN_PROBLEMS if documents is None else documents)
        self._cache: tuple[Problem, ...] | None = None

    def _load_directory(self, root: Path) -> list[Problem]:
        problems: list[Problem] = []
        for path in sorted(root.rglob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise DataLoadError(f"Cannot read problem file {path}: {exc}") from exc
            if not isinstance(data, dict):
                raise DataLoadError(f"{path}: expected a JSON object")
            problems.append(problem_from_dict(data, source=str(path)))
        return problems

    def list_all(self) -> tuple[Problem, ...]:
        """Return every problem ordered by id."""
        if self._cache is not None:
            return self._cache
        if self.root is not None and self.root.is_dir():
            loaded = self._load_directory(self.root)
        else:
            loaded = [problem_from_dict(doc) for doc in self._documents]
        by_id: dict[str, Problem] = {}
        for problem in loaded:
            by_id[problem.id] = problem
        self._cache = tuple(sorted(by_id.values(), key=lambda item: item.id))
        return self._cache

    def get_by_id(self, problem_id: str) -> Problem:
        for problem in self.list_all():
            if problem.id == problem_id:
                return problem
        raise DataLoadError(f"problem not found: {problem_id}")

    def reload(self) -> tuple[Problem, ...]:
        self._cache = None
        return self.list_all()

    def patterns(self) -> tuple[str, ...]:
        """Distinct patterns in daily scale order, then alphabetically."""
        return scale_ordered_patterns(self.list_all())


def find_problem(problems: Iterable[Problem], problem_id: str | None) -> Problem | None:
    if problem_id is None:
        return None
    for problem in problems:
        if problem.id == problem_id:
            return problem
    return None


def problems_for_pattern(problems: Iterable[Problem], pattern: str | None) -> tuple[Problem, ...]:
    """Filter by pattern tag; ``None`` keeps everything.

    Tags compare case-insensitively with spaces and slashes folded to dashes,
    so ``"Two Pointers"`` matches ``"two-pointers"``.
    """
    if pattern is None:
        return tuple(problems)
    wanted = normalize_pattern(pattern)
    return tuple(problem for problem in problems if any(normalize_pattern(tag) == wanted for tag in problem.patterns))


def normalize_pattern(pattern: str) -> str:
    folded = pattern.strip().lower().replace("&", "").replace("/", "-")
    return "-".join(folded.split())


def ordered_patterns(problems: Iterable[Problem], preferred_order: Iterable[str] = ()) -> tuple[str, ...]:
    """Distinct normalized patterns, ``preferred_order`` first, then by name."""
    seen = {normalize_pattern(tag) for problem in problems for tag in problem.patterns}
    ordered = [pattern for pattern in (normalize_pattern(p) for p in preferred_order) if pattern in seen]
    ordered.extend(sorted(seen - set(ordered)))
    return tuple(ordered)


def scale_ordered_patterns(problems: Iterable[Problem]) -> tuple[str, ...]:
    return ordered_patterns(problems, (scale.pattern for scale in SCALES))
