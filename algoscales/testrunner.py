"""Run a solution against a problem's test cases in a subprocess.

Python solutions execute under the current interpreter inside a small
harness. Each case input is a Python literal argument list such as
``[2, 7, 11, 15], 9``; the expected value is a literal compared with ``==``
(falling back to string comparison when it is not a literal).
"""

from __future__ import annotations

import json
import subprocess
import sys
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .errors import TestExecutionError
from .problems import TestCase

RESULT_MARKER = "__ALGOSCALES_RESULTS__"

_PYTHON_HARNESS = r'''
import ast
import json
import sys
import traceback

payload = json.loads(sys.stdin.read())
namespace = {"__name__": "solution"}
try:
    exec(compile(payload["code"], "solution.py", "exec"), namespace)
except BaseException:
    traceback.print_exc()
    sys.exit(2)

func = namespace.get(payload["function"]) if payload["function"] else None
if func is None:
    for name, value in namespace.items():
        if name.startswith("_") or not callable(value):
            continue
        if type(value).__name__ == "function" and getattr(value, "__module__", None) == "solution":
            func = value
            break
if func is None:
    sys.stderr.write("No solution function found in solution.py\n")
    sys.exit(3)


def parse_literal(text):
    try:
        return True, ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return False, text


results = []
for case in payload["cases"]:
    ok, args = parse_literal("(" + case["input"] + ",)")
    if not ok:
        results.append({"input": case["input"], "expected": case["expected"],
                        "actual": "invalid test input", "passed": False})
        continue
    is_literal, expected = parse_literal(case["expected"])
    try:
        actual = func(*args)
    except Exception as exc:
        results.append({"input": case["input"], "expected": case["expected"],
                        "actual": "%s: %s" % (type(exc).__name__, exc), "passed": False})
        continue
    passed = actual == expected if is_literal else str(actual) == expected
    results.append({"input": case["input"], "expected": case["expected"],
                    "actual": repr(actual), "passed": bool(passed)})

sys.stdout.write("\n" + MARKER + json.dumps(results) + "\n")
'''


@dataclass(frozen=True)
class TestResult:
    __test__ = False

    input: str
    expected: str
    actual: str
    passed: bool


def all_passed(results: Iterable[TestResult]) -> bool:
    """True for a non-empty result list where every case passed."""
    results = tuple(results)
    return bool(results) and all(result.passed for result in results)


def _parse_results(stdout: str) -> list[TestResult]:
    for line in reversed(stdout.splitlines()):
        if line.startswith(RESULT_MARKER):
            raw = json.loads(line[len(RESULT_MARKER):])
            return [
                TestResult(
                    input=str(item.get("input", "")),
                    expected=str(item.get("expected", "")),
                    actual=str(item.get("actual", "")),
                    passed=bool(item.get("passed", False)),
                )
                for item in raw
                if isinstance(item, dict)
            ]
    raise ValueError("no results reported")


class TestRunner:
    """Executes solutions; only Python has a harness."""

    __test__ = False

    def __init__(self, timeout_seconds: float = 10.0, python: str | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.python = python or sys.executable

    def run(
        self,
        language: str,
        code: str,
        test_cases: Iterable[TestCase],
        function: str = "",
    ) -> list[TestResult]:
        cases = list(test_cases)
        if language != "python":
            raise TestExecutionError(f"No test runner for language: {language}")
        if not cases:
            raise TestExecutionError("Problem has no test cases")
        return self._run_python(code, cases, function)

    def _run_python(self, code: str, cases: list[TestCase], function: str) -> list[TestResult]:
        payload = json.dumps(
            {
                "code": code,
                "function": function,
                "cases": [{"input": case.input, "expected": case.expected} for case in cases],
            }
        )
        with tempfile.TemporaryDirectory(prefix="algoscales-test-") as work_dir:
            harness = Path(work_dir) / "harness.py"
            harness.write_text(_PYTHON_HARNESS.replace("MARKER", repr(RESULT_MARKER), 1), encoding="utf-8")
            logger.info("Running {} test cases with {}", len(cases), self.python)
            try:
                completed = subprocess.run(
                    [self.python, str(harness)],
                    input=payload,
                    capture_output=True,
                    text=True,
                    cwd=work_dir,
                    timeout=self.timeout_seconds,
                    check=False,
                )
            except subprocess.TimeoutExpired as exc:
                raise TestExecutionError(f"Tests timed out after {self.timeout_seconds:g}s") from exc
            except OSError as exc:
                raise TestExecutionError(f"Cannot start {self.python}: {exc}") from exc

        if completed.returncode != 0:
            output = (completed.stderr or completed.stdout).strip()
            raise TestExecutionError(
                f"Solution failed to run (exit status {completed.returncode})",
                output=output,
            )
        try:
            return _parse_results(completed.stdout)
        except (ValueError, json.JSONDecodeError) as exc:
            raise TestExecutionError("Test harness produced no results", output=completed.stdout.strip()) from exc
