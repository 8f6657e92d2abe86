from __future__ import annotations

import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

from algoscales.stats import Attempt, StatsStore, streak_days, summarize


class _Today:
    def __init__(self, day: date) -> None:
        self.day = day

    def __call__(self) -> datetime:
        return datetime(self.day.year, self.day.month, self.day.day, 12, 0)


class SummaryTests(unittest.TestCase):
    def test_empty_history_is_all_zero(self) -> None:
        summary = summarize([], date(2026, 1, 10))

        self.assertEqual((summary.attempted, summary.solved, summary.success_rate), (0, 0, 0.0))

    def test_summary_counts_rate_and_fastest(self) -> None:
        attempts = [
            Attempt("two-sum", True, 120.0, recorded_on="2026-01-10"),
            Attempt("binary-search", True, 60.0, recorded_on="2026-01-10"),
            Attempt("valid-palindrome", False, 900.0, recorded_on="2026-01-10"),
            Attempt("two-sum", False, 30.0, recorded_on="2026-01-09"),
        ]

        summary = summarize(attempts, date(2026, 1, 10))

        self.assertEqual(summary.attempted, 4)
        self.assertEqual(summary.solved, 2)
        self.assertAlmostEqual(summary.success_rate, 0.5)
        self.assertAlmostEqual(summary.average_solve_seconds, 90.0)
        self.assertEqual((summary.fastest_problem_id, summary.fastest_seconds), ("binary-search", 60.0))

    def test_streak_tolerates_no_solve_yet_today(self) -> None:
        attempts = [
            Attempt("a", True, 1.0, recorded_on="2026-01-07"),
            Attempt("b", True, 1.0, recorded_on="2026-01-08"),
            Attempt("c", True, 1.0, recorded_on="2026-01-09"),
            Attempt("d", False, 1.0, recorded_on="2026-01-10"),
        ]

        self.assertEqual(streak_days(attempts, date(2026, 1, 10)), 3)
        self.assertEqual(streak_days(attempts, date(2026, 1, 11)), 0)


class StatsStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.today = _Today(date(2026, 3, 1))
        self.store = StatsStore(Path(self._tmp.name) / "stats", clock=self.today)

    def test_record_attempt_persists_and_returns_summary(self) -> None:
        summary = self.store.record_attempt("two-sum", True, 42.5, mode="practice", patterns=("hash-map",))

        self.assertEqual((summary.attempted, summary.solved), (1, 1))
        attempts = StatsStore(self.store.root).attempts()
        self.assertEqual(attempts[0].patterns, ("hash-map",))
        self.assertEqual(attempts[0].recorded_on, "2026-03-01")

    def test_corrupt_lines_are_skipped(self) -> None:
        self.store.record_attempt("two-sum", False, 10.0)
        with self.store.attempts_path.open("a", encoding="utf-8") as handle:
            handle.write("{broken\n[1]\n")
        self.store.record_attempt("two-sum", True, 20.0)

        self.assertEqual(self.store.get_summary().attempted, 2)

    def test_achievements_are_awarded_once(self) -> None:
        self.store.record_attempt("two-sum", True, 10.0, hints_used=True)

        first = [achievement.key for achievement in self.store.check_achievements()]
        second = self.store.check_achievements()

        self.assertEqual(first, ["first-solve"])
        self.assertEqual(second, ())
        self.assertEqual(self.store.earned_achievements(), ("first-solve",))

    def test_streak_achievement_after_three_days(self) -> None:
        for day in (1, 2, 3):
            self.today.day = date(2026, 3, day)
            self.store.record_attempt("two-sum", True, 10.0, solution_used=True)

        keys = {achievement.key for achievement in self.store.check_achievements()}

        self.assertIn("streak-3", keys)
        self.assertNotIn("clean-solve", keys)

    def test_reset_removes_history(self) -> None:
        self.store.record_attempt("two-sum", True, 10.0)
        self.store.check_achievements()

        self.store.reset()

        self.assertEqual(self.store.get_summary().attempted, 0)
        self.assertEqual(self.store.earned_achievements(), ())


if __name__ == "__main__":
    unittest.main()
