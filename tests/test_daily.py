from __future__ import annotations

import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

from algoscales.daily import SCALES, DailyProgress, DailyScheduler, mark_practiced, next_pattern
from algoscales.errors import DataLoadError


class _Today:
    def __init__(self, day: date) -> None:
        self.day = day

    def __call__(self) -> datetime:
        return datetime(self.day.year, self.day.month, self.day.day, 9, 30)


class RotationTests(unittest.TestCase):
    def test_next_pattern_follows_scale_order(self) -> None:
        self.assertEqual(next_pattern(()), "sliding-window")
        self.assertEqual(next_pattern(("sliding-window",)), "two-pointers")
        self.assertEqual(next_pattern({"sliding-window", "two-pointers"}), "fast-slow-pointers")
        self.assertIsNone(next_pattern([scale.pattern for scale in SCALES]))

    def test_mark_practiced_extends_streak_on_consecutive_days(self) -> None:
        progress = mark_practiced(DailyProgress(), "sliding-window", date(2026, 5, 1))
        progress = mark_practiced(progress, "two-pointers", date(2026, 5, 2))

        self.assertEqual(progress.streak, 2)
        self.assertEqual(progress.completed, ("two-pointers",))

        progress = mark_practiced(progress, "hash-map", date(2026, 5, 2))
        self.assertEqual(progress.streak, 2)
        self.assertEqual(progress.completed, ("two-pointers", "hash-map"))

    def test_gap_resets_streak_but_keeps_longest(self) -> None:
        progress = DailyProgress(last_practiced="2026-05-01", streak=4, longest_streak=4)

        progress = mark_practiced(progress, "heap", date(2026, 5, 5))

        self.assertEqual((progress.streak, progress.longest_streak), (1, 4))


class DailySchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.today = _Today(date(2026, 5, 1))
        self.daily = DailyScheduler(Path(self._tmp.name) / "daily", clock=self.today)

    def test_complete_moves_to_next_scale(self) -> None:
        self.daily.complete("sliding-window")

        pattern, progress = self.daily.current()

        self.assertEqual(pattern, "two-pointers")
        self.assertEqual(progress.streak, 1)

    def test_new_day_clears_completed(self) -> None:
        self.daily.complete("sliding-window")
        self.today.day = date(2026, 5, 2)

        pattern, progress = self.daily.current()

        self.assertEqual(pattern, "sliding-window")
        self.assertEqual(progress.completed, ())
        self.assertEqual(progress.streak, 1)

    def test_skip_does_not_touch_streak(self) -> None:
        pattern, progress = self.daily.skip("sliding-window")

        self.assertEqual(pattern, "two-pointers")
        self.assertEqual(progress.streak, 0)
        self.assertEqual(progress.last_practiced, "")

    def test_rotation_restarts_when_every_scale_is_done(self) -> None:
        for scale in SCALES:
            self.daily.skip(scale.pattern)

        pattern, progress = self.daily.current()

        self.assertEqual(pattern, SCALES[0].pattern)
        self.assertEqual(progress.completed, ())

    def test_reset_clears_today_but_keeps_streak(self) -> None:
        self.daily.complete("sliding-window")
        self.daily.complete("two-pointers")

        pattern, progress = self.daily.reset()

        self.assertEqual(pattern, "sliding-window")
        self.assertEqual(progress.completed, ())
        self.assertEqual(progress.streak, 1)

    def test_corrupt_progress_file_raises_data_load_error(self) -> None:
        self.daily.root.mkdir(parents=True)
        self.daily.progress_path.write_text("{oops", encoding="utf-8")

        with self.assertRaises(DataLoadError):
            self.daily.current()


if __name__ == "__main__":
    unittest.main()
