"""Tests for command execution and the background scheduler."""

from __future__ import annotations

import tempfile
import threading
import time
import unittest
from pathlib import Path
from unittest import mock

from algoscales import commands, errors
from algoscales import messages as msg
from algoscales.commands import Command, CommandScheduler, Services, execute
from algoscales.config import Settings
from algoscales.daily import DailyScheduler
from algoscales.problems import ProblemRepository
from algoscales.stats import StatsStore


def _services(root: Path, **overrides) -> Services:
    values = dict(
        repository=ProblemRepository(),
        stats=StatsStore(root / "stats"),
        daily=DailyScheduler(root / "daily"),
        runner=mock.Mock(),
        workspace_root=root / "sessions",
        clock=lambda: 42.0,
    )
    values.update(overrides)
    return Services(**values)


class ExecuteTests(unittest.TestCase):
    def test_unexpected_exception_becomes_command_failed(self) -> None:
        def boom() -> object:
            raise KeyError("missing")

        result = execute(Command(name="StatsLoaded", run=boom))

        self.assertIsInstance(result, msg.CommandFailed)
        self.assertEqual(result.command, "StatsLoaded")
        self.assertIsInstance(result.error, KeyError)

    def test_emit_returns_message_unchanged(self) -> None:
        message = msg.SessionTimeout(session_id="s-1")
        command = commands.emit(message, delay=1.5)

        self.assertEqual(command.name, "SessionTimeout")
        self.assertEqual(command.delay, 1.5)
        self.assertIs(execute(command), message)

    def test_tick_reads_clock_when_run(self) -> None:
        now = [5.0]
        command = commands.tick("s-1", lambda: now[0])
        now[0] = 6.0

        self.assertEqual(execute(command), msg.SessionTick(session_id="s-1", now=6.0))


class CommandFactoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.problem = ProblemRepository().get_by_id("two-sum")

    def test_start_session_creates_workspace(self) -> None:
        services = _services(self.root)

        result = execute(commands.start_session(self.problem, "cram", "python", services))

        self.assertIsInstance(result, msg.SessionStarted)
        self.assertTrue(result.session_id.startswith("two-sum-"))
        self.assertTrue(result.workspace.is_dir())
        self.assertEqual(result.workspace.parent, self.root / "sessions")
        self.assertEqual((result.mode, result.language, result.started_at), ("cram", "python", 42.0))

    def test_start_session_reports_unwritable_workspace(self) -> None:
        blocker = self.root / "blocker"
        blocker.write_text("", encoding="utf-8")
        services = _services(self.root, workspace_root=blocker)

        result = execute(commands.start_session(self.problem, "practice", "python", services))

        self.assertIsInstance(result, msg.SessionStartFailed)
        self.assertEqual(result.problem_id, "two-sum")

    def test_run_tests_maps_execution_error_to_tests_failed(self) -> None:
        runner = mock.Mock()
        runner.run.side_effect = errors.TestExecutionError("compile failed", output="SyntaxError")

        result = execute(commands.run_tests(runner, "s-1", "python", "def", self.problem))

        self.assertIsInstance(result, msg.TestsFailed)
        self.assertEqual(result.error.output, "SyntaxError")

    def test_load_problems_failure(self) -> None:
        repository = mock.Mock()
        repository.reload.side_effect = errors.DataLoadError("bad file")

        result = execute(commands.load_problems(repository))

        self.assertIsInstance(result, msg.ProblemsLoadFailed)

    def test_cleanup_workspace_removes_tree_and_tolerates_missing(self) -> None:
        workspace = self.root / "ws"
        (workspace / "sub").mkdir(parents=True)
        (workspace / "sub" / "solution.py").write_text("x = 1\n", encoding="utf-8")

        result = execute(commands.cleanup_workspace(workspace))
        again = execute(commands.cleanup_workspace(workspace))

        self.assertFalse(workspace.exists())
        self.assertIsInstance(result, msg.WorkspaceCleaned)
        self.assertIsInstance(again, msg.WorkspaceCleaned)

    def test_record_attempt_then_achievements(self) -> None:
        stats = StatsStore(self.root / "stats")

        recorded = execute(
            commands.record_attempt(
                stats, self.problem, True, 65.0, mode="cram", hints_used=False, solution_used=False
            )
        )
        unlocked = execute(commands.check_achievements(stats))

        self.assertEqual(recorded.summary.solved, 1)
        keys = {achievement.key for achievement in unlocked.achievements}
        self.assertEqual(keys, {"first-solve", "cram-finisher", "clean-solve"})
        self.assertEqual(execute(commands.check_achievements(stats)).achievements, ())

    def test_save_settings_reports_failure(self) -> None:
        blocker = self.root / "blocker"
        blocker.write_text("", encoding="utf-8")

        result = execute(commands.save_settings(Settings(), blocker / "config.json"))

        self.assertIsInstance(result, msg.SettingsSaveFailed)


class CommandSchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = CommandScheduler(max_workers=2)
        self.addCleanup(self.scheduler.shutdown)

    def test_results_are_queued_for_the_loop(self) -> None:
        self.scheduler.submit([commands.emit(msg.QuitRequested())])

        self.assertEqual(self.scheduler.wait(timeout=2.0), msg.QuitRequested())
        self.assertEqual(self.scheduler.drain(), [])

    def test_delayed_command_arrives_after_immediate_one(self) -> None:
        self.scheduler.submit(
            [
                commands.emit(msg.SessionTimeout(session_id="late"), delay=0.2),
                commands.emit(msg.SessionTimeout(session_id="early")),
            ]
        )

        first = self.scheduler.wait(timeout=2.0)
        second = self.scheduler.wait(timeout=2.0)

        self.assertEqual([first.session_id, second.session_id], ["early", "late"])

    def test_foreground_commands_are_parked(self) -> None:
        ran = threading.Event()
        command = Command(name="EditorFinished", run=lambda: ran.set(), foreground=True)

        self.scheduler.submit([command])

        self.assertIs(self.scheduler.pop_foreground(), command)
        self.assertIsNone(self.scheduler.pop_foreground())
        self.assertFalse(ran.is_set())

    def test_post_queues_loop_thread_message(self) -> None:
        self.scheduler.post(msg.QuitRequested())

        self.assertEqual(self.scheduler.drain(), [msg.QuitRequested()])

    def test_shutdown_drops_pending_delayed_commands(self) -> None:
        self.scheduler.submit([commands.emit(msg.QuitRequested(), delay=5.0)])
        self.assertEqual(self.scheduler.pending(), 1)

        started = time.monotonic()
        self.scheduler.shutdown()
        self.scheduler.submit([commands.emit(msg.QuitRequested())])

        self.assertIsNone(self.scheduler.wait(timeout=0.1))
        self.assertLess(time.monotonic() - started, 2.0)


if __name__ == "__main__":
    unittest.main()
