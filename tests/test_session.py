"""Session lifecycle: timing, pause, reveals, tests, exits and timeout."""

from __future__ import annotations

import unittest
from dataclasses import replace
from pathlib import Path

from algoscales import session as sessions
from algoscales.config import Settings
from algoscales.errors import TestExecutionError
from algoscales.problems import ProblemRepository
from algoscales.testrunner import TestResult

PROBLEM = ProblemRepository().get_by_id("two-sum")
PASS = TestResult(input="[3, 3], 6", expected="[0, 1]", actual="[0, 1]", passed=True)
FAIL = TestResult(input="[3, 2, 4], 6", expected="[1, 2]", actual="None", passed=False)


def _start(mode: str = "practice", now: float = 100.0, settings: Settings | None = None) -> sessions.Session:
    return sessions.start(
        PROBLEM,
        mode,
        "python",
        "sess-1",
        Path("/tmp/algoscales-ws"),
        settings or Settings(),
        now,
    )


class StartTests(unittest.TestCase):
    def test_start_uses_starter_code_and_mode_budget(self) -> None:
        session = _start("cram")

        self.assertEqual(session.status, sessions.STATUS_ACTIVE)
        self.assertEqual(session.code, PROBLEM.starter_code["python"])
        self.assertEqual(session.budget, 15 * 60)
        self.assertFalse(session.hint.shown)

    def test_learn_mode_starts_with_everything_revealed(self) -> None:
        session = _start("learn")

        self.assertTrue(session.hint.shown)
        self.assertTrue(session.solution.shown)
        self.assertFalse(session.hints_used)

    def test_missing_starter_code_gets_generated_template(self) -> None:
        code = sessions.template_code(replace(PROBLEM, starter_code={}), "go")

        self.assertIn("package main", code)
        self.assertIn("func two_sum", code)


class TimingTests(unittest.TestCase):
    def test_elapsed_counts_from_start(self) -> None:
        self.assertEqual(sessions.elapsed(_start(now=100.0), 130.0), 30.0)

    def test_paused_session_does_not_accumulate_time(self) -> None:
        session = sessions.toggle_pause(_start(now=0.0), 10.0)

        self.assertTrue(session.paused)
        self.assertEqual(sessions.elapsed(session, 500.0), 10.0)
        ticked, timed_out = sessions.tick(session, 5000.0)
        self.assertFalse(timed_out)
        self.assertEqual(sessions.elapsed(ticked, 5000.0), 10.0)

        resumed = sessions.toggle_pause(session, 600.0)
        self.assertEqual(resumed.status, sessions.STATUS_ACTIVE)
        self.assertEqual(sessions.elapsed(resumed, 605.0), 15.0)

    def test_tick_reports_timeout_once(self) -> None:
        session = _start(now=0.0, settings=Settings().with_timer("practice", 1))

        session, timed_out = sessions.tick(session, 59.0)
        self.assertFalse(timed_out)
        session, timed_out = sessions.tick(session, 60.0)
        self.assertTrue(timed_out)
        session, timed_out = sessions.tick(session, 61.0)
        self.assertFalse(timed_out)

    def test_ticks_for_other_or_finished_sessions_are_not_accepted(self) -> None:
        session = _start()

        self.assertTrue(sessions.accepts_tick(session, "sess-1"))
        self.assertFalse(sessions.accepts_tick(session, "sess-2"))
        finished = sessions.abandon(session, sessions.EXIT_QUIT, 120.0)
        self.assertFalse(sessions.accepts_tick(finished, "sess-1"))


class RevealTests(unittest.TestCase):
    def test_reveal_is_monotonic_and_idempotent(self) -> None:
        session = sessions.reveal_hint(_start())
        again = sessions.reveal_hint(session)

        self.assertTrue(session.hint.shown)
        self.assertEqual(session, again)
        self.assertEqual(sessions.HIDDEN.join(sessions.SHOWN), sessions.SHOWN)
        self.assertEqual(sessions.SHOWN.join(sessions.HIDDEN), sessions.SHOWN)

    def test_solution_implies_hint(self) -> None:
        session = sessions.reveal_solution(_start())

        self.assertTrue(session.hint.shown)
        self.assertTrue(session.solution_used)


class TestRunFlowTests(unittest.TestCase):
    def test_second_request_while_busy_is_rejected(self) -> None:
        session, accepted = sessions.request_tests(_start())
        self.assertTrue(accepted)
        self.assertEqual(session.busy, sessions.BUSY_TESTS)

        session, accepted = sessions.request_tests(session)
        self.assertFalse(accepted)
        self.assertEqual(session.message, sessions.TESTS_ALREADY_RUNNING)

    def test_all_passing_results_complete_the_session(self) -> None:
        session, _ = sessions.request_tests(_start(now=0.0))
        session = sessions.record_results(session, (PASS, PASS), now=90.0)

        self.assertIsNone(session.busy)
        self.assertEqual(session.status, sessions.STATUS_COMPLETED)
        self.assertEqual(session.outcome, sessions.OUTCOME_SOLVED)
        self.assertEqual(session.accumulated, 90.0)
        self.assertEqual(sessions.elapsed(session, 999.0), 90.0)

    def test_failing_results_keep_session_active(self) -> None:
        session, _ = sessions.request_tests(_start())
        session = sessions.record_results(session, (PASS, FAIL), now=110.0)

        self.assertEqual(session.status, sessions.STATUS_ACTIVE)
        self.assertEqual(session.message, "1/2 tests passed")

    def test_empty_results_do_not_count_as_solved(self) -> None:
        session, _ = sessions.request_tests(_start())
        session = sessions.record_results(session, (), now=110.0)

        self.assertIsNone(session.outcome)

    def test_test_error_keeps_output_verbatim(self) -> None:
        session, _ = sessions.request_tests(_start())
        error = TestExecutionError("Solution failed to run", output="SyntaxError: invalid syntax")
        session = sessions.record_test_error(session, error)

        self.assertIsNone(session.busy)
        self.assertIn("SyntaxError: invalid syntax", session.message)
        self.assertEqual(session.status, sessions.STATUS_ACTIVE)

    def test_requests_after_completion_are_rejected(self) -> None:
        session, _ = sessions.request_tests(_start())
        session = sessions.record_results(session, (PASS,), now=110.0)

        _, accepted = sessions.request_tests(session)
        self.assertFalse(accepted)


class SubmitTests(unittest.TestCase):
    def test_submit_without_results_runs_tests(self) -> None:
        session, run = sessions.submit(_start())

        self.assertTrue(run)
        self.assertEqual(session.busy, sessions.BUSY_TESTS)

    def test_submit_with_failures_reports_pass_count(self) -> None:
        session = replace(_start(), test_results=(PASS, FAIL))
        session, run = sessions.submit(session)

        self.assertFalse(run)
        self.assertIn("1/2", session.message)

    def test_submit_on_completed_session_only_redisplays(self) -> None:
        session, _ = sessions.request_tests(_start(now=0.0))
        session = sessions.record_results(session, (PASS,), now=65.0)
        again, run = sessions.submit(session)

        self.assertFalse(run)
        self.assertEqual(again.status, sessions.STATUS_COMPLETED)
        self.assertEqual(again.message, "Solved in 01:05")

    def test_submit_while_busy_is_rejected(self) -> None:
        session, _ = sessions.request_tests(_start())
        session, run = sessions.submit(session)

        self.assertFalse(run)
        self.assertEqual(session.message, sessions.TESTS_ALREADY_RUNNING)


class ExitTests(unittest.TestCase):
    def test_cram_exit_waits_for_confirmation(self) -> None:
        session, kind = sessions.request_exit(_start("cram"), sessions.EXIT_QUIT, now=120.0)

        self.assertIsNone(kind)
        self.assertTrue(session.confirm_quit)
        self.assertEqual(session.pending_exit, sessions.EXIT_QUIT)
        self.assertEqual(session.status, sessions.STATUS_ACTIVE)

    def test_confirm_no_resumes_session(self) -> None:
        session, _ = sessions.request_exit(_start("cram"), sessions.EXIT_SKIP, now=120.0)
        session, kind = sessions.confirm_exit(session, False, now=121.0)

        self.assertIsNone(kind)
        self.assertFalse(session.confirm_quit)
        self.assertFalse(session.finished)

    def test_confirm_yes_abandons_with_pending_kind(self) -> None:
        session, _ = sessions.request_exit(_start("cram"), sessions.EXIT_SKIP, now=120.0)
        session, kind = sessions.confirm_exit(session, True, now=121.0)

        self.assertEqual(kind, sessions.EXIT_SKIP)
        self.assertEqual(session.status, sessions.STATUS_ABANDONED)
        self.assertEqual(session.outcome, sessions.OUTCOME_SKIPPED)

    def test_practice_exit_is_immediate(self) -> None:
        session, kind = sessions.request_exit(_start("practice"), sessions.EXIT_QUIT, now=120.0)

        self.assertEqual(kind, sessions.EXIT_QUIT)
        self.assertEqual(session.outcome, sessions.OUTCOME_QUIT)

    def test_cram_timeout_abandons(self) -> None:
        session = sessions.time_out(_start("cram", now=0.0), now=900.0)

        self.assertEqual(session.status, sessions.STATUS_ABANDONED)
        self.assertEqual(session.outcome, sessions.OUTCOME_TIMEOUT)

    def test_practice_timeout_only_warns(self) -> None:
        session = sessions.time_out(_start("practice", now=0.0), now=1800.0)

        self.assertEqual(session.status, sessions.STATUS_ACTIVE)
        self.assertIn("Time is up", session.message)


if __name__ == "__main__":
    unittest.main()
