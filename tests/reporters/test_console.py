"""Tests for ConsoleReporter.

Tests the Rich-based console output reporter.
"""

from io import StringIO

from rich.console import Console

from s3verify.models import CaseOutcome, CheckResult, RunOutcome, RunResult, TestCase
from s3verify.reporters.base import Reporter
from s3verify.reporters.console import ConsoleReporter


def noop(config, ctx):
    return CheckResult.passed()


def make_reporter(quiet=False):
    buffer = StringIO()
    console = Console(file=buffer, width=120, force_terminal=False, color_system=None)
    return ConsoleReporter(quiet=quiet, console=console), buffer


class TestConsoleReporterInterface:
    """Tests that ConsoleReporter implements Reporter interface."""

    def test_inherits_from_reporter(self):
        reporter, _ = make_reporter()
        assert isinstance(reporter, Reporter)


class TestCaseComplete:
    """Tests for on_case_complete."""

    def test_pass_line(self):
        reporter, buffer = make_reporter()

        reporter.on_case_complete(3, 22, TestCase("HeadObject", noop), CheckResult.passed())

        assert "[03/22] HeadObject: PASSED" in buffer.getvalue()

    def test_failure_shows_message(self):
        reporter, buffer = make_reporter()

        reporter.on_case_complete(1, 22, TestCase("PutObject", noop), CheckResult.failed("Unexpected ETag"))

        output = buffer.getvalue()
        assert "[01/22] PutObject: FAILED" in output
        assert "Unexpected ETag" in output

    def test_critical_failure_marked(self):
        reporter, buffer = make_reporter()

        reporter.on_case_complete(1, 2, TestCase("PutBucket", noop, critical=True), CheckResult.failed("no"))

        assert "(critical)" in buffer.getvalue()

    def test_quiet_hides_passes(self):
        reporter, buffer = make_reporter(quiet=True)

        reporter.on_case_complete(1, 2, TestCase("A", noop), CheckResult.passed())
        reporter.on_case_complete(2, 2, TestCase("B", noop), CheckResult.failed("broken"))

        output = buffer.getvalue()
        assert "A:" not in output
        assert "B: FAILED" in output


class TestFixtureStep:
    """Tests for on_fixture_step."""

    def test_done_and_failed(self):
        reporter, buffer = make_reporter()

        reporter.on_fixture_step("Creating test bucket", True)
        reporter.on_fixture_step("Creating test objects", False, RuntimeError("denied"))

        output = buffer.getvalue()
        assert "Creating test bucket: DONE" in output
        assert "Creating test objects: FAILED" in output
        assert "denied" in output


class TestRunComplete:
    """Tests for the summary."""

    def test_summary_counts(self):
        reporter, buffer = make_reporter()
        case = TestCase("A", noop)
        result = RunResult(
            outcome=RunOutcome.COMPLETED,
            cases=[CaseOutcome(1, case, CheckResult.passed()), CaseOutcome(None, case, CheckResult.skipped())],
            total_duration=2.0,
        )

        reporter.on_run_complete(result)

        output = buffer.getvalue()
        assert "Summary" in output
        assert "COMPLETED" in output
        assert "2.0s" in output

    def test_abort_notice(self):
        reporter, buffer = make_reporter()
        case = TestCase("PutBucket", noop, critical=True)
        result = RunResult(
            outcome=RunOutcome.ABORTED_CRITICAL,
            cases=[CaseOutcome(1, case, CheckResult.failed("denied"))],
        )

        reporter.on_run_complete(result)

        output = buffer.getvalue()
        assert "ABORTED" in output
        assert "Critical check PutBucket failed" in output
