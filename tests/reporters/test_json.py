"""Tests for JsonReporter.

Tests the JSON results file.
"""

import json

from s3verify.models import CaseOutcome, CheckResult, RunOutcome, RunResult, TestCase
from s3verify.reporters.base import Reporter
from s3verify.reporters.json_reporter import JsonReporter


def noop(config, ctx):
    return CheckResult.passed()


def run_result():
    return RunResult(
        outcome=RunOutcome.COMPLETED,
        cases=[CaseOutcome(1, TestCase("HeadBucket", noop, critical=True), CheckResult.passed(), 0.1)],
        total_duration=0.1,
        timestamp="2024-01-01T00:00:00Z",
    )


class TestJsonReporter:
    """Tests for JsonReporter output."""

    def test_inherits_from_reporter(self, tmp_path):
        assert isinstance(JsonReporter(str(tmp_path / "out.json")), Reporter)

    def test_writes_run_result(self, tmp_path):
        path = tmp_path / "nested" / "out.json"
        reporter = JsonReporter(str(path))

        returned = reporter.on_run_complete(run_result())

        written = json.loads(path.read_text(encoding="utf-8"))
        assert written == returned
        assert written["outcome"] == "completed"
        assert written["cases"][0]["name"] == "HeadBucket"
        assert written["summary"]["passed"] == 1
        assert "fixture" not in written

    def test_includes_fixture_steps(self, tmp_path):
        path = tmp_path / "out.json"
        reporter = JsonReporter(str(path))

        reporter.on_fixture_step("Creating test bucket", True)
        reporter.on_fixture_step("Creating test objects", False, RuntimeError("denied"))
        reporter.on_run_complete(run_result())

        written = json.loads(path.read_text(encoding="utf-8"))
        assert written["fixture"] == [
            {"step": "Creating test bucket", "ok": True},
            {"step": "Creating test objects", "ok": False, "error": "denied"},
        ]
