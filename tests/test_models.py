"""Tests for models.py module."""

from s3verify.models import (
    BucketRecord,
    CaseOutcome,
    CheckResult,
    CheckStatus,
    FixtureSet,
    ObjectRecord,
    RunOutcome,
    RunResult,
    TestCase,
)


def noop(config, ctx):
    return CheckResult.passed()


class TestCheckResult:
    """Tests for CheckResult constructors."""

    def test_passed(self):
        result = CheckResult.passed()
        assert result.status == CheckStatus.PASSED
        assert result.ok is True

    def test_failed_keeps_message(self):
        result = CheckResult.failed("bad etag")
        assert result.status == CheckStatus.FAILED
        assert result.message == "bad etag"
        assert result.ok is False

    def test_skipped_is_not_ok(self):
        assert CheckResult.skipped().ok is False


class TestFixtureSet:
    """Tests for FixtureSet accessors."""

    def _fixture(self):
        return FixtureSet(
            bucket=BucketRecord("s3verify-abc"),
            objects=(
                ObjectRecord("s3verify/list/abc", "e0"),
                ObjectRecord("s3verify/put/object/abc0", "e1"),
                ObjectRecord("s3verify/put/object/abc1", "e2"),
            ),
            suffix="abc",
        )

    def test_put_objects_exclude_sentinel(self):
        keys = [o.key for o in self._fixture().put_objects]
        assert keys == ["s3verify/put/object/abc0", "s3verify/put/object/abc1"]

    def test_get(self):
        fixture = self._fixture()
        assert fixture.get("s3verify/put/object/abc1").etag == "e2"
        assert fixture.get("missing") is None


class TestRunResult:
    """Tests for RunResult summaries."""

    def _result(self, outcome):
        a = TestCase("A", noop, critical=True)
        b = TestCase("B", noop, extended=True)
        return RunResult(
            outcome=outcome,
            cases=[
                CaseOutcome(None, b, CheckResult.skipped()),
                CaseOutcome(1, a, CheckResult.failed("broken"), 0.5),
            ],
            total_duration=1.5,
            timestamp="2024-01-01T00:00:00Z",
        )

    def test_counts(self):
        result = self._result(RunOutcome.COMPLETED)

        assert result.passed_count == 0
        assert result.failed_count == 1
        assert result.skipped_count == 1
        assert result.aborted_on is None
        assert result.exit_code == 0

    def test_aborted(self):
        result = self._result(RunOutcome.ABORTED_CRITICAL)

        assert result.aborted_on.case.name == "A"
        assert result.exit_code == 1

    def test_to_dict(self):
        data = self._result(RunOutcome.ABORTED_CRITICAL).to_dict()

        assert data["timestamp"] == "2024-01-01T00:00:00Z"
        assert data["outcome"] == "aborted_critical"
        assert data["cases"][1] == {
            "index": 1,
            "name": "A",
            "extended": False,
            "critical": True,
            "status": "failed",
            "message": "broken",
            "duration_seconds": 0.5,
        }
        assert data["summary"] == {
            "passed": 0,
            "failed": 1,
            "skipped": 1,
            "aborted_on": "A",
            "duration_seconds": 1.5,
        }
