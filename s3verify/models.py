"""Data models for s3verify."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from s3verify.naming import PUT_OBJECT_PREFIX

if TYPE_CHECKING:
    from s3verify.checks.context import CheckContext


@dataclass(frozen=True)
class ServerConfig:
    """Resolved connection settings for the endpoint under test."""

    endpoint_url: str
    access_key: str
    secret_key: str
    region: str


@dataclass(frozen=True)
class BucketRecord:
    """A bucket believed to belong to s3verify."""

    name: str


@dataclass(frozen=True)
class ObjectRecord:
    """One fixture object as reported by a listing."""

    key: str
    etag: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class FixtureSet:
    """The bucket and objects a prepared run depends on.

    Built once by the provisioner or validator and only read afterwards.
    """

    bucket: BucketRecord
    objects: tuple[ObjectRecord, ...]
    suffix: str = ""

    @property
    def keys(self) -> list[str]:
        return [obj.key for obj in self.objects]

    @property
    def put_objects(self) -> list[ObjectRecord]:
        """Records under the put-object prefix, excluding the list sentinel."""
        return [obj for obj in self.objects if obj.key.startswith(PUT_OBJECT_PREFIX)]

    def get(self, key: str) -> Optional[ObjectRecord]:
        for obj in self.objects:
            if obj.key == key:
                return obj
        return None


class CheckStatus(Enum):
    """Status of a single check."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CheckResult:
    """Typed outcome returned by every check."""

    status: CheckStatus
    message: Optional[str] = None

    @classmethod
    def passed(cls, message: Optional[str] = None) -> "CheckResult":
        return cls(CheckStatus.PASSED, message)

    @classmethod
    def failed(cls, message: str) -> "CheckResult":
        return cls(CheckStatus.FAILED, message)

    @classmethod
    def skipped(cls) -> "CheckResult":
        return cls(CheckStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        return self.status == CheckStatus.PASSED


CheckFunc = Callable[[ServerConfig, "CheckContext"], CheckResult]


@dataclass(frozen=True)
class TestCase:
    """A named check plus its gating flags."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    check: CheckFunc
    extended: bool = False
    critical: bool = False


@dataclass
class CaseOutcome:
    """What happened to one TestCase during a run."""

    index: Optional[int]
    case: TestCase
    result: CheckResult
    duration_seconds: float = 0.0


class RunOutcome(Enum):
    """Overall state of a suite run."""

    COMPLETED = "completed"
    ABORTED_CRITICAL = "aborted_critical"


@dataclass
class RunResult:
    """Result of running one suite against one endpoint."""

    outcome: RunOutcome
    cases: list[CaseOutcome]
    total_duration: float = 0.0
    timestamp: str = field(default_factory=lambda: time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()))

    def _count(self, status: CheckStatus) -> int:
        return sum(1 for c in self.cases if c.result.status == status)

    @property
    def passed_count(self) -> int:
        return self._count(CheckStatus.PASSED)

    @property
    def failed_count(self) -> int:
        return self._count(CheckStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self._count(CheckStatus.SKIPPED)

    @property
    def aborted_on(self) -> Optional[CaseOutcome]:
        """The critical case that stopped the run, if any."""
        if self.outcome != RunOutcome.ABORTED_CRITICAL:
            return None
        return self.cases[-1] if self.cases else None

    @property
    def exit_code(self) -> int:
        # Non-critical failures do not change the exit status.
        return 1 if self.outcome == RunOutcome.ABORTED_CRITICAL else 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        cases = []
        for outcome in self.cases:
            cases.append({
                "index": outcome.index,
                "name": outcome.case.name,
                "extended": outcome.case.extended,
                "critical": outcome.case.critical,
                "status": outcome.result.status.value,
                "message": outcome.result.message,
                "duration_seconds": outcome.duration_seconds,
            })

        aborted = self.aborted_on
        return {
            "timestamp": self.timestamp,
            "outcome": self.outcome.value,
            "cases": cases,
            "summary": {
                "passed": self.passed_count,
                "failed": self.failed_count,
                "skipped": self.skipped_count,
                "aborted_on": aborted.case.name if aborted else None,
                "duration_seconds": self.total_duration,
            },
        }
