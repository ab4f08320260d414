"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from s3verify.models import CheckResult, RunResult, TestCase


class Reporter(ABC):
    """Abstract base class for progress and result reporters."""

    @abstractmethod
    def on_fixture_step(self, message: str, ok: bool, error: Optional[Exception] = None) -> None:
        """Called when a fixture provisioning or cleanup step finishes."""
        pass

    @abstractmethod
    def on_case_start(self, index: int, total: int, case: "TestCase") -> None:
        """Called when a check starts."""
        pass

    @abstractmethod
    def on_case_complete(self, index: int, total: int, case: "TestCase", result: "CheckResult") -> None:
        """Called when a check completes."""
        pass

    @abstractmethod
    def on_run_complete(self, result: "RunResult") -> None:
        """Called when the suite run is over, completed or aborted."""
        pass
