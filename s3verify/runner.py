"""Suite runner.

Executes an ordered sequence of TestCases against one endpoint, applying:
- Extended gating: extended cases only run when asked for, and skipped
  cases do not consume a counter value
- Fail-fast: a failed critical case stops the run
- Request timeouts, reported as ordinary failures

Cases run strictly one after another on the calling thread. Time is bounded
by the connect/read timeouts of the clients in the check context.

The runner never exits the process. It returns a RunResult and the caller
decides the exit status.
"""

import logging
import time
from typing import Any, Optional, Sequence

from s3verify.models import (
    CaseOutcome,
    CheckResult,
    CheckStatus,
    RunOutcome,
    RunResult,
    ServerConfig,
    TestCase,
)
from s3verify.retry import TIMEOUT_ERRORS

logger = logging.getLogger(__name__)


class SuiteRunner:
    """Runs a suite of TestCases in order.

    Args:
        cases: The ordered suite.
        extended: Whether extended cases are enabled for this run.
        reporter: Optional reporter for progress callbacks.
    """

    def __init__(
        self,
        cases: Sequence[TestCase],
        extended: bool = False,
        reporter: Optional[Any] = None,
    ):
        self.cases = list(cases)
        self.extended = extended
        self.reporter = reporter

    @property
    def total(self) -> int:
        """Number of cases eligible to run with the current gating."""
        return sum(1 for case in self.cases if self.extended or not case.extended)

    def run(self, config: ServerConfig, ctx: Any) -> RunResult:
        """Run the suite.

        Args:
            config: Resolved server configuration.
            ctx: Check context handed to every check.

        Returns:
            RunResult with COMPLETED, or ABORTED_CRITICAL if a critical
            case failed.
        """
        start_time = time.time()
        outcomes: list[CaseOutcome] = []
        outcome = RunOutcome.COMPLETED
        total = self.total
        counter = 1

        for case in self.cases:
            if case.extended and not self.extended:
                outcomes.append(CaseOutcome(index=None, case=case, result=CheckResult.skipped()))
                continue

            if self.reporter:
                self.reporter.on_case_start(counter, total, case)

            case_start = time.time()
            result = self._invoke(case, config, ctx)
            case_outcome = CaseOutcome(
                index=counter,
                case=case,
                result=result,
                duration_seconds=time.time() - case_start,
            )
            outcomes.append(case_outcome)

            if self.reporter:
                self.reporter.on_case_complete(counter, total, case, result)

            counter += 1

            if result.status == CheckStatus.FAILED and case.critical:
                logger.info("Critical check %s failed, aborting run", case.name)
                outcome = RunOutcome.ABORTED_CRITICAL
                break

        run_result = RunResult(
            outcome=outcome,
            cases=outcomes,
            total_duration=time.time() - start_time,
        )

        if self.reporter:
            self.reporter.on_run_complete(run_result)

        return run_result

    @staticmethod
    def _invoke(case: TestCase, config: ServerConfig, ctx: Any) -> CheckResult:
        """Run one check, converting timeouts and stray exceptions to failures."""
        try:
            result = case.check(config, ctx)
        except TIMEOUT_ERRORS as e:
            logger.warning("Check %s timed out: %s", case.name, e)
            return CheckResult.failed(f"Timed out: {e}")
        except Exception as e:
            logger.debug("Check %s raised", case.name, exc_info=True)
            return CheckResult.failed(f"Unexpected error: {e}")

        if not isinstance(result, CheckResult):
            return CheckResult.failed(f"Check returned {type(result).__name__}, not a CheckResult")
        return result
