"""JSON reporter for structured output.

Writes the RunResult of a suite run to a file, for CI jobs that archive or
diff compatibility results between server versions.
"""

import json
from pathlib import Path
from typing import Optional

from s3verify.models import CheckResult, RunResult, TestCase
from s3verify.reporters.base import Reporter


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: File path to write JSON output to
    """

    def __init__(self, output_path: str):
        self.output_path = output_path
        self.fixture_steps: list[dict] = []

    def on_fixture_step(self, message: str, ok: bool, error: Optional[Exception] = None) -> None:
        """Record the step; written out with the run result."""
        step = {"step": message, "ok": ok}
        if error is not None:
            step["error"] = str(error)
        self.fixture_steps.append(step)

    def on_case_start(self, index: int, total: int, case: TestCase) -> None:
        """No-op for JSON reporter."""
        pass

    def on_case_complete(self, index: int, total: int, case: TestCase, result: CheckResult) -> None:
        """No-op - data comes from the run result."""
        pass

    def on_run_complete(self, result: RunResult) -> dict:
        """Write the run result to ``output_path``.

        Returns:
            The generated JSON data as a dictionary
        """
        output = result.to_dict()
        if self.fixture_steps:
            output["fixture"] = self.fixture_steps

        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)

        return output
