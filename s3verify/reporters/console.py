"""Console reporter using Rich library for formatted CLI output.

Prints one line per check in suite order:

    [01/22] PutBucket: PASSED
    [02/22] PutObject: FAILED
         Unexpected ETag for s3verify-put-object-0: ...

followed by a summary once the run completes or aborts.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from s3verify.models import CheckResult, CheckStatus, RunOutcome, RunResult, TestCase
from s3verify.reporters.base import Reporter


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress per-check output (only show summary)
        console: Console to print to (defaults to stdout)
    """

    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console or Console(legacy_windows=True)
        self.quiet = quiet

    @staticmethod
    def label(index: int, total: int, case: TestCase) -> str:
        return f"[{index:02d}/{total}] {case.name}:"

    def on_fixture_step(self, message: str, ok: bool, error: Optional[Exception] = None) -> None:
        if self.quiet and ok:
            return
        status = "[green]DONE[/green]" if ok else "[red]FAILED[/red]"
        self.console.print(f"{message}: {status}", highlight=False)
        if error is not None:
            self.console.print(f"     [dim]{error}[/dim]", highlight=False)

    def on_case_start(self, index: int, total: int, case: TestCase) -> None:
        """Currently a no-op for the console reporter."""
        pass

    def on_case_complete(self, index: int, total: int, case: TestCase, result: CheckResult) -> None:
        if self.quiet and result.ok:
            return

        if result.status == CheckStatus.PASSED:
            status_text = "[green]PASSED[/green]"
        else:
            status_text = "[red]FAILED[/red]"
            if case.critical:
                status_text += " [bold red](critical)[/bold red]"

        self.console.print(f"{self.label(index, total, case)} {status_text}", highlight=False)

        if result.message and not result.ok:
            self.console.print(f"     [dim]{result.message}[/dim]", highlight=False)

    def on_run_complete(self, result: RunResult) -> None:
        self.console.print()
        self.console.print(Rule("[bold]Summary[/bold]", style="magenta", characters="-"))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Passed", justify="center", no_wrap=True)
        table.add_column("Failed", justify="center", no_wrap=True)
        table.add_column("Skipped", justify="center", no_wrap=True)
        table.add_column("Duration", justify="right", no_wrap=True)
        table.add_column("Outcome", justify="center", no_wrap=True)

        if result.outcome == RunOutcome.COMPLETED:
            outcome = "[green]COMPLETED[/green]"
        else:
            outcome = "[bold red]ABORTED[/bold red]"

        table.add_row(
            f"[green]{result.passed_count}[/green]",
            f"[red]{result.failed_count}[/red]" if result.failed_count else "0",
            f"[dim]{result.skipped_count}[/dim]",
            f"{result.total_duration:.1f}s",
            outcome,
        )
        self.console.print(table)

        aborted = result.aborted_on
        if aborted is not None:
            self.console.print(
                f"[red]Critical check {aborted.case.name} failed; remaining checks were not run.[/red]",
                highlight=False,
            )
        self.console.print()
