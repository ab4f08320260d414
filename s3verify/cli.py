"""Command-line interface for s3verify.

Provides argument parsing and the main entry point for checking an
S3-compatible server from the command line.
"""

import argparse
import sys
from typing import Optional

from s3verify.driver import DriverOptions, RunMode, drive, select_mode
from s3verify.logging_utils import configure_logging
from s3verify.reporters import ConsoleReporter, JsonReporter, Reporter


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_fixture_step(self, message: str, ok: bool, error: Optional[Exception] = None) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_fixture_step(message, ok, error)

    def on_case_start(self, index, total, case) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_case_start(index, total, case)

    def on_case_complete(self, index, total, case, result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_case_complete(index, total, case, result)

    def on_run_complete(self, result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_complete(result)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="s3verify",
        description="Check an S3-compatible server for AWS S3 V4 signature compatibility",
    )

    parser.add_argument("-a", "--access", metavar="KEY",
                        help="Access key (default: $S3_ACCESS)")
    parser.add_argument("-s", "--secret", metavar="KEY",
                        help="Secret key (default: $S3_SECRET)")
    parser.add_argument("-u", "--url", metavar="URL",
                        help="Server endpoint URL (default: $S3_URL)")
    parser.add_argument("-r", "--region", metavar="REGION",
                        help="Region (default: $S3_REGION, else derived from the URL)")

    parser.add_argument(
        "--extended",
        action="store_true",
        help="Also run extended checks (conditional requests, ranges, POST policy)",
    )

    parser.add_argument(
        "--prepare",
        action="store_true",
        help="Provision a reusable fixture bucket and print its id",
    )

    parser.add_argument(
        "--clean",
        metavar="SUFFIX",
        help="Remove the fixture bucket created with --prepare",
    )

    parser.add_argument(
        "--id",
        metavar="SUFFIX",
        dest="run_id",
        help="Run the prepared suite against the fixture with this id",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-check output, show only summary",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write JSON results to file",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Connect and read timeout for each request",
    )

    return parser.parse_args(argv)


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [ConsoleReporter(quiet=args.quiet)]

    if args.json_output:
        reporters.append(JsonReporter(output_path=args.json_output))

    return reporters


def build_options(args: argparse.Namespace) -> DriverOptions:
    """Translate parsed arguments into driver options."""
    mode = select_mode(prepare=args.prepare, clean=args.clean, run_id=args.run_id)
    suffix = {RunMode.CLEAN: args.clean, RunMode.PREPARED: args.run_id}.get(mode)
    return DriverOptions(
        mode=mode,
        suffix=suffix,
        extended=args.extended,
        timeout=args.timeout,
        access=args.access,
        secret=args.secret,
        url=args.url,
        region=args.region,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 when the run completed, 1 for fatal errors or a
        critical check failure
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    return drive(build_options(args), reporter=reporter)


if __name__ == "__main__":
    sys.exit(main())
