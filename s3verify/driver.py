"""Run driver: resolves configuration, picks a mode and dispatches it.

Modes, in flag precedence order:
    PREPARE     provision a fixture under a fresh suffix and stop
    CLEAN       remove the fixture for a given suffix
    PREPARED    validate the fixture for a given suffix, run the prepared suite
    UNPREPARED  run the unprepared suite on disposable resources

Every fatal error is reported once here and mapped to exit status 1.
"""

import logging
import random
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from s3verify.checks import PREPARED_SUITE, UNPREPARED_SUITE, CheckContext
from s3verify.config import ConfigError, resolve_config
from s3verify.fixture import (
    FixtureError,
    FixtureProvisioner,
    ProvisionError,
    clean_fixture,
    validate_and_load,
)
from s3verify.models import FixtureSet, RunResult, ServerConfig
from s3verify.naming import bucket_name, generate_suffix
from s3verify.runner import SuiteRunner
from s3verify.s3_client import (
    ReachabilityError,
    build_http_client,
    build_s3_client,
    verify_reachable,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class RunMode(Enum):
    """What a single invocation does."""

    PREPARE = "prepare"
    CLEAN = "clean"
    PREPARED = "prepared"
    UNPREPARED = "unprepared"


def select_mode(prepare: bool = False, clean: Optional[str] = None, run_id: Optional[str] = None) -> RunMode:
    """Map the mode flags to a RunMode; the first one set wins."""
    if prepare:
        return RunMode.PREPARE
    if clean:
        return RunMode.CLEAN
    if run_id:
        return RunMode.PREPARED
    return RunMode.UNPREPARED


@dataclass(frozen=True)
class DriverOptions:
    """Everything the driver needs from the command line."""

    mode: RunMode = RunMode.UNPREPARED
    suffix: Optional[str] = None
    extended: bool = False
    timeout: Optional[float] = None
    access: Optional[str] = None
    secret: Optional[str] = None
    url: Optional[str] = None
    region: Optional[str] = None


def _fail(kind: str, error: Exception) -> int:
    print(f"{kind} error: {error}", file=sys.stderr)
    return EXIT_FAILURE


def prepare_fixture(
    config: ServerConfig,
    s3_client: Any,
    reporter: Optional[Any] = None,
    suffix: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> FixtureSet:
    """Provision a fixture under ``suffix`` (a new one when omitted)."""
    suffix = suffix or generate_suffix()
    provisioner = FixtureProvisioner(s3_client, config.region, rng=rng, reporter=reporter)
    return provisioner.prepare(suffix)


def run_suite(
    config: ServerConfig,
    ctx: CheckContext,
    extended: bool = False,
    reporter: Optional[Any] = None,
) -> RunResult:
    """Run the suite matching the context: prepared if it carries a fixture."""
    suite = PREPARED_SUITE if ctx.prepared else UNPREPARED_SUITE
    runner = SuiteRunner(suite, extended=extended, reporter=reporter)
    return runner.run(config, ctx)


def drive(
    options: DriverOptions,
    reporter: Optional[Any] = None,
    environ: Optional[Mapping[str, str]] = None,
    s3_factory: Callable[..., Any] = build_s3_client,
    http_factory: Callable[..., Any] = build_http_client,
) -> int:
    """Execute one invocation and return the process exit status."""
    try:
        config = resolve_config(
            access=options.access,
            secret=options.secret,
            url=options.url,
            region=options.region,
            environ=environ,
        )
    except ConfigError as e:
        return _fail("Configuration", e)

    http_client = http_factory(options.timeout if options.timeout is not None else 60.0)
    try:
        try:
            verify_reachable(config, http_client)
        except ReachabilityError as e:
            return _fail("Reachability", e)

        s3_client = s3_factory(config, timeout=options.timeout)
        logger.debug("Running in %s mode against %s", options.mode.value, config.endpoint_url)

        if options.mode == RunMode.PREPARE:
            try:
                fixture = prepare_fixture(config, s3_client, reporter=reporter, suffix=options.suffix)
            except ProvisionError as e:
                return _fail("Provisioning", e)
            print(
                f"Prepared {fixture.bucket.name} with {len(fixture.objects)} objects.\n"
                f"Please run: s3verify --url {config.endpoint_url} --id {fixture.suffix}"
            )
            return EXIT_OK

        if options.mode == RunMode.CLEAN:
            try:
                removed = clean_fixture(s3_client, options.suffix or "", reporter=reporter)
            except (FixtureError, ValueError) as e:
                return _fail("Cleanup", e)
            print(f"Removed {removed} objects from {bucket_name(options.suffix)}")
            return EXIT_OK

        ctx = CheckContext(s3=s3_client, http=http_client)
        if options.mode == RunMode.PREPARED:
            try:
                name = bucket_name(options.suffix or "")
                print(f"S3verify attempting to use {name} to test AWS S3 V4 signature compatibility.")
                ctx.fixture = validate_and_load(s3_client, name)
            except (FixtureError, ValueError) as e:
                return _fail("Fixture validation", e)

        result = run_suite(config, ctx, extended=options.extended, reporter=reporter)
        return result.exit_code
    finally:
        http_client.close()
