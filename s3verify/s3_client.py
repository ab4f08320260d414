"""Client factories and the endpoint reachability probe.

Creates boto3 S3 clients configured for the endpoint under test, and the
httpx client used for raw HTTP exchanges.

The signature version is pinned to 's3v4': every check verifies V4
signature compatibility.
"""

import logging
from typing import Optional

import boto3
import httpx
from botocore.client import Config

from s3verify.models import ServerConfig
from s3verify.retry import RetryExhausted, retry_with_backoff

logger = logging.getLogger(__name__)


class ReachabilityError(Exception):
    """Raised when the endpoint cannot be reached at startup."""

    pass


def build_s3_client(config: ServerConfig, timeout: Optional[float] = None):
    """Build a boto3 S3 client for the given server configuration.

    Args:
        config: Server configuration containing endpoint, credentials
               and region.
        timeout: Optional connect/read timeout in seconds. When set,
                botocore's own retries are disabled so a hung call
                surfaces as a failure instead of stalling the run.

    Returns:
        A boto3 S3 client configured for the endpoint.
    """
    options = {
        "signature_version": "s3v4",
        "s3": {"addressing_style": "path"},
    }
    if timeout is not None:
        options["connect_timeout"] = timeout
        options["read_timeout"] = timeout
        options["retries"] = {"max_attempts": 1}

    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        region_name=config.region,
        config=Config(**options),
    )


def build_http_client(timeout: Optional[float] = 60.0) -> httpx.Client:
    """Build the httpx client used for raw requests."""
    return httpx.Client(timeout=timeout)


def verify_reachable(
    config: ServerConfig,
    http_client: httpx.Client,
    attempts: int = 3,
    delays: tuple = (1.0, 2.0),
) -> None:
    """Check that the endpoint answers HTTP at all.

    Any HTTP response counts, including 403: an S3 endpoint refuses an
    anonymous GET but is still reachable.

    Raises:
        ReachabilityError: If no HTTP response could be obtained.
    """
    try:
        response = retry_with_backoff(
            http_client.get,
            max_attempts=attempts,
            delays=delays,
            args=(config.endpoint_url,),
        )
    except RetryExhausted as e:
        raise ReachabilityError(
            f"Endpoint {config.endpoint_url} unreachable after {e.attempts} attempts: {e.last_error}"
        ) from e
    except httpx.HTTPError as e:
        raise ReachabilityError(f"Endpoint {config.endpoint_url} unreachable: {e}") from e

    logger.debug("Endpoint %s answered with HTTP %s", config.endpoint_url, response.status_code)
