"""Configuration resolution for s3verify.

Supports two configuration sources:
1. Command-line flags - take priority
2. Environment variables

Environment Variables:
    S3_URL=https://play.min.io
    S3_ACCESS=your-access-key
    S3_SECRET=your-secret-key
    S3_REGION=us-east-1        (optional)
"""

import os
import re
from typing import Mapping, Optional
from urllib.parse import urlparse

from s3verify.models import ServerConfig


class ConfigError(Exception):
    """Raised when configuration cannot be resolved."""

    pass


ENV_URL = "S3_URL"
ENV_ACCESS = "S3_ACCESS"
ENV_SECRET = "S3_SECRET"
ENV_REGION = "S3_REGION"

DEFAULT_REGION = "us-east-1"

# s3.us-west-2.amazonaws.com, s3-us-west-2.amazonaws.com,
# bucket.s3.dualstack.eu-west-1.amazonaws.com
_AWS_REGION_RE = re.compile(
    r"(?:^|\.)s3[.-](?:dualstack\.)?(?P<region>[a-z]{2}(?:-gov)?-[a-z]+-\d)\.amazonaws\.com$"
)


def default_region(endpoint_url: str) -> str:
    """Pick a region for an endpoint when none was supplied.

    Args:
        endpoint_url: The endpoint URL.

    Returns:
        The region embedded in an AWS regional hostname, ``auto`` for
        Google Cloud Storage, otherwise ``us-east-1``.
    """
    host = (urlparse(endpoint_url).hostname or "").lower()

    match = _AWS_REGION_RE.search(host)
    if match:
        return match.group("region")

    if host == "storage.googleapis.com":
        return "auto"

    return DEFAULT_REGION


def _pick(flag_value: Optional[str], environ: Mapping[str, str], env_key: str) -> str:
    if flag_value:
        return flag_value.strip()
    return environ.get(env_key, "").strip()


def resolve_config(
    access: Optional[str] = None,
    secret: Optional[str] = None,
    url: Optional[str] = None,
    region: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """Resolve the server configuration from flags and environment.

    Flags take precedence over environment variables when both are set.

    Args:
        access: Access key from the command line.
        secret: Secret key from the command line.
        url: Endpoint URL from the command line.
        region: Region from the command line.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        A fully populated ServerConfig.

    Raises:
        ConfigError: If the endpoint or either credential is missing, or the
                    endpoint is not an http(s) URL.
    """
    if environ is None:
        environ = os.environ

    endpoint_url = _pick(url, environ, ENV_URL)
    access_key = _pick(access, environ, ENV_ACCESS)
    secret_key = _pick(secret, environ, ENV_SECRET)

    missing = []
    if not endpoint_url:
        missing.append(f"--url/{ENV_URL}")
    if not access_key:
        missing.append(f"--access/{ENV_ACCESS}")
    if not secret_key:
        missing.append(f"--secret/{ENV_SECRET}")
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    parsed = urlparse(endpoint_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"Invalid endpoint URL '{endpoint_url}'. Expected http(s)://host[:port]"
        )

    resolved_region = _pick(region, environ, ENV_REGION) or default_region(endpoint_url)

    return ServerConfig(
        endpoint_url=endpoint_url.rstrip("/"),
        access_key=access_key,
        secret_key=secret_key,
        region=resolved_region,
    )
