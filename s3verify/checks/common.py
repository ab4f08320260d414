"""Helpers shared by the check implementations.

Checks signal a compatibility mismatch by raising :class:`Mismatch`; the
:func:`check` decorator turns that, and any transport error, into a failed
CheckResult so nothing raw escapes to the runner.
"""

import functools
import hashlib
import logging
from typing import Any, Callable

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from s3verify.models import CheckResult, ServerConfig
from s3verify.retry import TIMEOUT_ERRORS

logger = logging.getLogger(__name__)


class Mismatch(Exception):
    """The server answered, but not the way S3 does."""

    pass


def check(func: Callable[[ServerConfig, Any], None]) -> Callable[[ServerConfig, Any], CheckResult]:
    """Wrap a check body that raises on failure and returns nothing on success."""

    @functools.wraps(func)
    def wrapper(config: ServerConfig, ctx: Any) -> CheckResult:
        try:
            func(config, ctx)
        except Mismatch as e:
            return CheckResult.failed(str(e))
        except ClientError as e:
            return CheckResult.failed(f"{error_code(e) or 'ClientError'}: {e}")
        except TIMEOUT_ERRORS as e:
            return CheckResult.failed(f"Timed out: {e}")
        except (BotoCoreError, httpx.HTTPError) as e:
            return CheckResult.failed(f"Transport error: {e}")
        except LookupError as e:
            return CheckResult.failed(str(e))
        return CheckResult.passed()

    return wrapper


def expect(condition: bool, message: str) -> None:
    if not condition:
        raise Mismatch(message)


def expect_equal(what: str, wanted: Any, got: Any) -> None:
    if wanted != got:
        raise Mismatch(f"Unexpected {what}: wanted {wanted!r}, got {got!r}")


def error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def http_status(error: ClientError) -> int:
    return int(error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0))


def call_status(func: Callable[..., Any], **params: Any) -> tuple[int, Any]:
    """Call a boto3 operation and return (HTTP status, response or error).

    Conditional requests answer 304/412 through ClientError; this folds
    both paths into a status code the caller can compare.
    """
    try:
        response = func(**params)
    except ClientError as e:
        return http_status(e), e
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 200)
    return int(status), response


def expect_status_of(what: str, wanted: int, status: int, result: Any) -> None:
    """Raise Mismatch unless a call_status() outcome has the wanted status."""
    if status != wanted:
        detail = f" ({error_code(result)})" if isinstance(result, ClientError) else ""
        raise Mismatch(f"Unexpected status for {what}: wanted {wanted}, got {status}{detail}")


def expect_status(what: str, wanted: int, func: Callable[..., Any], **params: Any) -> Any:
    status, result = call_status(func, **params)
    expect_status_of(what, wanted, status, result)
    return result


def strip_etag(etag: Any) -> str:
    return str(etag or "").strip('"')


def md5_hex(body: bytes) -> str:
    return hashlib.md5(body).hexdigest()
