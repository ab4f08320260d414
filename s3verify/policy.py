"""POST policy document builder.

The condition order below is part of the wire contract: the signature a
server verifies is computed over these exact bytes, so reordering the
conditions or changing either timestamp format is a breaking change.
"""

import base64
import hashlib
import hmac
import json
from datetime import datetime, timezone
from typing import Optional

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"

# ISO-8601, millisecond precision, UTC.
EXPIRATION_FORMAT = "%Y-%m-%dT%H:%M:%S"
# SigV4 request date (ISO-8601 basic format).
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
SCOPE_DATE_FORMAT = "%Y%m%d"


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_expiration(dt: datetime) -> str:
    dt = _utc(dt)
    return f"{dt.strftime(EXPIRATION_FORMAT)}.{dt.microsecond // 1000:03d}Z"


def format_amz_date(dt: datetime) -> str:
    return _utc(dt).strftime(AMZ_DATE_FORMAT)


def credential_scope(access_key: str, region: str, now: datetime) -> str:
    """Build the ``x-amz-credential`` value for a POST upload."""
    date = _utc(now).strftime(SCOPE_DATE_FORMAT)
    return f"{access_key}/{date}/{region}/{SERVICE}/aws4_request"


def build_post_policy(
    credential: str,
    bucket_name: str,
    object_key: str,
    expiration: datetime,
    now: Optional[datetime] = None,
) -> bytes:
    """Build a POST policy document restricting the upload to one key.

    Args:
        credential: The ``x-amz-credential`` value.
        bucket_name: Bucket the form may upload into.
        object_key: Exact key the form may upload.
        expiration: When the policy stops being valid.
        now: Request instant embedded as ``x-amz-date`` (defaults to the
            current UTC time). The form must send the same value.

    Returns:
        The UTF-8 policy document.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    document = {
        "expiration": format_expiration(expiration),
        "conditions": [
            ["eq", "$bucket", bucket_name],
            ["eq", "$key", object_key],
            ["eq", "$x-amz-algorithm", ALGORITHM],
            ["eq", "$x-amz-date", format_amz_date(now)],
            ["eq", "$x-amz-credential", credential],
        ],
    }
    return json.dumps(document, separators=(",", ":")).encode("utf-8")


def encode_policy(policy: bytes) -> str:
    return base64.b64encode(policy).decode("ascii")


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def signing_key(secret_key: str, region: str, now: datetime) -> bytes:
    date = _utc(now).strftime(SCOPE_DATE_FORMAT)
    k_date = _hmac(("AWS4" + secret_key).encode("utf-8"), date)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, SERVICE)
    return _hmac(k_service, "aws4_request")


def sign_policy(policy: bytes, secret_key: str, region: str, now: datetime) -> str:
    """Return the hex SigV4 signature of the base64-encoded policy."""
    key = signing_key(secret_key, region, now)
    return hmac.new(key, encode_policy(policy).encode("ascii"), hashlib.sha256).hexdigest()
