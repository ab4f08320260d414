"""Browser-based POST upload with a signed policy document."""

from datetime import datetime, timedelta, timezone

from s3verify.checks.common import (
    call_status,
    check,
    expect,
    expect_equal,
    expect_status,
    md5_hex,
    strip_etag,
)
from s3verify.checks.context import CheckContext
from s3verify.fixture import payload
from s3verify.models import ServerConfig
from s3verify.naming import random_object_key
from s3verify.policy import (
    ALGORITHM,
    build_post_policy,
    credential_scope,
    encode_policy,
    format_amz_date,
    sign_policy,
)

POLICY_LIFETIME = timedelta(minutes=10)


@check
def post_policy(config: ServerConfig, ctx: CheckContext) -> None:
    bucket = ctx.primary_bucket()
    # Outside the fixture prefix, so a prepared fixture's shape is untouched.
    key = random_object_key(ctx.rng, prefix="s3verify-post-")
    body = payload(ctx.rng)

    now = datetime.now(timezone.utc)
    credential = credential_scope(config.access_key, config.region, now)
    policy = build_post_policy(credential, bucket, key, now + POLICY_LIFETIME, now=now)

    fields = {
        "key": key,
        "x-amz-algorithm": ALGORITHM,
        "x-amz-credential": credential,
        "x-amz-date": format_amz_date(now),
        "policy": encode_policy(policy),
        "x-amz-signature": sign_policy(policy, config.secret_key, config.region, now),
    }
    response = ctx.http.post(
        f"{config.endpoint_url}/{bucket}",
        data=fields,
        files={"file": (key, body, "application/octet-stream")},
    )
    expect(response.status_code in (200, 201, 204),
           f"Unexpected status for POST upload: wanted 204, got {response.status_code}")

    try:
        head = ctx.s3.head_object(Bucket=bucket, Key=key)
        expect_equal(f"ETag of POSTed {key}", md5_hex(body), strip_etag(head.get("ETag")))
    except Exception:
        # Best-effort removal; the original failure is what gets reported.
        call_status(ctx.s3.delete_object, Bucket=bucket, Key=key)
        raise
    expect_status(f"RemoveObject {key}", 204, ctx.s3.delete_object, Bucket=bucket, Key=key)
