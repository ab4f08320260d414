"""Bucket API checks: PutBucket, HeadBucket, ListBuckets, RemoveBucket."""

from typing import Any

from botocore.exceptions import ClientError

from s3verify.checks.common import Mismatch, check, error_code, expect, expect_status
from s3verify.checks.context import CheckContext
from s3verify.models import ServerConfig
from s3verify.naming import random_bucket_name

# CopyObject needs a source and a destination bucket.
UNPREPARED_BUCKET_COUNT = 2


def _create_params(name: str, region: str) -> dict[str, Any]:
    params: dict[str, Any] = {"Bucket": name}
    if region and region != "us-east-1":
        params["CreateBucketConfiguration"] = {"LocationConstraint": region}
    return params


@check
def put_bucket(config: ServerConfig, ctx: CheckContext) -> None:
    for _ in range(UNPREPARED_BUCKET_COUNT):
        name = random_bucket_name(ctx.rng)
        response = ctx.s3.create_bucket(**_create_params(name, config.region))
        ctx.buckets.append(name)

        location = response.get("Location")
        expect(location is None or name in location,
               f"Unexpected Location header for {name}: {location}")
        expect_status(f"HeadBucket {name}", 200, ctx.s3.head_bucket, Bucket=name)


@check
def head_bucket(config: ServerConfig, ctx: CheckContext) -> None:
    name = ctx.primary_bucket()
    expect_status(f"HeadBucket {name}", 200, ctx.s3.head_bucket, Bucket=name)

    missing = random_bucket_name(ctx.rng, prefix="s3verify-dne-")
    expect_status(f"HeadBucket {missing}", 404, ctx.s3.head_bucket, Bucket=missing)


@check
def list_buckets(config: ServerConfig, ctx: CheckContext) -> None:
    response = ctx.s3.list_buckets()
    listed = {bucket["Name"] for bucket in response.get("Buckets", [])}

    for name in ctx.bucket_names():
        expect(name in listed, f"Bucket {name} missing from ListBuckets response")

    expect("Owner" in response, "ListBuckets response has no Owner")


@check
def remove_bucket_dne(config: ServerConfig, ctx: CheckContext) -> None:
    name = random_bucket_name(ctx.rng, prefix="s3verify-rb-")
    try:
        ctx.s3.delete_bucket(Bucket=name)
    except ClientError as e:
        expect(error_code(e) == "NoSuchBucket",
               f"Unexpected error removing missing bucket: wanted NoSuchBucket, got {error_code(e)}")
        return
    raise Mismatch(f"RemoveBucket on missing bucket {name} succeeded")


@check
def remove_bucket_exists(config: ServerConfig, ctx: CheckContext) -> None:
    while ctx.buckets:
        name = ctx.buckets[0]
        expect_status(f"RemoveBucket {name}", 204, ctx.s3.delete_bucket, Bucket=name)
        ctx.buckets.pop(0)
        expect_status(f"HeadBucket {name} after removal", 404, ctx.s3.head_bucket, Bucket=name)
