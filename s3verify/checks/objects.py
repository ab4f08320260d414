"""Object API checks: PutObject, HeadObject, GetObject, CopyObject, RemoveObject.

The conditional variants (If-Match, If-None-Match, If-Modified-Since,
If-Unmodified-Since) each send one request whose precondition holds and one
whose precondition fails, and compare both status codes.
"""

from datetime import datetime, timedelta, timezone

from s3verify.checks.common import (
    call_status,
    check,
    expect,
    expect_equal,
    expect_status,
    expect_status_of,
    md5_hex,
    strip_etag,
)
from s3verify.checks.context import CheckContext, UploadedObject
from s3verify.fixture import payload
from s3verify.models import ServerConfig

UNPREPARED_OBJECT_COUNT = 10
UNPREPARED_KEY_PREFIX = "s3verify-put-object-"

RANGE_START = 10
RANGE_END = 29  # inclusive

WRONG_ETAG = '"00000000000000000000000000000000"'


def _current(ctx: CheckContext) -> UploadedObject:
    """The primary object with ETag and Last-Modified refreshed from the server."""
    obj = ctx.primary_object()
    response = ctx.s3.head_object(Bucket=obj.bucket, Key=obj.key)
    obj.etag = strip_etag(response.get("ETag"))
    obj.last_modified = response.get("LastModified")
    return obj


def _before(obj: UploadedObject) -> datetime:
    return (obj.last_modified or datetime.now(timezone.utc)) - timedelta(days=1)


def _after(obj: UploadedObject) -> datetime:
    return (obj.last_modified or datetime.now(timezone.utc)) + timedelta(days=1)


def _verify_body(obj: UploadedObject, body: bytes) -> None:
    if obj.body:
        expect(body == obj.body, f"Unexpected body for {obj.key}: content differs from upload")
    else:
        expect_equal(f"body checksum for {obj.key}", obj.etag, md5_hex(body))


@check
def put_object(config: ServerConfig, ctx: CheckContext) -> None:
    bucket = ctx.primary_bucket()
    for i in range(UNPREPARED_OBJECT_COUNT):
        body = payload(ctx.rng)
        key = f"{UNPREPARED_KEY_PREFIX}{i}"
        response = ctx.s3.put_object(Bucket=bucket, Key=key, Body=body)
        etag = strip_etag(response.get("ETag"))
        ctx.objects.append(UploadedObject(bucket=bucket, key=key, body=body, etag=etag))
        expect_equal(f"ETag for {key}", md5_hex(body), etag)


@check
def head_object(config: ServerConfig, ctx: CheckContext) -> None:
    obj = ctx.primary_object()
    response = ctx.s3.head_object(Bucket=obj.bucket, Key=obj.key)

    expect_equal(f"ETag for {obj.key}", obj.etag, strip_etag(response.get("ETag")))
    if obj.body:
        expect_equal(f"Content-Length for {obj.key}", len(obj.body), response.get("ContentLength"))
    expect(response.get("LastModified") is not None, f"No Last-Modified header for {obj.key}")
    obj.last_modified = response.get("LastModified")


@check
def head_object_if_match(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    expect_status("HeadObject If-Match (matching)", 200, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfMatch=f'"{obj.etag}"')
    expect_status("HeadObject If-Match (stale)", 412, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfMatch=WRONG_ETAG)


@check
def head_object_if_none_match(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    expect_status("HeadObject If-None-Match (other)", 200, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfNoneMatch=WRONG_ETAG)
    expect_status("HeadObject If-None-Match (matching)", 304, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfNoneMatch=f'"{obj.etag}"')


@check
def head_object_if_unmodified_since(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    expect_status("HeadObject If-Unmodified-Since (future)", 200, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfUnmodifiedSince=_after(obj))
    expect_status("HeadObject If-Unmodified-Since (past)", 412, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfUnmodifiedSince=_before(obj))


@check
def head_object_if_modified_since(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    expect_status("HeadObject If-Modified-Since (past)", 200, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfModifiedSince=_before(obj))
    expect_status("HeadObject If-Modified-Since (future)", 304, ctx.s3.head_object,
                  Bucket=obj.bucket, Key=obj.key, IfModifiedSince=_after(obj))


@check
def get_object(config: ServerConfig, ctx: CheckContext) -> None:
    obj = ctx.primary_object()
    response = ctx.s3.get_object(Bucket=obj.bucket, Key=obj.key)
    body = response["Body"].read()
    expect_equal(f"ETag for {obj.key}", obj.etag, strip_etag(response.get("ETag")))
    _verify_body(obj, body)


def _get_expecting_body(ctx: CheckContext, what: str, obj: UploadedObject, **conditions) -> None:
    response = expect_status(what, 200, ctx.s3.get_object, Bucket=obj.bucket, Key=obj.key, **conditions)
    _verify_body(obj, response["Body"].read())


@check
def get_object_if_match(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _get_expecting_body(ctx, "GetObject If-Match (matching)", obj, IfMatch=f'"{obj.etag}"')
    expect_status("GetObject If-Match (stale)", 412, ctx.s3.get_object,
                  Bucket=obj.bucket, Key=obj.key, IfMatch=WRONG_ETAG)


@check
def get_object_if_none_match(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _get_expecting_body(ctx, "GetObject If-None-Match (other)", obj, IfNoneMatch=WRONG_ETAG)
    expect_status("GetObject If-None-Match (matching)", 304, ctx.s3.get_object,
                  Bucket=obj.bucket, Key=obj.key, IfNoneMatch=f'"{obj.etag}"')


@check
def get_object_if_modified_since(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _get_expecting_body(ctx, "GetObject If-Modified-Since (past)", obj, IfModifiedSince=_before(obj))
    expect_status("GetObject If-Modified-Since (future)", 304, ctx.s3.get_object,
                  Bucket=obj.bucket, Key=obj.key, IfModifiedSince=_after(obj))


@check
def get_object_if_unmodified_since(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _get_expecting_body(ctx, "GetObject If-Unmodified-Since (future)", obj, IfUnmodifiedSince=_after(obj))
    expect_status("GetObject If-Unmodified-Since (past)", 412, ctx.s3.get_object,
                  Bucket=obj.bucket, Key=obj.key, IfUnmodifiedSince=_before(obj))


@check
def get_object_range(config: ServerConfig, ctx: CheckContext) -> None:
    obj = ctx.primary_object()
    response = expect_status("GetObject Range", 206, ctx.s3.get_object,
                             Bucket=obj.bucket, Key=obj.key, Range=f"bytes={RANGE_START}-{RANGE_END}")
    body = response["Body"].read()

    expect_equal("range length", RANGE_END - RANGE_START + 1, len(body))
    content_range = response.get("ContentRange", "")
    expect(content_range.startswith(f"bytes {RANGE_START}-{RANGE_END}/"),
           f"Unexpected Content-Range: {content_range!r}")
    if obj.body:
        expect(body == obj.body[RANGE_START:RANGE_END + 1], "Range body differs from uploaded bytes")


def _copy_destination(ctx: CheckContext) -> str:
    buckets = ctx.bucket_names()
    return buckets[1] if len(buckets) > 1 else buckets[0]


def _copy(ctx: CheckContext, what: str, wanted: int, dest_key: str, **conditions) -> None:
    source = ctx.primary_object()
    dest_bucket = _copy_destination(ctx)
    status, response = call_status(
        ctx.s3.copy_object,
        Bucket=dest_bucket,
        Key=dest_key,
        CopySource={"Bucket": source.bucket, "Key": source.key},
        **conditions,
    )
    if 200 <= status < 300:
        # Every copy the server made is removed by RemoveObject.
        ctx.copied.append(UploadedObject(bucket=dest_bucket, key=dest_key, body=source.body,
                                         etag=source.etag))
    expect_status_of(what, wanted, status, response)
    if wanted != 200:
        return

    etag = strip_etag(response.get("CopyObjectResult", {}).get("ETag"))
    expect_equal(f"ETag of copy {dest_key}", source.etag, etag)


@check
def copy_object(config: ServerConfig, ctx: CheckContext) -> None:
    source = ctx.primary_object()
    _copy(ctx, "CopyObject", 200, source.key)


@check
def copy_object_if_match(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _copy(ctx, "CopyObject If-Match (matching)", 200, obj.key + "-if-match",
          CopySourceIfMatch=f'"{obj.etag}"')
    _copy(ctx, "CopyObject If-Match (stale)", 412, obj.key + "-if-match-stale",
          CopySourceIfMatch=WRONG_ETAG)


@check
def copy_object_if_none_match(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _copy(ctx, "CopyObject If-None-Match (other)", 200, obj.key + "-if-none-match",
          CopySourceIfNoneMatch=WRONG_ETAG)
    _copy(ctx, "CopyObject If-None-Match (matching)", 412, obj.key + "-if-none-match-stale",
          CopySourceIfNoneMatch=f'"{obj.etag}"')


@check
def copy_object_if_modified_since(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _copy(ctx, "CopyObject If-Modified-Since (past)", 200, obj.key + "-if-modified-since",
          CopySourceIfModifiedSince=_before(obj))
    _copy(ctx, "CopyObject If-Modified-Since (future)", 412, obj.key + "-if-modified-since-stale",
          CopySourceIfModifiedSince=_after(obj))


@check
def copy_object_if_unmodified_since(config: ServerConfig, ctx: CheckContext) -> None:
    obj = _current(ctx)
    _copy(ctx, "CopyObject If-Unmodified-Since (future)", 200, obj.key + "-if-unmodified-since",
          CopySourceIfUnmodifiedSince=_after(obj))
    _copy(ctx, "CopyObject If-Unmodified-Since (past)", 412, obj.key + "-if-unmodified-since-stale",
          CopySourceIfUnmodifiedSince=_before(obj))


@check
def remove_object(config: ServerConfig, ctx: CheckContext) -> None:
    for group in (ctx.copied, ctx.objects):
        while group:
            obj = group[0]
            expect_status(f"RemoveObject {obj.key}", 204, ctx.s3.delete_object,
                          Bucket=obj.bucket, Key=obj.key)
            group.pop(0)
            expect_status(f"HeadObject {obj.key} after removal", 404, ctx.s3.head_object,
                          Bucket=obj.bucket, Key=obj.key)
