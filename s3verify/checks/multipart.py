"""Multipart upload checks.

Initiate, UploadPart, ListParts and Complete run in sequence against one
upload recorded on the context; Abort uses an upload of its own.
"""

from botocore.exceptions import ClientError

from s3verify.checks.common import (
    Mismatch,
    check,
    error_code,
    expect,
    expect_equal,
    md5_hex,
    strip_etag,
)
from s3verify.checks.context import CheckContext, MultipartState, UploadedObject
from s3verify.models import ServerConfig

MULTIPART_KEY = "s3verify-multipart-object"
ABORT_KEY = "s3verify-multipart-abort"

# Every part except the last must be at least 5 MiB.
MIN_PART_SIZE = 5 * 1024 * 1024
LAST_PART_SIZE = 1024


def _require_upload(ctx: CheckContext) -> MultipartState:
    if ctx.multipart is None:
        raise LookupError("No multipart upload in progress; InitiateMultipartUpload has not run")
    return ctx.multipart


@check
def initiate_multipart_upload(config: ServerConfig, ctx: CheckContext) -> None:
    bucket = ctx.primary_bucket()
    response = ctx.s3.create_multipart_upload(Bucket=bucket, Key=MULTIPART_KEY)

    upload_id = response.get("UploadId")
    expect(bool(upload_id), "InitiateMultipartUpload returned no UploadId")
    expect_equal("Bucket in response", bucket, response.get("Bucket"))
    expect_equal("Key in response", MULTIPART_KEY, response.get("Key"))

    ctx.multipart = MultipartState(bucket=bucket, key=MULTIPART_KEY, upload_id=upload_id)


@check
def upload_part(config: ServerConfig, ctx: CheckContext) -> None:
    state = _require_upload(ctx)
    for part_number, size in ((1, MIN_PART_SIZE), (2, LAST_PART_SIZE)):
        body = ctx.rng.randbytes(size)
        response = ctx.s3.upload_part(
            Bucket=state.bucket,
            Key=state.key,
            UploadId=state.upload_id,
            PartNumber=part_number,
            Body=body,
        )
        etag = strip_etag(response.get("ETag"))
        expect_equal(f"ETag for part {part_number}", md5_hex(body), etag)

        state.parts.append({"PartNumber": part_number, "ETag": f'"{etag}"'})
        state.bodies.append(body)


@check
def list_parts(config: ServerConfig, ctx: CheckContext) -> None:
    state = _require_upload(ctx)
    response = ctx.s3.list_parts(Bucket=state.bucket, Key=state.key, UploadId=state.upload_id)

    listed = {p["PartNumber"]: strip_etag(p["ETag"]) for p in response.get("Parts", [])}
    expect_equal("part count", len(state.parts), len(listed))

    for part in state.parts:
        number = part["PartNumber"]
        expect(number in listed, f"Part {number} not found in ListParts response")
        expect_equal(f"ETag for part {number}", strip_etag(part["ETag"]), listed[number])


@check
def complete_multipart_upload(config: ServerConfig, ctx: CheckContext) -> None:
    state = _require_upload(ctx)
    response = ctx.s3.complete_multipart_upload(
        Bucket=state.bucket,
        Key=state.key,
        UploadId=state.upload_id,
        MultipartUpload={"Parts": state.parts},
    )

    etag = strip_etag(response.get("ETag"))
    expect(etag.endswith(f"-{len(state.parts)}"),
           f"Unexpected multipart ETag {etag!r}: wanted a '-{len(state.parts)}' suffix")

    ctx.objects.append(UploadedObject(
        bucket=state.bucket,
        key=state.key,
        body=b"".join(state.bodies),
        etag=etag,
    ))
    ctx.multipart = None


@check
def abort_multipart_upload(config: ServerConfig, ctx: CheckContext) -> None:
    bucket = ctx.primary_bucket()
    upload_id = ctx.s3.create_multipart_upload(Bucket=bucket, Key=ABORT_KEY)["UploadId"]
    ctx.s3.abort_multipart_upload(Bucket=bucket, Key=ABORT_KEY, UploadId=upload_id)

    try:
        ctx.s3.list_parts(Bucket=bucket, Key=ABORT_KEY, UploadId=upload_id)
    except ClientError as e:
        expect_equal("error after abort", "NoSuchUpload", error_code(e))
        return
    raise Mismatch(f"ListParts succeeded on aborted upload {upload_id}")
