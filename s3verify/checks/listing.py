"""ListObjects checks (V1 and V2).

Unprepared runs list the objects PutObject and the multipart checks
created. Prepared runs list the fixture and compare keys and ETags against
the FixtureSet loaded at startup.
"""

from s3verify.checks.common import check, expect, expect_equal, strip_etag
from s3verify.checks.context import CheckContext
from s3verify.models import ServerConfig
from s3verify.naming import OBJECT_PREFIX, PUT_OBJECT_PREFIX

MAX_KEYS = 30
V2_PAGE_SIZE = 25


def _expected(ctx: CheckContext) -> tuple[str, str, dict[str, str]]:
    """Bucket, listing prefix, and expected {key: etag} for this run."""
    if ctx.fixture is not None:
        objects = {obj.key: obj.etag for obj in ctx.fixture.objects}
        return ctx.fixture.bucket.name, OBJECT_PREFIX, objects

    bucket = ctx.primary_bucket()
    objects = {obj.key: obj.etag for obj in ctx.objects if obj.bucket == bucket}
    return bucket, "", objects


def _compare(what: str, expected: dict[str, str], contents: list[dict]) -> None:
    listed = {entry["Key"]: strip_etag(entry.get("ETag")) for entry in contents}
    expect_equal(f"number of objects in {what}", len(expected), len(listed))

    for key, etag in expected.items():
        expect(key in listed, f"Object {key} missing from {what}")
        expect_equal(f"ETag of {key} in {what}", etag, listed[key])

    keys = [entry["Key"] for entry in contents]
    expect(keys == sorted(keys), f"{what} keys are not in lexicographic order")


@check
def list_objects_v1(config: ServerConfig, ctx: CheckContext) -> None:
    bucket, prefix, expected = _expected(ctx)

    response = ctx.s3.list_objects(Bucket=bucket, Prefix=prefix)
    expect_equal("bucket name in ListObjects", bucket, response.get("Name"))
    _compare("ListObjects", expected, response.get("Contents", []))

    limit = min(MAX_KEYS, max(len(expected) - 1, 1))
    response = ctx.s3.list_objects(Bucket=bucket, Prefix=prefix, MaxKeys=limit)
    contents = response.get("Contents", [])
    first = sorted(expected)[:limit]
    expect_equal("keys with max-keys", first, [entry["Key"] for entry in contents])
    expect_equal("MaxKeys echoed", limit, response.get("MaxKeys"))
    expect(response.get("IsTruncated") is (len(expected) > limit),
           "IsTruncated does not match the number of remaining keys")

    if ctx.fixture is not None:
        put_keys = {obj.key: obj.etag for obj in ctx.fixture.put_objects}
        response = ctx.s3.list_objects(Bucket=bucket, Prefix=PUT_OBJECT_PREFIX)
        _compare("ListObjects with prefix", put_keys, response.get("Contents", []))


@check
def list_objects_v2(config: ServerConfig, ctx: CheckContext) -> None:
    bucket, prefix, expected = _expected(ctx)

    contents: list[dict] = []
    params = {"Bucket": bucket, "Prefix": prefix, "MaxKeys": V2_PAGE_SIZE}
    pages = 0
    while True:
        response = ctx.s3.list_objects_v2(**params)
        page = response.get("Contents", [])
        expect_equal("KeyCount", len(page), response.get("KeyCount"))
        contents.extend(page)
        pages += 1

        if not response.get("IsTruncated"):
            break
        token = response.get("NextContinuationToken")
        expect(bool(token), "Truncated ListObjectsV2 response without NextContinuationToken")
        params["ContinuationToken"] = token

    _compare("ListObjectsV2", expected, contents)
    wanted_pages = max(1, -(-len(expected) // V2_PAGE_SIZE))
    expect_equal("ListObjectsV2 page count", wanted_pages, pages)
