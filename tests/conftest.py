"""Shared fixtures: an in-memory S3 stand-in and common configs."""

import hashlib
import random
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

import pytest
from botocore.exceptions import ClientError

from s3verify.models import ServerConfig


def client_error(code: str, status: int, operation: str = "Operation") -> ClientError:
    """Build a ClientError the way botocore reports it."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def _meta(status: int = 200) -> dict:
    return {"ResponseMetadata": {"HTTPStatusCode": status}}


class FakePaginator:
    def __init__(self, s3: "FakeS3", page_size: int = 1000):
        self.s3 = s3
        self.page_size = page_size

    def paginate(self, Bucket: str, Prefix: str = ""):
        self.s3.calls["paginate"] += 1
        keys = self.s3._keys(Bucket, Prefix)
        for start in range(0, max(len(keys), 1), self.page_size):
            batch = keys[start:start + self.page_size]
            yield {
                "KeyCount": len(batch),
                "Contents": [self.s3._entry(Bucket, key) for key in batch],
            }


class FakeS3:
    """Just enough of the boto3 S3 client for the fixture lifecycle and bucket checks.

    Args:
        fail_put_after: Number of successful put_object calls before every
            further put_object raises InternalError.
    """

    def __init__(self, fail_put_after: Optional[int] = None):
        self.buckets: dict[str, dict[str, bytes]] = {}
        self.calls: Counter = Counter()
        self.fail_put_after = fail_put_after
        self.created_with: list[dict] = []

    def _bucket(self, name: str, operation: str) -> dict[str, bytes]:
        if name not in self.buckets:
            raise client_error("NoSuchBucket", 404, operation)
        return self.buckets[name]

    def _keys(self, bucket: str, prefix: str = "") -> list[str]:
        return sorted(k for k in self._bucket(bucket, "ListObjectsV2") if k.startswith(prefix))

    def _entry(self, bucket: str, key: str) -> dict:
        body = self.buckets[bucket][key]
        return {
            "Key": key,
            "ETag": f'"{hashlib.md5(body).hexdigest()}"',
            "Size": len(body),
            "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }

    def head_bucket(self, Bucket: str):
        self.calls["head_bucket"] += 1
        if Bucket not in self.buckets:
            raise client_error("404", 404, "HeadBucket")
        return _meta()

    def create_bucket(self, Bucket: str, **params):
        self.calls["create_bucket"] += 1
        if Bucket in self.buckets:
            raise client_error("BucketAlreadyOwnedByYou", 409, "CreateBucket")
        self.buckets[Bucket] = {}
        self.created_with.append({"Bucket": Bucket, **params})
        return {"Location": f"/{Bucket}", **_meta()}

    def delete_bucket(self, Bucket: str):
        self.calls["delete_bucket"] += 1
        contents = self._bucket(Bucket, "DeleteBucket")
        if contents:
            raise client_error("BucketNotEmpty", 409, "DeleteBucket")
        del self.buckets[Bucket]
        return _meta(204)

    def list_buckets(self):
        self.calls["list_buckets"] += 1
        return {
            "Buckets": [{"Name": name} for name in sorted(self.buckets)],
            "Owner": {"ID": "owner"},
            **_meta(),
        }

    def put_object(self, Bucket: str, Key: str, Body: bytes = b"", **params):
        self.calls["put_object"] += 1
        if self.fail_put_after is not None and self.calls["put_object"] > self.fail_put_after:
            raise client_error("InternalError", 500, "PutObject")
        self._bucket(Bucket, "PutObject")[Key] = Body
        return {"ETag": f'"{hashlib.md5(Body).hexdigest()}"', **_meta()}

    def delete_objects(self, Bucket: str, Delete: dict):
        self.calls["delete_objects"] += 1
        contents = self._bucket(Bucket, "DeleteObjects")
        for item in Delete["Objects"]:
            contents.pop(item["Key"], None)
        return _meta()

    def list_objects_v2(self, Bucket: str, Prefix: str = "", MaxKeys: int = 1000, **params):
        self.calls["list_objects_v2"] += 1
        keys = self._keys(Bucket, Prefix)[:MaxKeys]
        return {
            "KeyCount": len(keys),
            "Contents": [self._entry(Bucket, key) for key in keys],
            **_meta(),
        }

    def get_paginator(self, operation: str):
        assert operation == "list_objects_v2"
        return FakePaginator(self)


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def server_config():
    return ServerConfig(
        endpoint_url="http://localhost:9000",
        access_key="test-access",
        secret_key="test-secret",
        region="us-east-1",
    )


@pytest.fixture
def rng():
    return random.Random(1234)
