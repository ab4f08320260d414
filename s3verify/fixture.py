"""Fixture lifecycle: provisioning, validation and cleanup.

A prepared fixture is one bucket holding NUM_TEST_OBJECTS put-objects plus a
listing sentinel, all named by :mod:`s3verify.naming`. The endpoint itself is
the only durable record of a fixture; nothing is persisted locally.

Provisioning is idempotent by reconciliation: the provisioner lists what is
already under the fixture prefix and uploads only the expected keys that are
missing. Re-running ``--prepare`` after a partial failure therefore resumes
where the last run stopped and never overwrites an object that exists.
"""

import logging
import random
import string
import time
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3verify.models import BucketRecord, FixtureSet, ObjectRecord
from s3verify.naming import (
    NUM_TEST_OBJECTS,
    OBJECT_PREFIX,
    bucket_name,
    fixture_keys,
    is_fixture_bucket,
    suffix_from_bucket,
)

logger = logging.getLogger(__name__)

PAYLOAD_SIZE = 60
PAYLOAD_ALPHABET = string.ascii_letters + string.digits

# S3 DeleteObjects accepts at most 1000 keys per request.
DELETE_BATCH_SIZE = 1000

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class FixtureError(Exception):
    """Base class for fixture lifecycle failures."""

    pass


class ProvisionError(FixtureError):
    """Raised when the fixture bucket or an object cannot be created."""

    pass


class FixtureValidationError(FixtureError):
    """Raised when an existing fixture does not have the expected shape."""

    pass


class FixtureNamingError(FixtureValidationError):
    """Raised when a bucket name was not produced by s3verify."""

    pass


class FixtureIncompleteError(FixtureValidationError):
    """Raised when a fixture bucket holds fewer objects than required."""

    def __init__(self, bucket: str, expected: int, actual: int):
        super().__init__(
            f"Not enough test objects found in {bucket}: "
            f"need at least {expected}, only found {actual}"
        )
        self.bucket = bucket
        self.expected = expected
        self.actual = actual


def error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def payload(rng: random.Random, size: int = PAYLOAD_SIZE) -> bytes:
    """Random alphanumeric object body."""
    return "".join(rng.choices(PAYLOAD_ALPHABET, k=size)).encode("ascii")


def _strip_etag(etag: Optional[str]) -> str:
    return (etag or "").strip('"')


def list_fixture_objects(s3_client: Any, bucket: str) -> list[ObjectRecord]:
    """List every object under the fixture prefix, sorted by key.

    Raises:
        ClientError, BotoCoreError: Transport or permission failures are
            left for the caller to wrap.
    """
    records = []
    paginator = s3_client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=bucket, Prefix=OBJECT_PREFIX):
        for entry in page.get("Contents", []):
            records.append(ObjectRecord(
                key=entry["Key"],
                etag=_strip_etag(entry.get("ETag")),
                last_modified=entry.get("LastModified"),
                size=entry.get("Size"),
            ))
    records.sort(key=lambda r: r.key)
    return records


class FixtureProvisioner:
    """Creates the fixture bucket and objects if they are absent.

    Args:
        s3_client: boto3 S3 client.
        region: Region the bucket is created in.
        rng: Random source for object payloads. Defaults to one seeded
            from the wall clock; tests pass a seeded instance.
        reporter: Optional reporter notified of each provisioning step.
    """

    def __init__(
        self,
        s3_client: Any,
        region: str,
        rng: Optional[random.Random] = None,
        reporter: Optional[Any] = None,
    ):
        self.s3_client = s3_client
        self.region = region
        self.rng = rng or random.Random(time.time_ns())
        self.reporter = reporter

    def _step(self, message: str, error: Optional[Exception] = None) -> None:
        if self.reporter:
            self.reporter.on_fixture_step(message, error is None, error)

    def _bucket_exists(self, name: str) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=name)
        except ClientError as e:
            if error_code(e) in _MISSING_BUCKET_CODES:
                return False
            raise
        return True

    def ensure_bucket(self, suffix: str) -> str:
        """Create ``s3verify-<suffix>`` unless it already exists.

        Returns:
            The bucket name.

        Raises:
            ProvisionError: If the existence check or the create fails.
        """
        name = bucket_name(suffix)
        message = "Creating test bucket"

        try:
            if self._bucket_exists(name):
                logger.info("Bucket %s already exists", name)
                self._step(message)
                return name

            params: dict[str, Any] = {"Bucket": name}
            # us-east-1 rejects an explicit LocationConstraint.
            if self.region and self.region != "us-east-1":
                params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

            try:
                self.s3_client.create_bucket(**params)
            except ClientError as e:
                if error_code(e) != "BucketAlreadyOwnedByYou":
                    raise
        except (ClientError, BotoCoreError) as e:
            self._step(message, e)
            raise ProvisionError(f"Unable to create bucket {name}: {e}") from e

        logger.info("Created bucket %s in %s", name, self.region)
        self._step(message)
        return name

    def ensure_objects(self, bucket: str, suffix: str) -> int:
        """Upload whichever fixture objects are missing from ``bucket``.

        Returns:
            The number of objects uploaded (0 when the fixture was
            already complete).

        Raises:
            ProvisionError: On the first listing or upload failure. Objects
                uploaded before the failure are left in place.
        """
        message = "Creating test objects"

        try:
            existing = {record.key for record in list_fixture_objects(self.s3_client, bucket)}
        except (ClientError, BotoCoreError) as e:
            self._step(message, e)
            raise ProvisionError(f"Unable to list objects in {bucket}: {e}") from e

        missing = [key for key in fixture_keys(suffix) if key not in existing]
        if not missing:
            logger.info("Fixture in %s already complete", bucket)
            self._step(message)
            return 0

        logger.info(
            "Uploading %d of %d fixture objects to %s",
            len(missing), NUM_TEST_OBJECTS + 1, bucket,
        )
        for key in missing:
            try:
                self.s3_client.put_object(
                    Bucket=bucket,
                    Key=key,
                    Body=payload(self.rng),
                    ContentType="application/octet-stream",
                )
            except (ClientError, BotoCoreError) as e:
                self._step(message, e)
                raise ProvisionError(f"Unable to upload {key} to {bucket}: {e}") from e

        self._step(message)
        return len(missing)

    def prepare(self, suffix: str) -> FixtureSet:
        """Provision the bucket, then its objects, and return the fixture."""
        name = self.ensure_bucket(suffix)
        self.ensure_objects(name, suffix)

        try:
            objects = list_fixture_objects(self.s3_client, name)
        except (ClientError, BotoCoreError) as e:
            raise ProvisionError(f"Unable to list objects in {name}: {e}") from e

        return FixtureSet(bucket=BucketRecord(name), objects=tuple(objects), suffix=suffix)


def validate_and_load(s3_client: Any, bucket: str) -> FixtureSet:
    """Rebuild a FixtureSet from what the endpoint holds. Read-only.

    Raises:
        FixtureNamingError: If ``bucket`` is not an s3verify bucket name.
        FixtureIncompleteError: If fewer than NUM_TEST_OBJECTS objects exist
            under the fixture prefix.
        FixtureValidationError: If the listing itself fails.
    """
    if not is_fixture_bucket(bucket):
        raise FixtureNamingError(
            f"{bucket} is not an s3verify created bucket. See s3verify --help"
        )

    try:
        objects = list_fixture_objects(s3_client, bucket)
    except (ClientError, BotoCoreError) as e:
        raise FixtureValidationError(f"Unable to list objects in {bucket}: {e}") from e

    if len(objects) < NUM_TEST_OBJECTS:
        raise FixtureIncompleteError(bucket, NUM_TEST_OBJECTS, len(objects))

    logger.debug("Loaded %d fixture objects from %s", len(objects), bucket)
    return FixtureSet(
        bucket=BucketRecord(bucket),
        objects=tuple(objects),
        suffix=suffix_from_bucket(bucket),
    )


def clean_fixture(s3_client: Any, suffix: str, reporter: Optional[Any] = None) -> int:
    """Remove a prepared fixture.

    Deletes every object under the fixture prefix, then the bucket if
    nothing else is left in it.

    Returns:
        The number of objects removed.

    Raises:
        FixtureValidationError: If the bucket does not exist.
        FixtureError: If listing or deleting fails.
    """
    name = bucket_name(suffix)

    try:
        s3_client.head_bucket(Bucket=name)
    except ClientError as e:
        if error_code(e) in _MISSING_BUCKET_CODES:
            raise FixtureValidationError(f"Bucket {name} does not exist") from e
        raise FixtureError(f"Unable to access bucket {name}: {e}") from e
    except BotoCoreError as e:
        raise FixtureError(f"Unable to access bucket {name}: {e}") from e

    message = "CleanUp (Removing Objects)"
    removed = 0
    try:
        keys = [record.key for record in list_fixture_objects(s3_client, name)]
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            response = s3_client.delete_objects(
                Bucket=name,
                Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
            )
            errors = response.get("Errors", [])
            if errors:
                first = errors[0]
                error = FixtureError(
                    f"Unable to delete {len(errors)} objects from {name}, "
                    f"first: {first.get('Key')} ({first.get('Code')})"
                )
                if reporter:
                    reporter.on_fixture_step(message, False, error)
                raise error
            removed += len(batch)
    except (ClientError, BotoCoreError) as e:
        if reporter:
            reporter.on_fixture_step(message, False, e)
        raise FixtureError(f"Unable to remove objects from {name}: {e}") from e

    if reporter:
        reporter.on_fixture_step(message, True, None)

    message = "CleanUp (Removing Buckets)"
    try:
        remaining = s3_client.list_objects_v2(Bucket=name, MaxKeys=1)
        if remaining.get("KeyCount", len(remaining.get("Contents", []))) == 0:
            s3_client.delete_bucket(Bucket=name)
            logger.info("Removed bucket %s", name)
        else:
            logger.warning("Bucket %s holds non-s3verify objects, leaving it in place", name)
    except (ClientError, BotoCoreError) as e:
        if reporter:
            reporter.on_fixture_step(message, False, e)
        raise FixtureError(f"Unable to remove bucket {name}: {e}") from e

    if reporter:
        reporter.on_fixture_step(message, True, None)
    return removed
