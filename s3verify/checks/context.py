"""State shared by the checks of one suite run."""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from s3verify.models import FixtureSet


@dataclass
class UploadedObject:
    """An object a check created, with the body it was given."""

    bucket: str
    key: str
    body: bytes
    etag: str = ""
    last_modified: Optional[datetime] = None


@dataclass
class MultipartState:
    """The multipart upload being exercised by the multipart checks."""

    bucket: str
    key: str
    upload_id: str
    parts: list[dict] = field(default_factory=list)
    bodies: list[bytes] = field(default_factory=list)


@dataclass
class CheckContext:
    """Clients, the optional fixture and run-scoped scratch state.

    The fixture is read-only. The scratch lists are written by the
    unprepared suite as it creates and removes its own resources, in suite
    order.
    """

    s3: Any
    http: Any
    rng: random.Random = field(default_factory=random.Random)
    fixture: Optional[FixtureSet] = None
    buckets: list[str] = field(default_factory=list)
    objects: list[UploadedObject] = field(default_factory=list)
    copied: list[UploadedObject] = field(default_factory=list)
    multipart: Optional[MultipartState] = None

    @property
    def prepared(self) -> bool:
        return self.fixture is not None

    def bucket_names(self) -> list[str]:
        """Buckets the current run expects to exist."""
        if self.fixture is not None:
            return [self.fixture.bucket.name]
        return list(self.buckets)

    def primary_bucket(self) -> str:
        if self.fixture is not None:
            return self.fixture.bucket.name
        if not self.buckets:
            raise LookupError("No test bucket available; PutBucket has not run")
        return self.buckets[0]

    def primary_object(self) -> UploadedObject:
        """The object single-object checks operate on.

        For a prepared run the body is unknown and left empty; checks
        compare against the fixture ETag instead.
        """
        if self.fixture is not None:
            records = self.fixture.put_objects
            if not records:
                raise LookupError("Fixture holds no put-objects")
            record = records[0]
            return UploadedObject(
                bucket=self.fixture.bucket.name,
                key=record.key,
                body=b"",
                etag=record.etag,
                last_modified=record.last_modified,
            )
        if not self.objects:
            raise LookupError("No test object available; PutObject has not run")
        return self.objects[0]
