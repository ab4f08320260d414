"""Tests for the multipart upload checks."""

import hashlib
import random
from unittest.mock import Mock

import pytest

from conftest import client_error
from s3verify.checks import multipart
from s3verify.checks.context import CheckContext, MultipartState


@pytest.fixture
def s3():
    s3 = Mock()
    s3.create_multipart_upload.return_value = {
        "Bucket": "s3verify-src",
        "Key": multipart.MULTIPART_KEY,
        "UploadId": "upload-123",
    }
    s3.upload_part.side_effect = lambda **kw: {"ETag": f'"{hashlib.md5(kw["Body"]).hexdigest()}"'}
    return s3


@pytest.fixture
def ctx(s3):
    return CheckContext(s3=s3, http=Mock(), rng=random.Random(2), buckets=["s3verify-src"])


class TestMultipartSequence:
    """Tests for initiate, upload, list and complete in order."""

    def test_full_sequence(self, server_config, ctx, s3):
        assert multipart.initiate_multipart_upload(server_config, ctx).ok
        assert ctx.multipart.upload_id == "upload-123"

        assert multipart.upload_part(server_config, ctx).ok
        sizes = [len(body) for body in ctx.multipart.bodies]
        assert sizes == [multipart.MIN_PART_SIZE, multipart.LAST_PART_SIZE]

        s3.list_parts.return_value = {"Parts": list(ctx.multipart.parts)}
        assert multipart.list_parts(server_config, ctx).ok

        s3.complete_multipart_upload.return_value = {"ETag": '"abc-2"'}
        result = multipart.complete_multipart_upload(server_config, ctx)

        assert result.ok, result.message
        assert ctx.multipart is None
        assert ctx.objects[-1].key == multipart.MULTIPART_KEY
        assert len(ctx.objects[-1].body) == multipart.MIN_PART_SIZE + multipart.LAST_PART_SIZE

    def test_upload_without_initiate(self, server_config, ctx):
        result = multipart.upload_part(server_config, ctx)

        assert not result.ok
        assert "InitiateMultipartUpload has not run" in result.message

    def test_initiate_without_upload_id(self, server_config, ctx, s3):
        s3.create_multipart_upload.return_value = {"Bucket": "s3verify-src", "Key": multipart.MULTIPART_KEY}

        assert not multipart.initiate_multipart_upload(server_config, ctx).ok

    def test_list_parts_missing_part(self, server_config, ctx, s3):
        ctx.multipart = MultipartState("s3verify-src", "k", "u", parts=[
            {"PartNumber": 1, "ETag": '"a"'},
            {"PartNumber": 2, "ETag": '"b"'},
        ])
        s3.list_parts.return_value = {"Parts": [{"PartNumber": 1, "ETag": '"a"'}]}

        assert "part count" in multipart.list_parts(server_config, ctx).message

    def test_complete_with_plain_etag(self, server_config, ctx, s3):
        ctx.multipart = MultipartState("s3verify-src", "k", "u", parts=[
            {"PartNumber": 1, "ETag": '"a"'},
            {"PartNumber": 2, "ETag": '"b"'},
        ])
        s3.complete_multipart_upload.return_value = {"ETag": '"d41d8cd98f00b204e9800998ecf8427e"'}

        result = multipart.complete_multipart_upload(server_config, ctx)

        assert not result.ok
        assert "'-2' suffix" in result.message


class TestAbortMultipartUpload:
    """Tests for abort_multipart_upload."""

    def test_no_such_upload_after_abort(self, server_config, ctx, s3):
        s3.list_parts.side_effect = client_error("NoSuchUpload", 404, "ListParts")

        assert multipart.abort_multipart_upload(server_config, ctx).ok
        s3.abort_multipart_upload.assert_called_once_with(
            Bucket="s3verify-src", Key=multipart.ABORT_KEY, UploadId="upload-123",
        )

    def test_upload_still_listed(self, server_config, ctx, s3):
        s3.list_parts.return_value = {"Parts": []}

        assert not multipart.abort_multipart_upload(server_config, ctx).ok
