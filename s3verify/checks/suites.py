"""The two ordered check suites.

Order matters: later checks use resources earlier ones created, and the
critical flags mark the checks whose failure makes everything after them
meaningless.

Unprepared suite order:
    PutBucket, PutObject, Multipart, HeadObject, CopyObject, GetObject,
    ListBuckets, ListObjects, PostPolicy, RemoveObject, RemoveBucket
"""

from s3verify.checks import buckets, listing, multipart, objects, post_policy
from s3verify.models import TestCase

UNPREPARED_SUITE: tuple[TestCase, ...] = (
    TestCase("PutBucket", buckets.put_bucket, critical=True),
    TestCase("PutObject", objects.put_object, critical=True),
    TestCase("InitiateMultipartUpload", multipart.initiate_multipart_upload, critical=True),
    TestCase("UploadPart", multipart.upload_part, critical=True),
    TestCase("ListParts", multipart.list_parts),
    TestCase("CompleteMultipartUpload", multipart.complete_multipart_upload, critical=True),
    TestCase("HeadObject", objects.head_object, critical=True),
    TestCase("HeadObject (If-Match)", objects.head_object_if_match, extended=True),
    TestCase("HeadObject (If-None-Match)", objects.head_object_if_none_match, extended=True),
    TestCase("HeadObject (If-Unmodified-Since)", objects.head_object_if_unmodified_since, extended=True),
    TestCase("HeadObject (If-Modified-Since)", objects.head_object_if_modified_since, extended=True),
    TestCase("CopyObject", objects.copy_object),
    TestCase("CopyObject (If-Match)", objects.copy_object_if_match, extended=True),
    TestCase("CopyObject (If-None-Match)", objects.copy_object_if_none_match, extended=True),
    TestCase("CopyObject (If-Modified-Since)", objects.copy_object_if_modified_since, extended=True),
    TestCase("CopyObject (If-Unmodified-Since)", objects.copy_object_if_unmodified_since, extended=True),
    TestCase("GetObject", objects.get_object),
    TestCase("GetObject (If-Match)", objects.get_object_if_match, extended=True),
    TestCase("GetObject (If-None-Match)", objects.get_object_if_none_match, extended=True),
    TestCase("GetObject (If-Modified-Since)", objects.get_object_if_modified_since, extended=True),
    TestCase("GetObject (If-Unmodified-Since)", objects.get_object_if_unmodified_since, extended=True),
    TestCase("GetObject (Range)", objects.get_object_range, extended=True),
    TestCase("ListBuckets", buckets.list_buckets),
    TestCase("ListObjects V1", listing.list_objects_v1),
    TestCase("ListObjects V2", listing.list_objects_v2),
    TestCase("PostPolicy", post_policy.post_policy, extended=True),
    TestCase("RemoveObject", objects.remove_object, critical=True),
    TestCase("AbortMultipartUpload", multipart.abort_multipart_upload),
    TestCase("RemoveBucket (DNE)", buckets.remove_bucket_dne),
    TestCase("RemoveBucket (Exists)", buckets.remove_bucket_exists),
)

# Prepared runs only read the fixture; nothing here modifies or removes it.
PREPARED_SUITE: tuple[TestCase, ...] = (
    TestCase("HeadBucket", buckets.head_bucket, critical=True),
    TestCase("ListBuckets", buckets.list_buckets),
    TestCase("ListObjects V1", listing.list_objects_v1),
    TestCase("ListObjects V2", listing.list_objects_v2),
    TestCase("HeadObject", objects.head_object, critical=True),
    TestCase("HeadObject (If-Match)", objects.head_object_if_match, extended=True),
    TestCase("HeadObject (If-None-Match)", objects.head_object_if_none_match, extended=True),
    TestCase("HeadObject (If-Unmodified-Since)", objects.head_object_if_unmodified_since, extended=True),
    TestCase("HeadObject (If-Modified-Since)", objects.head_object_if_modified_since, extended=True),
    TestCase("GetObject", objects.get_object),
    TestCase("GetObject (If-Match)", objects.get_object_if_match, extended=True),
    TestCase("GetObject (If-None-Match)", objects.get_object_if_none_match, extended=True),
    TestCase("GetObject (If-Modified-Since)", objects.get_object_if_modified_since, extended=True),
    TestCase("GetObject (If-Unmodified-Since)", objects.get_object_if_unmodified_since, extended=True),
    TestCase("GetObject (Range)", objects.get_object_range, extended=True),
    TestCase("PostPolicy", post_policy.post_policy, extended=True),
)
