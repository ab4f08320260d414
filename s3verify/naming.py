"""Resource naming for s3verify fixtures.

Every bucket and object s3verify creates is derived from a run suffix, so a
fixture provisioned by one invocation can be found again by a later one:

    bucket:   s3verify-<suffix>
    objects:  s3verify/put/object/<suffix><index>   (index in [0, 101))
    sentinel: s3verify/list/<suffix>

These names are durable. Changing them breaks ``--id`` against fixtures
created by earlier versions.
"""

import random
import string
from typing import Optional

BUCKET_PREFIX = "s3verify-"
OBJECT_PREFIX = "s3verify/"
PUT_OBJECT_PREFIX = OBJECT_PREFIX + "put/object/"
LIST_PREFIX = OBJECT_PREFIX + "list/"

# Number of put-objects in a prepared fixture (the list sentinel is extra).
NUM_TEST_OBJECTS = 101

SUFFIX_LENGTH = 8
DISPOSABLE_NAME_LENGTH = 60

# Bucket names must be lowercase, so suffixes are too.
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def _require_suffix(suffix: str) -> None:
    if not suffix:
        raise ValueError("Run suffix must not be empty")


def bucket_name(suffix: str) -> str:
    """Return the fixture bucket name for a suffix."""
    _require_suffix(suffix)
    return BUCKET_PREFIX + suffix


def object_key(suffix: str, index: int) -> str:
    """Return the key of the put-object at ``index``."""
    _require_suffix(suffix)
    if not 0 <= index < NUM_TEST_OBJECTS:
        raise ValueError(
            f"Object index {index} outside fixture range [0, {NUM_TEST_OBJECTS})"
        )
    return f"{PUT_OBJECT_PREFIX}{suffix}{index}"


def list_key(suffix: str) -> str:
    """Return the key of the listing sentinel object."""
    _require_suffix(suffix)
    return LIST_PREFIX + suffix


def fixture_keys(suffix: str, count: int = NUM_TEST_OBJECTS) -> list[str]:
    """All keys a complete fixture holds: put-objects in index order, then the sentinel."""
    keys = [object_key(suffix, i) for i in range(count)]
    keys.append(list_key(suffix))
    return keys


def is_fixture_bucket(name: str) -> bool:
    """Check that a bucket name was produced by :func:`bucket_name`."""
    head, sep, rest = name.partition("-")
    return head == "s3verify" and bool(sep) and bool(rest)


def suffix_from_bucket(name: str) -> str:
    """Recover the run suffix from a fixture bucket name."""
    if not is_fixture_bucket(name):
        raise ValueError(f"{name} is not an s3verify created bucket")
    return name[len(BUCKET_PREFIX):]


def _random_string(rng: random.Random, length: int) -> str:
    return "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(length))


def generate_suffix(rng: Optional[random.Random] = None) -> str:
    """Generate a fresh run suffix. Called once per ``--prepare``."""
    rng = rng or random.Random()
    return _random_string(rng, SUFFIX_LENGTH)


def random_bucket_name(rng: random.Random, prefix: str = BUCKET_PREFIX) -> str:
    """Disposable bucket name for checks that manage their own resources."""
    return prefix + _random_string(rng, DISPOSABLE_NAME_LENGTH - len(prefix))


def random_object_key(rng: random.Random, prefix: str = "s3verify-object-") -> str:
    return prefix + _random_string(rng, 16)
