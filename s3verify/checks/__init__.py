"""S3 API compatibility checks and the suites that order them."""

from .context import CheckContext
from .suites import PREPARED_SUITE, UNPREPARED_SUITE

__all__ = ["CheckContext", "PREPARED_SUITE", "UNPREPARED_SUITE"]
