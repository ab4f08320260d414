"""
s3verify: AWS S3 V4 signature compatibility checks.

Runs a suite of S3 API checks against an S3-compatible server, either on
disposable resources or against a reusable fixture bucket provisioned with
``--prepare``.
"""

__version__ = "2.0.0"

from s3verify.cli import main

__all__ = ["main", "__version__"]
