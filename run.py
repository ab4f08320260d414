#!/usr/bin/env python3
"""
s3verify: AWS S3 V4 signature compatibility checker

Run this script to check an S3-compatible server against the S3 API.

Usage:
    python run.py                        # Credentials from S3_URL/S3_ACCESS/S3_SECRET
    python run.py --extended             # Include extended checks
    python run.py --prepare              # Provision a reusable fixture
    python run.py --id <suffix>          # Run against a prepared fixture
    python run.py --clean <suffix>       # Remove a prepared fixture
    python run.py -j results.json        # Output JSON results
"""

import sys
from s3verify.cli import main

if __name__ == "__main__":
    sys.exit(main())
