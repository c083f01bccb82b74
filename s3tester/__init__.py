"""
S3 Bucket Authentication Tester.

A tool to check that credentials can authenticate against a bucket on an
S3-compatible storage provider, with SigV4 or SigV2 signing and either
virtual-hosted or path-style addressing.
"""

__version__ = "1.0.0"

from s3tester.cli import main

__all__ = ["main", "__version__"]
