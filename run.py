#!/usr/bin/env python3
"""
S3 Bucket Authentication Tester

Run this script to check that credentials can authenticate against a
bucket on an S3-compatible provider.

Usage:
    python run.py --endpoint aws --bucket my-bucket --access-key AK --secret-key SK
    python run.py --endpoint https://s3.example.com --bucket b --path-style ...
    python run.py -c check.json              # Use a config file
    python run.py -c check.json --verbose    # Log signing steps
    python run.py -c check.json -j out.json  # Output JSON results
    python run.py --list-providers           # Show provider shortcuts
"""

import sys
from s3tester.cli import main

if __name__ == "__main__":
    sys.exit(main())
