"""Reference bucket check through boto3.

Issues the same bucket HEAD with a standard SDK client, configured with
the same endpoint, credentials, region and addressing style. Comparing
its outcome with the hand-signed check separates provider-side
rejections from signing differences.
"""

import logging
import time
from datetime import datetime
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3tester.config import ResolvedConfig
from s3tester.models import AddressingStyle, AuthType, CheckResult, ResultStatus

logger = logging.getLogger(__name__)

SDK_CHECK_NAME = "SDK Reference Check"

# botocore signature version names for each auth type
SIGNATURE_VERSIONS = {
    AuthType.SIGV4: "s3v4",
    AuthType.SIGV2: "s3",
}

BOTO_ADDRESSING_STYLES = {
    AddressingStyle.VIRTUAL_HOSTED: "virtual",
    AddressingStyle.PATH_STYLE: "path",
}


def build_s3_client(config: ResolvedConfig):
    """Build a boto3 S3 client matching the resolved configuration.

    The endpoint URL is the bare endpoint host; boto3 applies the
    addressing style itself.
    """
    boto_config = Config(
        signature_version=SIGNATURE_VERSIONS[config.auth_type],
        s3={"addressing_style": BOTO_ADDRESSING_STYLES[config.style]},
        connect_timeout=config.timeout,
        read_timeout=config.timeout,
        retries={"max_attempts": 1, "mode": "standard"},
    )

    return boto3.client(
        "s3",
        endpoint_url=f"{config.target.scheme}://{config.target.endpoint_host}",
        aws_access_key_id=config.credentials.access_key,
        aws_secret_access_key=config.credentials.secret_key,
        region_name=config.region,
        verify=not config.insecure,
        config=boto_config,
    )


class SdkChecker:
    """Runs ``head_bucket`` through boto3."""

    name = SDK_CHECK_NAME

    def __init__(self, config: ResolvedConfig, s3_client=None):
        self.config = config
        self.s3_client = s3_client

    def check(self, timestamp: Optional[datetime] = None) -> CheckResult:
        """Run the check. ``timestamp`` is unused; botocore reads its own clock."""
        start_time = time.time()
        client = self.s3_client or build_s3_client(self.config)

        try:
            client.head_bucket(Bucket=self.config.bucket)
        except ClientError as e:
            status_code = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.debug("SDK head_bucket rejected: HTTP %s %s", status_code, code)
            return CheckResult(
                check_name=self.name,
                status=ResultStatus.FAIL,
                duration_seconds=time.time() - start_time,
                error_message=f"HTTP {status_code}: {code}",
            )
        except BotoCoreError as e:
            logger.debug("SDK head_bucket failed: %s", e)
            return CheckResult(
                check_name=self.name,
                status=ResultStatus.ERROR,
                duration_seconds=time.time() - start_time,
                error_message=f"request failed: {e}",
            )

        return CheckResult(
            check_name=self.name,
            status=ResultStatus.PASS,
            duration_seconds=time.time() - start_time,
        )
