"""Bucket authentication check.

Builds the signed HEAD request for the bucket root, sends it with httpx
and interprets the response. Remote rejections are reported as a failed
check and never retried.
"""

import logging
import time
from datetime import datetime
from typing import Optional

import httpx

from s3tester.config import ResolvedConfig
from s3tester.errors import parse_error_response
from s3tester.models import AuthResult, CheckResult, ResultStatus, SignedRequest
from s3tester.providers import detect_from_server_header
from s3tester.signing import build_signed_request, redact
from s3tester.timeutils import utcnow

logger = logging.getLogger(__name__)

AUTH_CHECK_NAME = "Bucket Authentication Check"


def build_http_client(config: ResolvedConfig) -> httpx.Client:
    """Create an httpx client honouring the TLS and redirect settings."""
    return httpx.Client(
        verify=not config.insecure,
        timeout=float(config.timeout),
        follow_redirects=config.follow_redirects,
        max_redirects=config.max_redirects,
    )


class AuthChecker:
    """Checks that the bucket exists and the credentials are accepted.

    Args:
        config: Validated configuration.
        http_client: Optional client to use instead of building one.
    """

    name = AUTH_CHECK_NAME

    def __init__(
        self,
        config: ResolvedConfig,
        http_client: Optional[httpx.Client] = None,
    ):
        self.config = config
        self._http_client = http_client

    def build_request(self, timestamp: datetime) -> SignedRequest:
        return build_signed_request(
            target=self.config.target,
            credentials=self.config.credentials,
            region=self.config.region,
            auth_type=self.config.auth_type,
            timestamp=timestamp,
        )

    def check(self, timestamp: Optional[datetime] = None) -> CheckResult:
        """Run the check.

        Args:
            timestamp: Signing time. Captured from the clock once when not
                given.

        Returns:
            CheckResult; PASS on 2xx, FAIL on any other status, ERROR when
            the request could not be sent.
        """
        start_time = time.time()
        request = self.build_request(timestamp or utcnow())

        logger.debug("Endpoint: %s", self.config.target.endpoint_host)
        logger.debug("Bucket: %s", self.config.bucket)
        logger.debug("Auth Type: %s", self.config.auth_type.value.upper())
        logger.debug("Addressing Style: %s", self.config.style.value)

        client = self._http_client or build_http_client(self.config)
        try:
            response = client.request(
                request.method,
                request.url,
                headers=request.headers,
            )
        except httpx.HTTPError as e:
            logger.debug("Request failed: %s", redact(str(e)))
            return CheckResult(
                check_name=self.name,
                status=ResultStatus.ERROR,
                duration_seconds=time.time() - start_time,
                error_message=f"request failed: {redact(str(e))}",
            )
        finally:
            if self._http_client is None:
                client.close()

        elapsed = time.time() - start_time
        status_code = response.status_code

        logger.debug("Response: HTTP %d", status_code)
        for name, value in response.headers.items():
            logger.debug("%s: %s", name, value)

        details = AuthResult(
            success=200 <= status_code < 300,
            auth_type=self.config.auth_type.value.upper(),
            status_code=status_code,
            response_time_ms=int(elapsed * 1000),
            endpoint=self.config.target.url,
            provider=detect_from_server_header(response.headers.get("Server", "")),
        )

        if status_code == 200:
            details.bucket_exists = True
            details.access_granted = True
            logger.debug("Bucket exists and access is granted")
        elif status_code == 403:
            details.bucket_exists = True
            logger.debug("Bucket exists but access is denied (403)")
        elif status_code == 404:
            logger.debug("Bucket not found (404)")
        else:
            logger.debug("Unexpected status code: %d", status_code)

        error_message = None
        status = ResultStatus.PASS
        if status_code >= 400:
            rejection = parse_error_response(status_code, response.content)
            error_message = rejection.summary
            status = ResultStatus.FAIL
            logger.debug("Error response: %s", error_message)
        elif not details.success:
            error_message = f"unexpected HTTP {status_code}"
            status = ResultStatus.FAIL

        return CheckResult(
            check_name=self.name,
            status=status,
            duration_seconds=elapsed,
            error_message=error_message,
            details=details,
        )
