"""Request signing for bucket HEAD checks.

Implements AWS Signature Version 4 (header based) and Version 2 (query
string based) over a ResolvedRequestTarget. Every function takes the
timestamp as an argument; nothing here reads the clock.
"""

import hashlib
import hmac
import logging
import re
from datetime import datetime
from urllib.parse import urlencode

from s3tester import __version__
from s3tester.models import (
    AddressingStyle,
    AuthType,
    Credentials,
    ResolvedRequestTarget,
    SignedRequest,
)
from s3tester.timeutils import to_amz_date, to_rfc1123, to_signer_date, to_unix_expiry

logger = logging.getLogger(__name__)

SIGN_V4_ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE_NAME = "s3"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
SIGNED_HEADERS = "host;x-amz-content-sha256;x-amz-date"

# SigV2 query signatures are valid for 15 minutes
SIGV2_EXPIRY_SECONDS = 15 * 60

USER_AGENT = f"s3tester/{__version__}"

_SIGNATURE_REGEX = re.compile(r"(Signature=)[^,&\s]+")


def _sha256_hex(data: str) -> str:
    """Return hex SHA-256 digest of given string."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def _hmac_sha256(key: bytes, data: str) -> bytes:
    """Return HMAC-SHA256 digest of given key and data."""
    return hmac.new(key, data.encode("utf-8"), hashlib.sha256).digest()


def credential_scope(timestamp: datetime, region: str) -> str:
    """Get scope string."""
    return f"{to_signer_date(timestamp)}/{region}/{SERVICE_NAME}/aws4_request"


def canonical_request_v4(
    method: str,
    target: ResolvedRequestTarget,
    amz_date: str,
) -> str:
    """Build the SigV4 canonical request for a bucket-root request.

    The canonical URI is the resolved path, so it is already correct for
    the addressing style. The header block covers exactly ``host``,
    ``x-amz-content-sha256`` and ``x-amz-date``.
    """
    canonical_headers = (
        f"host:{target.host_header}\n"
        f"x-amz-content-sha256:{UNSIGNED_PAYLOAD}\n"
        f"x-amz-date:{amz_date}\n"
    )
    # CanonicalRequest =
    #   HTTPRequestMethod + '\n' +
    #   CanonicalURI + '\n' +
    #   CanonicalQueryString + '\n' +
    #   CanonicalHeaders + '\n' +
    #   SignedHeaders + '\n' +
    #   HexEncode(Hash(RequestPayload))
    return "\n".join([
        method,
        target.path or "/",
        "",
        canonical_headers,
        SIGNED_HEADERS,
        UNSIGNED_PAYLOAD,
    ])


def string_to_sign_v4(amz_date: str, scope: str, canonical_request: str) -> str:
    """Get string-to-sign."""
    return (
        f"{SIGN_V4_ALGORITHM}\n{amz_date}\n{scope}\n"
        f"{_sha256_hex(canonical_request)}"
    )


def signing_key_v4(secret_key: str, date_stamp: str, region: str) -> bytes:
    """Derive the SigV4 signing key through the four-step HMAC chain."""
    date_key = _hmac_sha256(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    date_region_key = _hmac_sha256(date_key, region)
    date_region_service_key = _hmac_sha256(date_region_key, SERVICE_NAME)
    return _hmac_sha256(date_region_service_key, "aws4_request")


def sign_v4(
    target: ResolvedRequestTarget,
    credentials: Credentials,
    region: str,
    timestamp: datetime,
    method: str = "HEAD",
) -> dict[str, str]:
    """Sign a bucket-root request with AWS Signature Version 4.

    Args:
        target: Resolved request target.
        credentials: Access key pair.
        region: Signing region.
        timestamp: Request time, captured once by the caller.
        method: HTTP method.

    Returns:
        Headers to add: ``X-Amz-Date``, ``X-Amz-Content-Sha256`` and
        ``Authorization``.
    """
    amz_date = to_amz_date(timestamp)
    scope = credential_scope(timestamp, region)

    canonical_request = canonical_request_v4(method, target, amz_date)
    string_to_sign = string_to_sign_v4(amz_date, scope, canonical_request)
    signing_key = signing_key_v4(
        credentials.secret_key, to_signer_date(timestamp), region,
    )
    signature = hmac.new(
        signing_key, string_to_sign.encode("utf-8"), hashlib.sha256,
    ).hexdigest()

    logger.debug("SigV4 canonical request:\n%s", canonical_request)
    logger.debug("SigV4 string to sign:\n%s", string_to_sign)

    authorization = (
        f"{SIGN_V4_ALGORITHM} Credential={credentials.access_key}/{scope}, "
        f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
    )
    return {
        "X-Amz-Date": amz_date,
        "X-Amz-Content-Sha256": UNSIGNED_PAYLOAD,
        "Authorization": authorization,
    }


def canonicalized_resource_v2(
    target: ResolvedRequestTarget,
    bucket: str,
    style: AddressingStyle,
) -> str:
    """Build the SigV2 canonicalized resource.

    SigV2 always names the bucket in the resource path. Path-style
    targets already carry it; virtual-hosted targets get ``/<bucket>``
    prepended.
    """
    if style is AddressingStyle.PATH_STYLE:
        return target.path or "/"

    resource = f"/{bucket}"
    if target.path and target.path != "/":
        resource += target.path
    return resource


def string_to_sign_v2(method: str, date: str, resource: str) -> str:
    """Get SigV2 canonical string with empty Content-MD5 and Content-Type."""
    return f"{method}\n\n\n{date}\n{resource}"


def sign_v2(
    target: ResolvedRequestTarget,
    bucket: str,
    credentials: Credentials,
    style: AddressingStyle,
    timestamp: datetime,
    method: str = "HEAD",
) -> dict[str, str]:
    """Sign a bucket-root request with AWS Signature Version 2.

    The signature is HMAC-SHA256, not the HMAC-SHA1 of the published
    SigV2 scheme. Providers tested with this tool verify against that
    digest, so it is kept as is.

    Returns:
        Query parameters to append, in order: ``AWSAccessKeyId``,
        ``Signature``, ``Expires``.
    """
    date = to_rfc1123(timestamp)
    resource = canonicalized_resource_v2(target, bucket, style)
    canonical_string = string_to_sign_v2(method, date, resource)

    signature = hmac.new(
        credentials.secret_key.encode("utf-8"),
        canonical_string.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

    logger.debug("SigV2 canonical string:\n%s", canonical_string)

    return {
        "AWSAccessKeyId": credentials.access_key,
        "Signature": signature,
        "Expires": str(to_unix_expiry(timestamp, SIGV2_EXPIRY_SECONDS)),
    }


def append_query(url: str, params: dict[str, str]) -> str:
    """Append URL-encoded ``params`` to ``url``, extending any existing query."""
    query = urlencode(params)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def redact(value: str) -> str:
    """Elide signature values from a header value or URL."""
    return _SIGNATURE_REGEX.sub(r"\1<redacted>", value)


def build_signed_request(
    target: ResolvedRequestTarget,
    credentials: Credentials,
    region: str,
    auth_type: AuthType,
    timestamp: datetime,
    method: str = "HEAD",
    user_agent: str = USER_AGENT,
) -> SignedRequest:
    """Build the authenticated request description for a bucket check.

    ``Host``, ``User-Agent`` and ``Date`` are always set; then exactly one
    signer is applied using the same timestamp.
    """
    headers = {
        "Host": target.host_header,
        "User-Agent": user_agent,
        "Date": to_rfc1123(timestamp),
    }
    url = target.url

    if auth_type is AuthType.SIGV2:
        params = sign_v2(target, target.bucket, credentials, target.style, timestamp, method)
        url = append_query(url, params)
    else:
        headers.update(sign_v4(target, credentials, region, timestamp, method))

    request = SignedRequest(method=method, url=url, headers=headers)
    logger.debug("%s %s", method, redact(url))
    for name, value in headers.items():
        logger.debug("%s: %s", name, redact(value))
    return request
