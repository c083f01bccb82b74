"""Error types for the S3 bucket tester.

``ConfigurationError`` aborts a run before any request is signed.
``RemoteRejection`` describes a non-2xx answer from the provider; it is
a value reported as a failed check, not an exception.
"""

from dataclasses import dataclass
from typing import Optional, Union
from xml.etree import ElementTree as ET

# Number of body characters kept when the error body is not S3 XML
BODY_EXCERPT_LENGTH = 256


class S3TesterError(Exception):
    """Base exception for the S3 bucket tester."""

    pass


class ConfigurationError(S3TesterError):
    """Raised when the run configuration is invalid."""

    pass


@dataclass(frozen=True)
class RemoteRejection:
    """A non-2xx response from the storage provider."""

    status_code: int
    code: Optional[str] = None
    message: Optional[str] = None
    resource: Optional[str] = None
    request_id: Optional[str] = None
    body_excerpt: str = ""

    @property
    def summary(self) -> str:
        if self.code:
            return f"{self.code}: {self.message or ''}".rstrip()
        return f"HTTP {self.status_code}: {self.body_excerpt}".rstrip()


def _findtext(element: ET.Element, tag: str) -> Optional[str]:
    """Find a child element, ignoring any XML namespace."""
    for child in element:
        if child.tag == tag or child.tag.endswith("}" + tag):
            return child.text
    return None


def parse_error_response(
    status_code: int,
    body: Union[bytes, str, None],
) -> RemoteRejection:
    """Parse an S3 error body into a RemoteRejection.

    Args:
        status_code: HTTP status of the response.
        body: Raw response body. HEAD responses usually carry none.

    Returns:
        RemoteRejection with code/message filled when the body is
        ``<Error>`` XML, otherwise with a raw body excerpt.
    """
    if isinstance(body, bytes):
        text = body.decode("utf-8", errors="replace")
    else:
        text = body or ""

    excerpt = text.strip()[:BODY_EXCERPT_LENGTH]

    if not text.strip():
        return RemoteRejection(status_code=status_code)

    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return RemoteRejection(status_code=status_code, body_excerpt=excerpt)

    if not (root.tag == "Error" or root.tag.endswith("}Error")):
        return RemoteRejection(status_code=status_code, body_excerpt=excerpt)

    return RemoteRejection(
        status_code=status_code,
        code=_findtext(root, "Code"),
        message=_findtext(root, "Message"),
        resource=_findtext(root, "Resource"),
        request_id=_findtext(root, "RequestId"),
        body_excerpt=excerpt,
    )
