"""Data models for the S3 bucket tester."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ResultStatus(Enum):
    """Status of a single check."""

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


class AddressingStyle(Enum):
    """How the bucket is expressed in the request URL."""

    VIRTUAL_HOSTED = "virtual"
    PATH_STYLE = "path"


class AuthType(Enum):
    """Request signing protocol."""

    SIGV4 = "sigv4"
    SIGV2 = "sigv2"


class PolicySupport(Enum):
    """Level of bucket policy support offered by a provider."""

    FULL = "Full"
    IAM_ONLY = "IAMOnly"
    PARTIAL = "Partial"
    NONE = "None"
    UNKNOWN = "Unknown"


class ACLSupport(Enum):
    """Level of ACL support offered by a provider."""

    FULL = "Full"
    SYNTHETIC_ONLY = "SyntheticOnly"
    NONE = "None"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Credentials:
    """Access key pair used for one check.

    The secret is HMAC key material only and is kept out of ``repr``.
    """

    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class ProviderProfile:
    """Static capability description of a storage provider."""

    key: str
    name: str
    policy_support: PolicySupport
    acl_support: ACLSupport
    virtual_hosted: bool
    path_style: bool
    notes: str = ""
    path_style_deprecated: bool = False


@dataclass(frozen=True)
class ResolvedRequestTarget:
    """Scheme, host and path of the bucket-root resource.

    ``endpoint_host`` is the bare endpoint host with any default port
    removed; ``host`` is the host the request is sent to.
    """

    scheme: str
    endpoint_host: str
    host: str
    path: str
    bucket: str
    port: int
    style: AddressingStyle = AddressingStyle.VIRTUAL_HOSTED

    @property
    def host_header(self) -> str:
        return self.host

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


@dataclass
class SignedRequest:
    """Authenticated request description handed to the HTTP transport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class AuthResult:
    """Details of a bucket authentication check."""

    success: bool
    auth_type: str
    status_code: int
    response_time_ms: int
    endpoint: str
    bucket_exists: bool = False
    access_granted: bool = False
    provider: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "auth_type": self.auth_type,
            "bucket_exists": self.bucket_exists,
            "access_granted": self.access_granted,
            "status_code": self.status_code,
            "response_time_ms": self.response_time_ms,
            "provider": self.provider,
            "endpoint": self.endpoint,
        }


@dataclass
class CheckResult:
    """Result of a single check."""

    check_name: str
    status: ResultStatus
    duration_seconds: float = 0.0
    error_message: Optional[str] = None
    details: Optional[AuthResult] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_name": self.check_name,
            "status": self.status.value,
            "duration_seconds": self.duration_seconds,
            "error_message": self.error_message,
            "details": self.details.to_dict() if self.details else None,
        }
