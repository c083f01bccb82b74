"""Configuration loading and validation for the S3 bucket tester.

Settings are merged from, lowest to highest priority:
1. Built-in defaults
2. A JSON config file (``--config``)
3. Environment variables (for CI/CD)
4. Command-line flags

Environment Variable Format:
    S3TESTER_ENDPOINT=https://s3.example.com
    S3TESTER_PROVIDER=aws
    S3TESTER_BUCKET=my-bucket
    S3TESTER_REGION=us-east-1
    S3TESTER_ACCESS_KEY=xxx
    S3TESTER_SECRET_KEY=xxx
    S3TESTER_AUTH_TYPE=sigv4

Example config.json:
    {
        "endpoint": "s3.us-west-000.backblazeb2.com",
        "bucket": "my-bucket",
        "region": "us-west-000",
        "access_key": "xxx",
        "secret_key": "xxx",
        "path_style": true
    }
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit, urlunsplit

from s3tester.addressing import add_scheme, is_ip_or_localhost, resolve, split_host_port
from s3tester.capabilities import FEATURE_ACL, FEATURE_POLICY, capability_warnings
from s3tester.errors import ConfigurationError
from s3tester.models import (
    AddressingStyle,
    AuthType,
    Credentials,
    ProviderProfile,
    ResolvedRequestTarget,
)
from s3tester.providers import detect, is_shortcut, lookup, template_endpoint

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
SUPPORTED_FEATURES = (FEATURE_POLICY, FEATURE_ACL)
MASKED_SECRET = "********"

# Environment variable -> CheckConfig field
ENV_VARS = {
    "S3TESTER_ENDPOINT": "endpoint",
    "S3TESTER_PROVIDER": "provider",
    "S3TESTER_BUCKET": "bucket",
    "S3TESTER_REGION": "region",
    "S3TESTER_ACCESS_KEY": "access_key",
    "S3TESTER_SECRET_KEY": "secret_key",
    "S3TESTER_AUTH_TYPE": "auth_type",
}


@dataclass
class CheckConfig:
    """Raw, unvalidated settings for one check run."""

    endpoint: str = ""
    provider: str = ""
    bucket: str = ""
    region: str = DEFAULT_REGION
    access_key: str = ""
    secret_key: str = field(default="", repr=False)
    auth_type: str = "sigv4"
    port: int = 0
    insecure: bool = False
    timeout: int = 30
    follow_redirects: bool = True
    max_redirects: int = 10
    virtual_hosted: bool = False
    path_style: bool = False
    features: list[str] = field(default_factory=list)
    compare_sdk: bool = False


@dataclass(frozen=True)
class ResolvedConfig:
    """Validated settings with the request target already resolved."""

    target: ResolvedRequestTarget
    credentials: Credentials
    region: str
    auth_type: AuthType
    style: AddressingStyle
    provider: ProviderProfile
    insecure: bool = False
    timeout: int = 30
    follow_redirects: bool = True
    max_redirects: int = 10
    features: tuple[str, ...] = ()
    compare_sdk: bool = False

    @property
    def bucket(self) -> str:
        return self.target.bucket

    def to_dict(self) -> dict[str, Any]:
        """Render for reports. The secret key is always masked."""
        return {
            "endpoint": self.target.url,
            "bucket": self.bucket,
            "region": self.region,
            "access_key": self.credentials.access_key,
            "secret_key": MASKED_SECRET,
            "auth_type": self.auth_type.value,
            "addressing_style": self.style.value,
            "provider": self.provider.key,
            "provider_name": self.provider.name,
            "port": self.target.port,
            "insecure": self.insecure,
            "timeout": self.timeout,
            "follow_redirects": self.follow_redirects,
            "max_redirects": self.max_redirects,
            "features": list(self.features),
        }


_FIELD_NAMES = {f.name for f in fields(CheckConfig)}
_INT_FIELDS = {"port", "timeout", "max_redirects"}
_BOOL_FIELDS = {"insecure", "follow_redirects", "virtual_hosted", "path_style", "compare_sdk"}


def _coerce(settings: Mapping[str, Any], source: str) -> dict[str, Any]:
    """Check field names and convert int/bool values from a settings source."""
    result: dict[str, Any] = {}
    for key, value in settings.items():
        if key not in _FIELD_NAMES:
            raise ConfigurationError(f"Unknown setting '{key}' in {source}")

        if key in _INT_FIELDS:
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Setting '{key}' in {source} must be an integer"
                ) from e
        elif key in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise ConfigurationError(f"Setting '{key}' in {source} must be true or false")
        elif key == "features":
            if not isinstance(value, list) or not all(isinstance(f, str) for f in value):
                raise ConfigurationError(
                    f"Setting 'features' in {source} must be a list of strings"
                )
        elif not isinstance(value, str):
            raise ConfigurationError(f"Setting '{key}' in {source} must be a string")

        result[key] = value
    return result


def load_from_json(config_path: str) -> dict[str, Any]:
    """Load settings from a JSON file.

    Args:
        config_path: Path to the config file.

    Returns:
        Dictionary of CheckConfig field values found in the file.

    Raises:
        ConfigurationError: If the file doesn't exist, contains invalid
                    JSON, or has unknown or mistyped settings.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a JSON object")

    return _coerce(data, config_path)


def load_from_env() -> dict[str, Any]:
    """Load settings from ``S3TESTER_*`` environment variables.

    Empty variables are ignored.
    """
    settings: dict[str, Any] = {}
    for env_key, field_name in ENV_VARS.items():
        value = os.environ.get(env_key)
        if value:
            settings[field_name] = value
    return settings


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> CheckConfig:
    """Merge defaults, config file, environment and explicit overrides.

    ``None`` values in ``overrides`` are treated as "not given". An
    endpoint that names a built-in provider shortcut is moved to
    ``provider``.

    Raises:
        ConfigurationError: If the config file cannot be loaded.
    """
    settings: dict[str, Any] = {}

    if config_path:
        settings.update(load_from_json(config_path))

    settings.update(load_from_env())

    if overrides:
        settings.update(
            _coerce({k: v for k, v in overrides.items() if v is not None}, "arguments")
        )

    endpoint = settings.get("endpoint", "")
    if endpoint and is_shortcut(endpoint):
        settings["provider"] = endpoint
        settings["endpoint"] = ""

    return CheckConfig(**settings)


def _apply_port(endpoint: str, port: int) -> str:
    """Add ``port`` to an endpoint URL that has no explicit port."""
    try:
        parts = urlsplit(endpoint)
    except ValueError as e:
        raise ConfigurationError(f"invalid endpoint URL {endpoint!r}: {e}") from e
    _, port_text = split_host_port(parts.netloc.rpartition("@")[2])
    if port_text:
        return endpoint
    return urlunsplit(parts._replace(netloc=f"{parts.netloc}:{port}"))


def validate_config(config: CheckConfig) -> tuple[ResolvedConfig, list[str]]:
    """Validate raw settings and resolve the request target.

    Args:
        config: Raw settings.

    Returns:
        Tuple of (ResolvedConfig, warnings). Warnings never block the run.

    Raises:
        ConfigurationError: On the first invalid setting.
    """
    if not config.endpoint and not config.provider:
        raise ConfigurationError("endpoint or provider is required")
    if not config.bucket:
        raise ConfigurationError("bucket is required")
    if not config.access_key:
        raise ConfigurationError("access-key is required")
    if not config.secret_key:
        raise ConfigurationError("secret-key is required")

    endpoint = config.endpoint
    if not endpoint:
        try:
            endpoint = template_endpoint(config.provider, config.region)
        except KeyError:
            raise ConfigurationError(f"unknown provider: {config.provider}") from None

    endpoint = add_scheme(endpoint, config.insecure)

    try:
        auth_type = AuthType(config.auth_type.lower())
    except ValueError:
        raise ConfigurationError("invalid auth-type: must be 'sigv4' or 'sigv2'") from None

    if config.port < 0 or config.port > 65535:
        raise ConfigurationError("invalid port: must be between 0 and 65535 (0 = auto-detect)")

    if config.timeout < 1:
        raise ConfigurationError("invalid timeout: must be greater than 0")

    if config.max_redirects < 0:
        raise ConfigurationError("invalid max-redirects: must be 0 or greater")

    if config.virtual_hosted and config.path_style:
        raise ConfigurationError("--virtual-hosted and --path-style are mutually exclusive")
    style = AddressingStyle.PATH_STYLE if config.path_style else AddressingStyle.VIRTUAL_HOSTED

    if not all(isinstance(f, str) for f in config.features):
        raise ConfigurationError("invalid features: must be a list of strings")
    features = tuple(dict.fromkeys(f.lower() for f in config.features))
    for feature in features:
        if feature not in SUPPORTED_FEATURES:
            raise ConfigurationError(
                f"unknown feature '{feature}': must be one of {', '.join(SUPPORTED_FEATURES)}"
            )

    if config.port:
        endpoint = _apply_port(endpoint, config.port)

    target = resolve(endpoint, config.bucket, style, config.insecure)
    provider = lookup(detect(target.endpoint_host))

    warnings = capability_warnings(style, features, provider)
    hostname, _ = split_host_port(target.endpoint_host)
    if style is AddressingStyle.VIRTUAL_HOSTED and is_ip_or_localhost(hostname):
        warnings.append(
            f"Warning: virtual-hosted addressing puts the bucket in the host name, "
            f"which {hostname} cannot resolve. Try --path-style."
        )

    logger.debug("Detected provider: %s", provider.name)
    for warning in warnings:
        logger.debug("Capability warning: %s", warning)

    resolved = ResolvedConfig(
        target=target,
        credentials=Credentials(config.access_key, config.secret_key),
        region=config.region,
        auth_type=auth_type,
        style=style,
        provider=provider,
        insecure=config.insecure,
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        max_redirects=config.max_redirects,
        features=features,
        compare_sdk=config.compare_sdk,
    )
    return resolved, warnings
