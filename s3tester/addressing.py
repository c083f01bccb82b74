"""Addressing resolution for bucket-root requests.

Provider shortcuts and direct endpoints both pass through ``resolve``,
which yields the scheme, host, path and Host header of the request for
the requested addressing style.
"""

import ipaddress
import logging
from urllib.parse import urlsplit

from s3tester.errors import ConfigurationError
from s3tester.models import AddressingStyle, ResolvedRequestTarget
from s3tester.providers import is_shortcut, template_endpoint

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"https": 443, "http": 80}


def add_scheme(endpoint: str, insecure: bool = False) -> str:
    """Prefix ``endpoint`` with a protocol when it has none.

    ``http://`` is used in insecure mode, ``https://`` otherwise.
    """
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    return ("http://" if insecure else "https://") + endpoint


def clean_host(host: str, scheme: str) -> str:
    """Remove the default port for ``scheme`` from ``host``."""
    if scheme == "https" and host.endswith(":443"):
        return host[:-4]
    if scheme == "http" and host.endswith(":80"):
        return host[:-3]
    return host


def is_ip_or_localhost(hostname: str) -> bool:
    """True for IP literals and ``localhost``, which cannot carry a bucket label."""
    name = hostname.strip("[]")
    if name.lower() == "localhost":
        return True
    try:
        ipaddress.ip_address(name)
    except ValueError:
        return False
    return True


def split_host_port(host: str) -> tuple[str, str]:
    """Split ``host[:port]`` into hostname and port text (possibly empty)."""
    if host.startswith("["):
        hostname, _, rest = host.partition("]")
        return hostname + "]", rest[1:] if rest.startswith(":") else ""
    hostname, _, port = host.partition(":")
    return hostname, port


def resolve(
    endpoint: str,
    bucket: str,
    style: AddressingStyle = AddressingStyle.VIRTUAL_HOSTED,
    insecure: bool = False,
    region: str = "us-east-1",
) -> ResolvedRequestTarget:
    """Resolve an endpoint and bucket into a request target.

    Virtual-hosted style prepends ``<bucket>.`` unless the host already
    starts with it. Path-style keeps the host as given. Any path on the
    endpoint is replaced by the bucket-root path, so resolving an already
    resolved URL with the same style returns the same target.

    Args:
        endpoint: Endpoint URL or host, with or without scheme and port,
            or a provider shortcut.
        bucket: Bucket name.
        style: Addressing style to apply.
        insecure: Default to ``http://`` when the endpoint has no scheme.
        region: Region substituted into a provider shortcut template.

    Returns:
        The resolved target.

    Raises:
        ConfigurationError: If the bucket is empty or the endpoint cannot
            be parsed.
    """
    if not bucket:
        raise ConfigurationError("bucket is required")

    if is_shortcut(endpoint):
        endpoint = template_endpoint(endpoint, region)

    url = add_scheme(endpoint.strip(), insecure)
    try:
        parts = urlsplit(url)
        explicit_port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"invalid endpoint URL {endpoint!r}: {e}") from e
    scheme = parts.scheme.lower()

    netloc = parts.netloc.rpartition("@")[2]
    host = clean_host(netloc.rstrip(":"), scheme)
    hostname, _ = split_host_port(host)

    if not hostname or hostname == "[]":
        raise ConfigurationError(f"invalid endpoint URL {endpoint!r}: empty host")

    port = explicit_port or DEFAULT_PORTS.get(scheme, 443)

    if style is AddressingStyle.PATH_STYLE:
        target = ResolvedRequestTarget(
            scheme=scheme,
            endpoint_host=host,
            host=host,
            path=f"/{bucket}",
            bucket=bucket,
            port=port,
            style=style,
        )
    else:
        label = bucket + "."
        if hostname.startswith(label):
            endpoint_host = host[len(label):]
        else:
            endpoint_host = host
        target = ResolvedRequestTarget(
            scheme=scheme,
            endpoint_host=endpoint_host,
            host=f"{bucket}.{endpoint_host}",
            path="/",
            bucket=bucket,
            port=port,
            style=style,
        )

    logger.debug(
        "Resolved %s (%s) to %s", endpoint, style.value, target.url,
    )
    return target
