"""Provider capability registry, endpoint shortcuts and provider detection.

All tables in this module are constants built once at import time and
never mutated.
"""

from types import MappingProxyType
from typing import Mapping

from s3tester.models import ACLSupport, PolicySupport, ProviderProfile

CUSTOM_PROVIDER = "custom"

# Built-in endpoint shortcuts usable with --endpoint
PROVIDER_TEMPLATES: Mapping[str, dict[str, str]] = MappingProxyType({
    "aws": {
        "template": "<bucket>.s3.<region>.amazonaws.com",
        "description": "AWS S3 (virtual-hosted, default)",
    },
    "aws-legacy": {
        "template": "s3.<region>.amazonaws.com/<bucket>",
        "description": "AWS S3 (path-style, legacy)",
    },
    "wasabi": {
        "template": "<bucket>.s3.<region>.wasabisys.com",
        "description": "Wasabi (virtual-hosted)",
    },
    "wasabi-legacy": {
        "template": "s3.<region>.wasabisys.com/<bucket>",
        "description": "Wasabi (path-style, legacy)",
    },
    "b2": {
        "template": "<bucket>.s3.<region>.backblazeb2.com",
        "description": "Backblaze B2 (virtual-hosted)",
    },
    "b2-legacy": {
        "template": "s3.<region>.backblazeb2.com/<bucket>",
        "description": "Backblaze B2 (path-style, legacy)",
    },
    "ibm": {
        "template": "<bucket>.<region>.objectstorage.cloud.ibm.com",
        "description": "IBM Cloud Object Storage (virtual-hosted)",
    },
    "do": {
        "template": "<bucket>.<region>.digitaloceanspaces.com",
        "description": "DigitalOcean Spaces (virtual-hosted)",
    },
})

_PROFILES = (
    ProviderProfile(
        key="aws",
        name="AWS S3",
        policy_support=PolicySupport.FULL,
        acl_support=ACLSupport.FULL,
        virtual_hosted=True,
        path_style=True,
        notes="Path-style requests are deprecated; AWS recommends virtual-hosted addressing.",
        path_style_deprecated=True,
    ),
    ProviderProfile(
        key="wasabi",
        name="Wasabi",
        policy_support=PolicySupport.FULL,
        acl_support=ACLSupport.FULL,
        virtual_hosted=True,
        path_style=True,
    ),
    ProviderProfile(
        key="b2",
        name="Backblaze B2",
        policy_support=PolicySupport.NONE,
        acl_support=ACLSupport.SYNTHETIC_ONLY,
        virtual_hosted=True,
        path_style=True,
        notes="Buckets are either allPrivate or allPublic; bucket policies are not supported.",
    ),
    ProviderProfile(
        key="ibm",
        name="IBM Cloud Object Storage",
        policy_support=PolicySupport.IAM_ONLY,
        acl_support=ACLSupport.FULL,
        virtual_hosted=True,
        path_style=True,
        notes="Bucket access is governed by IBM Cloud IAM policies.",
    ),
    ProviderProfile(
        key="do",
        name="DigitalOcean Spaces",
        policy_support=PolicySupport.PARTIAL,
        acl_support=ACLSupport.SYNTHETIC_ONLY,
        virtual_hosted=True,
        path_style=True,
        notes="Only a subset of bucket policy conditions is honoured; ACLs are private or public-read.",
    ),
    ProviderProfile(
        key="minio",
        name="MinIO",
        policy_support=PolicySupport.FULL,
        acl_support=ACLSupport.NONE,
        virtual_hosted=True,
        path_style=True,
        notes="Virtual-hosted addressing requires MINIO_DOMAIN on the server; ACLs are not supported.",
    ),
    ProviderProfile(
        key="cloudflare",
        name="Cloudflare R2",
        policy_support=PolicySupport.NONE,
        acl_support=ACLSupport.NONE,
        virtual_hosted=True,
        path_style=False,
        notes="Access is controlled by API token scopes, not bucket policies or ACLs.",
    ),
    ProviderProfile(
        key="hetzner",
        name="Hetzner Object Storage",
        policy_support=PolicySupport.PARTIAL,
        acl_support=ACLSupport.SYNTHETIC_ONLY,
        virtual_hosted=True,
        path_style=True,
        notes="Bucket policies support a limited set of actions; ACLs are canned only.",
    ),
    ProviderProfile(
        key="ceph",
        name="Ceph RADOS Gateway",
        policy_support=PolicySupport.FULL,
        acl_support=ACLSupport.FULL,
        virtual_hosted=True,
        path_style=True,
        notes="Virtual-hosted addressing requires rgw_dns_name on the gateway.",
    ),
    ProviderProfile(
        key="dell",
        name="Dell ECS",
        policy_support=PolicySupport.FULL,
        acl_support=ACLSupport.FULL,
        virtual_hosted=True,
        path_style=True,
    ),
    ProviderProfile(
        key="netapp",
        name="NetApp StorageGRID",
        policy_support=PolicySupport.FULL,
        acl_support=ACLSupport.SYNTHETIC_ONLY,
        virtual_hosted=True,
        path_style=True,
        notes="Bucket and group policies are supported; ACLs are accepted but only partially enforced.",
    ),
    ProviderProfile(
        key=CUSTOM_PROVIDER,
        name="Custom S3-compatible endpoint",
        policy_support=PolicySupport.UNKNOWN,
        acl_support=ACLSupport.UNKNOWN,
        virtual_hosted=False,
        path_style=False,
    ),
)

PROVIDER_PROFILES: Mapping[str, ProviderProfile] = MappingProxyType(
    {profile.key: profile for profile in _PROFILES}
)

# Ordered (substring, provider) rules; first match wins
DETECTION_RULES: tuple[tuple[str, str], ...] = (
    ("amazonaws.com", "aws"),
    ("wasabisys.com", "wasabi"),
    ("backblazeb2.com", "b2"),
    ("digitaloceanspaces.com", "do"),
    ("objectstorage.cloud.ibm.com", "ibm"),
    ("cloud-object-storage.appdomain.cloud", "ibm"),
    ("r2.cloudflarestorage.com", "cloudflare"),
    ("cloudflare", "cloudflare"),
    ("your-objectstorage.com", "hetzner"),
    ("hetzner", "hetzner"),
    ("minio", "minio"),
    ("ceph", "ceph"),
    ("radosgw", "ceph"),
    ("ecstestdrive", "dell"),
    ("dell", "dell"),
    ("storagegrid", "netapp"),
    ("netapp", "netapp"),
)

# Server response header fragments and the provider names they indicate
SERVER_HEADER_RULES: tuple[tuple[str, str], ...] = (
    ("AmazonS3", "AWS S3"),
    ("MinIO", "MinIO"),
    ("StorageGRID", "NetApp StorageGRID"),
)

UNKNOWN_SERVER = "Unknown S3-Compatible"


def lookup(provider_id: str) -> ProviderProfile:
    """Return the capability profile for a provider identifier.

    Unrecognized identifiers get the ``custom`` profile.
    """
    return PROVIDER_PROFILES.get(provider_id, PROVIDER_PROFILES[CUSTOM_PROVIDER])


def detect(endpoint: str) -> str:
    """Infer a provider identifier from an endpoint string."""
    lowered = endpoint.lower()
    for fragment, provider_id in DETECTION_RULES:
        if fragment in lowered:
            return provider_id
    return CUSTOM_PROVIDER


def detect_from_server_header(server: str) -> str:
    """Name the provider from an HTTP ``Server`` response header."""
    for fragment, name in SERVER_HEADER_RULES:
        if fragment in server:
            return name
    return UNKNOWN_SERVER


def is_shortcut(value: str) -> bool:
    return value in PROVIDER_TEMPLATES


def template_endpoint(shortcut: str, region: str) -> str:
    """Bare endpoint host of a provider shortcut for ``region``.

    The ``<bucket>.`` host label and ``/<bucket>`` path of the template are
    dropped; the addressing style places the bucket.

    Raises:
        KeyError: If ``shortcut`` is not a built-in provider.
    """
    template = PROVIDER_TEMPLATES[shortcut]["template"]
    template = template.replace("<bucket>.", "").replace("/<bucket>", "")
    return template.replace("<region>", region)
