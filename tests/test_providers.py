"""Tests for the provider registry and detection."""

import pytest

from s3tester.models import ACLSupport, PolicySupport
from s3tester.providers import (
    CUSTOM_PROVIDER,
    PROVIDER_PROFILES,
    PROVIDER_TEMPLATES,
    UNKNOWN_SERVER,
    detect,
    detect_from_server_header,
    is_shortcut,
    lookup,
    template_endpoint,
)


class TestLookup:
    """Tests for lookup function."""

    def test_known_provider(self):
        profile = lookup("cloudflare")

        assert profile.name == "Cloudflare R2"
        assert profile.path_style is False
        assert profile.virtual_hosted is True
        assert profile.policy_support is PolicySupport.NONE
        assert profile.acl_support is ACLSupport.NONE

    def test_unknown_provider_falls_back_to_custom(self):
        profile = lookup("not-a-provider")

        assert profile.key == CUSTOM_PROVIDER
        assert profile.policy_support is PolicySupport.UNKNOWN
        assert profile.acl_support is ACLSupport.UNKNOWN

    def test_aws_marks_path_style_deprecated(self):
        profile = lookup("aws")

        assert profile.path_style is True
        assert profile.path_style_deprecated is True

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PROVIDER_PROFILES["aws"] = lookup("custom")

    def test_all_known_providers_present(self):
        assert set(PROVIDER_PROFILES) == {
            "aws", "wasabi", "b2", "ibm", "do", "minio", "cloudflare",
            "hetzner", "ceph", "dell", "netapp", "custom",
        }


class TestDetect:
    """Tests for detect function."""

    @pytest.mark.parametrize("endpoint,expected", [
        ("https://s3.us-west-2.amazonaws.com", "aws"),
        ("s3.eu-central-1.wasabisys.com", "wasabi"),
        ("https://s3.us-west-004.backblazeb2.com", "b2"),
        ("nyc3.digitaloceanspaces.com", "do"),
        ("s3.us-south.cloud-object-storage.appdomain.cloud", "ibm"),
        ("https://abc123.r2.cloudflarestorage.com", "cloudflare"),
        ("fsn1.your-objectstorage.com", "hetzner"),
        ("http://minio.local:9000", "minio"),
        ("https://radosgw.example.org", "ceph"),
        ("https://object.ecstestdrive.com", "dell"),
        ("https://storagegrid.corp.example", "netapp"),
    ])
    def test_known_endpoints(self, endpoint: str, expected: str):
        assert detect(endpoint) == expected

    def test_case_insensitive(self):
        assert detect("HTTPS://S3.AMAZONAWS.COM") == "aws"

    def test_unknown_endpoint(self):
        assert detect("https://storage.example.com") == CUSTOM_PROVIDER

    def test_first_match_wins(self):
        """An endpoint matching several rules resolves to the earliest."""
        assert detect("minio.amazonaws.com") == "aws"


class TestDetectFromServerHeader:
    """Tests for detect_from_server_header."""

    def test_amazon(self):
        assert detect_from_server_header("AmazonS3") == "AWS S3"

    def test_minio(self):
        assert detect_from_server_header("MinIO") == "MinIO"

    def test_unknown(self):
        assert detect_from_server_header("nginx") == UNKNOWN_SERVER
        assert detect_from_server_header("") == UNKNOWN_SERVER


class TestTemplates:
    """Tests for provider shortcut templates."""

    def test_is_shortcut(self):
        assert is_shortcut("aws")
        assert is_shortcut("b2-legacy")
        assert not is_shortcut("https://s3.amazonaws.com")

    def test_virtual_hosted_template_drops_bucket_label(self):
        assert template_endpoint("aws", "eu-west-1") == "s3.eu-west-1.amazonaws.com"

    def test_legacy_template_drops_bucket_path(self):
        assert template_endpoint("wasabi-legacy", "us-east-1") == "s3.us-east-1.wasabisys.com"

    def test_both_aws_templates_share_endpoint(self):
        assert template_endpoint("aws", "us-east-1") == template_endpoint("aws-legacy", "us-east-1")

    def test_region_label_template(self):
        assert template_endpoint("do", "nyc3") == "nyc3.digitaloceanspaces.com"

    def test_unknown_shortcut(self):
        with pytest.raises(KeyError):
            template_endpoint("nope", "r")

    def test_every_template_has_description(self):
        for entry in PROVIDER_TEMPLATES.values():
            assert entry["template"]
            assert entry["description"]
