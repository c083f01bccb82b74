"""Tests for addressing resolution."""

import pytest

from s3tester.addressing import (
    add_scheme,
    clean_host,
    is_ip_or_localhost,
    resolve,
    split_host_port,
)
from s3tester.errors import ConfigurationError
from s3tester.models import AddressingStyle

VIRTUAL = AddressingStyle.VIRTUAL_HOSTED
PATH = AddressingStyle.PATH_STYLE


class TestHelpers:
    """Tests for the small URL helpers."""

    def test_add_scheme_defaults_to_https(self):
        assert add_scheme("s3.example.com") == "https://s3.example.com"

    def test_add_scheme_insecure(self):
        assert add_scheme("s3.example.com", insecure=True) == "http://s3.example.com"

    def test_add_scheme_keeps_existing(self):
        assert add_scheme("http://s3.example.com") == "http://s3.example.com"

    def test_clean_host_strips_default_ports(self):
        assert clean_host("s3.example.com:443", "https") == "s3.example.com"
        assert clean_host("s3.example.com:80", "http") == "s3.example.com"

    def test_clean_host_keeps_other_ports(self):
        assert clean_host("s3.example.com:80", "https") == "s3.example.com:80"
        assert clean_host("s3.example.com:9000", "http") == "s3.example.com:9000"

    def test_split_host_port(self):
        assert split_host_port("example.com:9000") == ("example.com", "9000")
        assert split_host_port("example.com") == ("example.com", "")
        assert split_host_port("[::1]:9000") == ("[::1]", "9000")
        assert split_host_port("[::1]") == ("[::1]", "")

    @pytest.mark.parametrize("hostname,expected", [
        ("localhost", True),
        ("127.0.0.1", True),
        ("[::1]", True),
        ("s3.example.com", False),
    ])
    def test_is_ip_or_localhost(self, hostname: str, expected: bool):
        assert is_ip_or_localhost(hostname) is expected


class TestResolveStyles:
    """Tests for the two addressing styles."""

    def test_virtual_hosted(self):
        target = resolve("https://s3.us-east-1.amazonaws.com", "mybucket", VIRTUAL)

        assert target.scheme == "https"
        assert target.endpoint_host == "s3.us-east-1.amazonaws.com"
        assert target.host == "mybucket.s3.us-east-1.amazonaws.com"
        assert target.path == "/"
        assert target.port == 443
        assert target.url == "https://mybucket.s3.us-east-1.amazonaws.com/"

    def test_path_style(self):
        target = resolve("https://s3.us-east-1.amazonaws.com", "mybucket", PATH)

        assert target.host == "s3.us-east-1.amazonaws.com"
        assert target.path == "/mybucket"
        assert target.url == "https://s3.us-east-1.amazonaws.com/mybucket"

    def test_default_style_is_virtual_hosted(self):
        target = resolve("s3.example.com", "b")

        assert target.style is VIRTUAL
        assert target.host == "b.s3.example.com"

    def test_bucket_appears_in_exactly_one_place(self):
        """Host and path never both carry the bucket name."""
        for style in (VIRTUAL, PATH):
            target = resolve("https://s3.example.com", "mybucket", style)
            in_host = target.host.startswith("mybucket.")
            in_path = target.path == "/mybucket"
            assert in_host != in_path


class TestResolvePorts:
    """Tests for scheme and port handling."""

    def test_default_https_port_dropped(self):
        target = resolve("https://s3.example.com:443", "b", PATH)

        assert target.host == "s3.example.com"
        assert target.port == 443

    def test_default_http_port_dropped(self):
        target = resolve("http://s3.example.com:80", "b", PATH)

        assert target.host == "s3.example.com"
        assert target.port == 80

    def test_custom_port_kept(self):
        target = resolve("http://minio.local:9000", "b", VIRTUAL)

        assert target.host == "b.minio.local:9000"
        assert target.port == 9000

    def test_insecure_scheme_default(self):
        target = resolve("minio.local:9000", "b", PATH, insecure=True)

        assert target.scheme == "http"
        assert target.url == "http://minio.local:9000/b"

    def test_ipv6_literal_path_style(self):
        target = resolve("http://[::1]:9000", "b", PATH)

        assert target.host == "[::1]:9000"
        assert target.path == "/b"
        assert target.port == 9000


class TestResolveIdempotence:
    """Resolving a resolved URL again yields the same target."""

    @pytest.mark.parametrize("style", [VIRTUAL, PATH])
    def test_idempotent(self, style: AddressingStyle):
        first = resolve("https://s3.us-west-2.amazonaws.com", "mybucket", style)
        second = resolve(first.url, "mybucket", style)

        assert second == first

    def test_bucket_label_not_prepended_twice(self):
        target = resolve("mybucket.s3.eu-west-1.amazonaws.com", "mybucket", VIRTUAL)

        assert target.host == "mybucket.s3.eu-west-1.amazonaws.com"
        assert target.endpoint_host == "s3.eu-west-1.amazonaws.com"
        assert target.path == "/"

    def test_path_style_keeps_host_matching_bucket_name(self):
        """A host label equal to the bucket name is part of the endpoint."""
        target = resolve("https://storage.example.com", "storage", PATH)

        assert target.endpoint_host == "storage.example.com"
        assert target.host == "storage.example.com"
        assert target.url == "https://storage.example.com/storage"

    def test_legacy_shortcut_with_bucket_named_like_service(self):
        target = resolve("aws-legacy", "s3", PATH, region="us-east-1")

        assert target.endpoint_host == "s3.us-east-1.amazonaws.com"
        assert target.url == "https://s3.us-east-1.amazonaws.com/s3"

    def test_virtual_shortcut_path_style(self):
        target = resolve("aws", "mybucket", PATH, region="eu-west-1")

        assert target.host == "s3.eu-west-1.amazonaws.com"
        assert target.path == "/mybucket"

    def test_provider_shortcut(self):
        target = resolve("b2", "mybucket", PATH, region="us-west-004")

        assert target.url == "https://s3.us-west-004.backblazeb2.com/mybucket"

    def test_legacy_template_path_replaced(self):
        target = resolve("s3.us-east-1.wasabisys.com/mybucket", "mybucket", VIRTUAL)

        assert target.host == "mybucket.s3.us-east-1.wasabisys.com"
        assert target.path == "/"


class TestResolveErrors:
    """Tests for resolution failures."""

    def test_empty_bucket(self):
        with pytest.raises(ConfigurationError, match="bucket is required"):
            resolve("https://s3.example.com", "")

    def test_empty_host(self):
        with pytest.raises(ConfigurationError, match="empty host"):
            resolve("https://", "b")

    def test_invalid_port(self):
        with pytest.raises(ConfigurationError, match="invalid endpoint URL"):
            resolve("https://s3.example.com:notaport", "b")

    def test_malformed_ipv6_literal(self):
        with pytest.raises(ConfigurationError, match="invalid endpoint URL"):
            resolve("https://[::1", "b")
