"""Tests for config.py module.

Tests flag/environment resolution and region defaults.
"""

import pytest

from s3verify.config import ConfigError, default_region, resolve_config

ENV = {
    "S3_URL": "https://play.min.io",
    "S3_ACCESS": "env-access",
    "S3_SECRET": "env-secret",
}


class TestResolveConfig:
    """Tests for resolve_config."""

    def test_from_environment(self):
        config = resolve_config(environ=ENV)

        assert config.endpoint_url == "https://play.min.io"
        assert config.access_key == "env-access"
        assert config.secret_key == "env-secret"
        assert config.region == "us-east-1"

    def test_flags_override_environment(self):
        config = resolve_config(
            access="flag-access",
            secret="flag-secret",
            url="http://localhost:9000",
            region="eu-central-1",
            environ={**ENV, "S3_REGION": "us-west-2"},
        )

        assert config.endpoint_url == "http://localhost:9000"
        assert config.access_key == "flag-access"
        assert config.secret_key == "flag-secret"
        assert config.region == "eu-central-1"

    def test_region_from_environment(self):
        config = resolve_config(environ={**ENV, "S3_REGION": "ap-south-1"})
        assert config.region == "ap-south-1"

    def test_trailing_slash_stripped(self):
        config = resolve_config(url="http://localhost:9000/", environ=ENV)
        assert config.endpoint_url == "http://localhost:9000"

    def test_missing_settings_listed(self):
        with pytest.raises(ConfigError) as exc_info:
            resolve_config(environ={"S3_URL": "http://localhost:9000"})

        message = str(exc_info.value)
        assert "S3_ACCESS" in message
        assert "S3_SECRET" in message
        assert "S3_URL" not in message

    def test_blank_value_counts_as_missing(self):
        with pytest.raises(ConfigError):
            resolve_config(environ={**ENV, "S3_SECRET": "   "})

    @pytest.mark.parametrize("url", ["localhost:9000", "ftp://example.com", "http://"])
    def test_invalid_url(self, url):
        with pytest.raises(ConfigError, match="Invalid endpoint URL"):
            resolve_config(url=url, environ=ENV)


class TestDefaultRegion:
    """Tests for default_region."""

    @pytest.mark.parametrize("url,region", [
        ("https://s3.us-west-2.amazonaws.com", "us-west-2"),
        ("https://s3-eu-west-1.amazonaws.com", "eu-west-1"),
        ("https://s3.dualstack.ap-southeast-2.amazonaws.com", "ap-southeast-2"),
        ("https://s3.us-gov-west-1.amazonaws.com", "us-gov-west-1"),
        ("https://storage.googleapis.com", "auto"),
        ("https://s3.amazonaws.com", "us-east-1"),
        ("http://localhost:9000", "us-east-1"),
    ])
    def test_region_for_endpoint(self, url, region):
        assert default_region(url) == region
