"""
Unit tests for licensing configuration.
"""
from datetime import timedelta
from types import SimpleNamespace

import pytest
from django.test import override_settings

from core.config import DEFAULT_ENDPOINTS, ApiEndpoints, LicensingSettings


class TestApiEndpoints:
    """Tests for ApiEndpoints."""

    def test_defaults(self):
        """Test default endpoints point at LemonSqueezy."""
        endpoints = ApiEndpoints()
        assert endpoints.activate == "https://api.lemonsqueezy.com/v1/licenses/activate"
        assert endpoints.ping == DEFAULT_ENDPOINTS["PING"]

    def test_from_dict_merges_defaults(self):
        """Test missing entries fall back to defaults."""
        endpoints = ApiEndpoints.from_dict({"PING": "http://localhost/ping"})
        assert endpoints.ping == "http://localhost/ping"
        assert endpoints.validate == DEFAULT_ENDPOINTS["VALIDATE"]


class TestLicensingSettings:
    """Tests for LicensingSettings."""

    def test_defaults(self):
        """Test production defaults."""
        settings = LicensingSettings(store_id=1, product_id=2)
        assert settings.ping_interval == timedelta(seconds=5)
        assert settings.offline_duration_limit == timedelta(days=7)
        assert settings.instance_name_prefix == "VSCode"
        assert settings.validate_on_startup is True

    def test_rejects_non_positive_ping_interval(self):
        """Test ping interval must be positive."""
        with pytest.raises(ValueError, match="Ping interval"):
            LicensingSettings(store_id=1, product_id=2, ping_interval=timedelta(0))

    def test_rejects_negative_offline_limit(self):
        """Test offline limit cannot be negative."""
        with pytest.raises(ValueError, match="Offline duration limit"):
            LicensingSettings(
                store_id=1, product_id=2, offline_duration_limit=timedelta(seconds=-1)
            )

    def test_from_settings_object(self):
        """Test building from an arbitrary settings object."""
        source = SimpleNamespace(
            LICENSE_STORE_ID="10",
            LICENSE_PRODUCT_ID="20",
            LICENSE_API_ENDPOINTS={"PING": "http://localhost/ping"},
            LICENSE_PING_INTERVAL_SECONDS=2,
            LICENSE_OFFLINE_DURATION_LIMIT_SECONDS=60,
            LICENSE_API_TIMEOUT_SECONDS=3,
            LICENSE_INSTANCE_NAME_PREFIX="Test",
            LICENSE_VALIDATE_ON_STARTUP=False,
        )

        settings = LicensingSettings.from_django_settings(source)

        assert settings.store_id == 10
        assert settings.product_id == 20
        assert settings.endpoints.ping == "http://localhost/ping"
        assert settings.ping_interval == timedelta(seconds=2)
        assert settings.offline_duration_limit == timedelta(seconds=60)
        assert settings.request_timeout == 3.0
        assert settings.instance_name_prefix == "Test"
        assert settings.validate_on_startup is False

    def test_from_django_settings(self):
        """Test building from the active Django settings."""
        with override_settings(LICENSE_OFFLINE_DURATION_LIMIT_SECONDS=45):
            settings = LicensingSettings.from_django_settings()

        assert settings.store_id == 157343
        assert settings.product_id == 463516
        assert settings.offline_duration_limit == timedelta(seconds=45)
