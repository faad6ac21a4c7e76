"""
Licensing configuration.

LicensingSettings is the explicit, immutable configuration the lifecycle
engine and API client are constructed with. It is usually built from the
active Django settings module, but tests create it directly.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional

DEFAULT_ENDPOINTS = {
    "PING": "https://api.lemonsqueezy.com/ping",
    "ACTIVATE": "https://api.lemonsqueezy.com/v1/licenses/activate",
    "VALIDATE": "https://api.lemonsqueezy.com/v1/licenses/validate",
    "DEACTIVATE": "https://api.lemonsqueezy.com/v1/licenses/deactivate",
}


@dataclass(frozen=True)
class ApiEndpoints:
    """The four licensing service URLs."""

    ping: str = DEFAULT_ENDPOINTS["PING"]
    activate: str = DEFAULT_ENDPOINTS["ACTIVATE"]
    validate: str = DEFAULT_ENDPOINTS["VALIDATE"]
    deactivate: str = DEFAULT_ENDPOINTS["DEACTIVATE"]

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "ApiEndpoints":
        merged = {**DEFAULT_ENDPOINTS, **(data or {})}
        return cls(
            ping=merged["PING"],
            activate=merged["ACTIVATE"],
            validate=merged["VALIDATE"],
            deactivate=merged["DEACTIVATE"],
        )


@dataclass(frozen=True)
class LicensingSettings:
    """
    Settings consumed by the licensing core.

    Attributes:
        store_id: Store the product is sold from
        product_id: Product that license keys must belong to
        endpoints: Licensing service URLs
        ping_interval: Delay between two periodic ticks
        offline_duration_limit: Offline grace before premium is suspended
        request_timeout: Per-request HTTP timeout in seconds
        instance_name_prefix: Prefix of generated activation instance names
        validate_on_startup: Validate immediately when the startup probe
            finds the service reachable and a license is stored
    """

    store_id: int
    product_id: int
    endpoints: ApiEndpoints = field(default_factory=ApiEndpoints)
    ping_interval: timedelta = timedelta(seconds=5)
    offline_duration_limit: timedelta = timedelta(days=7)
    request_timeout: float = 10.0
    instance_name_prefix: str = "VSCode"
    validate_on_startup: bool = True

    def __post_init__(self):
        """Validate settings."""
        if self.ping_interval <= timedelta(0):
            raise ValueError("Ping interval must be positive")
        if self.offline_duration_limit < timedelta(0):
            raise ValueError("Offline duration limit cannot be negative")
        if self.request_timeout <= 0:
            raise ValueError("Request timeout must be positive")

    @classmethod
    def from_django_settings(cls, django_settings: Optional[Any] = None) -> "LicensingSettings":
        """
        Build settings from a Django settings object.

        Args:
            django_settings: Settings object (defaults to django.conf.settings)

        Returns:
            LicensingSettings instance
        """
        if django_settings is None:
            from django.conf import settings as django_settings

        return cls(
            store_id=int(django_settings.LICENSE_STORE_ID),
            product_id=int(django_settings.LICENSE_PRODUCT_ID),
            endpoints=ApiEndpoints.from_dict(
                getattr(django_settings, "LICENSE_API_ENDPOINTS", {})
            ),
            ping_interval=timedelta(
                seconds=float(getattr(django_settings, "LICENSE_PING_INTERVAL_SECONDS", 5))
            ),
            offline_duration_limit=timedelta(
                seconds=float(
                    getattr(
                        django_settings,
                        "LICENSE_OFFLINE_DURATION_LIMIT_SECONDS",
                        7 * 24 * 60 * 60,
                    )
                )
            ),
            request_timeout=float(getattr(django_settings, "LICENSE_API_TIMEOUT_SECONDS", 10)),
            instance_name_prefix=getattr(django_settings, "LICENSE_INSTANCE_NAME_PREFIX", "VSCode"),
            validate_on_startup=bool(getattr(django_settings, "LICENSE_VALIDATE_ON_STARTUP", True)),
        )
