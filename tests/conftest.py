"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from core.config import LicensingSettings
from core.infrastructure.events import InMemoryEventBus
from core.infrastructure.notifications import NotificationPort
from core.infrastructure.store_adapters import InMemoryStore
from licenses.application.dto.license_dto import LicenseResponseDTO
from licenses.application.services.license_lifecycle_service import LicenseLifecycleService
from licenses.infrastructure.repositories.store_license_state_repository import (
    StoreLicenseStateRepository,
)
from licenses.ports.connectivity import ConnectivityProber
from licenses.ports.license_api import LicenseApiPort

STORE_ID = 157343
PRODUCT_ID = 463516
LICENSE_KEY = "38B1460A-5104-4067-A91D-77B872934D51"
INSTANCE_ID = "47596ad9-a811-4ebf-ac8a-03fc7b6d2a17"
FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
OFFLINE_LIMIT = timedelta(seconds=30)


def license_key_payload(status: str = "active", expires_at: Optional[str] = None) -> Dict[str, Any]:
    """license_key part of a licensing service response."""
    return {
        "id": 1,
        "status": status,
        "key": LICENSE_KEY,
        "activation_limit": 1,
        "activation_usage": 1,
        "created_at": "2024-01-01T00:00:00.000000Z",
        "expires_at": expires_at,
    }


def meta_payload(store_id: int = STORE_ID, product_id: int = PRODUCT_ID) -> Dict[str, Any]:
    """meta part of a licensing service response."""
    return {
        "store_id": store_id,
        "order_id": 2,
        "product_id": product_id,
        "product_name": "Text Tools Pro",
        "variant_id": 3,
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
    }


def instance_payload() -> Dict[str, Any]:
    return {
        "id": INSTANCE_ID,
        "name": "VSCode-1705320000000",
        "created_at": "2024-01-15T12:00:00.000000Z",
    }


def activate_response(store_id: int = STORE_ID, product_id: int = PRODUCT_ID) -> Dict[str, Any]:
    """Successful activation answer."""
    return {
        "activated": True,
        "error": None,
        "license_key": license_key_payload(),
        "instance": instance_payload(),
        "meta": meta_payload(store_id, product_id),
    }


def rejected_activation_response(error: str = "license_key not found.") -> Dict[str, Any]:
    return {
        "activated": False,
        "error": error,
        "license_key": None,
        "instance": None,
        "meta": None,
    }


def validate_response(expires_at: Optional[str] = None) -> Dict[str, Any]:
    """Validation answer for an active license."""
    return {
        "valid": True,
        "error": None,
        "license_key": license_key_payload(expires_at=expires_at),
        "instance": instance_payload(),
        "meta": meta_payload(),
    }


def expired_response() -> Dict[str, Any]:
    """Validation answer for an expired license."""
    return {
        "valid": False,
        "error": "This license key has expired.",
        "license_key": license_key_payload(
            status="expired", expires_at="2024-01-10T00:00:00.000000Z"
        ),
        "instance": instance_payload(),
        "meta": meta_payload(),
    }


def not_found_response() -> Dict[str, Any]:
    """Validation answer for a key the service no longer knows."""
    return {
        "valid": False,
        "error": "license_key not found.",
        "license_key": None,
        "instance": None,
        "meta": None,
    }


def disabled_response() -> Dict[str, Any]:
    """Validation answer for a license disabled by the seller."""
    return {
        "valid": False,
        "error": "This license key is disabled.",
        "license_key": license_key_payload(status="disabled"),
        "instance": instance_payload(),
        "meta": meta_payload(),
    }


def deactivate_response() -> Dict[str, Any]:
    return {
        "deactivated": True,
        "error": None,
        "license_key": license_key_payload(status="inactive"),
        "meta": meta_payload(),
    }


class FakeLicenseApi(LicenseApiPort):
    """
    Scripted licensing service.

    Responses are queued per operation; the last queued response keeps
    being returned once the queue is drained. A queued exception is
    raised instead of returned.
    """

    def __init__(self):
        self.responses: Dict[str, List[Any]] = {
            "activate": [],
            "validate": [],
            "deactivate": [deactivate_response()],
        }
        self.calls: List[tuple] = []
        self.reachable = True

    def queue(self, operation: str, *responses: Any) -> None:
        self.responses[operation] = list(responses)

    def calls_to(self, operation: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def ping(self) -> bool:
        return self.reachable

    async def activate(self, license_key: str, instance_name: str) -> LicenseResponseDTO:
        return self._respond("activate", license_key, instance_name)

    async def validate(self, license_key: str, instance_id: str) -> LicenseResponseDTO:
        return self._respond("validate", license_key, instance_id)

    async def deactivate(self, license_key: str, instance_id: str) -> LicenseResponseDTO:
        return self._respond("deactivate", license_key, instance_id)

    def _respond(self, operation: str, *args: str) -> LicenseResponseDTO:
        self.calls.append((operation,) + args)
        queue = self.responses[operation]
        if not queue:
            raise AssertionError(f"No {operation} response queued")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return LicenseResponseDTO.from_dict(item)


class FakeProber(ConnectivityProber):
    """Prober whose answer is set by the test."""

    def __init__(self, online: bool = True):
        self.online = online
        self.probes = 0

    async def probe(self) -> bool:
        self.probes += 1
        return self.online


class RecordingNotifier(NotificationPort):
    """Notifier that records every message it is asked to show."""

    def __init__(self):
        self.infos: List[str] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []

    def show_info(self, message: str) -> None:
        self.infos.append(message)

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)


class FakeClock:
    """Controllable clock returning timezone-aware datetimes."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def licensing_settings():
    """Fixture for LicensingSettings with a short offline limit."""
    return LicensingSettings(
        store_id=STORE_ID,
        product_id=PRODUCT_ID,
        ping_interval=timedelta(milliseconds=10),
        offline_duration_limit=OFFLINE_LIMIT,
    )


@pytest.fixture
def store():
    """Fixture for an empty InMemoryStore."""
    return InMemoryStore()


@pytest.fixture
def state_repository(store):
    """Fixture for StoreLicenseStateRepository."""
    return StoreLicenseStateRepository(store)


@pytest.fixture
def license_api():
    """Fixture for FakeLicenseApi."""
    return FakeLicenseApi()


@pytest.fixture
def prober():
    """Fixture for FakeProber, online by default."""
    return FakeProber(online=True)


@pytest.fixture
def notifier():
    """Fixture for RecordingNotifier."""
    return RecordingNotifier()


@pytest.fixture
def clock():
    """Fixture for FakeClock."""
    return FakeClock()


@pytest.fixture
def event_bus():
    """Fixture for InMemoryEventBus."""
    return InMemoryEventBus()


@pytest.fixture
def lifecycle_service(
    licensing_settings, license_api, prober, state_repository, notifier, event_bus, clock
):
    """Fixture for LicenseLifecycleService wired with fakes."""
    service = LicenseLifecycleService(
        settings=licensing_settings,
        api_client=license_api,
        prober=prober,
        repository=state_repository,
        notifier=notifier,
        event_bus=event_bus,
        clock=clock,
    )
    yield service
    service.dispose()


@pytest.fixture
def status_updates(lifecycle_service):
    """Fixture recording (is_online, license_info) status notifications."""
    updates = []
    lifecycle_service.on_status_change(lambda online, info: updates.append((online, info)))
    return updates
