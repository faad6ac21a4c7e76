"""
Extension entry points.

``activate`` wires the licensing engine, the feature gate and the
sidebar handler together for one editor session; ``deactivate`` tears
them down again.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from api.sidebar import PostMessage, SidebarMessageHandler
from core.config import LicensingSettings
from core.domain.events import EventBus
from core.infrastructure.event_handlers import register_event_handlers
from core.infrastructure.events import InMemoryEventBus
from core.infrastructure.notifications import LoggingNotifier, NotificationPort
from core.infrastructure.store import StorePort
from core.infrastructure.store_adapters import DjangoCacheStore
from features.application.feature_gate import FeatureGate
from features.infrastructure.text_features import InMemoryTextEditor
from features.ports.text_editor import TextEditorPort
from licenses.application.services.license_lifecycle_service import LicenseLifecycleService
from licenses.infrastructure.connectivity import HttpConnectivityProber
from licenses.infrastructure.lemonsqueezy_client import LemonSqueezyLicenseApiClient
from licenses.infrastructure.repositories.store_license_state_repository import (
    StoreLicenseStateRepository,
)
from licenses.ports.license_api import LicenseApiPort

logger = logging.getLogger(__name__)


@dataclass
class ExtensionHost:
    """Everything one activated extension session owns."""

    lifecycle_service: LicenseLifecycleService
    feature_gate: FeatureGate
    sidebar: SidebarMessageHandler
    editor: TextEditorPort
    event_bus: EventBus

    def dispose(self) -> None:
        """Stop background checks and detach the sidebar."""
        self.sidebar.dispose()
        self.lifecycle_service.dispose()
        logger.info("Text Tools Pro deactivated")


def _setup_django() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "TextToolsPro.settings.prod")

    from django.apps import apps

    if not apps.ready:
        import django

        django.setup()


def _log_post_message(message) -> None:
    logger.debug("Panel message: %s", message.get("type"))


async def activate(
    settings: Optional[LicensingSettings] = None,
    store: Optional[StorePort] = None,
    api_client: Optional[LicenseApiPort] = None,
    notifier: Optional[NotificationPort] = None,
    editor: Optional[TextEditorPort] = None,
    post_message: Optional[PostMessage] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ExtensionHost:
    """
    Activate the extension.

    Args:
        settings: Licensing settings (defaults to the Django settings module)
        store: Persistent store (defaults to the Django cache)
        api_client: Licensing service client (defaults to LemonSqueezy)
        notifier: Host notification channel
        editor: Active text editor
        post_message: Sends messages to the status panel
        clock: Returns the current timezone-aware time

    Returns:
        ExtensionHost for the session
    """
    if settings is None or store is None:
        _setup_django()
    if settings is None:
        settings = LicensingSettings.from_django_settings()
    if store is None:
        store = DjangoCacheStore()

    if api_client is None:
        api_client = LemonSqueezyLicenseApiClient(
            settings.endpoints, timeout=settings.request_timeout
        )
    notifier = notifier or LoggingNotifier()
    editor = editor or InMemoryTextEditor()

    event_bus = InMemoryEventBus()
    register_event_handlers(event_bus)

    lifecycle_service = LicenseLifecycleService(
        settings=settings,
        api_client=api_client,
        prober=HttpConnectivityProber(api_client),
        repository=StoreLicenseStateRepository(store),
        notifier=notifier,
        event_bus=event_bus,
        clock=clock,
    )
    feature_gate = FeatureGate.for_editor(editor, notifier)
    sidebar = SidebarMessageHandler(
        lifecycle_service,
        feature_gate,
        post_message or _log_post_message,
        notifier=notifier,
    )

    await lifecycle_service.initialize()
    logger.info(
        "Text Tools Pro activated (%s)", lifecycle_service.lifecycle_state().value
    )

    return ExtensionHost(
        lifecycle_service=lifecycle_service,
        feature_gate=feature_gate,
        sidebar=sidebar,
        editor=editor,
        event_bus=event_bus,
    )


def deactivate(host: Optional[ExtensionHost]) -> None:
    """
    Deactivate the extension.

    Args:
        host: Host returned by activate, if any
    """
    if host is not None:
        host.dispose()
