"""
Sidebar panel message handling.

Translates messages coming from the status panel into lifecycle and
feature commands, and posts status updates back. Rendering the panel is
left to the host.
"""

import logging
from typing import Any, Callable, Dict, Optional

from api.exceptions import (
    ACTIVATION_FALLBACK,
    DEACTIVATION_FALLBACK,
    GENERIC_FALLBACK,
    error_payload,
)
from core.infrastructure.notifications import NotificationPort
from features.application.feature_gate import FeatureGate
from licenses.application.services.license_lifecycle_service import LicenseLifecycleService
from licenses.domain.license import EffectiveLicenseInfo

logger = logging.getLogger(__name__)

ACTIVATION_SUCCESS = "License activated successfully"

PostMessage = Callable[[Dict[str, Any]], None]


def _info_dict(info: Optional[EffectiveLicenseInfo]) -> Optional[Dict[str, Any]]:
    return info.to_dict() if info is not None else None


class SidebarMessageHandler:
    """Routes panel messages to the lifecycle service and the feature gate."""

    def __init__(
        self,
        lifecycle_service: LicenseLifecycleService,
        feature_gate: FeatureGate,
        post_message: PostMessage,
        notifier: Optional[NotificationPort] = None,
    ):
        """
        Initialize handler and subscribe to status changes.

        Args:
            lifecycle_service: License lifecycle service
            feature_gate: Feature gate
            post_message: Sends a message dictionary to the panel
            notifier: Host notification channel for success notices
        """
        self.lifecycle_service = lifecycle_service
        self.feature_gate = feature_gate
        self.post_message = post_message
        self.notifier = notifier
        self._unsubscribe = lifecycle_service.on_status_change(self._on_status_change)

    def _on_status_change(self, is_online: bool, info: Optional[EffectiveLicenseInfo]) -> None:
        self.post_message(
            {"type": "onlineStatus", "value": is_online, "licenseInfo": _info_dict(info)}
        )

    def resolve(self) -> None:
        """Post the initial status when the panel is shown."""
        self.post_message(
            {
                "type": "initialStatus",
                "value": {
                    "isOnline": bool(self.lifecycle_service.is_online),
                    "licenseInfo": _info_dict(self.lifecycle_service.get_license_info()),
                    "features": self.feature_gate.describe(),
                },
            }
        )

    async def handle_message(self, message: Dict[str, Any]) -> None:
        """
        Handle one message from the panel.

        Args:
            message: Panel message with a ``type`` key
        """
        message_type = message.get("type")

        if message_type == "activateLicense":
            await self._activate(message.get("value") or "")
        elif message_type == "deactivateLicense":
            await self._deactivate()
        elif message_type == "executeFeature":
            await self._execute_feature(message.get("feature"))
        else:
            logger.debug("Ignoring panel message of type %r", message_type)

    async def _activate(self, license_key: str) -> None:
        try:
            info = await self.lifecycle_service.activate(license_key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.post_message(error_payload(e, ACTIVATION_FALLBACK))
            return

        self.post_message({"type": "licenseStatus", "value": info.to_dict()})
        if self.notifier is not None:
            self.notifier.show_info(ACTIVATION_SUCCESS)

    async def _deactivate(self) -> None:
        try:
            await self.lifecycle_service.deactivate()
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.post_message(error_payload(e, DEACTIVATION_FALLBACK))
            return

        self.post_message({"type": "licenseStatus", "value": {"valid": False}})

    async def _execute_feature(self, feature_id: Optional[str]) -> None:
        try:
            result = await self.feature_gate.execute(
                feature_id or "", self.lifecycle_service.is_premium_enabled()
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.post_message(error_payload(e, GENERIC_FALLBACK))
            return

        self.post_message(
            {
                "type": "featureResult" if result.success else "featureError",
                "feature": feature_id,
                "result": result.message,
            }
        )

    def dispose(self) -> None:
        """Stop listening to status changes."""
        self._unsubscribe()
