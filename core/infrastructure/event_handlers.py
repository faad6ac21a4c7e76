"""
Event handlers for lifecycle events.

These handlers process lifecycle events for side effects
like audit logging and metrics.
"""

import logging

from core.domain.events import DomainEvent, EventBus, EventHandler
from core.metrics import license_lifecycle_events_total, premium_enabled
from licenses.domain.events import (
    LicenseActivated,
    LicenseDeactivated,
    LicenseExpired,
    LicenseRevoked,
    LicenseStatusChanged,
    LicenseValidated,
    PremiumReEnabled,
    PremiumTemporarilyDisabled,
)
from licenses.domain.services import PremiumAccessPolicy

logger = logging.getLogger(__name__)

LIFECYCLE_EVENTS = (
    LicenseActivated,
    LicenseDeactivated,
    LicenseValidated,
    LicenseRevoked,
    LicenseExpired,
    PremiumTemporarilyDisabled,
    PremiumReEnabled,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Logs every lifecycle event with its identifiers as structured fields.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle lifecycle event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


class MetricsEventHandler(EventHandler):
    """
    Event handler for Prometheus metrics.

    Counts lifecycle events and tracks the premium flag from status
    snapshots.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, LicenseStatusChanged):
            enabled = PremiumAccessPolicy.is_premium_enabled(event.license_info)
            premium_enabled.set(1 if enabled else 0)
            return
        license_lifecycle_events_total.labels(event_type=event.event_type).inc()


def register_event_handlers(event_bus: EventBus) -> None:
    """
    Register audit and metrics handlers on a bus.

    Args:
        event_bus: Bus owned by a lifecycle service
    """
    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in LIFECYCLE_EVENTS:
        event_bus.subscribe(event_type, audit_handler)
        event_bus.subscribe(event_type, metrics_handler)
    event_bus.subscribe(LicenseStatusChanged, metrics_handler)

    logger.info("Lifecycle event handlers registered")
