"""
License domain events.

Domain events represent something that happened in the license lifecycle.
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from core.domain.events import DomainEvent, utcnow
from licenses.domain.license import EffectiveLicenseInfo


class LicenseActivated(DomainEvent):
    """Event raised when a license is activated on this installation."""

    def __init__(
        self,
        instance_id: str,
        instance_name: str,
        product_name: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            instance_id: Activation instance id
            instance_name: Activation instance name
            product_name: Product display name
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="LicenseActivated",
        )
        self.instance_id = instance_id
        self.instance_name = instance_name
        self.product_name = product_name


class LicenseDeactivated(DomainEvent):
    """Event raised when the local license is deactivated."""

    def __init__(
        self,
        instance_id: str,
        remote_confirmed: bool,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseDeactivated event.

        Args:
            instance_id: Activation instance id
            remote_confirmed: Whether the licensing service answered
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="LicenseDeactivated",
        )
        self.instance_id = instance_id
        self.remote_confirmed = remote_confirmed


class LicenseValidated(DomainEvent):
    """Event raised when the licensing service confirms the license."""

    def __init__(self, instance_id: str, occurred_at: Optional[datetime] = None):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="LicenseValidated",
        )
        self.instance_id = instance_id


class LicenseRevoked(DomainEvent):
    """Event raised when the licensing service no longer knows the key."""

    def __init__(self, instance_id: str, occurred_at: Optional[datetime] = None):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="LicenseRevoked",
        )
        self.instance_id = instance_id


class LicenseExpired(DomainEvent):
    """Event raised on the first validation of an expired episode."""

    def __init__(
        self,
        instance_id: str,
        expires_at: Optional[datetime] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="LicenseExpired",
        )
        self.instance_id = instance_id
        self.expires_at = expires_at


class PremiumTemporarilyDisabled(DomainEvent):
    """Event raised when the offline grace period runs out."""

    def __init__(
        self,
        instance_id: str,
        offline_duration: timedelta,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="PremiumTemporarilyDisabled",
        )
        self.instance_id = instance_id
        self.offline_duration = offline_duration


class PremiumReEnabled(DomainEvent):
    """Event raised when a validation lifts a temporary suspension."""

    def __init__(self, instance_id: str, occurred_at: Optional[datetime] = None):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=instance_id,
            event_type="PremiumReEnabled",
        )
        self.instance_id = instance_id


class LicenseStatusChanged(DomainEvent):
    """
    Event carrying a status snapshot for the presentation layer.

    The license info is an immutable snapshot taken after the mutation
    that triggered the event completed.
    """

    def __init__(
        self,
        is_online: bool,
        license_info: Optional[EffectiveLicenseInfo],
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseStatusChanged event.

        Args:
            is_online: Result of the latest connectivity probe
            license_info: Effective license info or None
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=license_info.instance_id if license_info else "none",
            event_type="LicenseStatusChanged",
        )
        self.is_online = is_online
        self.license_info = license_info
