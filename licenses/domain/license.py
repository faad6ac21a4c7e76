"""
License domain entities.

LicenseRecord is the authoritative snapshot of one license/activation
pair as last reported by the licensing service. DerivedFlags are the
locally tracked booleans layered on top of it, and EffectiveLicenseInfo
is the merged, read-only view handed to consumers.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from core.domain.value_objects import LicenseStatus


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as sent by the licensing service.

    Args:
        value: ISO string, datetime or None

    Returns:
        Timezone-aware datetime, or None when value is empty
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime for storage, keeping None as None."""
    return value.isoformat() if value else None


@dataclass(frozen=True)
class LicenseRecord:
    """
    License record entity.

    Created by a successful activation, refreshed by every successful
    validation and destroyed by deactivation or revocation.
    """

    license_key: str
    instance_id: str
    instance_name: Optional[str] = None
    status: LicenseStatus = LicenseStatus.ACTIVE
    expires_at: Optional[datetime] = None
    activation_limit: Optional[int] = None
    activation_usage: Optional[int] = None
    created_at: Optional[datetime] = None
    product_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None

    def __post_init__(self):
        """Validate license record."""
        if not self.license_key or not self.instance_id:
            raise ValueError("License key and instance ID are both required")

    def to_storage_dict(self) -> Dict[str, Any]:
        """Serialize for the persistent store."""
        return {
            "licenseKey": self.license_key,
            "instanceId": self.instance_id,
            "instanceName": self.instance_name,
            "status": self.status.value,
            "expiresAt": format_timestamp(self.expires_at),
            "activationLimit": self.activation_limit,
            "activationUsage": self.activation_usage,
            "createdAt": format_timestamp(self.created_at),
            "productName": self.product_name,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
        }

    @classmethod
    def from_storage_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["LicenseRecord"]:
        """
        Rebuild a record from the persistent store.

        A record missing either the key or the instance id is partial and
        is treated as no license at all.

        Args:
            data: Stored dictionary (may be None)

        Returns:
            LicenseRecord or None
        """
        if not data or not data.get("licenseKey") or not data.get("instanceId"):
            return None
        return cls(
            license_key=data["licenseKey"],
            instance_id=data["instanceId"],
            instance_name=data.get("instanceName"),
            status=LicenseStatus.parse(data.get("status", "active")),
            expires_at=parse_timestamp(data.get("expiresAt")),
            activation_limit=data.get("activationLimit"),
            activation_usage=data.get("activationUsage"),
            created_at=parse_timestamp(data.get("createdAt")),
            product_name=data.get("productName"),
            customer_name=data.get("customerName"),
            customer_email=data.get("customerEmail"),
        )


@dataclass(frozen=True)
class DerivedFlags:
    """Locally tracked flags layered on top of the license record."""

    temporarily_disabled: bool = False
    expired: bool = False
    expiration_notification_shown: bool = False


class LifecycleState(Enum):
    """Conceptual lifecycle state derived from record and flags."""

    NO_LICENSE = "no_license"
    ACTIVE = "active"
    TEMPORARILY_DISABLED = "temporarily_disabled"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class EffectiveLicenseInfo:
    """
    License information exposed to consumers.

    Recomputed on every query from the record and the derived flags;
    never persisted and never the source of truth.
    """

    record: LicenseRecord
    valid: bool
    temporarily_disabled: bool
    expired: bool

    @classmethod
    def derive(cls, record: LicenseRecord, flags: DerivedFlags) -> "EffectiveLicenseInfo":
        """Merge a record with the current flags."""
        return cls(
            record=record,
            valid=not flags.temporarily_disabled and not flags.expired,
            temporarily_disabled=flags.temporarily_disabled,
            expired=flags.expired,
        )

    @property
    def license_key(self) -> str:
        return self.record.license_key

    @property
    def instance_id(self) -> str:
        return self.record.instance_id

    @property
    def status(self) -> LicenseStatus:
        """Status as presented to the user, reflecting local flags."""
        if self.temporarily_disabled:
            return LicenseStatus.INACTIVE
        if self.expired:
            return LicenseStatus.EXPIRED
        return self.record.status

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the status panel."""
        data = self.record.to_storage_dict()
        data.update(
            {
                "valid": self.valid,
                "status": self.status.value,
                "temporarilyDisabled": self.temporarily_disabled,
                "expired": self.expired,
            }
        )
        return data


@dataclass(frozen=True)
class PersistedLicenseState:
    """Everything the lifecycle engine keeps in the persistent store."""

    record: Optional[LicenseRecord] = None
    flags: DerivedFlags = DerivedFlags()
    last_online_at: Optional[datetime] = None
    offline_since: Optional[datetime] = None
