"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from datetime import datetime, timedelta
from typing import Optional

from core.domain.value_objects import LicenseKeyValue
from licenses.domain.license import (
    DerivedFlags,
    EffectiveLicenseInfo,
    LicenseRecord,
    LifecycleState,
)

LICENSE_KEY_NOT_FOUND_ERROR = "license_key not found."


class PremiumAccessPolicy:
    """Domain service deciding whether premium features may run."""

    @staticmethod
    def is_premium_enabled(info: Optional[EffectiveLicenseInfo]) -> bool:
        """
        Derive the premium flag from the effective license information.

        Args:
            info: Effective license info, None when no license is stored

        Returns:
            True only if a license exists, is valid, is not temporarily
            disabled and is not expired
        """
        return bool(
            info is not None
            and info.valid
            and not info.temporarily_disabled
            and not info.expired
        )

    @staticmethod
    def lifecycle_state(
        record: Optional[LicenseRecord], flags: DerivedFlags
    ) -> LifecycleState:
        """
        Map record and flags onto the conceptual lifecycle state.

        Args:
            record: Stored license record or None
            flags: Current derived flags

        Returns:
            LifecycleState
        """
        if record is None:
            return LifecycleState.NO_LICENSE
        if flags.expired:
            return LifecycleState.EXPIRED
        if flags.temporarily_disabled:
            return LifecycleState.TEMPORARILY_DISABLED
        if record.status.value != "active":
            return LifecycleState.INVALID
        return LifecycleState.ACTIVE


class OfflineGracePolicy:
    """Domain service for the offline grace period."""

    def __init__(self, limit: timedelta):
        """
        Initialize policy.

        Args:
            limit: Maximum tolerated time since the last successful probe
        """
        self.limit = limit

    def offline_duration(self, now: datetime, last_online: Optional[datetime]) -> timedelta:
        """Time spent offline; zero when the last online time is unknown."""
        if last_online is None:
            return timedelta(0)
        return now - last_online

    def is_exceeded(self, now: datetime, last_online: Optional[datetime]) -> bool:
        """
        Check whether the grace period has run out.

        The boundary itself is still within grace: only a duration strictly
        greater than the limit counts as exceeded.
        """
        return self.offline_duration(now, last_online) > self.limit


class ProductVerifier:
    """Domain service checking that a key belongs to this product."""

    def __init__(self, store_id: int, product_id: int):
        self.store_id = store_id
        self.product_id = product_id

    def matches(self, store_id: Optional[int], product_id: Optional[int]) -> bool:
        """True when both ids match the configured store and product."""
        return store_id == self.store_id and product_id == self.product_id


class InstanceNameGenerator:
    """Domain service for activation instance names."""

    @staticmethod
    def generate(prefix: str, now: datetime) -> str:
        """
        Generate an instance name in format: PREFIX-<epoch milliseconds>.

        Args:
            prefix: Host label (e.g., 'VSCode')
            now: Current time

        Returns:
            Instance name
        """
        return f"{prefix}-{int(now.timestamp() * 1000)}"


class LicenseKeyValidator:
    """Domain service for local license key checks."""

    @staticmethod
    def validate_format(raw_key: str) -> LicenseKeyValue:
        """
        Validate the key shape before any network call.

        Args:
            raw_key: Key as typed by the user

        Returns:
            LicenseKeyValue

        Raises:
            InvalidLicenseKeyFormatError: If the key is malformed
        """
        return LicenseKeyValue((raw_key or "").strip())
