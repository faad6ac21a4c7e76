"""
Store-backed implementation of LicenseStateRepository.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from core.infrastructure.store import StorePort
from licenses.domain.license import DerivedFlags, LicenseRecord, PersistedLicenseState
from licenses.ports.license_state_repository import LicenseStateRepository

logger = logging.getLogger(__name__)


class StorageKeys:
    """Logical keys of the persisted license state."""

    LICENSE_KEY = "license_key"
    INSTANCE_ID = "instance_id"
    STORED_LICENSE_INFO = "stored_license_info"
    LAST_ONLINE = "last_online_timestamp"
    OFFLINE_START = "offline_start_timestamp"
    TEMPORARILY_DISABLED = "isPremiumTemporarilyDisabled"
    EXPIRED = "isExpired"
    EXPIRATION_NOTIFICATION_SHOWN = "expirationNotificationShown"


def _to_millis(timestamp: Optional[datetime]) -> Optional[int]:
    if timestamp is None:
        return None
    return int(timestamp.timestamp() * 1000)


def _from_millis(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


class StoreLicenseStateRepository(LicenseStateRepository):
    """
    LicenseStateRepository on top of a StorePort.

    Timestamps are stored as epoch milliseconds. The key and instance id
    are also stored under their own keys next to the full record.
    """

    def __init__(self, store: StorePort):
        """
        Initialize repository.

        Args:
            store: Persistent key/value store
        """
        self.store = store

    async def load(self) -> PersistedLicenseState:
        """
        Load the complete persisted state.

        Returns:
            PersistedLicenseState
        """
        stored = await self.store.get(StorageKeys.STORED_LICENSE_INFO)
        try:
            record = LicenseRecord.from_storage_dict(stored)
        except (TypeError, ValueError) as e:
            logger.warning("Discarding unreadable stored license record: %s", e)
            record = None

        flags = DerivedFlags(
            temporarily_disabled=bool(
                await self.store.get(StorageKeys.TEMPORARILY_DISABLED, False)
            ),
            expired=bool(await self.store.get(StorageKeys.EXPIRED, False)),
            expiration_notification_shown=bool(
                await self.store.get(StorageKeys.EXPIRATION_NOTIFICATION_SHOWN, False)
            ),
        )

        return PersistedLicenseState(
            record=record,
            flags=flags,
            last_online_at=_from_millis(await self.store.get(StorageKeys.LAST_ONLINE)),
            offline_since=_from_millis(await self.store.get(StorageKeys.OFFLINE_START)),
        )

    async def save_record(self, record: Optional[LicenseRecord]) -> None:
        """
        Persist the license record.

        Args:
            record: Record to store, or None to remove it
        """
        if record is None:
            await self.store.set(StorageKeys.STORED_LICENSE_INFO, None)
            await self.store.set(StorageKeys.LICENSE_KEY, None)
            await self.store.set(StorageKeys.INSTANCE_ID, None)
            logger.debug("Stored license record removed")
            return

        await self.store.set(StorageKeys.STORED_LICENSE_INFO, record.to_storage_dict())
        await self.store.set(StorageKeys.LICENSE_KEY, record.license_key)
        await self.store.set(StorageKeys.INSTANCE_ID, record.instance_id)
        logger.debug("Stored license record for instance %s", record.instance_id)

    async def save_flags(self, flags: DerivedFlags) -> None:
        """
        Persist the derived flags.

        Args:
            flags: Flags to store
        """
        await self.store.set(StorageKeys.TEMPORARILY_DISABLED, flags.temporarily_disabled)
        await self.store.set(StorageKeys.EXPIRED, flags.expired)
        await self.store.set(
            StorageKeys.EXPIRATION_NOTIFICATION_SHOWN, flags.expiration_notification_shown
        )

    async def save_last_online(self, timestamp: datetime) -> None:
        await self.store.set(StorageKeys.LAST_ONLINE, _to_millis(timestamp))

    async def save_offline_since(self, timestamp: Optional[datetime]) -> None:
        await self.store.set(StorageKeys.OFFLINE_START, _to_millis(timestamp))
