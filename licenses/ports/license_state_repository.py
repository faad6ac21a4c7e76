"""
License state repository port (interface).

This defines the contract for persisting the license record, the
derived flags and the connectivity timestamps.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from licenses.domain.license import DerivedFlags, LicenseRecord, PersistedLicenseState


class LicenseStateRepository(ABC):
    """
    Abstract repository for the locally persisted license state.

    Only the lifecycle engine writes through this repository.
    """

    @abstractmethod
    async def load(self) -> PersistedLicenseState:
        """
        Load the complete persisted state.

        Returns:
            PersistedLicenseState (empty when nothing was stored)
        """
        pass

    @abstractmethod
    async def save_record(self, record: Optional[LicenseRecord]) -> None:
        """
        Persist the license record.

        Args:
            record: Record to store, or None to remove it
        """
        pass

    @abstractmethod
    async def save_flags(self, flags: DerivedFlags) -> None:
        """
        Persist the derived flags.

        Args:
            flags: Flags to store
        """
        pass

    @abstractmethod
    async def save_last_online(self, timestamp: datetime) -> None:
        """
        Persist the time of the last successful connectivity probe.

        Args:
            timestamp: Probe time
        """
        pass

    @abstractmethod
    async def save_offline_since(self, timestamp: Optional[datetime]) -> None:
        """
        Persist the start of the current offline episode.

        Args:
            timestamp: First failed probe time, or None when back online
        """
        pass

    async def clear(self) -> None:
        """Remove the record and reset all derived flags."""
        await self.save_record(None)
        await self.save_flags(DerivedFlags())
