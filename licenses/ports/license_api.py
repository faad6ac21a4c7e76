"""
Licensing service API port (interface).

This defines the contract for the three remote license operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod

from licenses.application.dto.license_dto import LicenseResponseDTO


class LicenseApiPort(ABC):
    """
    Abstract client for the remote licensing service.

    Structured rejections are returned as a LicenseResponseDTO with
    ``error`` set. Transport failures raise LicenseApiTransportError.
    """

    @abstractmethod
    async def ping(self) -> bool:
        """
        Check whether the licensing service answers at all.

        Returns:
            True if a response was received, False on any failure
        """
        pass

    @abstractmethod
    async def activate(self, license_key: str, instance_name: str) -> LicenseResponseDTO:
        """
        Activate a license key for a new instance.

        Args:
            license_key: License key
            instance_name: Human label for the new instance

        Returns:
            LicenseResponseDTO

        Raises:
            LicenseApiTransportError: If the service could not be reached
        """
        pass

    @abstractmethod
    async def validate(self, license_key: str, instance_id: str) -> LicenseResponseDTO:
        """
        Validate a license key for an existing instance.

        Args:
            license_key: License key
            instance_id: Instance id returned by activation

        Returns:
            LicenseResponseDTO

        Raises:
            LicenseApiTransportError: If the service could not be reached
        """
        pass

    @abstractmethod
    async def deactivate(self, license_key: str, instance_id: str) -> LicenseResponseDTO:
        """
        Release an instance of a license key.

        Args:
            license_key: License key
            instance_id: Instance id returned by activation

        Returns:
            LicenseResponseDTO

        Raises:
            LicenseApiTransportError: If the service could not be reached
        """
        pass
