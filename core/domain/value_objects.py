"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum

from core.domain.exceptions import InvalidLicenseKeyFormatError

LICENSE_KEY_PATTERN = re.compile(
    r"^[A-F0-9]{8}-[A-F0-9]{4}-[A-F0-9]{4}-[A-F0-9]{4}-[A-F0-9]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class LicenseKeyValue(ValueObject):
    """License key in grouped hexadecimal form (8-4-4-4-12)."""

    value: str

    def __post_init__(self):
        """Validate license key format."""
        if not self.value or not LICENSE_KEY_PATTERN.match(self.value):
            raise InvalidLicenseKeyFormatError()

    def masked(self) -> str:
        """Return the key with everything but the first group hidden."""
        return f"{self.value[:8]}-****"

    def __str__(self) -> str:
        """Return key as string."""
        return self.value


class LicenseStatus(Enum):
    """License status as reported by the licensing service."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    DISABLED = "disabled"

    @classmethod
    def parse(cls, raw: str) -> "LicenseStatus":
        """
        Parse a server status string.

        Unknown values are treated as inactive so a surprising payload
        never grants premium access.
        """
        try:
            return cls(raw)
        except ValueError:
            return cls.INACTIVE

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class FeatureTier(Enum):
    """Feature tier value object."""

    FREE = "free"
    PREMIUM = "premium"

    def __str__(self) -> str:
        """Return tier as string."""
        return self.value
