"""
Feature domain entities.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from core.domain.value_objects import FeatureTier


@dataclass(frozen=True)
class FeatureResult:
    """Uniform outcome of a feature execution request."""

    success: bool
    message: str
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str, data: Optional[Any] = None) -> "FeatureResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str) -> "FeatureResult":
        return cls(success=False, message=message)


# A feature body returns the success message shown to the user
FeatureHandler = Callable[[], Awaitable[str]]


@dataclass(frozen=True)
class FeatureDefinition:
    """A registered feature."""

    feature_id: str
    tier: FeatureTier
    handler: FeatureHandler

    def __post_init__(self):
        """Validate feature definition."""
        if not self.feature_id:
            raise ValueError("Feature ID is required")

    @property
    def is_premium(self) -> bool:
        return self.tier == FeatureTier.PREMIUM
