"""
Feature gate.

Decides whether a feature may run from the premium flag handed in by
the caller and dispatches to the feature implementation. The gate has
no licensing logic of its own.
"""
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional

from core.domain.exceptions import DomainException
from core.domain.value_objects import FeatureTier
from core.infrastructure.notifications import NotificationPort
from core.metrics import feature_executions_total
from features.domain.feature import FeatureDefinition, FeatureResult
from features.infrastructure.text_features import FreeFeatures, PremiumFeatures
from features.ports.text_editor import TextEditorPort

logger = logging.getLogger(__name__)


class FeatureMessages:
    """User-facing feature gate messages."""

    LICENSE_REQUIRED = "Premium license required for this feature"
    UNKNOWN_FEATURE = "Unknown feature"
    EXECUTION_FAILED = "Feature execution failed"


class FeatureGate:
    """Allow/deny decision and dispatch for feature execution requests."""

    def __init__(
        self,
        features: Iterable[FeatureDefinition],
        notifier: Optional[NotificationPort] = None,
    ):
        """
        Initialize gate.

        Args:
            features: Feature definitions to register
            notifier: Shows feature failures as error messages
        """
        self.notifier = notifier
        self._features: Dict[str, FeatureDefinition] = {}
        for feature in features:
            if feature.feature_id in self._features:
                raise ValueError(f"Feature {feature.feature_id} registered twice")
            self._features[feature.feature_id] = feature

    @classmethod
    def for_editor(
        cls, editor: TextEditorPort, notifier: Optional[NotificationPort] = None
    ) -> "FeatureGate":
        """
        Build a gate with the standard text features.

        Args:
            editor: Editor the features operate on
            notifier: Shows feature failures as error messages

        Returns:
            FeatureGate
        """
        free = FreeFeatures(editor)
        premium = PremiumFeatures(editor)

        async def character_count() -> str:
            return f"Character count: {await free.character_count()}"

        async def word_count() -> str:
            return f"Word count: {await free.word_count()}"

        async def to_upper_case() -> str:
            await premium.convert_to_upper_case()
            return "Text converted to uppercase"

        async def to_lower_case() -> str:
            await premium.convert_to_lower_case()
            return "Text converted to lowercase"

        async def base64_encode() -> str:
            await premium.base64_encode()
            return "Text encoded to base64"

        async def base64_decode() -> str:
            await premium.base64_decode()
            return "Text decoded from base64"

        return cls(
            [
                FeatureDefinition("characterCount", FeatureTier.FREE, character_count),
                FeatureDefinition("wordCount", FeatureTier.FREE, word_count),
                FeatureDefinition("toUpperCase", FeatureTier.PREMIUM, to_upper_case),
                FeatureDefinition("toLowerCase", FeatureTier.PREMIUM, to_lower_case),
                FeatureDefinition("base64Encode", FeatureTier.PREMIUM, base64_encode),
                FeatureDefinition("base64Decode", FeatureTier.PREMIUM, base64_decode),
            ],
            notifier=notifier,
        )

    @property
    def premium_feature_ids(self) -> FrozenSet[str]:
        return frozenset(f.feature_id for f in self._features.values() if f.is_premium)

    @property
    def free_feature_ids(self) -> FrozenSet[str]:
        return frozenset(f.feature_id for f in self._features.values() if not f.is_premium)

    def describe(self) -> List[Dict[str, str]]:
        """Feature ids and tiers, in registration order."""
        return [
            {"id": f.feature_id, "tier": f.tier.value} for f in self._features.values()
        ]

    async def execute(self, feature_id: str, is_premium_enabled: bool) -> FeatureResult:
        """
        Execute a feature if the license allows it.

        Args:
            feature_id: Feature identifier
            is_premium_enabled: Current premium flag from the lifecycle service

        Returns:
            FeatureResult
        """
        feature = self._features.get(feature_id)

        if feature is not None and feature.is_premium and not is_premium_enabled:
            feature_executions_total.labels(feature=feature_id, outcome="denied").inc()
            logger.info("Premium feature %s refused without license", feature_id)
            return FeatureResult.failure(FeatureMessages.LICENSE_REQUIRED)

        if feature is None:
            feature_executions_total.labels(feature="unknown", outcome="unknown").inc()
            return FeatureResult.failure(FeatureMessages.UNKNOWN_FEATURE)

        try:
            message = await feature.handler()
        except DomainException as e:
            feature_executions_total.labels(feature=feature_id, outcome="failed").inc()
            logger.info("Feature %s failed: %s", feature_id, e.message)
            if self.notifier is not None:
                self.notifier.show_error(e.message)
            return FeatureResult.failure(e.message)
        except Exception as e:  # pylint: disable=broad-exception-caught
            feature_executions_total.labels(feature=feature_id, outcome="failed").inc()
            logger.error("Feature %s raised: %s", feature_id, e, exc_info=True)
            return FeatureResult.failure(str(e) or FeatureMessages.EXECUTION_FAILED)

        feature_executions_total.labels(feature=feature_id, outcome="succeeded").inc()
        return FeatureResult.ok(message)
