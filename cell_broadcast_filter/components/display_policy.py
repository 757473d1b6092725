"""Display policy deciding whether a classified broadcast reaches the user."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..models.channel import AlertType, ChannelCategory, ClassificationResult
from ..models.config import CarrierConfig, UserPreferences
from ..models.device import DeviceState, ServiceState
from ..models.message import BroadcastMessage
from ..models.verdict import SuppressReason, Verdict
from .scope_evaluator import ScopeEvaluator

logger = logging.getLogger(__name__)

TEST_ALERTS_PREFERENCE = "enable_test_alerts"


@dataclass(frozen=True)
class EnablePolicy:
    """Toggles a channel needs to be enabled."""

    preference: Optional[str] = None
    requires_master: bool = True


# Precedence lives in CATEGORY_PRECEDENCE; this only says what each category needs
CATEGORY_POLICIES: Dict[ChannelCategory, EnablePolicy] = {
    ChannelCategory.ADDITIONAL: EnablePolicy(),
    ChannelCategory.EMERGENCY: EnablePolicy("enable_emergency_alerts"),
    ChannelCategory.CMAS_PRESIDENTIAL: EnablePolicy(requires_master=False),
    ChannelCategory.CMAS_EXTREME: EnablePolicy("enable_cmas_extreme_threat_alerts"),
    ChannelCategory.CMAS_SEVERE: EnablePolicy("enable_cmas_severe_threat_alerts"),
    ChannelCategory.CMAS_AMBER: EnablePolicy("enable_cmas_amber_alerts"),
    ChannelCategory.REQUIRED_MONTHLY_TEST: EnablePolicy(TEST_ALERTS_PREFERENCE),
    ChannelCategory.EXERCISE: EnablePolicy(TEST_ALERTS_PREFERENCE),
    ChannelCategory.OPERATOR_DEFINED: EnablePolicy(TEST_ALERTS_PREFERENCE),
    ChannelCategory.PUBLIC_SAFETY: EnablePolicy("enable_public_safety_messages"),
    ChannelCategory.STATE_LOCAL_TEST: EnablePolicy("enable_state_local_test_alerts"),
}

# Range alert types that carry their own toggle, checked before the category
ALERT_TYPE_POLICIES: Dict[AlertType, EnablePolicy] = {
    AlertType.TEST: EnablePolicy(TEST_ALERTS_PREFERENCE),
}

UNMATCHED_POLICY = EnablePolicy()


class DisplayPolicy:
    """Combines preferences, carrier flags and classification into a Verdict.

    Checks run in a fixed order and the first failing check decides:

    1. emergency callback mode (when the carrier ignores alerts in ECBM)
    2. range scope against the roaming state
    3. empty body
    4. language filter of the matched range
    5. carrier content filters
    6. channel enablement: ETWS by the master toggle, area info ranges
       routed away from the popup, everything else by category toggle
    """

    def __init__(self, scope_evaluator: Optional[ScopeEvaluator] = None):
        self.scope_evaluator = scope_evaluator or ScopeEvaluator()

    def decide(
        self,
        message: BroadcastMessage,
        classification: ClassificationResult,
        preferences: UserPreferences,
        carrier_config: CarrierConfig,
        service_state: Optional[ServiceState] = None,
        device: Optional[DeviceState] = None,
    ) -> Verdict:
        """Decide whether and how a message is surfaced."""
        device = device or DeviceState()
        alert_type = classification.alert_type
        is_emergency = classification.is_emergency

        def suppress(reason: SuppressReason, route_to_area_info: bool = False) -> Verdict:
            logger.debug(
                f"Ignoring alert on channel {message.channel}: {reason.value}"
            )
            return Verdict.suppress(
                reason,
                alert_type=alert_type,
                is_emergency=is_emergency,
                route_to_area_info=route_to_area_info,
            )

        if device.emergency_callback_mode and carrier_config.ignore_messages_in_ecbm:
            return suppress(SuppressReason.EMERGENCY_CALLBACK_MODE)

        if not self._in_scope(classification, service_state):
            logger.debug(
                f"The range {classification.matched_range} is not within the scope. "
                f"scope={classification.matched_range.scope.value}"
            )
            return suppress(SuppressReason.OUT_OF_SCOPE)

        if not message.body:
            logger.error(
                f"Empty content or unsupported charset on channel {message.channel}"
            )
            return suppress(SuppressReason.EMPTY_BODY)

        if self._language_mismatch(message, classification, device):
            logger.debug(
                f"Language mismatch. Message lang={message.language_code}, "
                f"device lang={device.language}"
            )
            return suppress(SuppressReason.LANGUAGE_MISMATCH)

        matched_filter = self._matching_content_filter(message, carrier_config)
        if matched_filter is not None:
            logger.info(f"Skipped message due to filter: {matched_filter}")
            return suppress(SuppressReason.CONTENT_FILTER)

        if message.is_etws_message:
            if not self._is_etws_enabled(message, preferences, carrier_config):
                return suppress(SuppressReason.DISABLED_BY_PREFERENCE)
        elif classification.is_classified and alert_type == AlertType.AREA:
            # Area info goes to the settings status screen, never a popup
            return suppress(SuppressReason.AREA_INFO, route_to_area_info=True)
        elif not self._is_channel_enabled(message, classification, preferences, carrier_config):
            return suppress(SuppressReason.DISABLED_BY_PREFERENCE)

        return Verdict(show=True, alert_type=alert_type, is_emergency=is_emergency)

    def _in_scope(
        self,
        classification: ClassificationResult,
        service_state: Optional[ServiceState],
    ) -> bool:
        if classification.matched_range is None:
            return True
        if not classification.scope_pass:
            return False
        return self.scope_evaluator.matches(
            classification.matched_range.scope, service_state
        )

    def _language_mismatch(
        self,
        message: BroadcastMessage,
        classification: ClassificationResult,
        device: DeviceState,
    ) -> bool:
        matched = classification.matched_range
        if matched is None or not matched.filter_language:
            return False
        if not message.language_code:
            return False
        if not device.language:
            logger.warning(
                f"Device language unknown, not filtering message in {message.language_code}"
            )
            return False
        return message.language_code.lower() != device.language.lower()

    def _matching_content_filter(
        self, message: BroadcastMessage, carrier_config: CarrierConfig
    ) -> Optional[str]:
        body = message.body.lower()
        for message_filter in carrier_config.message_filters:
            message_filter = message_filter.strip()
            if message_filter and message_filter.lower() in body:
                return message_filter
        return None

    def _is_etws_enabled(
        self,
        message: BroadcastMessage,
        preferences: UserPreferences,
        carrier_config: CarrierConfig,
    ) -> bool:
        # The master toggle is the only switch for ETWS
        master = preferences.enable_alerts_master_toggle
        if message.is_etws_test_message:
            return master and self._toggle(
                TEST_ALERTS_PREFERENCE, preferences, carrier_config
            )
        return master

    def _is_channel_enabled(
        self,
        message: BroadcastMessage,
        classification: ClassificationResult,
        preferences: UserPreferences,
        carrier_config: CarrierConfig,
    ) -> bool:
        # Presidential alerts cannot be turned off
        if (
            classification.category == ChannelCategory.CMAS_PRESIDENTIAL
            or message.is_presidential_alert
        ):
            return True

        policy = self._policy_for(classification)
        if policy.requires_master and not preferences.enable_alerts_master_toggle:
            return False
        if policy.preference is None:
            return True
        return self._toggle(policy.preference, preferences, carrier_config)

    def _policy_for(self, classification: ClassificationResult) -> EnablePolicy:
        if not classification.is_classified:
            return UNMATCHED_POLICY
        if classification.alert_type in ALERT_TYPE_POLICIES:
            return ALERT_TYPE_POLICIES[classification.alert_type]
        if classification.category is None:
            # Matched through a single range list rather than a full table
            return CATEGORY_POLICIES[ChannelCategory.ADDITIONAL]
        return CATEGORY_POLICIES[classification.category]

    def _toggle(
        self,
        preference: str,
        preferences: UserPreferences,
        carrier_config: CarrierConfig,
    ) -> bool:
        if preference == TEST_ALERTS_PREFERENCE and carrier_config.force_disable_etws_cmas_test:
            return False
        return getattr(preferences, preference)
