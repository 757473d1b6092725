"""
Alert service turning received broadcasts into display decisions.

The service builds the channel range table for the message's subscription,
classifies the channel, runs the display policy and prepares the requests
consumed by the notification, audio and area-info collaborators.
"""

from typing import Dict, Optional

from ..components.alert_classifier import AlertClassifier
from ..components.channel_range_table import ChannelRangeTable
from ..components.display_policy import DisplayPolicy
from ..components.range_parser import RangeParser
from ..components.scope_evaluator import ScopeEvaluator
from ..interfaces import IAreaInfoSink, IConfigurationManager
from ..models.alert import (
    NOTIFICATION_CHANNEL_EMERGENCY_ALERTS,
    NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS,
    AlertOutcome,
    AudioRequest,
)
from ..models.channel import ClassificationResult
from ..models.config import CarrierConfig, UserPreferences
from ..models.device import DeviceState, ServiceState
from ..models.message import BroadcastMessage
from ..models.verdict import Verdict
from ..utils.error_handling import ErrorCategory, ErrorSeverity, get_error_tracker
from ..utils.logging import get_logger


class AlertService:
    """
    Per-message entry point of the filter.

    Holds no channel state between calls: the range table is rebuilt from
    the current configuration for every message. The only thing remembered
    is the latest area info broadcast per subscription.
    """

    def __init__(
        self,
        config_manager: IConfigurationManager,
        area_info_sink: Optional[IAreaInfoSink] = None,
        parser: Optional[RangeParser] = None,
    ):
        self.config_manager = config_manager
        self.area_info_sink = area_info_sink
        self.parser = parser or RangeParser()

        scope_evaluator = ScopeEvaluator()
        self.classifier = AlertClassifier(scope_evaluator)
        self.display_policy = DisplayPolicy(scope_evaluator)

        self._latest_area_info: Dict[int, BroadcastMessage] = {}
        self.error_tracker = get_error_tracker()
        self.logger = get_logger("alert.service")

    def build_table(self, sub_id: int) -> ChannelRangeTable:
        """Channel range table for one subscription."""
        return ChannelRangeTable.from_resources(
            self.config_manager.get_channel_resources(sub_id), self.parser
        )

    def process_message(
        self,
        message: BroadcastMessage,
        service_state: Optional[ServiceState] = None,
        device: Optional[DeviceState] = None,
    ) -> AlertOutcome:
        """
        Decide how a received broadcast is surfaced.

        Args:
            message: The decoded broadcast
            service_state: Roaming snapshot for the message's subscription, None if unknown
            device: Device language and emergency callback mode

        Returns:
            AlertOutcome for the presentation, audio and area-info collaborators
        """
        device = device or DeviceState()

        try:
            return self._process(message, service_state, device)
        except Exception as e:
            self.error_tracker.record_error(
                component="alert.service",
                category=ErrorCategory.DECISION,
                severity=ErrorSeverity.HIGH,
                message=f"Failed to evaluate broadcast on channel {message.channel}: {e}",
                exception=e,
                context={"channel": message.channel, "sub_id": message.sub_id},
            )
            return self._fail_open(message)

    def _process(
        self,
        message: BroadcastMessage,
        service_state: Optional[ServiceState],
        device: DeviceState,
    ) -> AlertOutcome:
        carrier = self.config_manager.get_carrier_config(message.sub_id)
        preferences = self.config_manager.get_preferences()
        table = self.build_table(message.sub_id)

        classification = self.classifier.classify_table(
            message.channel, table, service_state
        )
        verdict = self.display_policy.decide(
            message, classification, preferences, carrier, service_state, device
        )
        is_emergency = self.classifier.is_emergency_message(message, table)

        extra = {
            "channel": message.channel,
            "sub_id": message.sub_id,
            "category": classification.category.name if classification.category else None,
            "alert_type": verdict.alert_type.value,
            "show": verdict.show,
            "reason": verdict.reason.value if verdict.reason else None,
        }

        if not verdict.show:
            published = False
            if verdict.route_to_area_info:
                published = self._publish_area_info(message, carrier, preferences)
            self.logger.info("Broadcast not displayed", extra=extra)
            return AlertOutcome(
                verdict=verdict,
                classification=classification,
                is_emergency=is_emergency,
                area_info_published=published,
            )

        audio = None
        if is_emergency:
            audio = AudioRequest(
                tone_type=self.classifier.resolve_alert_type(message, table),
                vibration_pattern=self.classifier.resolve_vibration_pattern(
                    message, table, carrier.default_vibration_pattern
                ),
                full_volume=self._use_full_volume(message, carrier, preferences),
                sub_id=message.sub_id,
                message_body=message.body if preferences.enable_alert_speech else None,
                message_language=(
                    message.language_code if preferences.enable_alert_speech else None
                ),
            )

        self.logger.info("Broadcast displayed", extra={**extra, "emergency": is_emergency})
        return AlertOutcome(
            verdict=verdict,
            classification=classification,
            is_emergency=is_emergency,
            notification_channel=(
                NOTIFICATION_CHANNEL_EMERGENCY_ALERTS
                if is_emergency
                else NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS
            ),
            audio=audio,
        )

    def _publish_area_info(
        self,
        message: BroadcastMessage,
        carrier: CarrierConfig,
        preferences: UserPreferences,
    ) -> bool:
        if not (
            carrier.area_update_info_settings_enabled
            and preferences.enable_area_update_info_alerts
        ):
            return False

        self._latest_area_info[message.sub_id] = message
        if self.area_info_sink is not None:
            self.area_info_sink.publish(message)
        self.logger.debug(
            "Area info updated", extra={"sub_id": message.sub_id, "channel": message.channel}
        )
        return True

    def _use_full_volume(
        self,
        message: BroadcastMessage,
        carrier: CarrierConfig,
        preferences: UserPreferences,
    ) -> bool:
        if carrier.full_volume_presidential_alert and message.is_presidential_alert:
            return True
        return preferences.use_full_volume

    def _fail_open(self, message: BroadcastMessage) -> AlertOutcome:
        is_emergency = message.is_emergency_alert_message
        return AlertOutcome(
            verdict=Verdict(show=True),
            classification=ClassificationResult(channel=message.channel),
            is_emergency=is_emergency,
            notification_channel=(
                NOTIFICATION_CHANNEL_EMERGENCY_ALERTS
                if is_emergency
                else NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS
            ),
        )

    def get_latest_area_info(self, sub_id: int) -> Optional[BroadcastMessage]:
        """Latest area info broadcast received on a subscription."""
        return self._latest_area_info.get(sub_id)
