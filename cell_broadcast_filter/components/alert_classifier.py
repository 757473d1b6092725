"""Classification of broadcast channels against channel range tables."""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..models.channel import (
    AlertType,
    ChannelRange,
    ClassificationResult,
)
from ..models.device import ServiceState
from ..models.message import BroadcastMessage, EtwsWarningType
from .channel_range_table import ChannelRangeTable
from .scope_evaluator import ScopeEvaluator

logger = logging.getLogger(__name__)

ETWS_WARNING_ALERT_TYPES: Dict[EtwsWarningType, AlertType] = {
    EtwsWarningType.EARTHQUAKE: AlertType.ETWS_EARTHQUAKE,
    EtwsWarningType.EARTHQUAKE_AND_TSUNAMI: AlertType.ETWS_EARTHQUAKE,
    EtwsWarningType.TSUNAMI: AlertType.ETWS_TSUNAMI,
    EtwsWarningType.TEST_MESSAGE: AlertType.TEST,
    EtwsWarningType.OTHER_EMERGENCY: AlertType.OTHER,
}


def find_range(channel: int, ranges: Iterable[ChannelRange]) -> Optional[ChannelRange]:
    """First range containing the channel, in iteration order."""
    for channel_range in ranges:
        if channel_range.contains(channel):
            return channel_range
    return None


class AlertClassifier:
    """Matches channel ids to configured ranges.

    Stateless; tables are passed in on every call so one classifier can be
    shared between threads.
    """

    def __init__(self, scope_evaluator: Optional[ScopeEvaluator] = None):
        self.scope_evaluator = scope_evaluator or ScopeEvaluator()

    def classify(
        self,
        channel: int,
        ranges: Optional[Sequence[ChannelRange]],
        service_state: Optional[ServiceState] = None,
    ) -> ClassificationResult:
        """Classify a channel against a single ordered list of ranges."""
        matched = find_range(channel, ranges or ())
        if matched is None:
            return ClassificationResult(channel=channel)

        return ClassificationResult(
            channel=channel,
            matched_range=matched,
            scope_pass=self.scope_evaluator.matches(matched.scope, service_state),
        )

    def classify_table(
        self,
        channel: int,
        table: ChannelRangeTable,
        service_state: Optional[ServiceState] = None,
    ) -> ClassificationResult:
        """Classify a channel against every category of a table.

        Categories are checked in precedence order and the first one with a
        matching range decides the result, even when later categories
        overlap it.
        """
        for category, ranges in table:
            matched = find_range(channel, ranges)
            if matched is None:
                continue

            scope_pass = self.scope_evaluator.matches(matched.scope, service_state)
            logger.debug(
                f"Channel {channel} matched {category.name} range {matched} "
                f"(type={matched.alert_type.value}, emergency={matched.is_emergency}, "
                f"scope_pass={scope_pass})"
            )
            return ClassificationResult(
                channel=channel,
                matched_range=matched,
                category=category,
                scope_pass=scope_pass,
            )

        logger.debug(f"Channel {channel} is not in any configured range")
        return ClassificationResult(channel=channel)

    def resolve_alert_type(self, message: BroadcastMessage, table: ChannelRangeTable) -> AlertType:
        """Alert tone type for an emergency message.

        ETWS messages take their type from the warning type; everything else
        from the first range in the full table that contains the channel.
        """
        if message.is_etws_message:
            if message.etws_warning_info is None:
                return AlertType.ETWS_DEFAULT
            return ETWS_WARNING_ALERT_TYPES.get(
                message.etws_warning_info.warning_type, AlertType.ETWS_DEFAULT
            )

        matched = find_range(message.channel, table.all_ranges())
        if matched is None:
            return AlertType.DEFAULT
        return matched.alert_type

    def resolve_vibration_pattern(
        self,
        message: BroadcastMessage,
        table: ChannelRangeTable,
        default_pattern: Sequence[int],
    ) -> Tuple[int, ...]:
        """Vibration pattern of the matching range, or the device default."""
        matched = find_range(message.channel, table.all_ranges())
        if matched is not None and matched.vibration_pattern is not None:
            return matched.vibration_pattern
        return tuple(default_pattern)

    def is_emergency_message(self, message: BroadcastMessage, table: ChannelRangeTable) -> bool:
        """Emergency flag of the matching range, else the message family."""
        matched = find_range(message.channel, table.all_ranges())
        if matched is not None:
            return matched.is_emergency
        return message.is_emergency_alert_message
