"""
Protocol interfaces for the Cell Broadcast Alert Filter.

These protocols mark the seams between the rule engine and the
collaborators that supply configuration or consume its decisions.
"""

from typing import Dict, List, Optional, Protocol, Sequence

from .models.channel import ChannelRange, ClassificationResult, Scope
from .models.config import CarrierConfig, UserPreferences
from .models.device import DeviceState, ServiceState
from .models.message import BroadcastMessage
from .models.verdict import Verdict


class IRangeParser(Protocol):
    """Protocol for parsing channel range configuration lines."""

    def parse(self, line: str) -> ChannelRange:
        """Parse one configuration line, raising on malformed input."""
        ...


class IScopeEvaluator(Protocol):
    """Protocol for matching range scopes against roaming state."""

    def matches(self, scope: Scope, service_state: Optional[ServiceState]) -> bool:
        """Check whether a scope applies under the given service state."""
        ...


class IAlertClassifier(Protocol):
    """Protocol for classifying channel ids."""

    def classify(
        self,
        channel: int,
        ranges: Optional[Sequence[ChannelRange]],
        service_state: Optional[ServiceState] = None,
    ) -> ClassificationResult:
        """Classify a channel against an ordered list of ranges."""
        ...


class IDisplayPolicy(Protocol):
    """Protocol for the final display decision."""

    def decide(
        self,
        message: BroadcastMessage,
        classification: ClassificationResult,
        preferences: UserPreferences,
        carrier_config: CarrierConfig,
        service_state: Optional[ServiceState] = None,
        device: Optional[DeviceState] = None,
    ) -> Verdict:
        """Decide whether a message is shown."""
        ...


class IConfigurationManager(Protocol):
    """Protocol for resolving carrier configuration per subscription."""

    def get_carrier_config(self, sub_id: int) -> CarrierConfig:
        """Carrier feature flags for a subscription."""
        ...

    def get_channel_resources(self, sub_id: int) -> Dict[str, Optional[List[str]]]:
        """Channel range arrays for a subscription."""
        ...

    def get_preferences(self) -> UserPreferences:
        """Current user preferences."""
        ...


class IAreaInfoSink(Protocol):
    """Protocol for the collaborator that stores and broadcasts area info."""

    def publish(self, message: BroadcastMessage) -> None:
        """Publish the latest area info broadcast."""
        ...
