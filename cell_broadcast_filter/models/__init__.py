"""
Data models for the Cell Broadcast Alert Filter.

This module contains the data classes and enumerations used to describe
channel ranges, received messages, device state, configuration and the
decisions produced by the filter.
"""

from .alert import (
    NOTIFICATION_CHANNEL_EMERGENCY_ALERTS,
    NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS,
    AlertOutcome,
    AudioRequest,
)
from .channel import (
    CATEGORY_PRECEDENCE,
    AlertType,
    ChannelCategory,
    ChannelRange,
    ClassificationResult,
    RatType,
    Scope,
)
from .config import (
    CarrierConfig,
    Configuration,
    SubscriptionOverrides,
    UserPreferences,
)
from .device import DeviceState, RegistrationState, RoamingType, ServiceState
from .message import (
    BroadcastMessage,
    CmasMessageClass,
    EtwsWarningInfo,
    EtwsWarningType,
    MessageType,
)
from .verdict import SuppressReason, Verdict

__all__ = [
    "AlertType",
    "RatType",
    "Scope",
    "ChannelCategory",
    "CATEGORY_PRECEDENCE",
    "ChannelRange",
    "ClassificationResult",
    "BroadcastMessage",
    "MessageType",
    "EtwsWarningInfo",
    "EtwsWarningType",
    "CmasMessageClass",
    "ServiceState",
    "RegistrationState",
    "RoamingType",
    "DeviceState",
    "Verdict",
    "SuppressReason",
    "UserPreferences",
    "CarrierConfig",
    "SubscriptionOverrides",
    "Configuration",
    "AudioRequest",
    "AlertOutcome",
    "NOTIFICATION_CHANNEL_EMERGENCY_ALERTS",
    "NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS",
]
