"""
Channel range models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class AlertType(Enum):
    """Alert tone / presentation type attached to a channel range."""

    DEFAULT = "default"
    ETWS_DEFAULT = "etws_default"
    ETWS_EARTHQUAKE = "etws_earthquake"
    ETWS_TSUNAMI = "etws_tsunami"
    TEST = "test"
    AREA = "area"
    INFO = "info"
    OTHER = "other"


class RatType(Enum):
    """Radio access technology the range applies to."""

    GSM = "gsm"
    CDMA = "cdma"


class Scope(Enum):
    """Network conditions under which a range applies."""

    UNKNOWN = "unknown"
    CARRIER = "carrier"
    DOMESTIC = "domestic"
    INTERNATIONAL = "international"


class ChannelCategory(Enum):
    """Named channel range arrays, one per carrier resource key."""

    ADDITIONAL = "additional_cbs_channels_strings"
    EMERGENCY = "emergency_alerts_channels_range_strings"
    CMAS_PRESIDENTIAL = "cmas_presidential_alerts_channels_range_strings"
    CMAS_EXTREME = "cmas_alert_extreme_channels_range_strings"
    CMAS_SEVERE = "cmas_alerts_severe_range_strings"
    CMAS_AMBER = "cmas_amber_alerts_channels_range_strings"
    REQUIRED_MONTHLY_TEST = "required_monthly_test_range_strings"
    EXERCISE = "exercise_alert_range_strings"
    OPERATOR_DEFINED = "operator_defined_alert_range_strings"
    PUBLIC_SAFETY = "public_safety_messages_channels_range_strings"
    STATE_LOCAL_TEST = "state_local_test_alert_range_strings"

    @property
    def resource_key(self) -> str:
        return self.value


# Probe order when a channel may appear in several arrays. Earlier entries win.
CATEGORY_PRECEDENCE: Tuple[ChannelCategory, ...] = (
    ChannelCategory.ADDITIONAL,
    ChannelCategory.EMERGENCY,
    ChannelCategory.CMAS_PRESIDENTIAL,
    ChannelCategory.CMAS_EXTREME,
    ChannelCategory.CMAS_SEVERE,
    ChannelCategory.CMAS_AMBER,
    ChannelCategory.REQUIRED_MONTHLY_TEST,
    ChannelCategory.EXERCISE,
    ChannelCategory.OPERATOR_DEFINED,
    ChannelCategory.PUBLIC_SAFETY,
    ChannelCategory.STATE_LOCAL_TEST,
)


@dataclass(frozen=True)
class ChannelRange:
    """A contiguous interval of broadcast channel ids sharing attributes."""

    start_id: int
    end_id: int
    alert_type: AlertType = AlertType.DEFAULT
    is_emergency: bool = False
    rat: RatType = RatType.GSM
    scope: Scope = Scope.UNKNOWN
    filter_language: bool = False
    vibration_pattern: Optional[Tuple[int, ...]] = None

    def contains(self, channel: int) -> bool:
        """Check whether a channel id falls inside this range."""
        return self.start_id <= channel <= self.end_id

    def validate(self) -> bool:
        """Validate range bounds and attributes."""
        if not isinstance(self.start_id, int) or not isinstance(self.end_id, int):
            raise ValueError("Channel range bounds must be integers")

        if self.start_id < 0:
            raise ValueError("Channel range start cannot be negative")

        if self.start_id > self.end_id:
            raise ValueError(
                f"Channel range start {self.start_id} is greater than end {self.end_id}"
            )

        if not isinstance(self.alert_type, AlertType):
            raise ValueError("alert_type must be an AlertType enum")

        if self.vibration_pattern is not None:
            if any(duration < 0 for duration in self.vibration_pattern):
                raise ValueError("Vibration durations cannot be negative")

        return True

    def __str__(self) -> str:
        if self.start_id == self.end_id:
            return f"[{self.start_id}]"
        return f"[{self.start_id}-{self.end_id}]"


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of matching a channel id against channel ranges."""

    channel: int
    matched_range: Optional[ChannelRange] = None
    category: Optional[ChannelCategory] = None
    scope_pass: bool = True

    @property
    def is_classified(self) -> bool:
        return self.matched_range is not None

    @property
    def alert_type(self) -> AlertType:
        if self.matched_range is None:
            return AlertType.DEFAULT
        return self.matched_range.alert_type

    @property
    def is_emergency(self) -> bool:
        if self.matched_range is None:
            return False
        return self.matched_range.is_emergency
