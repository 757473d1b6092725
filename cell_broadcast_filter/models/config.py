"""
Configuration models for the system.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from .channel import ChannelCategory

DEFAULT_VIBRATION_PATTERN = [0, 2000, 500, 1000, 500, 1000, 500, 2000, 500, 1000, 500, 1000]

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class UserPreferences:
    """User toggles from the emergency alert settings screen."""

    enable_alerts_master_toggle: bool = True
    enable_emergency_alerts: bool = True
    enable_cmas_extreme_threat_alerts: bool = True
    enable_cmas_severe_threat_alerts: bool = True
    enable_cmas_amber_alerts: bool = True
    enable_public_safety_messages: bool = True
    enable_test_alerts: bool = False
    enable_state_local_test_alerts: bool = False
    enable_area_update_info_alerts: bool = True
    enable_alert_speech: bool = True
    use_full_volume: bool = False

    def validate(self) -> bool:
        """Validate that every toggle is a boolean."""
        for pref in fields(self):
            if not isinstance(getattr(self, pref.name), bool):
                raise ValueError(f"Preference '{pref.name}' must be a boolean")

        return True


@dataclass
class CarrierConfig:
    """Carrier feature flags that affect alert handling."""

    ignore_messages_in_ecbm: bool = False
    force_disable_etws_cmas_test: bool = False
    area_update_info_settings_enabled: bool = False
    full_volume_presidential_alert: bool = False
    default_vibration_pattern: List[int] = field(
        default_factory=lambda: list(DEFAULT_VIBRATION_PATTERN)
    )
    message_filters: List[str] = field(default_factory=list)

    def validate(self) -> bool:
        """Validate carrier configuration."""
        for flag in (
            "ignore_messages_in_ecbm",
            "force_disable_etws_cmas_test",
            "area_update_info_settings_enabled",
            "full_volume_presidential_alert",
        ):
            if not isinstance(getattr(self, flag), bool):
                raise ValueError(f"Carrier flag '{flag}' must be a boolean")

        if not isinstance(self.default_vibration_pattern, list):
            raise ValueError("Default vibration pattern must be a list")

        for duration in self.default_vibration_pattern:
            if not isinstance(duration, int) or duration < 0:
                raise ValueError(
                    "Default vibration pattern must contain non-negative integers"
                )

        if not isinstance(self.message_filters, list):
            raise ValueError("Message filters must be a list")

        for message_filter in self.message_filters:
            if not isinstance(message_filter, str):
                raise ValueError("All message filters must be strings")

        return True

    def with_overrides(self, overrides: Dict[str, Any]) -> "CarrierConfig":
        """Return a copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown carrier config keys: {sorted(unknown)}")
        return replace(self, **overrides)


@dataclass
class SubscriptionOverrides:
    """Per-subscription replacements for carrier flags and channel arrays."""

    carrier: Dict[str, Any] = field(default_factory=dict)
    channel_ranges: Dict[str, Optional[List[str]]] = field(default_factory=dict)


def _validate_channel_ranges(channel_ranges: Dict[str, Any]) -> None:
    if not isinstance(channel_ranges, dict):
        raise ValueError("Channel ranges must be a mapping of resource key to list")

    valid_keys = [category.resource_key for category in ChannelCategory]
    for key, entries in channel_ranges.items():
        if key not in valid_keys:
            raise ValueError(f"Unknown channel range key '{key}'")

        # None marks a key as explicitly not configured
        if entries is None:
            continue

        if not isinstance(entries, list):
            raise ValueError(f"Channel ranges for '{key}' must be a list")

        for entry in entries:
            if not isinstance(entry, str):
                raise ValueError(f"All channel ranges for '{key}' must be strings")


@dataclass
class Configuration:
    """System configuration."""

    channel_ranges: Dict[str, Optional[List[str]]]
    carrier: CarrierConfig
    preferences: UserPreferences
    subscriptions: Dict[int, SubscriptionOverrides] = field(default_factory=dict)
    log_level: str = "INFO"
    log_dir: str = "logs"

    def validate(self) -> bool:
        """Validate system configuration."""
        _validate_channel_ranges(self.channel_ranges)

        self.carrier.validate()
        self.preferences.validate()

        for sub_id, overrides in self.subscriptions.items():
            if not isinstance(sub_id, int):
                raise ValueError("Subscription ids must be integers")

            _validate_channel_ranges(overrides.channel_ranges)
            self.carrier.with_overrides(overrides.carrier).validate()

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")

        return True

    def carrier_for(self, sub_id: int) -> CarrierConfig:
        """Carrier flags for a subscription, overrides applied."""
        overrides = self.subscriptions.get(sub_id)
        if overrides is None:
            return self.carrier
        return self.carrier.with_overrides(overrides.carrier)

    def channel_ranges_for(self, sub_id: int) -> Dict[str, Optional[List[str]]]:
        """Channel range arrays for a subscription, overrides applied."""
        resources = dict(self.channel_ranges)
        overrides = self.subscriptions.get(sub_id)
        if overrides is not None:
            resources.update(overrides.channel_ranges)
        return resources
