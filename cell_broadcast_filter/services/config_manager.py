"""
Configuration management for the Cell Broadcast Alert Filter.

Carrier channel range arrays, carrier feature flags, per-subscription
overrides and user preferences are read from a YAML or JSON file.
"""

import json
import os
from dataclasses import fields
from typing import Any, Dict, List, Optional

import yaml

from ..models.config import (
    CarrierConfig,
    Configuration,
    SubscriptionOverrides,
    UserPreferences,
)
from ..utils.error_handling import ErrorCategory, ErrorSeverity, with_error_handling
from ..utils.logging import get_logger


class ConfigurationManager:
    """Manages loading, validation, and reloading of system configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, uses default paths.
        """
        self.config_path = config_path or self._find_config_file()
        self._config: Optional[Configuration] = None
        self._last_modified: Optional[float] = None
        self.logger = get_logger("config.manager", {"config_path": self.config_path})

    def _find_config_file(self) -> str:
        """Find the configuration file in standard locations."""
        possible_paths = [
            "config/carrier.yaml",
            "config/carrier.yml",
            "config/carrier.json",
            "carrier.yaml",
            "carrier.yml",
            "carrier.json",
        ]

        for path in possible_paths:
            if os.path.exists(path):
                return path

        if os.path.exists("config/carrier.example.yaml"):
            raise ValueError(
                "No configuration file found. Please copy 'config/carrier.example.yaml' "
                "to 'config/carrier.yaml' and customize it for your carrier."
            )

        raise ValueError(
            "No configuration file found. Please create a configuration file "
            "at one of these locations: " + ", ".join(possible_paths)
        )

    def load_config(self) -> Configuration:
        """
        Load configuration from file.

        Returns:
            Configuration object with validated settings.

        Raises:
            ValueError: If configuration is invalid or file cannot be read.
            FileNotFoundError: If configuration file doesn't exist.
        """
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        config = self._read_and_parse(self.config_path, expand_env=True)

        self._config = config
        self._last_modified = os.path.getmtime(self.config_path)

        self.logger.info(
            "Configuration loaded",
            extra={
                "channel_range_keys": sorted(config.channel_ranges),
                "subscriptions": sorted(config.subscriptions),
            },
        )
        return config

    def _read_and_parse(self, config_path: str, expand_env: bool) -> Configuration:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith(".json"):
                    raw_config = json.load(f)
                else:
                    raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ValueError(f"Error loading configuration: {e}")

        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        if expand_env:
            raw_config = self._expand_env_vars(raw_config)

        config = self._parse_config(raw_config)
        config.validate()
        return config

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand environment variables in configuration."""
        if isinstance(obj, dict):
            return {key: self._expand_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._expand_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            # Expand ${VAR_NAME} patterns
            if obj.startswith("${") and obj.endswith("}"):
                var_name = obj[2:-1]
                env_value = os.getenv(var_name)
                if env_value is None:
                    raise ValueError(f"Environment variable '{var_name}' not found")
                return env_value
            return obj
        else:
            return obj

    def _parse_config(self, raw_config: Dict[str, Any]) -> Configuration:
        """Parse raw configuration dictionary into Configuration object."""
        channel_ranges = self._normalize_channel_ranges(raw_config.get("channel_ranges") or {})
        carrier = self._parse_carrier(raw_config.get("carrier") or {})
        preferences = self._parse_preferences(raw_config.get("preferences") or {})

        subscriptions: Dict[int, SubscriptionOverrides] = {}
        for sub_id, sub_data in (raw_config.get("subscriptions") or {}).items():
            try:
                sub_key = int(sub_id)
            except (TypeError, ValueError):
                raise ValueError(f"Subscription id must be an integer: {sub_id}")
            sub_data = sub_data or {}
            subscriptions[sub_key] = SubscriptionOverrides(
                carrier=self._normalize_carrier_data(sub_data.get("carrier") or {}),
                channel_ranges=self._normalize_channel_ranges(
                    sub_data.get("channel_ranges") or {}
                ),
            )

        system_data = raw_config.get("system") or {}

        return Configuration(
            channel_ranges=channel_ranges,
            carrier=carrier,
            preferences=preferences,
            subscriptions=subscriptions,
            log_level=str(system_data.get("log_level", "INFO")),
            log_dir=str(system_data.get("log_dir", "logs")),
        )

    def _normalize_channel_ranges(self, channel_ranges: Any) -> Any:
        """Turn bare numeric entries back into range strings.

        YAML reads an unquoted `- 4370` or `- 0x1112` as an int; its decimal
        form is an equivalent single channel line.
        """
        if not isinstance(channel_ranges, dict):
            return channel_ranges

        normalized = {}
        for key, entries in channel_ranges.items():
            if isinstance(entries, list):
                entries = [
                    str(entry)
                    if isinstance(entry, int) and not isinstance(entry, bool)
                    else entry
                    for entry in entries
                ]
            normalized[key] = entries
        return normalized

    def _normalize_carrier_data(self, carrier_data: Dict[str, Any]) -> Dict[str, Any]:
        """Accept message filters as a comma separated string or a list."""
        carrier_data = dict(carrier_data)
        message_filters = carrier_data.get("message_filters")
        if isinstance(message_filters, str):
            carrier_data["message_filters"] = self._split_filters(message_filters)
        return carrier_data

    @staticmethod
    def _split_filters(message_filters: str) -> List[str]:
        return [item.strip() for item in message_filters.split(",") if item.strip()]

    def _parse_carrier(self, carrier_data: Dict[str, Any]) -> CarrierConfig:
        return CarrierConfig().with_overrides(self._normalize_carrier_data(carrier_data))

    def _parse_preferences(self, preference_data: Dict[str, Any]) -> UserPreferences:
        known = {f.name for f in fields(UserPreferences)}
        unknown = set(preference_data) - known
        if unknown:
            raise ValueError(f"Unknown preference keys: {sorted(unknown)}")
        return UserPreferences(**preference_data)

    def get_config(self) -> Configuration:
        """
        Get current configuration, loading if necessary.

        Returns:
            Current configuration object.
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def get_carrier_config(self, sub_id: int) -> CarrierConfig:
        """Carrier flags for a subscription."""
        return self.get_config().carrier_for(sub_id)

    def get_channel_resources(self, sub_id: int) -> Dict[str, Optional[List[str]]]:
        """Channel range arrays for a subscription, keyed by resource name."""
        return self.get_config().channel_ranges_for(sub_id)

    def get_preferences(self) -> UserPreferences:
        """Current user preferences."""
        return self.get_config().preferences

    @with_error_handling(
        component="config.manager",
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.MEDIUM,
        fallback_value=False,
        suppress_exceptions=True,
    )
    def reload_if_changed(self) -> bool:
        """
        Reload configuration if file has been modified.

        A failed reload keeps the current configuration.

        Returns:
            True if configuration was reloaded, False otherwise.
        """
        if not os.path.exists(self.config_path):
            return False

        current_modified = os.path.getmtime(self.config_path)

        if self._last_modified is None or current_modified > self._last_modified:
            self.load_config()
            return True

        return False

    def validate_config_file(self, config_path: str) -> bool:
        """
        Validate a configuration file without loading it.

        Environment variables are not expanded during validation.

        Raises:
            ValueError: If configuration is invalid with detailed error message.
        """
        if not os.path.exists(config_path):
            raise ValueError(f"Configuration file not found: {config_path}")

        try:
            self._read_and_parse(config_path, expand_env=False)
        except ValueError as e:
            raise ValueError(f"Configuration validation failed: {e}")

        return True

    def get_config_template(self) -> Dict[str, Any]:
        """
        Get a template configuration dictionary.

        Returns:
            Dictionary with example configuration structure.
        """
        return {
            "channel_ranges": {
                "additional_cbs_channels_strings": [
                    "43008:type=earthquake, emergency=true",
                    "0xAFEE:type=tsunami, emergency=true",
                    "0xAC00-0xAFED:type=other",
                    "1234-5678",
                ],
                "emergency_alerts_channels_range_strings": [],
                "cmas_presidential_alerts_channels_range_strings": [
                    "0x1112:emergency=true",
                    "0x1120:emergency=true",
                ],
                "cmas_alert_extreme_channels_range_strings": [
                    "0x1113-0x1114:emergency=true",
                    "0x1121-0x1122:emergency=true",
                ],
                "cmas_alerts_severe_range_strings": [
                    "0x1115-0x111A:emergency=true",
                    "0x1123-0x1128:emergency=true",
                ],
                "cmas_amber_alerts_channels_range_strings": [
                    "0x111B:emergency=true",
                    "0x1129:emergency=true",
                ],
                "required_monthly_test_range_strings": ["0x111C:type=test", "0x112A:type=test"],
                "exercise_alert_range_strings": ["0x111D:type=test", "0x112B:type=test"],
                "operator_defined_alert_range_strings": ["0x111E:type=test", "0x112C:type=test"],
                "public_safety_messages_channels_range_strings": ["0x112D:emergency=true"],
                "state_local_test_alert_range_strings": ["0x112E:type=test"],
            },
            "carrier": {
                "ignore_messages_in_ecbm": False,
                "force_disable_etws_cmas_test": False,
                "area_update_info_settings_enabled": False,
                "full_volume_presidential_alert": True,
                "default_vibration_pattern": [0, 2000, 500, 1000, 500, 1000, 500, 2000, 500, 1000, 500, 1000],
                "message_filters": "${CB_MESSAGE_FILTER}",
            },
            "preferences": {
                "enable_alerts_master_toggle": True,
                "enable_test_alerts": False,
            },
            "subscriptions": {
                1: {
                    "carrier": {"ignore_messages_in_ecbm": True},
                },
            },
            "system": {
                "log_level": "INFO",
                "log_dir": "logs",
            },
        }
