"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Cell Broadcast Alert Filter test suite.
"""

import logging
import tempfile
from pathlib import Path

import pytest
import yaml

from cell_broadcast_filter.components.alert_classifier import AlertClassifier
from cell_broadcast_filter.components.channel_range_table import ChannelRangeTable
from cell_broadcast_filter.components.display_policy import DisplayPolicy
from cell_broadcast_filter.components.range_parser import RangeParser
from cell_broadcast_filter.components.scope_evaluator import ScopeEvaluator
from cell_broadcast_filter.models.config import CarrierConfig, UserPreferences
from cell_broadcast_filter.models.device import (
    DeviceState,
    RegistrationState,
    RoamingType,
    ServiceState,
)
from cell_broadcast_filter.models.message import BroadcastMessage, MessageType
from cell_broadcast_filter.utils.error_handling import get_error_tracker
from cell_broadcast_filter.utils import logging as logging_module


SAMPLE_CHANNEL_RESOURCES = {
    "additional_cbs_channels_strings": [
        "43008:type=earthquake, emergency=true",
        "0xAFEE:type=tsunami, emergency=true",
        "0xAC00-0xAFED:type=other",
        "50:type=area",
        "60:type=test",
        "4383:scope=national",
        "4384:filter_language=true, vibration=0|350|250|350",
    ],
    "emergency_alerts_channels_range_strings": ["911-912:emergency=true"],
    "cmas_presidential_alerts_channels_range_strings": ["0x1112:emergency=true"],
    "cmas_alert_extreme_channels_range_strings": ["0x1113-0x1114:emergency=true"],
    "cmas_alerts_severe_range_strings": ["0x1115-0x111A:emergency=true"],
    "cmas_amber_alerts_channels_range_strings": ["0x111B:emergency=true"],
    "required_monthly_test_range_strings": ["0x111C"],
    "exercise_alert_range_strings": ["0x111D"],
    "operator_defined_alert_range_strings": ["0x111E"],
    "public_safety_messages_channels_range_strings": ["0x112D"],
    "state_local_test_alert_range_strings": ["0x112E"],
}


@pytest.fixture(autouse=True)
def clear_error_tracker():
    """Start every test with an empty global error tracker."""
    get_error_tracker().clear()
    yield
    get_error_tracker().clear()


@pytest.fixture
def reset_logging():
    """Restore the package logger after tests that install handlers."""
    yield
    root_logger = logging.getLogger(logging_module.ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.NOTSET)
    logging_module._logging_manager = None


@pytest.fixture
def parser():
    return RangeParser()


@pytest.fixture
def scope_evaluator():
    return ScopeEvaluator()


@pytest.fixture
def classifier():
    return AlertClassifier()


@pytest.fixture
def display_policy():
    return DisplayPolicy()


@pytest.fixture
def channel_resources():
    """Carrier channel arrays keyed by resource name."""
    return {key: list(entries) for key, entries in SAMPLE_CHANNEL_RESOURCES.items()}


@pytest.fixture
def sample_table(channel_resources):
    """A fully configured channel range table."""
    return ChannelRangeTable.from_resources(channel_resources)


@pytest.fixture
def preferences():
    """Default user preferences."""
    return UserPreferences()


@pytest.fixture
def carrier_config():
    """Default carrier flags."""
    return CarrierConfig()


@pytest.fixture
def home_service_state():
    """Registered on the home network."""
    return ServiceState(RegistrationState.IN_SERVICE, RoamingType.NOT_ROAMING)


@pytest.fixture
def device():
    """English device outside emergency callback mode."""
    return DeviceState(language="en", emergency_callback_mode=False)


@pytest.fixture
def make_message():
    """Factory for broadcast messages with sensible defaults."""

    def _make(channel=911, body="Test alert message", **kwargs):
        kwargs.setdefault("message_type", MessageType.GSM)
        return BroadcastMessage(channel=channel, body=body, **kwargs)

    return _make


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def valid_config_data(channel_resources):
    """Configuration file contents accepted by the configuration manager."""
    return {
        "channel_ranges": channel_resources,
        "carrier": {
            "ignore_messages_in_ecbm": False,
            "area_update_info_settings_enabled": True,
            "full_volume_presidential_alert": True,
            "default_vibration_pattern": [0, 1000, 500, 1000],
            "message_filters": "",
        },
        "preferences": {
            "enable_alerts_master_toggle": True,
            "enable_test_alerts": False,
        },
        "subscriptions": {
            2: {
                "carrier": {"ignore_messages_in_ecbm": True},
                "channel_ranges": {
                    "additional_cbs_channels_strings": ["919:emergency=true"],
                },
            },
        },
        "system": {"log_level": "INFO", "log_dir": "logs"},
    }


@pytest.fixture
def config_file(temp_dir, valid_config_data):
    """A YAML configuration file on disk."""
    path = temp_dir / "carrier.yaml"
    path.write_text(yaml.safe_dump(valid_config_data), encoding="utf-8")
    return path


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to every test not marked otherwise."""
    for item in items:
        if not any(
            marker.name in ["integration", "slow"] for marker in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)
