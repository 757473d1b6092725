"""Tests for the alert service."""

from unittest.mock import Mock

import pytest

from cell_broadcast_filter.models.alert import (
    NOTIFICATION_CHANNEL_EMERGENCY_ALERTS,
    NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS,
)
from cell_broadcast_filter.models.channel import AlertType, ChannelCategory
from cell_broadcast_filter.models.config import CarrierConfig, UserPreferences
from cell_broadcast_filter.models.device import DeviceState, RoamingType, ServiceState
from cell_broadcast_filter.models.message import (
    CmasMessageClass,
    EtwsWarningInfo,
    EtwsWarningType,
    MessageType,
)
from cell_broadcast_filter.models.verdict import SuppressReason
from cell_broadcast_filter.services.alert_service import AlertService
from cell_broadcast_filter.services.config_manager import ConfigurationManager
from cell_broadcast_filter.utils.error_handling import ErrorCategory, get_error_tracker


@pytest.fixture
def config_manager(config_file):
    return ConfigurationManager(str(config_file))


@pytest.fixture
def area_info_sink():
    return Mock()


@pytest.fixture
def service(config_manager, area_info_sink):
    return AlertService(config_manager, area_info_sink=area_info_sink)


@pytest.fixture
def stub_config_manager(channel_resources):
    """Configuration manager double returning fixed values."""
    manager = Mock()
    manager.get_carrier_config.return_value = CarrierConfig()
    manager.get_channel_resources.return_value = channel_resources
    manager.get_preferences.return_value = UserPreferences()
    return manager


class TestProcessMessage:
    """Test cases for AlertService.process_message."""

    def test_emergency_alert_shown_with_audio(self, service, make_message, device):
        outcome = service.process_message(make_message(channel=911, language_code="en"), None, device)

        assert outcome.show is True
        assert outcome.is_emergency is True
        assert outcome.classification.category == ChannelCategory.EMERGENCY
        assert outcome.notification_channel == NOTIFICATION_CHANNEL_EMERGENCY_ALERTS
        assert outcome.audio.tone_type == AlertType.DEFAULT
        assert outcome.audio.vibration_pattern == (0, 1000, 500, 1000)
        assert outcome.audio.full_volume is False
        assert outcome.audio.message_body == "Test alert message"
        assert outcome.audio.message_language == "en"

    def test_non_emergency_shown_without_audio(self, service, make_message, device):
        outcome = service.process_message(make_message(channel=0xAC50), None, device)

        assert outcome.show is True
        assert outcome.is_emergency is False
        assert outcome.notification_channel == NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS
        assert outcome.audio is None

    def test_tone_from_range(self, service, make_message, device):
        outcome = service.process_message(make_message(channel=0xAFEE), None, device)

        assert outcome.audio.tone_type == AlertType.ETWS_TSUNAMI

    def test_etws_tone_from_warning_type(self, service, make_message, device):
        message = make_message(
            channel=4352,
            message_type=MessageType.ETWS,
            etws_warning_info=EtwsWarningInfo(warning_type=EtwsWarningType.EARTHQUAKE),
        )

        outcome = service.process_message(message, None, device)

        assert outcome.is_emergency is True
        assert outcome.audio.tone_type == AlertType.ETWS_EARTHQUAKE

    def test_presidential_full_volume(self, service, make_message, device):
        message = make_message(
            channel=0x1112,
            message_type=MessageType.CMAS,
            cmas_message_class=CmasMessageClass.PRESIDENTIAL_LEVEL_ALERT,
        )

        outcome = service.process_message(message, None, device)

        assert outcome.audio.full_volume is True

    def test_suppressed_has_no_audio(self, service, make_message, device):
        outcome = service.process_message(make_message(channel=0x111C), None, device)

        assert outcome.show is False
        assert outcome.verdict.reason == SuppressReason.DISABLED_BY_PREFERENCE
        assert outcome.audio is None
        assert outcome.notification_channel is None

    def test_out_of_scope(self, service, make_message, device):
        roaming = ServiceState(voice_roaming_type=RoamingType.INTERNATIONAL)

        outcome = service.process_message(make_message(channel=4383), roaming, device)

        assert outcome.verdict.reason == SuppressReason.OUT_OF_SCOPE

    def test_default_device_used_when_missing(self, service, make_message):
        assert service.process_message(make_message(channel=911)).show is True


class TestAreaInfo:
    """Test cases for area info publication."""

    def test_area_info_published(self, service, area_info_sink, make_message, device):
        message = make_message(channel=50, body="Sydney CBD", sub_id=0)

        outcome = service.process_message(message, None, device)

        assert outcome.show is False
        assert outcome.verdict.route_to_area_info is True
        assert outcome.area_info_published is True
        area_info_sink.publish.assert_called_once_with(message)
        assert service.get_latest_area_info(0) is message

    def test_area_range_next_to_bare_numeric_entries(self, temp_dir, make_message, device):
        config_file = temp_dir / "carrier.yaml"
        config_file.write_text(
            "channel_ranges:\n"
            "  additional_cbs_channels_strings:\n"
            "    - \"50:type=area\"\n"
            "    - 0x1112\n"
            "    - 4370\n"
            "carrier:\n"
            "  area_update_info_settings_enabled: true\n",
            encoding="utf-8",
        )
        service = AlertService(ConfigurationManager(str(config_file)))

        outcome = service.process_message(make_message(channel=50, body="Sydney CBD"), None, device)

        assert outcome.show is False
        assert outcome.classification.alert_type == AlertType.AREA
        assert outcome.verdict.route_to_area_info is True
        assert get_error_tracker().get_component_errors("alert.service") == []

    def test_area_info_needs_carrier_flag(self, stub_config_manager, area_info_sink, make_message, device):
        service = AlertService(stub_config_manager, area_info_sink=area_info_sink)

        outcome = service.process_message(make_message(channel=50), None, device)

        assert outcome.verdict.route_to_area_info is True
        assert outcome.area_info_published is False
        area_info_sink.publish.assert_not_called()
        assert service.get_latest_area_info(0) is None

    def test_area_info_needs_preference(self, stub_config_manager, area_info_sink, make_message, device):
        stub_config_manager.get_carrier_config.return_value = CarrierConfig(
            area_update_info_settings_enabled=True
        )
        stub_config_manager.get_preferences.return_value = UserPreferences(
            enable_area_update_info_alerts=False
        )
        service = AlertService(stub_config_manager, area_info_sink=area_info_sink)

        outcome = service.process_message(make_message(channel=50), None, device)

        assert outcome.area_info_published is False
        area_info_sink.publish.assert_not_called()

    def test_area_info_without_sink(self, config_manager, make_message, device):
        service = AlertService(config_manager)

        outcome = service.process_message(make_message(channel=50, sub_id=0), None, device)

        assert outcome.area_info_published is True
        assert service.get_latest_area_info(0).channel == 50


class TestSubscriptions:
    """Test cases for per-subscription configuration."""

    def test_subscription_channel_overrides(self, service, make_message, device):
        outcome = service.process_message(make_message(channel=919, sub_id=2), None, device)

        assert outcome.classification.category == ChannelCategory.ADDITIONAL
        assert outcome.is_emergency is True

        other = service.process_message(make_message(channel=919, sub_id=0), None, device)
        assert not other.classification.is_classified

    def test_subscription_carrier_overrides(self, service, make_message):
        ecbm = DeviceState(language="en", emergency_callback_mode=True)

        sub_two = service.process_message(make_message(channel=911, sub_id=2), None, ecbm)
        sub_zero = service.process_message(make_message(channel=911, sub_id=0), None, ecbm)

        assert sub_two.verdict.reason == SuppressReason.EMERGENCY_CALLBACK_MODE
        assert sub_zero.show is True

    def test_table_built_per_subscription(self, stub_config_manager, make_message, device):
        service = AlertService(stub_config_manager)

        service.process_message(make_message(channel=911, sub_id=3), None, device)

        stub_config_manager.get_channel_resources.assert_called_once_with(3)
        stub_config_manager.get_carrier_config.assert_called_once_with(3)


class TestFailOpen:
    """Test cases for failures while evaluating a message."""

    def test_configuration_failure_shows_alert(self, stub_config_manager, make_message, device):
        stub_config_manager.get_channel_resources.side_effect = RuntimeError("boom")
        service = AlertService(stub_config_manager)

        outcome = service.process_message(
            make_message(channel=0x1113, message_type=MessageType.CMAS), None, device
        )

        assert outcome.show is True
        assert outcome.is_emergency is True
        assert outcome.notification_channel == NOTIFICATION_CHANNEL_EMERGENCY_ALERTS
        assert not outcome.classification.is_classified

    def test_failure_recorded(self, stub_config_manager, make_message, device):
        stub_config_manager.get_preferences.side_effect = RuntimeError("boom")
        service = AlertService(stub_config_manager)

        outcome = service.process_message(make_message(channel=911), None, device)

        assert outcome.is_emergency is False
        errors = get_error_tracker().get_component_errors("alert.service")
        assert len(errors) == 1
        assert errors[0].category == ErrorCategory.DECISION
        assert errors[0].context == {"channel": 911, "sub_id": 0}

    def test_bad_range_lines_do_not_fail_message(self, stub_config_manager, make_message, device):
        stub_config_manager.get_channel_resources.return_value = {
            "emergency_alerts_channels_range_strings": ["bogus", "911:emergency=true"],
        }
        service = AlertService(stub_config_manager)

        outcome = service.process_message(make_message(channel=911), None, device)

        assert outcome.show is True
        assert outcome.is_emergency is True
        assert len(get_error_tracker().get_component_errors("channel_range_table")) == 1
