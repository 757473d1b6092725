"""
Unit tests for data model validation.
"""

import pytest
from unittest.mock import patch

from cell_broadcast_filter.models import (
    CATEGORY_PRECEDENCE,
    AlertOutcome,
    AlertType,
    BroadcastMessage,
    CarrierConfig,
    ChannelCategory,
    ChannelRange,
    ClassificationResult,
    CmasMessageClass,
    Configuration,
    DeviceState,
    EtwsWarningInfo,
    EtwsWarningType,
    MessageType,
    RegistrationState,
    ServiceState,
    SubscriptionOverrides,
    SuppressReason,
    UserPreferences,
    Verdict,
)
from cell_broadcast_filter.models.device import default_device_language


class TestChannelRange:
    """Test ChannelRange validation."""

    def test_valid_range(self):
        """Test validation of valid range."""
        channel_range = ChannelRange(0x1113, 0x1114, is_emergency=True)

        assert channel_range.validate() is True
        assert channel_range.contains(0x1113)
        assert channel_range.contains(0x1114)
        assert not channel_range.contains(0x1115)

    def test_reversed_bounds_raise_error(self):
        with pytest.raises(ValueError, match="greater than end"):
            ChannelRange(10, 5).validate()

    def test_negative_start_raises_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            ChannelRange(-1, 5).validate()

    def test_negative_vibration_raises_error(self):
        with pytest.raises(ValueError, match="Vibration durations"):
            ChannelRange(1, 1, vibration_pattern=(0, -100)).validate()

    def test_str(self):
        assert str(ChannelRange(4370, 4370)) == "[4370]"
        assert str(ChannelRange(4371, 4372)) == "[4371-4372]"

    def test_immutable(self):
        channel_range = ChannelRange(1, 2)
        with pytest.raises(AttributeError):
            channel_range.start_id = 3


class TestChannelCategory:
    """Test channel category ordering and resource keys."""

    def test_precedence_covers_every_category(self):
        assert set(CATEGORY_PRECEDENCE) == set(ChannelCategory)
        assert len(CATEGORY_PRECEDENCE) == len(ChannelCategory)

    def test_precedence_order(self):
        assert CATEGORY_PRECEDENCE[0] == ChannelCategory.ADDITIONAL
        assert CATEGORY_PRECEDENCE[1] == ChannelCategory.EMERGENCY
        assert CATEGORY_PRECEDENCE[-1] == ChannelCategory.STATE_LOCAL_TEST

    def test_resource_key(self):
        assert ChannelCategory.CMAS_SEVERE.resource_key == "cmas_alerts_severe_range_strings"


class TestClassificationResult:
    """Test ClassificationResult derived values."""

    def test_unclassified_defaults(self):
        result = ClassificationResult(channel=9999)

        assert result.is_classified is False
        assert result.alert_type == AlertType.DEFAULT
        assert result.is_emergency is False
        assert result.scope_pass is True

    def test_values_from_matched_range(self):
        result = ClassificationResult(
            channel=43008,
            matched_range=ChannelRange(
                43008, 43008, alert_type=AlertType.ETWS_EARTHQUAKE, is_emergency=True
            ),
            category=ChannelCategory.ADDITIONAL,
        )

        assert result.is_classified is True
        assert result.alert_type == AlertType.ETWS_EARTHQUAKE
        assert result.is_emergency is True


class TestBroadcastMessage:
    """Test BroadcastMessage properties and validation."""

    def test_valid_gsm_message(self):
        message = BroadcastMessage(channel=4370, body="Alert")

        assert message.validate() is True
        assert message.is_emergency_alert_message is False
        assert message.is_presidential_alert is False

    def test_etws_message(self):
        message = BroadcastMessage(
            channel=4352,
            body="Earthquake",
            message_type=MessageType.ETWS,
            etws_warning_info=EtwsWarningInfo(EtwsWarningType.TEST_MESSAGE),
        )

        assert message.validate() is True
        assert message.is_etws_message
        assert message.is_etws_test_message
        assert message.is_emergency_alert_message

    def test_etws_without_info_is_not_test(self):
        message = BroadcastMessage(channel=4352, body="x", message_type=MessageType.ETWS)

        assert message.is_etws_test_message is False

    def test_presidential_requires_cmas(self):
        message = BroadcastMessage(
            channel=4370,
            body="Alert",
            message_type=MessageType.CMAS,
            cmas_message_class=CmasMessageClass.PRESIDENTIAL_LEVEL_ALERT,
        )

        assert message.is_presidential_alert is True
        assert message.is_emergency_alert_message is True

    @pytest.mark.parametrize("channel", [-1, 0x10000])
    def test_channel_out_of_range_raises_error(self, channel):
        with pytest.raises(ValueError, match="Channel"):
            BroadcastMessage(channel=channel, body="x").validate()

    def test_etws_info_on_gsm_raises_error(self):
        message = BroadcastMessage(
            channel=4352, body="x", etws_warning_info=EtwsWarningInfo()
        )

        with pytest.raises(ValueError, match="ETWS warning info"):
            message.validate()

    def test_cmas_class_on_etws_raises_error(self):
        message = BroadcastMessage(
            channel=4370,
            body="x",
            message_type=MessageType.ETWS,
            cmas_message_class=CmasMessageClass.EXTREME_THREAT,
        )

        with pytest.raises(ValueError, match="CMAS message class"):
            message.validate()


class TestDeviceModels:
    """Test service and device state snapshots."""

    @pytest.mark.parametrize(
        "reg_state,registered",
        [
            (RegistrationState.IN_SERVICE, True),
            (RegistrationState.EMERGENCY_ONLY, True),
            (RegistrationState.OUT_OF_SERVICE, False),
            (RegistrationState.POWER_OFF, False),
        ],
    )
    def test_is_registered(self, reg_state, registered):
        assert ServiceState(voice_reg_state=reg_state).is_registered is registered

    def test_default_device_language(self):
        with patch("cell_broadcast_filter.models.device.locale.getlocale", return_value=("pt_BR", "UTF-8")):
            assert default_device_language() == "pt"
            assert DeviceState().language == "pt"

    def test_default_device_language_unset(self):
        with patch("cell_broadcast_filter.models.device.locale.getlocale", return_value=(None, None)):
            assert default_device_language() == ""


class TestVerdict:
    """Test Verdict construction and validation."""

    def test_shown_verdict(self):
        assert Verdict(show=True, alert_type=AlertType.OTHER).validate() is True

    def test_suppress(self):
        verdict = Verdict.suppress(
            SuppressReason.AREA_INFO, alert_type=AlertType.AREA, route_to_area_info=True
        )

        assert verdict.show is False
        assert verdict.reason == SuppressReason.AREA_INFO
        assert verdict.validate() is True

    def test_shown_with_reason_raises_error(self):
        with pytest.raises(ValueError, match="cannot carry a suppress reason"):
            Verdict(show=True, reason=SuppressReason.EMPTY_BODY).validate()

    def test_suppressed_without_reason_raises_error(self):
        with pytest.raises(ValueError, match="must carry a reason"):
            Verdict(show=False).validate()

    def test_shown_area_info_raises_error(self):
        with pytest.raises(ValueError, match="never shown"):
            Verdict(show=True, route_to_area_info=True).validate()

    def test_outcome_show(self):
        outcome = AlertOutcome(
            verdict=Verdict(show=True),
            classification=ClassificationResult(channel=1),
            is_emergency=False,
        )

        assert outcome.show is True


class TestUserPreferences:
    """Test UserPreferences validation."""

    def test_defaults(self):
        preferences = UserPreferences()

        assert preferences.validate() is True
        assert preferences.enable_alerts_master_toggle is True
        assert preferences.enable_test_alerts is False
        assert preferences.enable_state_local_test_alerts is False

    def test_non_boolean_raises_error(self):
        with pytest.raises(ValueError, match="enable_emergency_alerts"):
            UserPreferences(enable_emergency_alerts="yes").validate()


class TestCarrierConfig:
    """Test CarrierConfig validation and overrides."""

    def test_defaults(self):
        carrier = CarrierConfig()

        assert carrier.validate() is True
        assert carrier.message_filters == []
        assert carrier.default_vibration_pattern[0] == 0

    def test_default_pattern_not_shared(self):
        first = CarrierConfig()
        first.default_vibration_pattern.append(1)

        assert CarrierConfig().default_vibration_pattern != first.default_vibration_pattern

    def test_with_overrides(self):
        carrier = CarrierConfig()

        overridden = carrier.with_overrides({"ignore_messages_in_ecbm": True})

        assert overridden.ignore_messages_in_ecbm is True
        assert carrier.ignore_messages_in_ecbm is False

    def test_unknown_override_raises_error(self):
        with pytest.raises(ValueError, match="Unknown carrier config keys"):
            CarrierConfig().with_overrides({"bogus": True})

    def test_non_string_filter_raises_error(self):
        with pytest.raises(ValueError, match="message filters must be strings"):
            CarrierConfig(message_filters=["ok", 3]).validate()


class TestConfiguration:
    """Test Configuration validation and per-subscription views."""

    def get_configuration(self) -> Configuration:
        return Configuration(
            channel_ranges={
                "additional_cbs_channels_strings": ["1234-5678"],
                "emergency_alerts_channels_range_strings": None,
            },
            carrier=CarrierConfig(),
            preferences=UserPreferences(),
            subscriptions={
                1: SubscriptionOverrides(
                    carrier={"force_disable_etws_cmas_test": True},
                    channel_ranges={"emergency_alerts_channels_range_strings": ["911"]},
                )
            },
        )

    def test_valid_configuration(self):
        assert self.get_configuration().validate() is True

    def test_carrier_for(self):
        config = self.get_configuration()

        assert config.carrier_for(0) is config.carrier
        assert config.carrier_for(1).force_disable_etws_cmas_test is True

    def test_channel_ranges_for(self):
        config = self.get_configuration()

        assert config.channel_ranges_for(0)["emergency_alerts_channels_range_strings"] is None
        assert config.channel_ranges_for(1)["emergency_alerts_channels_range_strings"] == ["911"]
        # Overrides never leak into the base configuration
        assert config.channel_ranges["emergency_alerts_channels_range_strings"] is None

    def test_invalid_log_level_raises_error(self):
        config = self.get_configuration()
        config.log_level = "LOUD"

        with pytest.raises(ValueError, match="Log level"):
            config.validate()

    def test_non_string_range_raises_error(self):
        config = self.get_configuration()
        config.channel_ranges["additional_cbs_channels_strings"] = [1234]

        with pytest.raises(ValueError, match="must be strings"):
            config.validate()
