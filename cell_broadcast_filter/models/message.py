"""
Decoded cell broadcast message models.

Payload decoding happens upstream; these classes only carry the fields the
filter needs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional


class MessageType(Enum):
    """Broadcast family the message was received as."""

    GSM = "gsm"
    ETWS = "etws"
    CMAS = "cmas"
    CDMA = "cdma"


class EtwsWarningType(IntEnum):
    """ETWS warning type codes from the primary notification."""

    EARTHQUAKE = 0
    TSUNAMI = 1
    EARTHQUAKE_AND_TSUNAMI = 2
    TEST_MESSAGE = 3
    OTHER_EMERGENCY = 4
    UNKNOWN = -1


class CmasMessageClass(IntEnum):
    """CMAS message classes."""

    PRESIDENTIAL_LEVEL_ALERT = 0
    EXTREME_THREAT = 1
    SEVERE_THREAT = 2
    CHILD_ABDUCTION_EMERGENCY = 3
    REQUIRED_MONTHLY_TEST = 4
    CMAS_EXERCISE = 5
    OPERATOR_DEFINED_USE = 6
    UNKNOWN = -1


@dataclass(frozen=True)
class EtwsWarningInfo:
    """ETWS-specific information carried with an ETWS message."""

    warning_type: EtwsWarningType = EtwsWarningType.UNKNOWN
    emergency_user_alert: bool = False
    activate_popup: bool = False


@dataclass
class BroadcastMessage:
    """A received, already decoded, cell broadcast message."""

    channel: int
    body: Optional[str]
    language_code: Optional[str] = None
    sub_id: int = 0
    message_type: MessageType = MessageType.GSM
    etws_warning_info: Optional[EtwsWarningInfo] = None
    cmas_message_class: Optional[CmasMessageClass] = None
    serial_number: int = 0
    received_at: datetime = field(default_factory=datetime.now)

    @property
    def is_etws_message(self) -> bool:
        return self.message_type == MessageType.ETWS

    @property
    def is_etws_test_message(self) -> bool:
        return (
            self.is_etws_message
            and self.etws_warning_info is not None
            and self.etws_warning_info.warning_type == EtwsWarningType.TEST_MESSAGE
        )

    @property
    def is_cmas_message(self) -> bool:
        return self.message_type == MessageType.CMAS

    @property
    def is_presidential_alert(self) -> bool:
        return (
            self.is_cmas_message
            and self.cmas_message_class == CmasMessageClass.PRESIDENTIAL_LEVEL_ALERT
        )

    @property
    def is_emergency_alert_message(self) -> bool:
        """ETWS and CMAS messages are emergency alerts by definition."""
        return self.is_etws_message or self.is_cmas_message

    def validate(self) -> bool:
        """Validate the message fields."""
        if not isinstance(self.channel, int) or self.channel < 0:
            raise ValueError("Channel must be a non-negative integer")

        if self.channel > 0xFFFF:
            raise ValueError("Channel must fit in 16 bits")

        if self.body is not None and not isinstance(self.body, str):
            raise ValueError("Message body must be a string")

        if not isinstance(self.message_type, MessageType):
            raise ValueError("message_type must be a MessageType enum")

        if self.etws_warning_info is not None and not self.is_etws_message:
            raise ValueError("ETWS warning info is only valid on ETWS messages")

        if self.cmas_message_class is not None and not self.is_cmas_message:
            raise ValueError("CMAS message class is only valid on CMAS messages")

        return True
