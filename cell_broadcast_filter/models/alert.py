"""
Alert outcome models handed to presentation and audio collaborators.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .channel import AlertType, ClassificationResult
from .verdict import Verdict

NOTIFICATION_CHANNEL_EMERGENCY_ALERTS = "broadcastMessages"
NOTIFICATION_CHANNEL_NON_EMERGENCY_ALERTS = "broadcastMessagesNonEmergency"


@dataclass(frozen=True)
class AudioRequest:
    """Parameters for the alert tone, vibration and text-to-speech player."""

    tone_type: AlertType
    vibration_pattern: Tuple[int, ...]
    full_volume: bool
    sub_id: int
    message_body: Optional[str] = None
    message_language: Optional[str] = None


@dataclass(frozen=True)
class AlertOutcome:
    """Everything downstream collaborators need for one message."""

    verdict: Verdict
    classification: ClassificationResult
    is_emergency: bool
    notification_channel: Optional[str] = None
    audio: Optional[AudioRequest] = None
    area_info_published: bool = False

    @property
    def show(self) -> bool:
        return self.verdict.show
