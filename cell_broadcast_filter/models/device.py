"""
Device and network state snapshots supplied per decision.
"""

import locale
from dataclasses import dataclass, field
from enum import Enum


class RegistrationState(Enum):
    """Voice registration state of the serving network."""

    IN_SERVICE = "in_service"
    OUT_OF_SERVICE = "out_of_service"
    EMERGENCY_ONLY = "emergency_only"
    POWER_OFF = "power_off"


class RoamingType(Enum):
    """Voice roaming type reported by the serving network."""

    NOT_ROAMING = "not_roaming"
    UNKNOWN = "unknown"
    DOMESTIC = "domestic"
    INTERNATIONAL = "international"


@dataclass(frozen=True)
class ServiceState:
    """Roaming snapshot for one subscription."""

    voice_reg_state: RegistrationState = RegistrationState.IN_SERVICE
    voice_roaming_type: RoamingType = RoamingType.NOT_ROAMING

    @property
    def is_registered(self) -> bool:
        return self.voice_reg_state in (
            RegistrationState.IN_SERVICE,
            RegistrationState.EMERGENCY_ONLY,
        )


def default_device_language() -> str:
    """Language part of the process locale, e.g. 'en' for 'en_US'."""
    language, _ = locale.getlocale()
    if not language:
        return ""
    return language.split("_")[0].lower()


@dataclass(frozen=True)
class DeviceState:
    """Device conditions that influence whether an alert is displayed."""

    language: str = field(default_factory=default_device_language)
    emergency_callback_mode: bool = False
