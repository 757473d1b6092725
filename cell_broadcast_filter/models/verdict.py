"""
Display decision models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .channel import AlertType


class SuppressReason(Enum):
    """Why a message was not shown."""

    EMERGENCY_CALLBACK_MODE = "emergency_callback_mode"
    OUT_OF_SCOPE = "out_of_scope"
    EMPTY_BODY = "empty_body"
    LANGUAGE_MISMATCH = "language_mismatch"
    CONTENT_FILTER = "content_filter"
    AREA_INFO = "area_info"
    DISABLED_BY_PREFERENCE = "disabled_by_preference"


@dataclass(frozen=True)
class Verdict:
    """Final show/suppress decision plus routing hints."""

    show: bool
    alert_type: AlertType = AlertType.DEFAULT
    is_emergency: bool = False
    route_to_area_info: bool = False
    reason: Optional[SuppressReason] = None

    @classmethod
    def suppress(
        cls,
        reason: SuppressReason,
        alert_type: AlertType = AlertType.DEFAULT,
        is_emergency: bool = False,
        route_to_area_info: bool = False,
    ) -> "Verdict":
        return cls(
            show=False,
            alert_type=alert_type,
            is_emergency=is_emergency,
            route_to_area_info=route_to_area_info,
            reason=reason,
        )

    def validate(self) -> bool:
        """Validate verdict consistency."""
        if self.show and self.reason is not None:
            raise ValueError("A shown verdict cannot carry a suppress reason")

        if not self.show and self.reason is None:
            raise ValueError("A suppressed verdict must carry a reason")

        if self.route_to_area_info and self.show:
            raise ValueError("Area info broadcasts are never shown as alerts")

        return True
