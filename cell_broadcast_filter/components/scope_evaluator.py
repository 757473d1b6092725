"""Scope check of channel ranges against the current roaming condition."""

import logging
from typing import Optional

from ..models.channel import Scope
from ..models.device import RoamingType, ServiceState
from ..utils.error_handling import ErrorCategory, ErrorSeverity, get_error_tracker

logger = logging.getLogger(__name__)


class ScopeEvaluator:
    """Decides whether a range scope applies under the current service state.

    When the state cannot be determined the range is assumed to be in scope:
    an extra alert is preferable to a missed one.
    """

    def matches(self, scope: Scope, service_state: Optional[ServiceState]) -> bool:
        """Check a range scope against a service state snapshot.

        Args:
            scope: Scope declared on the channel range
            service_state: Current voice service state, or None if unavailable

        Returns:
            True if the range applies
        """
        if scope == Scope.UNKNOWN:
            return True

        if service_state is None:
            message = f"Service state unavailable, assuming scope {scope.value} matches"
            logger.warning(message)
            get_error_tracker().record_error(
                component="scope_evaluator",
                category=ErrorCategory.SCOPE_RESOLUTION,
                severity=ErrorSeverity.LOW,
                message=message,
                context={"scope": scope.value},
            )
            return True

        if not service_state.is_registered:
            # Not registered: roaming type is meaningless
            return True

        roaming_type = service_state.voice_roaming_type
        if roaming_type == RoamingType.NOT_ROAMING:
            return True
        if roaming_type == RoamingType.DOMESTIC:
            return scope == Scope.DOMESTIC
        if roaming_type == RoamingType.INTERNATIONAL:
            return scope == Scope.INTERNATIONAL

        logger.debug(
            f"Scope {scope.value} does not match roaming type {roaming_type.value}"
        )
        return False
