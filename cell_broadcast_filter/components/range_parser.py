"""Parser for carrier channel range configuration lines.

A line looks like ``<id>[-<id>][:<key>=<value>[, <key>=<value>...]]``, e.g.::

    "43008:type=earthquake, emergency=true"
    "0xAFEE:type=tsunami, emergency=true"
    "0xAC00-0xAFED:type=other"
    "1234-5678"
    "4383:scope=national, filter_language=true, vibration=0|350|250|350"

Ids are decimal or hexadecimal (``0x`` or ``#`` prefix). Keys and values are
case-insensitive and surrounding whitespace is ignored. Unknown keys are
skipped so that newer configuration keeps loading on older builds.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from ..models.channel import AlertType, ChannelRange, RatType, Scope

logger = logging.getLogger(__name__)


class ChannelRangeParseError(ValueError):
    """Raised when a configuration line cannot be turned into a range."""

    def __init__(self, line: str, reason: str):
        super().__init__(f'Failed to parse "{line}": {reason}')
        self.line = line
        self.reason = reason


class RangeParser:
    """Turns one configuration line into a ChannelRange."""

    KEY_TYPE = "type"
    KEY_EMERGENCY = "emergency"
    KEY_RAT = "rat"
    KEY_SCOPE = "scope"
    KEY_FILTER_LANGUAGE = "filter_language"
    KEY_VIBRATION = "vibration"

    # Short names used in carrier examples for the ETWS tone types
    ALERT_TYPE_ALIASES = {
        "EARTHQUAKE": AlertType.ETWS_EARTHQUAKE,
        "TSUNAMI": AlertType.ETWS_TSUNAMI,
    }

    SCOPE_VALUES = {
        "carrier": Scope.CARRIER,
        "national": Scope.DOMESTIC,
        "international": Scope.INTERNATIONAL,
    }

    HEX_ID_PATTERN = re.compile(r"^(?:0[xX]|#)([0-9a-fA-F]+)$")
    DECIMAL_ID_PATTERN = re.compile(r"^[0-9]+$")

    def parse(self, line: str) -> ChannelRange:
        """Parse a configuration line.

        Args:
            line: Raw configuration string

        Returns:
            The parsed ChannelRange

        Raises:
            ChannelRangeParseError: If the ids or an attribute value are invalid
        """
        if line is None:
            raise ChannelRangeParseError("None", "empty configuration line")

        range_part = line
        attributes: Dict[str, str] = {}

        colon_index = line.find(":")
        if colon_index != -1:
            attributes = self._parse_attributes(line[colon_index + 1:])
            range_part = line[:colon_index]

        start_id, end_id = self._parse_bounds(line, range_part.strip())

        alert_type = AlertType.DEFAULT
        is_emergency = False
        rat = RatType.GSM
        scope = Scope.UNKNOWN
        filter_language = False
        vibration_pattern: Optional[Tuple[int, ...]] = None

        for key, value in attributes.items():
            if key == self.KEY_TYPE:
                alert_type = self._parse_alert_type(line, value)
            elif key == self.KEY_EMERGENCY:
                is_emergency = value.lower() == "true"
            elif key == self.KEY_RAT:
                rat = RatType.CDMA if value.lower() == "cdma" else RatType.GSM
            elif key == self.KEY_SCOPE:
                scope = self.SCOPE_VALUES.get(value.lower(), Scope.UNKNOWN)
            elif key == self.KEY_FILTER_LANGUAGE:
                filter_language = value.lower() == "true"
            elif key == self.KEY_VIBRATION:
                vibration_pattern = self._parse_vibration(line, value)
            else:
                logger.debug(f"Ignoring unknown channel range attribute '{key}' in \"{line}\"")

        return ChannelRange(
            start_id=start_id,
            end_id=end_id,
            alert_type=alert_type,
            is_emergency=is_emergency,
            rat=rat,
            scope=scope,
            filter_language=filter_language,
            vibration_pattern=vibration_pattern,
        )

    def try_parse(self, line: str) -> Optional[ChannelRange]:
        """Parse a line, logging and returning None on failure."""
        try:
            return self.parse(line)
        except ChannelRangeParseError as e:
            logger.error(str(e))
            return None

    def _parse_attributes(self, text: str) -> Dict[str, str]:
        """Split ``key=value`` pairs; later duplicates replace earlier ones."""
        attributes: Dict[str, str] = {}
        for pair in text.strip().split(","):
            tokens = pair.strip().split("=")
            if len(tokens) != 2:
                continue
            key = tokens[0].strip().lower()
            value = tokens[1].strip()
            if key:
                attributes[key] = value
        return attributes

    def _parse_bounds(self, line: str, range_part: str) -> Tuple[int, int]:
        dash_index = range_part.find("-")
        if dash_index != -1:
            start_id = self._decode_id(line, range_part[:dash_index])
            end_id = self._decode_id(line, range_part[dash_index + 1:])
        else:
            start_id = end_id = self._decode_id(line, range_part)

        if start_id > end_id:
            raise ChannelRangeParseError(
                line, f"start id {start_id} is greater than end id {end_id}"
            )

        return start_id, end_id

    def _decode_id(self, line: str, token: str) -> int:
        token = token.strip()

        hex_match = self.HEX_ID_PATTERN.match(token)
        if hex_match:
            return int(hex_match.group(1), 16)

        if self.DECIMAL_ID_PATTERN.match(token):
            return int(token, 10)

        raise ChannelRangeParseError(line, f"invalid channel id '{token}'")

    def _parse_alert_type(self, line: str, value: str) -> AlertType:
        name = value.upper()
        if name in self.ALERT_TYPE_ALIASES:
            return self.ALERT_TYPE_ALIASES[name]
        try:
            return AlertType[name]
        except KeyError:
            raise ChannelRangeParseError(line, f"unknown alert type '{value}'")

    def _parse_vibration(self, line: str, value: str) -> Tuple[int, ...]:
        durations = []
        for token in value.split("|"):
            token = token.strip()
            if not self.DECIMAL_ID_PATTERN.match(token):
                raise ChannelRangeParseError(
                    line, f"invalid vibration duration '{token}'"
                )
            durations.append(int(token))
        return tuple(durations)
