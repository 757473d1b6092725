"""Channel range tables built from carrier resource arrays."""

import logging
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..models.channel import CATEGORY_PRECEDENCE, ChannelCategory, ChannelRange
from ..utils.error_handling import ErrorCategory, ErrorSeverity, get_error_tracker
from .range_parser import ChannelRangeParseError, RangeParser

logger = logging.getLogger(__name__)


def build(config_entries: Optional[Sequence[str]], parser: Optional[RangeParser] = None) -> List[ChannelRange]:
    """Parse configuration entries into ranges, keeping their order.

    Malformed entries are logged, recorded and skipped. A missing or empty
    entry list yields an empty list.
    """
    parser = parser or RangeParser()
    ranges: List[ChannelRange] = []

    for entry in config_entries or ():
        try:
            ranges.append(parser.parse(entry))
        except ChannelRangeParseError as e:
            logger.error(str(e))
            get_error_tracker().record_error(
                component="channel_range_table",
                category=ErrorCategory.PARSING,
                severity=ErrorSeverity.LOW,
                message=str(e),
                exception=e,
                context={"entry": entry},
            )

    return ranges


class ChannelRangeTable:
    """Parsed channel ranges grouped by category.

    A category maps to None when its resource key is not configured at all,
    and to an empty tuple when it is configured with no entries. Tables are
    read-only once built.
    """

    def __init__(self, ranges: Mapping[ChannelCategory, Optional[Sequence[ChannelRange]]]):
        self._ranges: Dict[ChannelCategory, Optional[Tuple[ChannelRange, ...]]] = {}
        for category in CATEGORY_PRECEDENCE:
            category_ranges = ranges.get(category)
            self._ranges[category] = (
                None if category_ranges is None else tuple(category_ranges)
            )

    @classmethod
    def from_resources(
        cls,
        resources: Mapping[str, Optional[Sequence[str]]],
        parser: Optional[RangeParser] = None,
    ) -> "ChannelRangeTable":
        """Build a table from resource key -> configuration strings."""
        parser = parser or RangeParser()
        ranges: Dict[ChannelCategory, Optional[List[ChannelRange]]] = {}

        for category in CATEGORY_PRECEDENCE:
            entries = resources.get(category.resource_key)
            if entries is None:
                ranges[category] = None
                continue
            ranges[category] = build(entries, parser)

        table = cls(ranges)
        logger.debug(
            f"Built channel range table with {len(table.all_ranges())} ranges "
            f"across {len(table.configured_categories())} configured categories"
        )
        return table

    def ranges_for(self, category: ChannelCategory) -> Optional[Tuple[ChannelRange, ...]]:
        """Ranges for a category, or None if the category is not configured."""
        return self._ranges.get(category)

    def is_configured(self, category: ChannelCategory) -> bool:
        return self._ranges.get(category) is not None

    def configured_categories(self) -> List[ChannelCategory]:
        return [category for category in CATEGORY_PRECEDENCE if self.is_configured(category)]

    def all_ranges(self) -> List[ChannelRange]:
        """Union of every configured range, in precedence order."""
        union: List[ChannelRange] = []
        for category in CATEGORY_PRECEDENCE:
            union.extend(self._ranges[category] or ())
        return union

    def __iter__(self) -> Iterator[Tuple[ChannelCategory, Tuple[ChannelRange, ...]]]:
        """Iterate configured categories in precedence order."""
        for category in CATEGORY_PRECEDENCE:
            category_ranges = self._ranges[category]
            if category_ranges is not None:
                yield category, category_ranges

    def __len__(self) -> int:
        return len(self.all_ranges())
