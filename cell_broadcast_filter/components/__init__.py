"""
Core components for the Cell Broadcast Alert Filter.

This module contains the range parser, channel range tables, scope
evaluation, alert classification and the display policy.
"""

from . import channel_range_table
from .alert_classifier import AlertClassifier
from .channel_range_table import ChannelRangeTable
from .display_policy import DisplayPolicy
from .range_parser import ChannelRangeParseError, RangeParser
from .scope_evaluator import ScopeEvaluator

__all__ = [
    "RangeParser",
    "ChannelRangeParseError",
    "ChannelRangeTable",
    "channel_range_table",
    "ScopeEvaluator",
    "AlertClassifier",
    "DisplayPolicy",
]
