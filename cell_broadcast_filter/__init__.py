"""
Cell Broadcast Alert Filter

A rule engine that classifies incoming cell broadcast messages against
carrier-configured channel ranges and decides whether each alert is shown,
suppressed, or routed as area information.
"""

__version__ = "0.1.0"
__author__ = "Cell Broadcast Alert Filter Team"
