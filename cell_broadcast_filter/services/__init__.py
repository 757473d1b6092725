"""
Service layer for the Cell Broadcast Alert Filter.

This module contains the configuration manager and the alert service that
ties parsing, classification and the display policy together.
"""

from .alert_service import AlertService
from .config_manager import ConfigurationManager

__all__ = [
    "AlertService",
    "ConfigurationManager",
]
