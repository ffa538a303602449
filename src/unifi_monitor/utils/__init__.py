"""Shared utilities for UniFi monitor."""

from unifi_monitor.utils.errors import ConfigurationError, ErrorCodes, MonitorError, SourceError
from unifi_monitor.utils.logging import configure_logging, get_logger
from unifi_monitor.utils.settings import Settings

__all__ = [
    'ConfigurationError',
    'ErrorCodes',
    'MonitorError',
    'Settings',
    'SourceError',
    'configure_logging',
    'get_logger',
]
