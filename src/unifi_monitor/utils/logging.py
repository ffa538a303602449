"""Structured JSON logging configuration."""

import os
import sys
from loguru import logger
from pathlib import Path
from typing import Any


def configure_logging(
    log_file: str | None = None,
    log_level: str = 'INFO',
    include_console: bool = False,
) -> None:
    """Configure structured JSON logging.

    Args:
        log_file: Path to log file (defaults to ~/.unifi-monitor/logs/unifi_monitor.log)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        include_console: Whether to also log to console
    """
    logger.remove()

    if not log_file:
        log_dir = Path.home() / '.unifi-monitor' / 'logs'
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = str(log_dir / 'unifi_monitor.log')

    # JSON file logging with rotation
    logger.add(
        log_file,
        format='{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[resource]} | {message}',
        serialize=True,
        rotation='10 MB',
        retention='7 days',
        compression='gz',
        level=log_level,
        backtrace=True,
        diagnose=False,
    )

    if include_console or os.getenv('UNIFI_MONITOR_DEBUG'):
        logger.add(
            sys.stderr,
            format='<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
            level=log_level,
            colorize=True,
        )

    logger.configure(extra={'resource': ''})


def get_logger(resource: str = '') -> Any:
    """Get logger bound to a resource kind for tracing cache activity.

    Args:
        resource: Resource kind being fetched (devices, clients)

    Returns:
        Logger instance with resource bound
    """
    return logger.bind(resource=resource)
