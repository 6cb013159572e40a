"""Logging utilities for headless-proxy."""

from headless_proxy.utils.logging.iso_formatter import ISO8601Formatter
from headless_proxy.utils.logging.log_config import ConsoleFormatter, configure_logging

__all__ = [
    "ConsoleFormatter",
    "ISO8601Formatter",
    "configure_logging",
]
