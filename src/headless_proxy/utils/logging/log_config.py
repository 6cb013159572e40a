"""Server logging configuration.

Owns the application logger configuration (handlers, formatters).
Other modules get their own child logger via:
    _logger = logging.getLogger(f"{APP_NAME}.<module>")

Child loggers propagate to the "headless-proxy" logger configured here.
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_logging",
]

import logging
from pathlib import Path

from headless_proxy.constants import APP_NAME
from headless_proxy.utils.logging.iso_formatter import ISO8601Formatter

_logger = logging.getLogger(APP_NAME)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


def configure_logging(log_level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """Configure the application logger.

    Sets up:
    - stderr handler at log_level for operator visibility
    - optional JSONL file handler, WARNING+ only (errors worth reviewing)

    Safe to call more than once; existing handlers are closed and replaced.

    Args:
        log_level: Level name for the console handler (e.g. "INFO", "DEBUG").
        log_file: Path of the JSONL log file, or None for console only.

    Returns:
        The configured application logger.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    _logger.setLevel(min(level, logging.WARNING))
    _logger.propagate = False

    # Close and clear any existing handlers to avoid resource leaks
    for handler in _logger.handlers:
        handler.close()
    _logger.handlers.clear()

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(ConsoleFormatter())
    _logger.addHandler(stderr_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            _logger.warning(
                {
                    "event": "file_logging_failed",
                    "message": f"Failed to configure file logging: {e}",
                    "error_type": type(e).__name__,
                    "log_file": str(log_file),
                }
            )
        else:
            file_handler.setLevel(logging.WARNING)
            file_handler.setFormatter(ISO8601Formatter())
            _logger.addHandler(file_handler)

    # Silence uvicorn's own loggers (we log requests ourselves)
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)

    return _logger
