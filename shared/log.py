#!/usr/bin/env python3
"""
Logging configuration for the bot.

Console output is colored when attached to a terminal. A plain log file under
``logs/`` is added outside of test runs.

Usage:
    from shared.log import get_logger

    logger = get_logger(__name__)
    logger.info("Connecting...")
    logger.warning("Server error", extra={"packet": "ERROR", "player_id": 12})
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional
import os


# ========================================
#           LOGGING FORMATTERS
# ========================================

class ContextFormatter(logging.Formatter):
    """Prefixes the message with protocol context passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        context = []
        if hasattr(record, 'player_id'):
            context.append(f"player={record.player_id}")
        if hasattr(record, 'packet'):
            context.append(f"pkt={record.packet}")
        if hasattr(record, 'state'):
            context.append(f"state={record.state}")

        message = super().format(record)
        if context:
            return f"[{' '.join(context)}] {message}"
        return message


class ColoredFormatter(ContextFormatter):
    """Colored formatter for console output"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


# ========================================
#           LOGGING CONFIGURATION
# ========================================

_loggers_configured = set()


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger for the given module.

    Args:
        name: Usually __name__ from the calling module
        level: Override log level ("DEBUG", "INFO", "WARNING", "ERROR")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if name not in _loggers_configured:
        _configure_logger(logger, level)
        _loggers_configured.add(name)

    return logger


def _configure_logger(logger: logging.Logger, level: Optional[str] = None) -> None:
    logger.setLevel(_get_log_level(level))
    logger.handlers.clear()

    if _is_development():
        _add_console_handler(logger, colored=True)
    else:
        _add_console_handler(logger, colored=False)

    if not _is_testing():
        _add_file_handler(logger)

    # Prevent duplicate messages from parent loggers
    logger.propagate = False


def _get_log_level(level: Optional[str] = None) -> int:
    if level:
        return getattr(logging, level.upper(), logging.INFO)
    return logging.DEBUG if _is_development() else logging.INFO


def _is_testing() -> bool:
    return 'pytest' in sys.modules


def _is_development() -> bool:
    return (
        os.getenv('PYTHON_ENV', '').lower() in ['dev', 'development'] or
        _is_testing()
    )


def _add_console_handler(logger: logging.Logger, colored: bool = True) -> None:
    fmt = '[%(levelname)-8s][%(asctime)s][%(name)-5s]: %(message)s'
    handler = logging.StreamHandler(sys.stdout)

    if colored and _supports_color():
        formatter: logging.Formatter = ColoredFormatter(fmt=fmt, datefmt='%H:%M:%S')
    else:
        formatter = ContextFormatter(fmt=fmt, datefmt='%Y-%m-%d %H:%M:%S')

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _add_file_handler(logger: logging.Logger) -> None:
    log_dir = Path(os.getenv('PIZZABOT_LOG_DIR', 'logs'))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_dir / "pizzabot.log")
    handler.setFormatter(ContextFormatter(
        fmt='%(asctime)s | %(name)-20s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(handler)


def _supports_color() -> bool:
    """Check if terminal supports color output"""
    if not (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()):
        return False
    if os.getenv("TERM", "") == "dumb":
        return False
    if sys.platform == "win32":
        return (
            os.getenv("ANSICON") is not None
            or os.getenv("WT_SESSION") is not None
            or os.getenv("TERM_PROGRAM") == "vscode"
        )
    return True


# ========================================
#           CONVENIENCE FUNCTIONS
# ========================================

def configure_root_logging(level: str = "INFO") -> None:
    """
    Configure root logging and set ``level`` on every module logger already
    handed out. Call this once at application startup.
    """
    _configure_logger(logging.getLogger(), level)
    for name in _loggers_configured:
        logging.getLogger(name).setLevel(_get_log_level(level))
