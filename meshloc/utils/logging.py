"""Logging configuration for meshloc.

Library modules log through ``logging.getLogger(__name__)`` and never install
handlers themselves. Applications and scripts call ``configure_logging`` once
to get a console handler on stderr.

Usage:
    from meshloc.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("Imported %d records", n)
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

_ROOT_LOGGER_NAME = "meshloc"
_configured = False


class ConsoleFormatter(logging.Formatter):
    """Human-readable console format with optional color."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname
        if self.use_color:
            level_str = f"{self.LEVEL_COLORS.get(level, '')}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"
        name = record.name.replace(f"{_ROOT_LOGGER_NAME}.", "")
        base = f"[{ts}] {level_str} [{name}] {record.getMessage()}"
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(*, level: Optional[str] = None, use_color: bool = True) -> None:
    """Configure the meshloc logger.

    Args:
        level: Log level name. Defaults to ``MESHLOC_LOG_LEVEL`` from the
               environment, or INFO.
        use_color: Colorize console output (auto-disabled if not a TTY).

    Calling it again replaces the previously installed handler.
    """
    global _configured

    if level is None:
        level = os.environ.get("MESHLOC_LOG_LEVEL", "INFO")
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(ConsoleFormatter(use_color=use_color))
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the meshloc namespace, configuring defaults on first use."""
    if not _configured:
        configure_logging()
    if not name.startswith(_ROOT_LOGGER_NAME):
        name = f"{_ROOT_LOGGER_NAME}.{'main' if name == '__main__' else name}"
    return logging.getLogger(name)
