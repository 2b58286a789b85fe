"""Severity-tagged console logging for the CLI."""
import os
import sys
import logging
from typing import Optional, TextIO

PACKAGE_LOGGER = "agent_awstoolkit"

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
RESET = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "",
    logging.INFO: GREEN,
    logging.WARNING: YELLOW,
    logging.ERROR: RED,
    logging.CRITICAL: RED,
}


class SeverityTagFormatter(logging.Formatter):
    """Format records as ``[LEVEL] message``, optionally coloring the tag."""

    def __init__(self, color: bool = False):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        tag = f"[{record.levelname}]"
        if self.color and LEVEL_COLORS.get(record.levelno):
            tag = f"{LEVEL_COLORS[record.levelno]}{tag}{RESET}"
        return f"{tag} {message}"


def _use_color(stream: TextIO) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(quiet: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Route package logs to stderr with severity tags.

    Replaces any handler installed by a previous call, so repeated invocations
    in one process log each line once.

    Args:
        quiet: Suppress INFO lines (warnings and errors still print)
        stream: Output stream (defaults to the current sys.stderr)
    """
    stream = stream if stream is not None else sys.stderr

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(SeverityTagFormatter(color=_use_color(stream)))
    logger.addHandler(handler)
    logger.setLevel(logging.WARNING if quiet else logging.INFO)
    logger.propagate = False
    return logger
