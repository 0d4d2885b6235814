"""Diagnostic logging setup.

Diagnostics go to stderr so they never mix with the live output channel
(stdout) or the audit log file.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s"


def setup_logging(level: str = "WARNING", stream: Optional[TextIO] = None) -> logging.Logger:
    """Install a single stderr handler on the package logger."""
    logger = logging.getLogger("camsentinel")
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logger.setLevel(numeric)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
