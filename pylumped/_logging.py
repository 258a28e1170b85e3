"""Logging configuration for pylumped.

Quiet by default (WARNING and above). Switch on step/registry tracing with:

    from pylumped._logging import enable_debug_logging
    enable_debug_logging()
"""

import logging
import sys

logger = logging.getLogger("pylumped")

# Default: WARNING level only (quiet operation)
logger.setLevel(logging.WARNING)

if not logger.handlers:
    _default_handler = logging.StreamHandler(sys.stdout)
    _default_handler.setLevel(logging.DEBUG)
    _default_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(_default_handler)


def enable_debug_logging() -> None:
    """Log everything, including per-load and per-simulation messages."""
    logger.setLevel(logging.DEBUG)


def set_log_level(level: int | str) -> None:
    """Set the package log level (e.g. logging.INFO or "INFO")."""
    logger.setLevel(level)
