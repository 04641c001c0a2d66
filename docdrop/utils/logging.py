"""
Logging configuration.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Route all loggers to stdout at the given level. Safe to call more than once."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if getattr(setup_logging, "_configured", False):
        root.setLevel(numeric_level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.handlers[:] = [handler]
    root.setLevel(numeric_level)

    # Reduce noise from HTTP client internals
    logging.getLogger("httpx").setLevel(logging.WARNING)

    setup_logging._configured = True
