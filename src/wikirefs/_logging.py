"""Logging configuration for wikirefs.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

    log.debug("Index collisions, per-document counts")
    log.info("Run summaries")
    log.warning("Unresolved references")

The log level can be configured via the WIKIREFS_LOG_LEVEL environment variable
(DEBUG, INFO, WARNING, ERROR). Default is INFO.
"""

import logging
import os
import sys

LOG_LEVEL_ENV = "WIKIREFS_LOG_LEVEL"


def configure_logging() -> None:
    """Configure logging for the wikirefs package.

    Call this once at application startup (e.g., in cli.py).
    Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger("wikirefs")

    if root_logger.handlers:
        return

    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Keep messages out of the root logger (avoids duplicates under pytest/click)
    root_logger.propagate = False
