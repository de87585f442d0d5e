"""Logging configuration."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root ``app`` logger once per process."""
    log = logging.getLogger("app")
    log.setLevel(level.upper())

    # Avoid duplicate handlers when the app is rebuilt (tests, reload)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
