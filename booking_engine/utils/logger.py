"""Structured logging utilities."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from booking_engine.utils.config import get_settings


PACKAGE_LOGGER_NAME = "booking_engine"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Attach the stdout handler to the ``booking_engine`` logger once.

    Only the package namespace is configured; other loggers are left as the
    host process set them up.
    """

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    resolved_level = (level or get_settings().log_level).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(resolved_level)
    package_logger.addHandler(handler)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``booking_engine`` namespace.

    Module names outside the package (``app``, ``scripts.*``) are nested under
    it so every engine message shares one handler and level.
    """
    configure_logging()
    if name != PACKAGE_LOGGER_NAME and not name.startswith(PACKAGE_LOGGER_NAME + "."):
        name = f"{PACKAGE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
