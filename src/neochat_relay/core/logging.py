"""Logging setup for the relay process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_neochat_relay", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._neochat_relay = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())
