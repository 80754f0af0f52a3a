"""Logging helpers shared by every module."""

import logging
from typing import Optional

ROOT_LOGGER_NAME = "plasmid_browser"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package root logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Install a single stream handler on the package root logger.

    Calling this more than once only updates the level.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to WARNING.

    Returns:
        The package root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(getattr(h, "_plasmid_browser", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._plasmid_browser = True
        root.addHandler(handler)
    root.setLevel((level or "WARNING").upper())
    return root
