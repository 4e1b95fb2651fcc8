"""Centralized logger configuration.

Usage:
    from recordview.utils.logging import get_logger
    logger = get_logger(__name__)

Library modules only acquire loggers; handlers are attached once by
``setup_logging``, which the CLI calls at startup.
"""

import logging
import os
import sys

DEFAULT_LEVEL = os.getenv("RECORDVIEW_LOG_LEVEL", "WARNING").upper()
_PKG_LOGGER_NAME = "recordview"


def setup_logging(level: str | int = DEFAULT_LEVEL) -> None:
    """Attach a single stream handler to the package logger.

    Calling it again only updates the level and points the handler at the
    current ``sys.stderr``.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        if getattr(handler, "_recordview", False):
            handler.stream = sys.stderr
            return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    handler._recordview = True
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(_PKG_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
