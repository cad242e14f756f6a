"""Logging helpers for shapecheck.

Library modules log through ``logging.getLogger(__name__)``. The package
logger carries a NullHandler, so nothing is printed unless the application
configures logging, for example with ``configure_logging``.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "shapecheck"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it for ``name``."""
    if not name or name == PACKAGE_LOGGER:
        return logging.getLogger(PACKAGE_LOGGER)
    if name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def configure_logging(
    level: int = logging.INFO,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Attach a stderr handler to the package logger.

    Calling it again replaces the handler installed by the previous call.

    Returns:
        The installed handler
    """
    logger = get_logger()
    for handler in list(logger.handlers):
        if getattr(handler, "_shapecheck_handler", False):
            logger.removeHandler(handler)

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(formatter)
    handler._shapecheck_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


__all__ = [
    "PACKAGE_LOGGER",
    "get_logger",
    "configure_logging",
]
