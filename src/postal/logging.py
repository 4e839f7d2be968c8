"""Logging helpers for postal.

Modules log through ``logging.getLogger(__name__)`` so everything lives under
the ``postal`` logger. A ``TRACE`` level (5) sits below ``DEBUG`` and carries
the SMTP dialogue details.

Nothing is printed until :func:`init_logging` attaches a handler; libraries
embedding postal can configure the ``postal`` logger themselves instead.

Examples:
    >>> from postal.logging import init_logging
    >>> logger = init_logging("TRACE")  # doctest: +SKIP
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["ROOT_LOGGER_NAME", "TRACE_LEVEL", "get_logger", "init_logging"]

ROOT_LOGGER_NAME = "postal"
TRACE_LEVEL = 5

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``postal`` namespace.

    Args:
        name: Child name. Names already prefixed with ``postal`` are kept.

    Examples:
        >>> get_logger("mail").name
        'postal.mail'
        >>> get_logger("postal.config").name
        'postal.config'
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def init_logging(level: int | str = logging.INFO, *, console: Console | None = None) -> logging.Logger:
    """Attach a Rich console handler to the ``postal`` logger.

    Calling it again replaces the previously installed Rich handler.

    Args:
        level: Level name (``"TRACE"``, ``"DEBUG"``...) or number.
        console: Rich console to write to, stderr by default.

    Returns:
        The configured ``postal`` logger.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
