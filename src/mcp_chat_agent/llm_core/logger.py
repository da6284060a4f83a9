"""Logging helpers shared by the chat agent, the tool layer and the demo server."""

import logging
import sys
from typing import Union

_LOGGER_NAME = "mcp_chat_agent"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or one of its children.

    Module names that already start with the package name (``__name__`` inside
    the package) are used as-is so they are not nested twice.

    Args:
        name: Optional child logger name.

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def setup_logging(level: Union[int, str] = logging.INFO, format_str: str = DEFAULT_FORMAT) -> None:
    """Attach a stdout handler to the package logger.

    Meant for applications and example scripts; the library itself only
    installs a ``NullHandler``. Calling it again after a handler exists only
    adjusts the level.

    Args:
        level: Logging level, either numeric or a name such as ``"DEBUG"``.
        format_str: Log format string.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    logger.addHandler(handler)


logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
