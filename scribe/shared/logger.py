"""Logging setup shared by all scribe modules."""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler


def _root_name(name: str) -> str:
    return name.split(".")[0] if name else "scribe"


def setup_logger(name: str, level: Union[str, int] = "INFO") -> logging.Logger:
    """
    Configure logging for the package that owns ``name``.

    The handler is attached to the top-level package logger so that every
    module logger obtained through :func:`get_logger` shares it. Calling this
    more than once replaces the previous handler.

    Args:
        name: Module name (usually ``__name__``)
        level: Logging level name or number

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_root_name(name))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)
