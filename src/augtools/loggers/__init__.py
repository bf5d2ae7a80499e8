"""
Package logger and logging helpers.

Use the package-wide ``logger`` and pass values as keyword arguments;
images, transforms, arrays and paths are summarized by the processors::

    from augtools.loggers import logger

    logger.info("Resampled image", image=resampled, transform=t0)
"""

import logging
import os
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Generator

import structlog
from tqdm.contrib.logging import logging_redirect_tqdm as _redirect_tqdm

from augtools.loggers.logging_config import DEFAULT_LOG_LEVEL, LoggingManager

__all__ = [
    "logger",
    "get_logger",
    "temporary_log_level",
    "tqdm_logging_redirect",
    "LoggingManager",
]

PACKAGE_LOGGER_NAME = "augtools"

DEFAULT_OR_ENV = os.environ.get("AUGTOOLS_LOG_LEVEL", DEFAULT_LOG_LEVEL)


def get_logger(name: str, level: str = "INFO") -> structlog.stdlib.BoundLogger:
    """
    Configure logger `name` at `level` and return it.

    A warning is emitted when ``<NAME>_LOG_LEVEL`` asks for a different,
    non-default level, since the explicit `level` wins.
    """
    manager = LoggingManager(name)
    env_level = manager.env_level
    if env_level not in (level.upper(), DEFAULT_LOG_LEVEL):
        manager.get_logger().warning(
            f"Environment variable {name.upper()}_LOG_LEVEL is {env_level} "
            f"but you are setting it to {level}"
        )
    return manager.configure_logging(level=level)


@contextmanager
def temporary_log_level(
    logger: structlog.stdlib.BoundLogger | logging.Logger, level: str
) -> Generator[None, Any, None]:
    """
    Change the level of `logger` for the duration of the block.

    Examples
    --------
    >>> with temporary_log_level(logger, "ERROR"):
    ...     augment_images_spatial(...)  # only errors are shown
    """
    original_level = logger.level
    logger.setLevel(getattr(logging, level.upper()))
    try:
        yield
    finally:
        logger.setLevel(original_level)


def tqdm_logging_redirect(
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> AbstractContextManager[None]:
    """Route log output through ``tqdm.write`` so progress bars stay intact."""
    return _redirect_tqdm([logging.getLogger(logger_name)])


logger = get_logger(PACKAGE_LOGGER_NAME, DEFAULT_OR_ENV)
