import logging
import os
from typing import Optional

LOGGER_NAME = "lispreader"

LEVEL_ENV_VAR = "LISPREADER_LOGGING_LEVEL"
DEV_LOGGER_ENV_VAR = "LISPREADER_USE_DEV_LOGGER"

DEFAULT_LEVEL = "WARNING"

# Below DEBUG; the reader logs every token classification at this level.
TRACE = 5

logging.addLevelName(TRACE, "TRACE")


DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] - %(message)s"

_handler: Optional[logging.Handler] = None


def get_level() -> str:
    """Get the logging level for the reader from the environment."""
    return os.getenv(LEVEL_ENV_VAR, DEFAULT_LEVEL).upper()


def use_dev_logger() -> bool:
    return os.getenv(DEV_LOGGER_ENV_VAR, "").lower() == "true"


def get_handler(
    level: Optional[str] = None, fmt: str = DEFAULT_FORMAT
) -> logging.Handler:
    """Get the handler for reader log records.

    Records are discarded unless the dev logger is enabled, in which case they
    are written to stderr."""
    handler = logging.StreamHandler() if use_dev_logger() else logging.NullHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(level or get_level())
    return handler


def configure_root_logger(
    level: Optional[str] = None, fmt: str = DEFAULT_FORMAT
) -> logging.Logger:
    """Configure and return the `lispreader` logger.

    Calling this again replaces the handler installed by the previous call."""
    global _handler

    level = level or get_level()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = get_handler(level=level, fmt=fmt)
    logger.addHandler(_handler)
    return logger
