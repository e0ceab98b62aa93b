"""Logging configuration for asum.

All modules log through ``logging.getLogger(__name__)`` under the ``asum``
logger. ``setup_logging`` attaches two handlers once per process:

- stderr, with a short level prefix (stdout is reserved for the message)
- a daily rotating file in ~/.asum/logs/asum.log
"""

import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from asum import global_config

LOG_LEVEL_ENV_VAR = "ASUM_LOG_LEVEL"

_STDERR_FORMAT = "[%(levelname)s] %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_ROOT_LOGGER_NAME = "asum"


def _level_from_env() -> Optional[int]:
    """Return the log level named in ASUM_LOG_LEVEL, if any."""
    level_name = os.getenv(LOG_LEVEL_ENV_VAR)
    if not level_name:
        return None
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else None


def setup_logging(verbose: bool = False, log_to_file: bool = True) -> logging.Logger:
    """Configure the asum logger hierarchy.

    Args:
        verbose: Log DEBUG records to stderr.
        log_to_file: Also write to the daily log file in ~/.asum/logs/.

    Returns:
        The configured ``asum`` logger.
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)

    env_level = _level_from_env()
    if verbose:
        level = logging.DEBUG
    elif env_level is not None:
        level = env_level
    else:
        level = logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))
    logger.addHandler(stderr_handler)

    if log_to_file:
        log_dir = global_config.get_logs_dir()
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                log_dir / "asum.log",
                when="midnight",
                backupCount=14,
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("File logging disabled, cannot write to %s: %s", log_dir, e)
        else:
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            logger.addHandler(file_handler)

    return logger
