"""
Loguru sink configuration.
"""

import sys

from loguru import logger

from bibresolver.config import Settings


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """
    Replace loguru's default sink with one matching the settings.

    Args:
        settings: Application settings (log_level, log_json)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=LOG_FORMAT,
        serialize=settings.log_json,
        backtrace=settings.debug,
        diagnose=settings.debug,
    )
    logger.debug(f"Logging configured at {settings.log_level}")
