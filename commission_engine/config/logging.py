"""
Logging configuration.

Sets up loguru sinks for the worker and scheduler processes.
"""

import sys

from loguru import logger

from commission_engine.config.settings import Settings


def configure_logging(settings: Settings) -> None:
    """
    Configure loguru sinks.

    Args:
        settings: Application settings
    """
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="1 day",
            retention="7 days",
            level=settings.log_level,
        )

    logger.info(
        "Logging configured",
        extra={"level": settings.log_level, "file": settings.log_file},
    )
