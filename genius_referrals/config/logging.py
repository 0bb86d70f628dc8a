"""
Logging setup.

Configures the loguru logger with file rotation.
"""

from loguru import logger

from genius_referrals.config.settings import Settings, settings as default_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logger with file rotation."""
    settings = settings or default_settings
    logger.add(
        settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )

    logger.info(
        "Logging configured",
        extra={"environment": settings.environment, "level": settings.log_level},
    )
