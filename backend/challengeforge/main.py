"""
ChallengeForge - process bootstrap
"""
from typing import Optional

import structlog

from challengeforge.core.config import Settings, settings as default_settings
from challengeforge.infrastructure.di import Container, build_container
from challengeforge.infrastructure.observability import configure_logging
from challengeforge.infrastructure.persistence import StoreClient

logger = structlog.get_logger(__name__)


def create_application(settings: Optional[Settings] = None) -> Container:
    """Configure logging and wire every dependency once for this process."""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    container = build_container(settings)
    logger.info(
        "application_started",
        project=settings.PROJECT_NAME,
        version=settings.VERSION,
        environment=settings.APP_ENV,
        store="sql" if settings.DATABASE_URL else "memory",
    )
    return container


async def shutdown_application(container: Container) -> None:
    """Release the store's connections."""
    await container.resolve(StoreClient).close()
    logger.info("application_stopped")
