import pytest
import structlog

from challengeforge.infrastructure.persistence import InMemoryStore, StoreClient
from challengeforge.main import create_application, shutdown_application


@pytest.mark.asyncio
async def test_create_and_shutdown_application(test_settings, restore_logging):
    container = create_application(test_settings)

    store = container.resolve(StoreClient)
    assert isinstance(store, InMemoryStore)
    assert structlog.get_config()["cache_logger_on_first_use"] is True

    await shutdown_application(container)
