import logging
import os
import sys
from pathlib import Path

import pytest
import structlog

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

os.environ.setdefault("AI_API_KEY", "test-key")
os.environ.setdefault("AI_API_BASE", "https://ai.example.test/v1")

from challengeforge.core.config import Settings  # noqa: E402
from challengeforge.infrastructure.event_bus import InMemoryEventBus  # noqa: E402
from challengeforge.infrastructure.persistence import InMemoryStore  # noqa: E402
from challengeforge.infrastructure.resilience import RetryPolicy  # noqa: E402


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL=None,
        REPOSITORY_MAX_RETRIES=2,
        REPOSITORY_RETRY_BASE_DELAY=0,
        SEARCH_DEFAULT_LIMIT=10,
        SEARCH_MAX_LIMIT=100,
        _env_file=None,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def event_bus():
    return InMemoryEventBus(record_history=True)


@pytest.fixture
def fast_retry():
    return RetryPolicy(max_retries=2, base_delay=0)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    structlog.reset_defaults()
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
