"""Service registration for the DI container."""
from __future__ import annotations

from typing import Optional

from challengeforge.core.config import Settings, settings as default_settings
from challengeforge.domains.challenge.infrastructure.repositories import ChallengeRepository
from challengeforge.domains.evaluation.infrastructure.repositories import EvaluationRepository
from challengeforge.domains.focus_area.infrastructure.repositories import FocusAreaRepository
from challengeforge.domains.personality.infrastructure.repositories import PersonalityRepository
from challengeforge.domains.user.infrastructure.repositories import UserRepository
from challengeforge.infrastructure.di.container import Container
from challengeforge.infrastructure.di.scopes import Scope
from challengeforge.infrastructure.event_bus import DeadLetterQueue, EventBus, InMemoryEventBus
from challengeforge.infrastructure.persistence import InMemoryStore, SQLAlchemyStore, StoreClient
from challengeforge.infrastructure.resilience import (
    CircuitBreakerProxy,
    CircuitBreakerRegistry,
    RetryPolicy,
    wrap_client_with_circuit_breaker,
)
from challengeforge.services.ai_client import AIProviderClient
from challengeforge.services.evaluation_service import EvaluationService

REPOSITORIES = (
    ChallengeRepository,
    EvaluationRepository,
    FocusAreaRepository,
    UserRepository,
    PersonalityRepository,
)


def configure_container(container: Container, settings: Settings) -> None:
    """Configure application dependencies."""

    container.register(Settings, lambda c: settings, Scope.SINGLETON)

    # Infrastructure
    if settings.DATABASE_URL:
        container.register(StoreClient, lambda c: SQLAlchemyStore(settings.DATABASE_URL), Scope.SINGLETON)
    else:
        container.register(StoreClient, lambda c: InMemoryStore(), Scope.SINGLETON)

    container.register(DeadLetterQueue, lambda c: DeadLetterQueue(), Scope.SINGLETON)
    container.register(
        EventBus,
        lambda c: InMemoryEventBus(
            record_history=settings.EVENT_BUS_RECORD_HISTORY,
            history_limit=settings.EVENT_BUS_HISTORY_LIMIT,
            dead_letter_queue=(
                c.resolve(DeadLetterQueue) if settings.EVENT_BUS_DEAD_LETTER_ENABLED else None
            ),
        ),
        Scope.SINGLETON,
    )
    container.register(RetryPolicy, lambda c: RetryPolicy.from_settings(settings), Scope.SINGLETON)
    container.register(CircuitBreakerRegistry, lambda c: CircuitBreakerRegistry(settings), Scope.SINGLETON)

    # External AI provider, only ever reachable through its breaker
    container.register(
        CircuitBreakerProxy,
        lambda c: wrap_client_with_circuit_breaker(
            AIProviderClient(settings),
            c.resolve(CircuitBreakerRegistry).create_for_ai(),
        ),
        Scope.SINGLETON,
    )

    # Repositories
    for repository_class in REPOSITORIES:
        container.register(
            repository_class,
            lambda c, cls=repository_class: cls(
                store=c.resolve(StoreClient),
                event_bus=c.resolve(EventBus),
                retry_policy=c.resolve(RetryPolicy),
                settings=settings,
            ),
            Scope.SINGLETON,
        )

    # Application services
    container.register(
        EvaluationService,
        lambda c: EvaluationService(
            challenge_repository=c.resolve(ChallengeRepository),
            evaluation_repository=c.resolve(EvaluationRepository),
            ai_client=c.resolve(CircuitBreakerProxy),
        ),
        Scope.SINGLETON,
    )


def build_container(settings: Optional[Settings] = None) -> Container:
    """Return a freshly configured container."""
    container = Container()
    configure_container(container, settings or default_settings)
    return container
