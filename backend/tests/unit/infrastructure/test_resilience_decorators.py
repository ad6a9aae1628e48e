import pytest

from challengeforge.infrastructure.resilience import (
    CircuitBreaker,
    CircuitState,
    with_circuit_breaker,
    wrap_client_with_circuit_breaker,
)
from challengeforge.shared_kernel.exceptions import CircuitOpenError


class DummyAIClient:
    model = "test-model"

    def __init__(self):
        self.calls = 0

    async def chat(self, messages):
        self.calls += 1
        return messages[-1]["content"].upper()

    def describe(self):
        return f"client for {self.model}"

    async def _private(self):
        return "untouched"


@pytest.mark.asyncio
async def test_with_circuit_breaker_decorator():
    breaker = CircuitBreaker(name="decorated", failure_threshold=1)

    @with_circuit_breaker(breaker)
    async def unstable():
        raise RuntimeError("down")

    with pytest.raises(RuntimeError):
        await unstable()
    with pytest.raises(CircuitOpenError):
        await unstable()


@pytest.mark.asyncio
async def test_proxy_routes_public_methods_through_breaker():
    client = DummyAIClient()
    breaker = CircuitBreaker(name="proxy")
    guarded = wrap_client_with_circuit_breaker(client, breaker)

    assert await guarded.chat([{"role": "user", "content": "hi"}]) == "HI"
    assert await guarded.describe() == "client for test-model"
    assert breaker.status()["stats"]["successes"] == 2


@pytest.mark.asyncio
async def test_proxy_leaves_attributes_and_private_members_alone():
    client = DummyAIClient()
    guarded = wrap_client_with_circuit_breaker(client, CircuitBreaker(name="attrs"))

    assert guarded.model == "test-model"
    assert await guarded._private() == "untouched"
    assert guarded.wrapped is client


@pytest.mark.asyncio
async def test_proxy_fails_fast_when_open():
    client = DummyAIClient()
    breaker = CircuitBreaker(name="open-proxy")
    breaker.force_state(CircuitState.OPEN)
    guarded = wrap_client_with_circuit_breaker(client, breaker)

    with pytest.raises(CircuitOpenError):
        await guarded.chat([{"role": "user", "content": "hi"}])
    assert client.calls == 0
