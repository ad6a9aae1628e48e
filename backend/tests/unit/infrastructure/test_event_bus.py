import pytest
from structlog.testing import capture_logs
from uuid import uuid4

from challengeforge.infrastructure.event_bus import DeadLetterQueue, InMemoryEventBus
from challengeforge.shared_kernel.domain_events import DomainEvent


@pytest.mark.asyncio
async def test_in_memory_event_bus_dispatches():
    bus = InMemoryEventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe("challenge.created", handler)
    event = DomainEvent(event_type="challenge.created", payload={"challengeId": "c-1"})
    await bus.publish(event)

    assert received == [event]


@pytest.mark.asyncio
async def test_handlers_run_in_registration_order_and_only_for_their_type():
    bus = InMemoryEventBus()
    order = []

    async def first(event):
        order.append(("first", event.event_type))

    async def second(event):
        order.append(("second", event.event_type))

    bus.subscribe("user.created", first)
    bus.subscribe("user.created", second)
    bus.subscribe("user.deleted", second)

    await bus.publish(DomainEvent(event_type="user.created"))

    assert order == [("first", "user.created"), ("second", "user.created")]


@pytest.mark.asyncio
async def test_failing_handler_is_logged_and_does_not_stop_others():
    dead_letters = DeadLetterQueue()
    bus = InMemoryEventBus(dead_letter_queue=dead_letters)
    received = []

    async def broken(event):
        raise RuntimeError("handler bug")

    async def healthy(event):
        received.append(event)

    bus.subscribe("challenge.completed", broken)
    bus.subscribe("challenge.completed", healthy)
    event = DomainEvent(event_type="challenge.completed")

    with capture_logs() as logs:
        assert await bus.publish(event) == "challenge.completed"

    assert received == [event]
    failures = [entry for entry in logs if entry["event"] == "event_handler_failed"]
    assert len(failures) == 1
    assert failures[0]["event_type"] == "challenge.completed"
    assert failures[0]["error"] == "handler bug"
    assert bus.metrics()["handler_failures"] == 1
    assert [entry.event for entry in dead_letters.pending()] == [event]


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = InMemoryEventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe("focus_area.created", handler)
    assert bus.unsubscribe("focus_area.created", handler) is True
    assert bus.unsubscribe("focus_area.created", handler) is False

    await bus.publish(DomainEvent(event_type="focus_area.created"))
    assert received == []


@pytest.mark.asyncio
async def test_publish_all_preserves_order():
    bus = InMemoryEventBus()
    seen = []

    async def handler(event):
        seen.append(event.payload["n"])

    bus.subscribe("tick", handler)
    await bus.publish_all([DomainEvent(event_type="tick", payload={"n": n}) for n in range(3)])
    assert seen == [0, 1, 2]


@pytest.mark.asyncio
async def test_history_filters_and_limit():
    bus = InMemoryEventBus(record_history=True, history_limit=3)
    correlation_id = uuid4()
    for n in range(4):
        await bus.publish(DomainEvent(event_type="tick", payload={"n": n}))
    await bus.publish(DomainEvent(event_type="tock", correlation_id=correlation_id))

    history = bus.get_event_history()
    assert [event.event_type for event in history] == ["tick", "tick", "tock"]
    assert [event.payload["n"] for event in bus.get_event_history(event_type="tick")] == [2, 3]
    assert len(bus.get_event_history(correlation_id=correlation_id)) == 1
    assert len(bus.get_event_history(limit=1)) == 1


@pytest.mark.asyncio
async def test_history_disabled_by_default_and_reset_keeps_subscriptions():
    bus = InMemoryEventBus()
    calls = []

    async def handler(event):
        calls.append(event)

    bus.subscribe("tick", handler)
    await bus.publish(DomainEvent(event_type="tick"))
    assert bus.get_event_history() == []
    assert bus.metrics()["published"] == 1

    bus.reset()
    assert bus.metrics()["published"] == 0
    assert bus.metrics()["handlers"] == {"tick": 1}
    await bus.publish(DomainEvent(event_type="tick"))
    assert len(calls) == 2
