import asyncio

import pytest
from structlog.testing import capture_logs

from challengeforge.infrastructure.resilience import RetryPolicy, retrying, with_retry, with_timeout
from challengeforge.shared_kernel.context import OperationContext
from challengeforge.shared_kernel.exceptions import EntityNotFoundError, PersistenceError


class RecordingSleeper:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_always_transient_failure_runs_max_retries_plus_one_times():
    calls = {"count": 0}

    async def flaky():
        calls["count"] += 1
        raise ConnectionError("connection reset")

    sleeper = RecordingSleeper()
    with pytest.raises(ConnectionError):
        await with_retry(flaky, RetryPolicy(max_retries=3, base_delay=0.5), sleep=sleeper)

    assert calls["count"] == 4
    assert sleeper.delays == [0.5, 1.0, 2.0]


@pytest.mark.asyncio
async def test_permanent_failure_runs_once_and_never_sleeps():
    calls = {"count": 0}
    error = EntityNotFoundError("missing")

    async def missing():
        calls["count"] += 1
        raise error

    sleeper = RecordingSleeper()
    with pytest.raises(EntityNotFoundError) as excinfo:
        await with_retry(missing, RetryPolicy(max_retries=5, base_delay=1), sleep=sleeper)

    assert excinfo.value is error
    assert calls["count"] == 1
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_eventual_success_returns_value():
    calls = {"count": 0}

    async def flaky():
        calls["count"] += 1
        if calls["count"] < 3:
            raise PersistenceError("db busy", transient=True)
        return "ok"

    result = await with_retry(flaky, RetryPolicy(max_retries=3, base_delay=0))
    assert result == "ok"
    assert calls["count"] == 3


@pytest.mark.asyncio
async def test_exhaustion_reraises_the_last_error_unchanged():
    errors = [ConnectionError("first"), ConnectionError("second")]

    async def failing():
        raise errors.pop(0)

    with pytest.raises(ConnectionError) as excinfo:
        await with_retry(failing, RetryPolicy(max_retries=1, base_delay=0))
    assert str(excinfo.value) == "second"


@pytest.mark.asyncio
async def test_delay_is_capped_by_max_delay():
    async def failing():
        raise ConnectionError("down")

    sleeper = RecordingSleeper()
    with pytest.raises(ConnectionError):
        await with_retry(failing, RetryPolicy(max_retries=4, base_delay=1, max_delay=3), sleep=sleeper)
    assert sleeper.delays == [1, 2, 3, 3]


@pytest.mark.asyncio
async def test_caller_timeout_bounds_the_whole_call():
    calls = {"count": 0}

    async def slow():
        calls["count"] += 1
        await asyncio.sleep(0.05)
        raise ConnectionError("slow failure")

    with pytest.raises(asyncio.TimeoutError):
        await with_retry(slow, RetryPolicy(max_retries=10, base_delay=0.05, timeout=0.12))
    assert calls["count"] < 11


@pytest.mark.asyncio
async def test_retry_attempts_are_logged_with_context():
    calls = {"count": 0}

    async def flaky():
        calls["count"] += 1
        if calls["count"] == 1:
            raise ConnectionError("connection reset")
        return 1

    context = OperationContext("save", "challenge", {"id": "c-1"})
    with capture_logs() as logs:
        await with_retry(flaky, RetryPolicy(max_retries=2, base_delay=0), context)

    retrying_entries = [entry for entry in logs if entry["event"] == "operation_retrying"]
    assert len(retrying_entries) == 1
    assert retrying_entries[0]["operation"] == "save"
    assert retrying_entries[0]["domain"] == "challenge"
    assert retrying_entries[0]["context"] == {"id": "c-1"}
    assert retrying_entries[0]["attempt"] == 1
    assert any(entry["event"] == "operation_recovered" for entry in logs)


@pytest.mark.asyncio
async def test_retry_logging_accepts_metadata_named_like_log_fields():
    calls = {"count": 0}

    async def flaky():
        calls["count"] += 1
        if calls["count"] < 3:
            raise ConnectionError("connection reset")
        return "done"

    context = OperationContext(
        "save",
        "challenge",
        {"error": "previous", "attempt": 9, "delay": 1.5, "attempts": 2, "max_retries": 0, "event": "e"},
    )
    with capture_logs() as logs:
        result = await with_retry(flaky, RetryPolicy(max_retries=2, base_delay=0), context)

    assert result == "done"
    retrying_entries = [entry for entry in logs if entry["event"] == "operation_retrying"]
    assert [entry["attempt"] for entry in retrying_entries] == [1, 2]
    assert retrying_entries[0]["error"] == "connection reset"
    assert retrying_entries[0]["context"]["error"] == "previous"
    recovered = [entry for entry in logs if entry["event"] == "operation_recovered"]
    assert recovered[0]["attempts"] == 3


def test_policy_rejects_negative_retries():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)


def test_policy_from_settings(test_settings):
    policy = RetryPolicy.from_settings(test_settings, timeout=2.0)
    assert policy.max_retries == 2
    assert policy.base_delay == 0
    assert policy.timeout == 2.0


@pytest.mark.asyncio
async def test_retrying_decorator():
    calls = {"count": 0}

    @retrying(RetryPolicy(max_retries=2, base_delay=0))
    async def fetch(value):
        calls["count"] += 1
        if calls["count"] == 1:
            raise TimeoutError("timed out")
        return value * 2

    assert await fetch(21) == 42
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_with_timeout_raises():
    async def slow():
        await asyncio.sleep(0.05)
        return "done"

    with pytest.raises(asyncio.TimeoutError):
        await with_timeout(slow(), timeout=0.01)


@pytest.mark.asyncio
async def test_with_timeout_none_waits():
    async def quick():
        return "done"

    assert await with_timeout(quick(), None) == "done"
