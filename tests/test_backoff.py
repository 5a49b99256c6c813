"""Tests for backoff delay computation and the retry loop."""

from __future__ import annotations

import asyncio
import random

import pytest

from alchemykit.transport.backoff import BackoffPolicy, Retrier, compute_delay
from alchemykit.transport.context import call_scope
from alchemykit.utils.exceptions import (
    ConnectionFailedError,
    DeadlineExceededError,
    InvalidParameterError,
    ProtocolError,
    RequestCancelledError,
    TransportError,
)


def test_compute_delay_without_jitter_is_exponential_and_capped() -> None:
    delays = [compute_delay(i, 1.0, 30.0, 2.0, 0.0) for i in range(7)]
    assert delays == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0, 30.0]


def test_compute_delay_with_jitter_stays_in_band() -> None:
    rng = random.Random(7)
    for attempt in range(6):
        base = min(0.5 * 2.0**attempt, 10.0)
        for _ in range(50):
            d = compute_delay(attempt, 0.5, 10.0, 2.0, 0.25, rng)
            assert base * 0.75 - 1e-9 <= d <= base * 1.25 + 1e-9


def test_compute_delay_never_negative_and_survives_overflow() -> None:
    assert compute_delay(5000, 1.0, 12.0, 10.0, 0.0) == 12.0
    assert compute_delay(0, 0.0, 1.0, 2.0, 1.0) == 0.0


def test_policy_delay_uses_its_rng() -> None:
    a = BackoffPolicy(jitter=0.5, rng=random.Random(1))
    b = BackoffPolicy(jitter=0.5, rng=random.Random(1))
    assert [a.delay(i) for i in range(4)] == [b.delay(i) for i in range(4)]


@pytest.mark.asyncio
async def test_retrier_makes_max_retries_plus_one_attempts() -> None:
    sleeps: list[float] = []

    async def sleep(d: float) -> None:
        sleeps.append(d)

    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        raise TransportError(503, "Service Unavailable")

    retrier = Retrier(BackoffPolicy(max_retries=3, jitter=0.0), sleep=sleep)
    with pytest.raises(TransportError) as exc_info:
        await retrier.run(attempt)
    assert exc_info.value.status_code == 503
    assert calls == 4
    assert sleeps == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_retrier_returns_first_success() -> None:
    outcomes = [ConnectionFailedError("reset"), ProtocolError(-32005, "limit"), "ok"]

    async def attempt():
        item = outcomes.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def sleep(d: float) -> None:
        return None

    retrier = Retrier(BackoffPolicy(max_retries=5, jitter=0.0), sleep=sleep)
    assert await retrier.run(attempt) == "ok"
    assert outcomes == []


@pytest.mark.asyncio
async def test_retrier_stops_on_non_retryable_error() -> None:
    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        raise ProtocolError(-32602, "invalid params")

    retrier = Retrier(BackoffPolicy(max_retries=3), sleep=lambda d: asyncio.sleep(0))
    with pytest.raises(ProtocolError):
        await retrier.run(attempt)
    assert calls == 1


@pytest.mark.asyncio
async def test_retrier_with_retry_disabled_makes_one_attempt() -> None:
    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        raise TransportError(500, "Internal Server Error")

    with pytest.raises(TransportError):
        await Retrier(BackoffPolicy(max_retries=4)).run(attempt, retry=False)
    assert calls == 1


@pytest.mark.asyncio
async def test_retrier_zero_retries_policy() -> None:
    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        raise TransportError(429, "Too Many Requests")

    with pytest.raises(TransportError):
        await Retrier(BackoffPolicy.disabled()).run(attempt)
    assert calls == 1


@pytest.mark.asyncio
async def test_parameter_errors_are_not_retried() -> None:
    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        raise InvalidParameterError("bad")

    with pytest.raises(InvalidParameterError):
        await Retrier(BackoffPolicy(max_retries=2)).run(attempt)
    assert calls == 1


@pytest.mark.asyncio
async def test_cancelled_scope_stops_before_first_attempt() -> None:
    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        return 1

    with call_scope() as scope:
        scope.cancel()
        with pytest.raises(RequestCancelledError):
            await Retrier().run(attempt)
    assert calls == 0


@pytest.mark.asyncio
async def test_cancel_during_backoff_sleep_aborts_promptly() -> None:
    calls = 0

    async def attempt():
        nonlocal calls
        calls += 1
        raise TransportError(503, "Service Unavailable")

    retrier = Retrier(BackoffPolicy(max_retries=3, initial_delay=30.0, jitter=0.0))
    event = asyncio.Event()

    async def cancel_soon() -> None:
        await asyncio.sleep(0.05)
        event.set()

    with call_scope(cancel_event=event):
        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(retrier.run(attempt), timeout=5.0)
        await canceller
    assert calls == 1


@pytest.mark.asyncio
async def test_deadline_aborts_slow_attempt() -> None:
    async def attempt():
        await asyncio.sleep(10)
        return "late"

    with call_scope(timeout=0.05):
        with pytest.raises(DeadlineExceededError):
            await asyncio.wait_for(Retrier().run(attempt), timeout=5.0)


@pytest.mark.asyncio
async def test_deadline_shorter_than_backoff_reports_deadline() -> None:
    async def attempt():
        raise ConnectionFailedError("refused")

    retrier = Retrier(BackoffPolicy(max_retries=5, initial_delay=20.0, jitter=0.0))
    with call_scope(timeout=0.05):
        with pytest.raises(DeadlineExceededError):
            await asyncio.wait_for(retrier.run(attempt), timeout=5.0)


@pytest.mark.asyncio
async def test_task_cancellation_propagates_untouched() -> None:
    started = asyncio.Event()

    async def attempt():
        started.set()
        await asyncio.sleep(10)

    task = asyncio.create_task(Retrier().run(attempt))
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
