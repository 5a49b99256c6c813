"""Exponential backoff with jitter and the retry loop built on it."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from alchemykit.transport.context import CallScope, current_scope
from alchemykit.utils.exceptions import is_retryable, sanitize_error_message

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0
DEFAULT_MULTIPLIER = 2.0
DEFAULT_JITTER = 0.1


def compute_delay(
    attempt: int,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    multiplier: float = DEFAULT_MULTIPLIER,
    jitter: float = DEFAULT_JITTER,
    rng: random.Random | None = None,
) -> float:
    """
    Delay in seconds before retry number ``attempt`` (zero-based).

    ``min(initial * multiplier**attempt, max)`` perturbed by
    ``delay * jitter * U(-1, 1)`` and clamped at zero.
    """
    try:
        delay = min(initial_delay * (multiplier ** attempt), max_delay)
    except OverflowError:
        delay = max_delay
    if jitter > 0:
        source = rng if rng is not None else random
        delay += delay * jitter * (source.random() * 2 - 1)
    return max(0.0, delay)


@dataclass
class BackoffPolicy:
    """Retry bounds shared by every request a client makes."""

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = DEFAULT_INITIAL_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    multiplier: float = DEFAULT_MULTIPLIER
    jitter: float = DEFAULT_JITTER
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def delay(self, attempt: int) -> float:
        return compute_delay(
            attempt,
            self.initial_delay,
            self.max_delay,
            self.multiplier,
            self.jitter,
            self.rng,
        )

    @classmethod
    def disabled(cls) -> "BackoffPolicy":
        return cls(max_retries=0)


class Retrier:
    """Runs an async attempt function under a BackoffPolicy."""

    def __init__(
        self,
        policy: BackoffPolicy | None = None,
        *,
        is_retryable_fn: Callable[[BaseException], bool] = is_retryable,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        self.policy = policy or BackoffPolicy()
        self._is_retryable = is_retryable_fn
        self._sleep = sleep

    async def run(self, attempt_fn: Callable[[], Awaitable[T]], *, retry: bool = True) -> T:
        max_retries = self.policy.max_retries if retry else 0
        scope = current_scope()
        last_exc: BaseException | None = None
        for attempt in range(max_retries + 1):
            if scope is not None:
                scope.check()
            try:
                if scope is not None:
                    return await scope.run(attempt_fn())
                return await attempt_fn()
            except Exception as exc:
                if not self._is_retryable(exc):
                    raise
                last_exc = exc
            if attempt >= max_retries:
                break
            delay = self.policy.delay(attempt)
            logger.warning(
                f"Retrying after {sanitize_error_message(str(last_exc))} "
                f"(attempt {attempt + 1}/{max_retries}, sleeping {delay:.2f}s)"
            )
            await self._wait(delay, scope)
        assert last_exc is not None
        raise last_exc

    async def _wait(self, delay: float, scope: CallScope | None) -> None:
        if self._sleep is not None:
            await self._sleep(delay)
            if scope is not None:
                scope.check()
            return
        if scope is not None:
            await scope.sleep(delay)
            return
        await asyncio.sleep(delay)
