"""Caller-supplied cancellation/deadline scope honoured by the retry loop.

Usage::

    async with alchemy:
        with call_scope(timeout=5.0) as scope:
            number = await alchemy.node.block_number()

``scope.cancel()`` (or setting the ``cancel_event`` passed in) aborts the
in-flight attempt and any pending backoff sleep with ``RequestCancelledError``;
an expired timeout raises ``DeadlineExceededError``. Plain task cancellation
still works and propagates ``asyncio.CancelledError`` untouched.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Awaitable, Iterator, TypeVar

from loguru import logger

from alchemykit.utils.exceptions import DeadlineExceededError, RequestCancelledError

T = TypeVar("T")

_current_scope: ContextVar["CallScope | None"] = ContextVar("alchemykit_call_scope", default=None)


@dataclass
class CallScope:
    deadline: float | None = None
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the scope already fired."""
        if self.cancelled:
            raise RequestCancelledError()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise DeadlineExceededError()

    async def run(self, aw: Awaitable[T]) -> T:
        """Await ``aw`` but abort it as soon as the scope fires."""
        try:
            self.check()
        except BaseException:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise
        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self.cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except BaseException:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if task in done:
            return task.result()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            logger.debug(f"attempt finished with {exc!r} after scope fired")
        if self.cancelled:
            raise RequestCancelledError()
        raise DeadlineExceededError()

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds unless the scope fires first."""
        remaining = self.remaining()
        timeout = delay if remaining is None else min(delay, remaining)
        try:
            await asyncio.wait_for(self.cancel_event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            if remaining is not None and remaining <= delay:
                raise DeadlineExceededError() from None
            return
        raise RequestCancelledError()


@contextmanager
def call_scope(
    timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
) -> Iterator[CallScope]:
    """Activate a cancellation scope for every request made inside the block.

    Nested scopes keep the tighter deadline and, unless given their own
    event, share the enclosing scope's cancel event.
    """
    parent = _current_scope.get()
    deadline = time.monotonic() + timeout if timeout is not None else None
    if parent is not None and parent.deadline is not None:
        deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
    if cancel_event is None:
        cancel_event = parent.cancel_event if parent is not None else asyncio.Event()
    scope = CallScope(deadline=deadline, cancel_event=cancel_event)
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)


def current_scope() -> CallScope | None:
    return _current_scope.get()
