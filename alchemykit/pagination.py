"""Generic cursor-driven iterator over paginated endpoints."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    next_key: str | None = None
    total_count: int | None = None


PageFetcher = Callable[["str | None"], Awaitable[Page[T]]]


class PageIterator(Generic[T]):
    """
    Lazy, forward-only traversal of a paginated endpoint.

    ``fetch_page(page_key)`` is called with None for the first page and with
    the previous page's ``next_key`` afterwards. Nothing is fetched until the
    first ``next()``/``has_next()``. An empty next key ends the sequence, as
    does an empty page reached by following a key. The first error is kept
    and re-raised on every later call until ``reset()``.
    """

    def __init__(self, fetch_page: PageFetcher[T]):
        self._fetch_page = fetch_page
        self._lock = asyncio.Lock()
        self._clear()

    def _clear(self) -> None:
        self._page: Page[T] | None = None
        self._index = 0
        self._done = False
        self._error: BaseException | None = None
        self._total_count: int | None = None

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def total_count(self) -> int | None:
        """Total reported by the endpoint, once a page has been fetched."""
        return self._total_count

    async def _load(self, page_key: str | None) -> None:
        try:
            page = await self._fetch_page(page_key)
        except Exception as exc:
            self._error = exc
            raise
        self._page = page
        self._index = 0
        if page.total_count is not None:
            self._total_count = page.total_count
        if not page.items:
            self._done = True

    async def _advance(self) -> bool:
        """Make sure an unread item is available; False at end of data."""
        if self._error is not None:
            raise self._error
        if self._done:
            return False
        if self._page is None:
            await self._load(None)
            return not self._done
        if self._index < len(self._page.items):
            return True
        if not self._page.next_key:
            self._done = True
            return False
        await self._load(self._page.next_key)
        return not self._done

    async def next(self) -> T | None:
        """Next item, or None once the sequence is exhausted."""
        async with self._lock:
            if not await self._advance():
                return None
            assert self._page is not None
            item = self._page.items[self._index]
            self._index += 1
            return item

    async def has_next(self) -> bool:
        async with self._lock:
            return await self._advance()

    async def collect(self) -> list[T]:
        items: list[T] = []
        while True:
            item = await self.next()
            if item is None:
                return items
            items.append(item)

    async def collect_up_to(self, n: int) -> list[T]:
        items: list[T] = []
        while len(items) < n:
            item = await self.next()
            if item is None:
                break
            items.append(item)
        return items

    async def reset(self) -> None:
        async with self._lock:
            self._clear()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        while True:
            item = await self.next()
            if item is None:
                return
            yield item
