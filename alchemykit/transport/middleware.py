"""
Request/response interceptors.

A handler is ``async (httpx.Request) -> httpx.Response``. A middleware wraps
the next handler and returns a new one; ``compose`` folds a list right to
left so the first middleware registered runs outermost.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Protocol, Sequence

import httpx
from loguru import logger

from alchemykit.utils.exceptions import sanitize_error_message

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]
MiddlewareFn = Callable[[httpx.Request, Handler], Awaitable[httpx.Response]]


class Middleware(Protocol):
    def wrap(self, next_handler: Handler) -> Handler: ...


class FunctionMiddleware:
    """Adapts ``async fn(request, next_handler)`` to the Middleware protocol."""

    def __init__(self, fn: MiddlewareFn):
        self._fn = fn

    def wrap(self, next_handler: Handler) -> Handler:
        async def handler(request: httpx.Request) -> httpx.Response:
            return await self._fn(request, next_handler)

        return handler


def middleware(fn: MiddlewareFn) -> FunctionMiddleware:
    """Decorator form of FunctionMiddleware."""
    return FunctionMiddleware(fn)


def compose(middlewares: Sequence[Middleware], base: Handler) -> Handler:
    handler = base
    for mw in reversed(middlewares):
        handler = mw.wrap(handler)
    return handler


class ChainMiddleware:
    """Several middlewares bundled as one, applied in order."""

    def __init__(self, *middlewares: Middleware):
        self.middlewares = list(middlewares)

    def wrap(self, next_handler: Handler) -> Handler:
        return compose(self.middlewares, next_handler)


def chain(*middlewares: Middleware) -> ChainMiddleware:
    return ChainMiddleware(*middlewares)


class LoggingMiddleware:
    def __init__(self, level: str = "DEBUG"):
        self.level = level

    def wrap(self, next_handler: Handler) -> Handler:
        async def handler(request: httpx.Request) -> httpx.Response:
            url = sanitize_error_message(str(request.url))
            logger.log(self.level, f"--> {request.method} {url}")
            start = time.monotonic()
            try:
                response = await next_handler(request)
            except Exception as exc:
                elapsed = (time.monotonic() - start) * 1000
                logger.log(self.level, f"<-- {request.method} {url} failed after {elapsed:.0f}ms: {exc}")
                raise
            elapsed = (time.monotonic() - start) * 1000
            logger.log(self.level, f"<-- {response.status_code} {request.method} {url} ({elapsed:.0f}ms)")
            return response

        return handler


class HeaderMiddleware:
    def __init__(self, headers: dict[str, str]):
        self.headers = dict(headers)

    def wrap(self, next_handler: Handler) -> Handler:
        async def handler(request: httpx.Request) -> httpx.Response:
            for key, value in self.headers.items():
                request.headers[key] = value
            return await next_handler(request)

        return handler


class UserAgentMiddleware(HeaderMiddleware):
    def __init__(self, user_agent: str):
        super().__init__({"User-Agent": user_agent})


OnRequest = Callable[[httpx.Request], None]
OnResponse = Callable[[str, str, int, float, "BaseException | None"], None]


class MetricsMiddleware:
    """Reports (method, url, status, duration_seconds, error) per attempt."""

    def __init__(self, on_request: OnRequest | None = None, on_response: OnResponse | None = None):
        self.on_request = on_request
        self.on_response = on_response

    def wrap(self, next_handler: Handler) -> Handler:
        async def handler(request: httpx.Request) -> httpx.Response:
            if self.on_request is not None:
                self.on_request(request)
            start = time.monotonic()
            status = 0
            error: BaseException | None = None
            try:
                response = await next_handler(request)
                status = response.status_code
                return response
            except Exception as exc:
                error = exc
                raise
            finally:
                if self.on_response is not None:
                    url = sanitize_error_message(str(request.url))
                    self.on_response(request.method, url, status, time.monotonic() - start, error)

        return handler
