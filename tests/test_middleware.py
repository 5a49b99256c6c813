"""Tests for middleware composition and the stock middlewares."""

from __future__ import annotations

import httpx
import pytest

from alchemykit.transport.middleware import (
    HeaderMiddleware,
    LoggingMiddleware,
    MetricsMiddleware,
    UserAgentMiddleware,
    chain,
    compose,
    middleware,
)


def _tracing(name: str, trace: list[str]):
    @middleware
    async def mw(request, next_handler):
        trace.append(f"{name}:before")
        response = await next_handler(request)
        trace.append(f"{name}:after")
        return response

    return mw


def _base(trace: list[str]):
    async def handler(request: httpx.Request) -> httpx.Response:
        trace.append("base")
        return httpx.Response(200, json={"ok": True}, request=request)

    return handler


@pytest.mark.asyncio
async def test_compose_runs_first_middleware_outermost() -> None:
    trace: list[str] = []
    handler = compose([_tracing("a", trace), _tracing("b", trace), _tracing("c", trace)], _base(trace))
    await handler(httpx.Request("GET", "https://example.test/"))
    assert trace == ["a:before", "b:before", "c:before", "base", "c:after", "b:after", "a:after"]


@pytest.mark.asyncio
async def test_compose_empty_is_base_handler() -> None:
    trace: list[str] = []
    base = _base(trace)
    assert compose([], base) is base


@pytest.mark.asyncio
async def test_chain_behaves_like_inline_middlewares() -> None:
    trace: list[str] = []
    bundled = chain(_tracing("a", trace), _tracing("b", trace))
    handler = compose([bundled, _tracing("c", trace)], _base(trace))
    await handler(httpx.Request("GET", "https://example.test/"))
    assert trace[:3] == ["a:before", "b:before", "c:before"]


@pytest.mark.asyncio
async def test_middleware_can_short_circuit() -> None:
    trace: list[str] = []

    @middleware
    async def cached(request, next_handler):
        return httpx.Response(200, json={"cached": True}, request=request)

    handler = compose([cached], _base(trace))
    response = await handler(httpx.Request("GET", "https://example.test/"))
    assert response.json() == {"cached": True}
    assert trace == []


@pytest.mark.asyncio
async def test_header_and_user_agent_middleware_set_headers() -> None:
    seen: dict[str, str] = {}

    async def base(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(204, request=request)

    handler = compose([UserAgentMiddleware("alchemykit/test"), HeaderMiddleware({"X-Alchemy-Token": "t0k"})], base)
    await handler(httpx.Request("GET", "https://example.test/"))
    assert seen["user-agent"] == "alchemykit/test"
    assert seen["x-alchemy-token"] == "t0k"


@pytest.mark.asyncio
async def test_metrics_middleware_reports_status_and_errors() -> None:
    events: list[tuple] = []
    metrics = MetricsMiddleware(on_response=lambda m, u, s, d, e: events.append((m, s, e is not None)))

    handler = compose([metrics], _base([]))
    await handler(httpx.Request("POST", "https://example.test/v2/key"))

    async def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.ConnectError):
        await compose([metrics], failing)(httpx.Request("GET", "https://example.test/"))

    assert events == [("POST", 200, False), ("GET", 0, True)]


@pytest.mark.asyncio
async def test_logging_middleware_passes_response_through() -> None:
    handler = compose([LoggingMiddleware()], _base([]))
    response = await handler(httpx.Request("GET", "https://eth-mainnet.g.alchemy.com/v2/secret"))
    assert response.status_code == 200
