"""Pytest hooks and fixtures."""

from __future__ import annotations

import json
import os
from typing import Any, Callable

import httpx
import pytest
from loguru import logger

from alchemykit.transport.backoff import BackoffPolicy, Retrier
from alchemykit.transport.http import HttpExecutor
from alchemykit.transport.jsonrpc import JsonRpcClient

NODE_URL = "https://eth-mainnet.g.alchemy.com/v2/test-key"
NFT_URL = "https://eth-mainnet.g.alchemy.com/nft/v3/test-key"


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "network: hits the live provider (requires ALCHEMY_API_KEY)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live-provider tests unless an API key is configured."""
    if os.environ.get("ALCHEMY_API_KEY"):
        return
    skip = pytest.mark.skip(reason="Requires ALCHEMY_API_KEY")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No ALCHEMY_* variables and a throwaway home directory for config files."""
    for key in list(os.environ):
        if key.startswith("ALCHEMY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    logger.enable("alchemykit")
    yield


class Recorder:
    """Collects what a MockTransport handler saw."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_executor(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    base_url: str = NODE_URL,
    max_retries: int = 3,
    middlewares=(),
    sleeps: list[float] | None = None,
) -> HttpExecutor:
    """HttpExecutor over a MockTransport whose backoff never really sleeps."""

    async def record_sleep(delay: float) -> None:
        if sleeps is not None:
            sleeps.append(delay)

    policy = BackoffPolicy(max_retries=max_retries, jitter=0.0)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpExecutor(
        base_url,
        client=client,
        retrier=Retrier(policy, sleep=record_sleep),
        middlewares=middlewares,
    )


def rpc_result(request: httpx.Request, result: Any) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


def rpc_router(results: dict[str, Any], recorder: Recorder | None = None):
    """Handler answering single JSON-RPC calls by method name."""

    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.requests.append(request)
        body = json.loads(request.content)
        value = results[body["method"]]
        if callable(value):
            value = value(body["params"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": value})

    return handler


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def rpc_factory():
    def build(handler, **kwargs) -> JsonRpcClient:
        return JsonRpcClient(make_executor(handler, **kwargs))

    return build


@pytest.fixture
def executor_factory():
    return make_executor


@pytest.fixture
def router():
    return rpc_router
