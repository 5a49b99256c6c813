"""Tests for the Alchemy facade wiring."""

from __future__ import annotations

import json

import httpx
import pytest

from alchemykit import Alchemy, AlchemyConfig
from alchemykit.transport.middleware import middleware
from alchemykit.utils.exceptions import ConfigError, MissingAPIKeyError, NetworkNotFoundError


def _node_handler(seen: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.startswith("/nft/"):
            return httpx.Response(200, json={"isSpamContract": True})
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0x2105"})

    return handler


def test_requires_api_key() -> None:
    with pytest.raises(MissingAPIKeyError):
        Alchemy()


def test_unknown_network() -> None:
    with pytest.raises(NetworkNotFoundError):
        Alchemy(api_key="k", network="atlantis")


def test_overrides_apply_on_top_of_config() -> None:
    base = AlchemyConfig(api_key="k", max_retries=9)
    client = Alchemy(base, network="arbitrum")
    assert client.network.slug == "arb-mainnet"
    assert client.config.max_retries == 9
    assert base.network == "eth-mainnet"


def test_env_config(monkeypatch) -> None:
    monkeypatch.setenv("ALCHEMY_API_KEY", "env-key")
    monkeypatch.setenv("ALCHEMY_NETWORK", "opt-mainnet")
    client = Alchemy()
    assert client.network.chain_id == 10
    assert client.config.node_url().endswith("/v2/env-key")


@pytest.mark.asyncio
async def test_sub_clients_share_transport_and_urls() -> None:
    seen: list[httpx.Request] = []
    http = httpx.AsyncClient(transport=httpx.MockTransport(_node_handler(seen)))
    async with Alchemy(api_key="k", network="base-mainnet", client=http) as client:
        assert await client.node.chain_id() == 8453
        assert await client.data.is_spam_contract("0x" + "12" * 20) is True
        assert client.http_client is http

    assert str(seen[0].url) == "https://base-mainnet.g.alchemy.com/v2/k"
    assert seen[1].url.path == "/nft/v3/k/isSpamContract"
    assert all(r.headers["user-agent"].startswith("alchemykit/") for r in seen)
    # A borrowed client is left open.
    assert not http.is_closed
    await http.aclose()


@pytest.mark.asyncio
async def test_extra_middlewares_run_on_every_request() -> None:
    seen: list[httpx.Request] = []
    tagged: list[str] = []

    @middleware
    async def tag(request, next_handler):
        tagged.append(request.url.host)
        return await next_handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(_node_handler(seen)))
    client = Alchemy(api_key="k", client=http, middlewares=[tag])
    await client.node.block_number()
    other = client.with_network("polygon-mainnet")
    await other.node.block_number()
    assert tagged == ["eth-mainnet.g.alchemy.com", "polygon-mainnet.g.alchemy.com"]
    assert other.http_client is http
    assert other.config.api_key == "k"
    await http.aclose()


@pytest.mark.asyncio
async def test_close_closes_owned_client() -> None:
    client = Alchemy(api_key="k")
    await client.close()
    assert client.http_client.is_closed


def test_webhooks_need_auth_token() -> None:
    client = Alchemy(api_key="k")
    with pytest.raises(ConfigError):
        client.webhooks
    with_token = Alchemy(api_key="k", webhook_auth_token="tok")
    assert with_token.webhooks is with_token.webhooks
