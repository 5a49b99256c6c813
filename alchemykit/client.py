"""Top-level Alchemy client wiring the node, data, wallet and webhook APIs together."""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from loguru import logger

from alchemykit.config.schema import AlchemyConfig
from alchemykit.data.client import DataClient
from alchemykit.network import Network
from alchemykit.node.client import NodeClient
from alchemykit.transport.http import HttpExecutor
from alchemykit.transport.jsonrpc import JsonRpcClient
from alchemykit.transport.middleware import LoggingMiddleware, Middleware, UserAgentMiddleware
from alchemykit.wallet.client import WalletClient
from alchemykit.webhooks.client import WebhookClient


class Alchemy:
    """
    Entry point for one network.

    All sub-clients share a single httpx.AsyncClient and one backoff policy.
    Keyword overrides are applied on top of ``config`` (or the environment
    when no config is given), e.g. ``Alchemy(api_key="...", network="base-mainnet")``.
    """

    def __init__(
        self,
        config: AlchemyConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        middlewares: Sequence[Middleware] = (),
        **overrides: Any,
    ):
        config = config or AlchemyConfig()
        if overrides:
            config = AlchemyConfig.model_validate({**config.model_dump(), **overrides})
        self.network: Network = config.validate_settings()
        self.config = config

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._extra_middlewares = list(middlewares)

        policy = config.backoff_policy()
        chain: list[Middleware] = [UserAgentMiddleware(config.user_agent), *self._extra_middlewares]
        if config.log_requests:
            chain.append(LoggingMiddleware())
        self._middlewares = chain

        self._node_http = HttpExecutor(
            config.node_url(), client=self._client, timeout=config.timeout, policy=policy, middlewares=chain
        )
        self._nft_http = HttpExecutor(
            config.nft_url(), client=self._client, timeout=config.timeout, policy=policy, middlewares=chain
        )
        self.rpc = JsonRpcClient(self._node_http)
        self.node = NodeClient(self.rpc)
        self.data = DataClient(self.rpc, self._nft_http)
        self.wallet = WalletClient(self.data, self.node)
        self._webhooks: WebhookClient | None = None
        logger.debug(f"Alchemy client ready for {self.network.slug} (chain id {self.network.chain_id})")

    @property
    def webhooks(self) -> WebhookClient:
        """Notify API client; needs ``webhook_auth_token`` in the config."""
        if self._webhooks is None:
            self._webhooks = WebhookClient(
                self.config.webhook_auth_token,
                client=self._client,
                timeout=self.config.timeout,
                policy=self.config.backoff_policy(),
                middlewares=self._middlewares,
            )
        return self._webhooks

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._client

    def with_network(self, network: str | Network) -> "Alchemy":
        """Same credentials and HTTP client, different network."""
        slug = network.slug if isinstance(network, Network) else network
        config = self.config.model_copy(update={"network": slug})
        return Alchemy(config, client=self._client, middlewares=self._extra_middlewares)

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "Alchemy":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
