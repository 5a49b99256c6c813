"""Notify API client: create, list and edit webhooks on the dashboard API."""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from loguru import logger

from alchemykit.models import decode_model
from alchemykit.pagination import Page, PageIterator
from alchemykit.transport.backoff import BackoffPolicy
from alchemykit.transport.http import HttpExecutor
from alchemykit.transport.middleware import HeaderMiddleware, Middleware
from alchemykit.utils.exceptions import ConfigError, DecodeError
from alchemykit.webhooks.models import (
    CreateWebhookParams,
    NFTFiltersResponse,
    ReplaceWebhookAddressesParams,
    UpdateNFTFiltersParams,
    UpdateWebhookAddressesParams,
    UpdateWebhookParams,
    Webhook,
    WebhookAddressesResponse,
)

DASHBOARD_API_URL = "https://dashboard.alchemy.com/api"
AUTH_HEADER = "X-Alchemy-Token"
ADDRESS_PAGE_LIMIT = 1000


class WebhookClient:
    def __init__(
        self,
        auth_token: str | None,
        *,
        base_url: str = DASHBOARD_API_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        policy: BackoffPolicy | None = None,
        middlewares: Sequence[Middleware] = (),
    ):
        if not auth_token or not auth_token.strip():
            raise ConfigError("webhook auth token is required", field="webhook_auth_token")
        self.executor = HttpExecutor(
            base_url,
            client=client,
            timeout=timeout,
            policy=policy,
            middlewares=[*middlewares, HeaderMiddleware({AUTH_HEADER: auth_token})],
        )

    async def close(self) -> None:
        await self.executor.close()

    @staticmethod
    def _data(body: Any, endpoint: str) -> Any:
        if not isinstance(body, dict) or "data" not in body:
            raise DecodeError(f"{endpoint}: response has no data member", body=str(body)[:500])
        return body["data"]

    async def get_all_webhooks(self) -> list[Webhook]:
        body = await self.executor.get_json("team-webhooks")
        items = self._data(body, "team-webhooks") or []
        if not isinstance(items, list):
            raise DecodeError("team-webhooks: data is not a list", body=str(body))
        return [decode_model(Webhook, item, "team-webhooks") for item in items]

    async def create_webhook(self, params: CreateWebhookParams) -> Webhook:
        # Creating is not idempotent; a retried POST could register a duplicate.
        body = await self.executor.post_json("create-webhook", params.to_wire(), retry=False)
        webhook = decode_model(Webhook, self._data(body, "create-webhook"), "create-webhook")
        logger.info(f"Created {webhook.webhook_type} webhook {webhook.id}")
        return webhook

    async def update_webhook(self, params: UpdateWebhookParams) -> Webhook:
        body = await self.executor.request_json("PUT", "update-webhook", json_body=params.to_wire())
        return decode_model(Webhook, self._data(body, "update-webhook"), "update-webhook")

    async def delete_webhook(self, webhook_id: str) -> None:
        await self.executor.request_json("DELETE", "delete-webhook", params={"webhook_id": webhook_id})
        logger.info(f"Deleted webhook {webhook_id}")

    async def get_webhook_addresses(
        self,
        webhook_id: str,
        *,
        limit: int | None = None,
        after: str | None = None,
        page_key: str | None = None,
    ) -> WebhookAddressesResponse:
        query = {"webhook_id": webhook_id, "limit": limit or None, "after": after, "pageKey": page_key}
        body = await self.executor.get_with_query("webhook-addresses", query)
        return decode_model(WebhookAddressesResponse, body, "webhook-addresses")

    def iter_webhook_addresses(self, webhook_id: str, limit: int = ADDRESS_PAGE_LIMIT) -> PageIterator[str]:
        async def fetch(after: str | None) -> Page[str]:
            response = await self.get_webhook_addresses(webhook_id, limit=limit, after=after)
            return Page(response.data, response.pagination.cursors.after, response.pagination.total_count)

        return PageIterator(fetch)

    async def get_all_webhook_addresses(self, webhook_id: str) -> list[str]:
        return await self.iter_webhook_addresses(webhook_id).collect()

    async def replace_webhook_addresses(self, webhook_id: str, addresses: Sequence[str]) -> None:
        params = ReplaceWebhookAddressesParams(webhook_id=webhook_id, addresses=list(addresses))
        await self.executor.request_json("PUT", "update-webhook-addresses", json_body=params.to_wire())

    async def update_webhook_addresses(
        self,
        webhook_id: str,
        add: Sequence[str] = (),
        remove: Sequence[str] = (),
    ) -> None:
        params = UpdateWebhookAddressesParams(
            webhook_id=webhook_id,
            addresses_to_add=list(add),
            addresses_to_remove=list(remove),
        )
        await self.executor.request_json("PATCH", "update-webhook-addresses", json_body=params.to_wire())

    async def get_nft_filters(
        self,
        webhook_id: str,
        *,
        limit: int | None = None,
        after: str | None = None,
    ) -> NFTFiltersResponse:
        query = {"webhook_id": webhook_id, "limit": limit or None, "after": after}
        body = await self.executor.get_with_query("webhook-nft-filters", query)
        return decode_model(NFTFiltersResponse, body, "webhook-nft-filters")

    async def update_nft_filters(self, params: UpdateNFTFiltersParams) -> None:
        await self.executor.request_json("PATCH", "update-webhook-nft-filters", json_body=params.to_wire())
