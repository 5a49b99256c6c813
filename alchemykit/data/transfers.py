"""Transfers API: alchemy_getAssetTransfers."""

from __future__ import annotations

from alchemykit.data.models import AssetTransfer, AssetTransfersParams, AssetTransfersResponse
from alchemykit.pagination import Page, PageIterator
from alchemykit.transport.jsonrpc import JsonRpcClient


class TransfersMixin:
    rpc: JsonRpcClient

    async def get_asset_transfers(self, params: AssetTransfersParams | None = None) -> AssetTransfersResponse:
        params = params or AssetTransfersParams()
        return await self.rpc.call("alchemy_getAssetTransfers", [params.to_wire()], AssetTransfersResponse)

    def iter_asset_transfers(self, params: AssetTransfersParams | None = None) -> PageIterator[AssetTransfer]:
        # Work on a copy so the caller's params keep their page key.
        base = (params or AssetTransfersParams()).model_copy()

        async def fetch(page_key: str | None) -> Page[AssetTransfer]:
            response = await self.get_asset_transfers(base.model_copy(update={"page_key": page_key}))
            return Page(response.transfers, response.page_key)

        return PageIterator(fetch)
