"""Token API: alchemy_getTokenBalances and friends."""

from __future__ import annotations

from typing import Any, Sequence

from alchemykit.data.models import (
    OwnedToken,
    TokenAllowanceParams,
    TokenBalancesParams,
    TokenBalancesResponse,
    TokenMetadata,
    TokensForOwnerResponse,
)
from alchemykit.pagination import Page, PageIterator
from alchemykit.transport.jsonrpc import JsonRpcClient
from alchemykit.utils.hexutil import parse_address


class TokensMixin:
    rpc: JsonRpcClient

    async def get_token_balances(self, params: TokenBalancesParams | str) -> TokenBalancesResponse:
        if isinstance(params, str):
            params = TokenBalancesParams(address=params)
        return await self.rpc.call("alchemy_getTokenBalances", params.to_rpc_params(), TokenBalancesResponse)

    async def get_token_balances_for_addresses(
        self,
        addresses: Sequence[str],
        contract_addresses: Sequence[str] = (),
    ) -> dict[str, TokenBalancesResponse]:
        """One call per address; the first failure aborts the whole lookup."""
        results: dict[str, TokenBalancesResponse] = {}
        for address in addresses:
            params = TokenBalancesParams(address=address, contract_addresses=list(contract_addresses))
            results[params.address] = await self.get_token_balances(params)
        return results

    async def get_token_metadata(self, contract_address: str) -> TokenMetadata:
        return await self.rpc.call("alchemy_getTokenMetadata", [parse_address(contract_address)], TokenMetadata)

    async def get_tokens_for_owner(self, owner: str, page_key: str | None = None) -> TokensForOwnerResponse:
        request: dict[str, Any] = {"owner": parse_address(owner)}
        if page_key:
            request["pageKey"] = page_key
        return await self.rpc.call("alchemy_getTokensForOwner", [request], TokensForOwnerResponse)

    def iter_tokens_for_owner(self, owner: str) -> PageIterator[OwnedToken]:
        async def fetch(page_key: str | None) -> Page[OwnedToken]:
            response = await self.get_tokens_for_owner(owner, page_key)
            return Page(response.tokens, response.page_key)

        return PageIterator(fetch)

    async def get_token_allowance(self, params: TokenAllowanceParams) -> int:
        """Allowance granted by ``owner`` to ``spender``, in base units."""
        raw = await self.rpc.call("alchemy_getTokenAllowance", [params.to_wire()])
        if isinstance(raw, dict):
            raw = raw.get("allowance", "0")
        if isinstance(raw, str):
            return int(raw, 16) if raw.lower().startswith("0x") else int(raw or "0")
        return int(raw or 0)
