"""NFT API v3. Plain GET endpoints under ``/nft/v3/<api key>/``."""

from __future__ import annotations

from typing import Any

from alchemykit.data.models import (
    NFTContractMetadata,
    NFTMetadataParams,
    NFTsForContractResponse,
    NFTsForOwnerParams,
    NFTsForOwnerResponse,
    OwnedNFT,
    OwnersForContractResponse,
    OwnersForNFTResponse,
)
from alchemykit.models import decode_model
from alchemykit.pagination import Page, PageIterator
from alchemykit.transport.http import HttpExecutor
from alchemykit.utils.exceptions import DecodeError, EmptyResponseError
from alchemykit.utils.hexutil import parse_address


class NFTsMixin:
    nft: HttpExecutor

    async def _nft_get(self, endpoint: str, query: dict[str, Any]) -> dict[str, Any]:
        body = await self.nft.get_with_query(endpoint, query)
        if body is None:
            raise EmptyResponseError(f"{endpoint}: empty response")
        if not isinstance(body, dict):
            raise DecodeError(f"{endpoint}: expected a JSON object", body=str(body)[:500])
        return body

    async def get_nfts_for_owner(self, params: NFTsForOwnerParams | str) -> NFTsForOwnerResponse:
        if isinstance(params, str):
            params = NFTsForOwnerParams(owner=params)
        body = await self._nft_get("getNFTsForOwner", params.to_query())
        return decode_model(NFTsForOwnerResponse, body, "getNFTsForOwner")

    def iter_nfts_for_owner(self, params: NFTsForOwnerParams | str) -> PageIterator[OwnedNFT]:
        if isinstance(params, str):
            params = NFTsForOwnerParams(owner=params)
        base = params.model_copy()

        async def fetch(page_key: str | None) -> Page[OwnedNFT]:
            response = await self.get_nfts_for_owner(base.model_copy(update={"page_key": page_key}))
            return Page(response.owned_nfts, response.page_key, response.total_count)

        return PageIterator(fetch)

    async def get_nft_metadata(self, params: NFTMetadataParams) -> OwnedNFT:
        body = await self._nft_get("getNFTMetadata", params.to_query())
        return decode_model(OwnedNFT, body, "getNFTMetadata")

    async def get_contract_metadata(self, contract_address: str) -> NFTContractMetadata:
        body = await self._nft_get("getContractMetadata", {"contractAddress": parse_address(contract_address)})
        return decode_model(NFTContractMetadata, body, "getContractMetadata")

    async def get_nfts_for_contract(
        self,
        contract_address: str,
        page_key: str | None = None,
        with_metadata: bool = True,
    ) -> NFTsForContractResponse:
        query = {
            "contractAddress": parse_address(contract_address),
            "withMetadata": with_metadata,
            "startToken": page_key,
        }
        body = await self._nft_get("getNFTsForContract", query)
        return decode_model(NFTsForContractResponse, body, "getNFTsForContract")

    def iter_nfts_for_contract(self, contract_address: str, with_metadata: bool = True) -> PageIterator[OwnedNFT]:
        async def fetch(page_key: str | None) -> Page[OwnedNFT]:
            response = await self.get_nfts_for_contract(contract_address, page_key, with_metadata)
            return Page(response.nfts, response.page_key)

        return PageIterator(fetch)

    async def get_owners_for_nft(self, contract_address: str, token_id: str) -> OwnersForNFTResponse:
        query = {"contractAddress": parse_address(contract_address), "tokenId": token_id}
        body = await self._nft_get("getOwnersForNFT", query)
        return decode_model(OwnersForNFTResponse, body, "getOwnersForNFT")

    async def get_owners_for_contract(
        self,
        contract_address: str,
        page_key: str | None = None,
        with_token_balances: bool = False,
    ) -> OwnersForContractResponse:
        query = {
            "contractAddress": parse_address(contract_address),
            "withTokenBalances": with_token_balances,
            "pageKey": page_key,
        }
        body = await self._nft_get("getOwnersForContract", query)
        return decode_model(OwnersForContractResponse, body, "getOwnersForContract")

    async def is_spam_contract(self, contract_address: str) -> bool:
        body = await self._nft_get("isSpamContract", {"contractAddress": parse_address(contract_address)})
        return bool(body.get("isSpamContract", False))
