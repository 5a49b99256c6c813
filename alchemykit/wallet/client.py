"""
Wallet-level helpers built on the node and data clients.

Balances are returned both raw (base units) and formatted as decimal strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from loguru import logger

from alchemykit.data.client import DataClient
from alchemykit.data.models import (
    NFTFilter,
    NFTsForOwnerParams,
    NFTTokenType,
    OwnedNFT,
    TokenBalance,
    TokenBalancesParams,
    TokenMetadata,
    TokenSpec,
)
from alchemykit.node.client import NodeClient
from alchemykit.node.models import BlockId, BlockTag
from alchemykit.utils.exceptions import AlchemyError
from alchemykit.utils.hexutil import decode_uint, parse_address

WEI_DECIMALS = 18


def format_units(raw: int, decimals: int) -> str:
    """Render ``raw`` base units with exactly ``decimals`` fractional digits."""
    if decimals <= 0:
        return str(raw)
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10**decimals)
    return f"{sign}{whole}.{frac:0{decimals}d}"


def format_wei(wei: int | None) -> str:
    if wei is None:
        return "0"
    return format_units(wei, WEI_DECIMALS)


@dataclass
class Balance:
    address: str
    raw: int
    formatted: str


@dataclass
class TokenBalanceInfo:
    contract_address: str
    balance: Optional[int] = None
    balance_formatted: str = ""
    metadata: Optional[TokenMetadata] = None
    error: str = ""


@dataclass
class TokenBalancesResult:
    address: str
    balances: list[TokenBalanceInfo] = field(default_factory=list)
    page_key: Optional[str] = None


@dataclass
class NFTQueryOptions:
    contract_addresses: list[str] = field(default_factory=list)
    exclude_spam: bool = True
    exclude_airdrops: bool = False
    with_metadata: bool = True
    page_size: int = 100

    def to_params(self, owner: str) -> NFTsForOwnerParams:
        filters = []
        if self.exclude_spam:
            filters.append(NFTFilter.SPAM)
        if self.exclude_airdrops:
            filters.append(NFTFilter.AIRDROPS)
        return NFTsForOwnerParams(
            owner=owner,
            contract_addresses=list(self.contract_addresses),
            exclude_filters=filters,
            with_metadata=self.with_metadata,
            page_size=self.page_size if self.page_size > 0 else None,
        )


@dataclass
class NFTsResult:
    address: str
    nfts: list[OwnedNFT] = field(default_factory=list)
    total_count: int = 0
    page_key: Optional[str] = None


@dataclass
class AssetSummary:
    address: str
    native_balance: Balance
    token_count: int = 0
    nft_count: int = 0
    erc721_count: int = 0
    erc1155_count: int = 0


def _balance_info(tb: TokenBalance) -> TokenBalanceInfo:
    info = TokenBalanceInfo(contract_address=tb.contract_address)
    if tb.error is not None:
        info.error = tb.error
    elif tb.token_balance is not None:
        info.balance = decode_uint(tb.token_balance)
    return info


def _is_token_type(nft: OwnedNFT, token_type: NFTTokenType) -> bool:
    return nft.token_type == token_type.value or nft.contract.token_type == token_type.value


class WalletClient:
    def __init__(self, data: DataClient, node: NodeClient):
        self.data = data
        self.node = node

    async def get_balance(self, address: str) -> Balance:
        return await self.get_balance_at_block(address, BlockTag.LATEST)

    async def get_balance_at_block(self, address: str, block: BlockId) -> Balance:
        address = parse_address(address)
        raw = await self.node.get_balance(address, block)
        return Balance(address=address, raw=raw, formatted=format_wei(raw))

    async def get_token_balances(
        self,
        address: str,
        contract_addresses: Sequence[str] = (),
    ) -> TokenBalancesResult:
        """ERC-20 balances; without explicit contracts the provider picks the token set."""
        params = TokenBalancesParams(address=address)
        if contract_addresses:
            params.contract_addresses = [parse_address(a) for a in contract_addresses]
        else:
            params.token_spec = TokenSpec.ERC20
        response = await self.data.get_token_balances(params)
        return TokenBalancesResult(
            address=params.address,
            balances=[_balance_info(tb) for tb in response.token_balances],
            page_key=response.page_key,
        )

    async def get_token_balances_with_metadata(
        self,
        address: str,
        contract_addresses: Sequence[str] = (),
    ) -> TokenBalancesResult:
        result = await self.get_token_balances(address, contract_addresses)
        for info in result.balances:
            if info.error:
                continue
            try:
                metadata = await self.data.get_token_metadata(info.contract_address)
            except AlchemyError as e:
                logger.debug(f"Skipping metadata for {info.contract_address}: {e}")
                continue
            info.metadata = metadata
            if info.balance is not None and metadata.decimals is not None:
                info.balance_formatted = format_units(info.balance, metadata.decimals)
        return result

    async def get_all_token_balances(self, address: str) -> TokenBalancesResult:
        address = parse_address(address)
        balances: list[TokenBalanceInfo] = []
        page_key: str | None = None
        while True:
            params = TokenBalancesParams(address=address, token_spec=TokenSpec.ERC20, page_key=page_key)
            response = await self.data.get_token_balances(params)
            balances.extend(_balance_info(tb) for tb in response.token_balances)
            if not response.has_more:
                break
            page_key = response.page_key
        return TokenBalancesResult(address=address, balances=balances)

    async def get_nfts(self, address: str, options: NFTQueryOptions | None = None) -> NFTsResult:
        options = options or NFTQueryOptions()
        response = await self.data.get_nfts_for_owner(options.to_params(address))
        return NFTsResult(
            address=parse_address(address),
            nfts=response.owned_nfts,
            total_count=response.total_count,
            page_key=response.page_key,
        )

    async def get_all_nfts(self, address: str, options: NFTQueryOptions | None = None) -> NFTsResult:
        options = options or NFTQueryOptions()
        iterator = self.data.iter_nfts_for_owner(options.to_params(address))
        nfts = await iterator.collect()
        return NFTsResult(address=parse_address(address), nfts=nfts, total_count=iterator.total_count or 0)

    async def get_erc721_assets(self, address: str) -> list[OwnedNFT]:
        result = await self.get_all_nfts(address)
        return [nft for nft in result.nfts if _is_token_type(nft, NFTTokenType.ERC721)]

    async def get_erc1155_assets(self, address: str) -> list[OwnedNFT]:
        result = await self.get_all_nfts(address)
        return [nft for nft in result.nfts if _is_token_type(nft, NFTTokenType.ERC1155)]

    async def get_asset_summary(self, address: str) -> AssetSummary:
        summary = AssetSummary(address=parse_address(address), native_balance=await self.get_balance(address))

        tokens = await self.get_token_balances(address)
        summary.token_count = sum(1 for info in tokens.balances if info.balance and info.balance > 0)

        count_query = NFTsForOwnerParams(owner=address, with_metadata=False, page_size=1)
        summary.nft_count = (await self.data.get_nfts_for_owner(count_query)).total_count

        if summary.nft_count > 0:
            try:
                nfts = await self.get_all_nfts(address, NFTQueryOptions(with_metadata=False, page_size=0))
            except AlchemyError as e:
                # Per-standard counts are best effort; the totals above stand.
                logger.warning(f"Could not break down NFTs for {summary.address}: {e}")
            else:
                for nft in nfts.nfts:
                    if nft.token_type == NFTTokenType.ERC721.value:
                        summary.erc721_count += 1
                    elif nft.token_type == NFTTokenType.ERC1155.value:
                        summary.erc1155_count += 1
        return summary
