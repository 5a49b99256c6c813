"""Request and response shapes for the enhanced token, transfer and NFT APIs."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from alchemykit.models import ApiModel
from alchemykit.node.models import block_number_param
from alchemykit.utils.hexutil import Address, Hash, HexInt, decode_uint


# ---- tokens ----


class TokenSpec(str, Enum):
    ERC20 = "erc20"
    NATIVE_TOKEN = "NATIVE_TOKEN"


class TokenBalancesParams(ApiModel):
    address: Address
    token_spec: Optional[TokenSpec] = None
    contract_addresses: list[Address] = Field(default_factory=list)
    page_key: Optional[str] = None
    max_count: Optional[int] = None

    def to_rpc_params(self) -> list[Any]:
        """Positional params: ``[address, contracts | spec, {pageKey, maxCount}]``."""
        params: list[Any] = [self.address]
        if self.contract_addresses:
            params.append(list(self.contract_addresses))
        elif self.token_spec is not None:
            params.append(self.token_spec.value)
        options: dict[str, Any] = {}
        if self.page_key:
            options["pageKey"] = self.page_key
        if self.max_count:
            options["maxCount"] = self.max_count
        if options:
            if len(params) == 1:
                # Options are positional; the token selector cannot be skipped.
                params.append(TokenSpec.ERC20.value)
            params.append(options)
        return params


class TokenBalance(ApiModel):
    contract_address: Address
    token_balance: Optional[str] = None
    error: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def raw_balance(self) -> int:
        if self.token_balance is None:
            return 0
        return decode_uint(self.token_balance)


class TokenBalancesResponse(ApiModel):
    address: Address
    token_balances: list[TokenBalance] = Field(default_factory=list)
    page_key: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.page_key)


class TokenMetadata(ApiModel):
    name: Optional[str] = None
    symbol: Optional[str] = None
    decimals: Optional[int] = None
    logo: Optional[str] = None


class OwnedToken(ApiModel):
    contract_address: Address
    raw_balance: Optional[str] = None
    balance: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    decimals: Optional[int] = None
    logo: Optional[str] = None
    error: Optional[str] = None


class TokensForOwnerResponse(ApiModel):
    tokens: list[OwnedToken] = Field(default_factory=list)
    page_key: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.page_key)


class TokenAllowanceParams(ApiModel):
    contract: Address
    owner: Address
    spender: Address


# ---- transfers ----


class AssetTransferCategory(str, Enum):
    EXTERNAL = "external"
    INTERNAL = "internal"
    ERC20 = "erc20"
    ERC721 = "erc721"
    ERC1155 = "erc1155"
    SPECIAL_NFT = "specialnft"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AssetTransfersParams(ApiModel):
    """Filter for alchemy_getAssetTransfers. ``max_count`` goes out as hex."""

    from_block: Optional[str] = None
    to_block: Optional[str] = None
    from_address: Optional[Address] = None
    to_address: Optional[Address] = None
    contract_addresses: Optional[list[Address]] = None
    category: list[AssetTransferCategory] = Field(
        default_factory=lambda: [AssetTransferCategory.EXTERNAL, AssetTransferCategory.ERC20]
    )
    order: Optional[SortOrder] = None
    with_metadata: Optional[bool] = None
    exclude_zero_value: bool = True
    max_count: Optional[HexInt] = None
    page_key: Optional[str] = None

    @field_validator("from_block", "to_block", mode="before")
    @classmethod
    def _render_block(cls, value: Any) -> Any:
        if value is None:
            return None
        return block_number_param(value)


class RawContract(ApiModel):
    value: Optional[str] = None
    address: Optional[str] = None
    decimal: Optional[str] = None


class ERC1155Metadata(ApiModel):
    token_id: str
    value: str


class TransferMetadata(ApiModel):
    block_timestamp: Optional[str] = None


class AssetTransfer(ApiModel):
    category: str
    block_num: str = "0x0"
    from_: Address = Field(alias="from")
    to: Optional[Address] = None
    value: Optional[float] = None
    token_id: Optional[str] = None
    erc1155_metadata: Optional[list[ERC1155Metadata]] = None
    asset: Optional[str] = None
    unique_id: str = ""
    hash: Hash
    raw_contract: RawContract = Field(default_factory=RawContract)
    metadata: Optional[TransferMetadata] = None

    @property
    def block_number(self) -> int:
        return decode_uint(self.block_num)


class AssetTransfersResponse(ApiModel):
    transfers: list[AssetTransfer] = Field(default_factory=list)
    page_key: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.page_key)


# ---- NFTs ----


class NFTFilter(str, Enum):
    SPAM = "SPAM"
    AIRDROPS = "AIRDROPS"


class SpamConfidenceLevel(str, Enum):
    VERY_HIGH = "VERY_HIGH"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class NFTOrderBy(str, Enum):
    TRANSFER_TIME = "transferTime"


class NFTTokenType(str, Enum):
    ERC721 = "ERC721"
    ERC1155 = "ERC1155"


class NFTsForOwnerParams(ApiModel):
    owner: Address
    contract_addresses: list[Address] = Field(default_factory=list)
    with_metadata: Optional[bool] = None
    order_by: Optional[NFTOrderBy] = None
    exclude_filters: list[NFTFilter] = Field(default_factory=list)
    include_filters: list[NFTFilter] = Field(default_factory=list)
    spam_confidence_level: Optional[SpamConfidenceLevel] = None
    token_uri_timeout_in_ms: Optional[int] = None
    page_key: Optional[str] = None
    page_size: Optional[int] = None

    def to_query(self) -> dict[str, Any]:
        return {
            "owner": self.owner,
            "contractAddresses[]": list(self.contract_addresses),
            "withMetadata": self.with_metadata,
            "orderBy": self.order_by.value if self.order_by else None,
            "excludeFilters[]": [f.value for f in self.exclude_filters],
            "includeFilters[]": [f.value for f in self.include_filters],
            "spamConfidenceLevel": self.spam_confidence_level.value if self.spam_confidence_level else None,
            "tokenUriTimeoutInMs": self.token_uri_timeout_in_ms,
            "pageKey": self.page_key,
            "pageSize": self.page_size,
        }


class OpenSeaMetadata(ApiModel):
    floor_price: Optional[float] = None
    collection_name: Optional[str] = None
    safelist_request_status: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    external_url: Optional[str] = None
    twitter_username: Optional[str] = None
    discord_url: Optional[str] = None
    banner_image_url: Optional[str] = None
    last_ingested_at: Optional[str] = None


class NFTContract(ApiModel):
    address: Address
    name: Optional[str] = None
    symbol: Optional[str] = None
    total_supply: Optional[str] = None
    token_type: str = "UNKNOWN"
    contract_deployer: Optional[str] = None
    deployed_block_number: Optional[int] = None
    opensea_metadata: Optional[OpenSeaMetadata] = None
    is_spam: Optional[bool] = None
    spam_classifications: list[str] = Field(default_factory=list)


NFTContractMetadata = NFTContract


class NFTImage(ApiModel):
    cached_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    png_url: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    original_url: Optional[str] = None


class NFTAttribute(ApiModel):
    trait_type: Optional[str] = Field(default=None, alias="trait_type")
    value: Any = None
    display_type: Optional[str] = Field(default=None, alias="display_type")


class NFTRawMetadata(ApiModel):
    image: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    attributes: list[NFTAttribute] = Field(default_factory=list)
    external_url: Optional[str] = Field(default=None, alias="external_url")
    animation_url: Optional[str] = Field(default=None, alias="animation_url")

    @field_validator("attributes", mode="before")
    @classmethod
    def _attributes_list(cls, value: Any) -> Any:
        # Token metadata in the wild sometimes carries a dict or a string here.
        return value if isinstance(value, list) else []


class NFTRaw(ApiModel):
    token_uri: Optional[str] = None
    metadata: Optional[NFTRawMetadata] = None
    error: Optional[str] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_dict(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None


class NFTCollection(ApiModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    external_url: Optional[str] = None
    banner_image_url: Optional[str] = None


class AcquiredAt(ApiModel):
    block_timestamp: Optional[str] = None
    block_number: Optional[str] = None


class ValidAt(ApiModel):
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    block_timestamp: Optional[str] = None


class OwnedNFT(ApiModel):
    contract: NFTContract
    token_id: str
    token_type: str = "UNKNOWN"
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[NFTImage] = None
    raw: Optional[NFTRaw] = None
    collection: Optional[NFTCollection] = None
    token_uri: Optional[str] = None
    time_last_updated: Optional[str] = None
    acquired_at: Optional[AcquiredAt] = None
    balance: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.contract.name or f"#{self.token_id}"


class NFTsForOwnerResponse(ApiModel):
    owned_nfts: list[OwnedNFT] = Field(default_factory=list)
    total_count: int = 0
    page_key: Optional[str] = None
    valid_at: Optional[ValidAt] = None

    @property
    def has_more(self) -> bool:
        return bool(self.page_key)


class NFTMetadataParams(ApiModel):
    contract_address: Address
    token_id: str
    token_type: Optional[NFTTokenType] = None
    refresh_cache: bool = False

    def to_query(self) -> dict[str, Any]:
        return {
            "contractAddress": self.contract_address,
            "tokenId": self.token_id,
            "tokenType": self.token_type.value if self.token_type else None,
            "refreshCache": True if self.refresh_cache else None,
        }


class NFTsForContractResponse(ApiModel):
    nfts: list[OwnedNFT] = Field(default_factory=list)
    page_key: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.page_key)


class OwnersForNFTResponse(ApiModel):
    owners: list[Address] = Field(default_factory=list)
    page_key: Optional[str] = None


class TokenBalanceEntry(ApiModel):
    token_id: str
    balance: str


class ContractOwner(ApiModel):
    owner_address: Address
    token_balances: list[TokenBalanceEntry] = Field(default_factory=list)


class OwnersForContractResponse(ApiModel):
    owners: list[ContractOwner] = Field(default_factory=list, alias="ownerAddresses")
    page_key: Optional[str] = None

    @field_validator("owners", mode="before")
    @classmethod
    def _plain_addresses(cls, value: Any) -> Any:
        # Without withTokenBalances the API returns bare address strings.
        if isinstance(value, list):
            return [{"ownerAddress": v} if isinstance(v, str) else v for v in value]
        return value
