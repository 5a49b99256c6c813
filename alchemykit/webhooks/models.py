"""Notify (webhook management) API shapes. The dashboard API speaks snake_case."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from alchemykit.models import ApiModel


class WebhookType(str, Enum):
    GRAPHQL = "GRAPHQL"
    ADDRESS_ACTIVITY = "ADDRESS_ACTIVITY"
    NFT_ACTIVITY = "NFT_ACTIVITY"


class WebhookNetwork(str, Enum):
    ETH_MAINNET = "ETH_MAINNET"
    ETH_SEPOLIA = "ETH_SEPOLIA"
    ETH_HOLESKY = "ETH_HOLESKY"
    MATIC_MAINNET = "MATIC_MAINNET"
    MATIC_AMOY = "MATIC_AMOY"
    ARB_MAINNET = "ARB_MAINNET"
    ARB_SEPOLIA = "ARB_SEPOLIA"
    OPT_MAINNET = "OPT_MAINNET"
    OPT_SEPOLIA = "OPT_SEPOLIA"
    BASE_MAINNET = "BASE_MAINNET"
    BASE_SEPOLIA = "BASE_SEPOLIA"
    ZKSYNC_MAINNET = "ZKSYNC_MAINNET"
    ZKSYNC_SEPOLIA = "ZKSYNC_SEPOLIA"


class WebhookVersion(str, Enum):
    V1 = "V1"
    V2 = "V2"


class WebhookModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, mode="json")


class Webhook(WebhookModel):
    id: str
    network: str
    webhook_type: str
    webhook_url: str
    is_active: bool = True
    time_created: int = 0
    version: Optional[str] = None
    signing_key: Optional[str] = None
    app_id: Optional[str] = None
    name: Optional[str] = None


class NFTWebhookFilter(WebhookModel):
    contract_address: str
    token_id: Optional[str] = None


class CreateWebhookParams(WebhookModel):
    network: WebhookNetwork
    webhook_type: WebhookType
    webhook_url: str
    addresses: Optional[list[str]] = None
    nft_filters: Optional[list[NFTWebhookFilter]] = None
    graphql_query: Optional[str] = None
    app_id: Optional[str] = None

    @classmethod
    def address_activity(cls, network: WebhookNetwork, url: str, addresses: list[str]) -> "CreateWebhookParams":
        return cls(network=network, webhook_type=WebhookType.ADDRESS_ACTIVITY, webhook_url=url, addresses=addresses)

    @classmethod
    def nft_activity(cls, network: WebhookNetwork, url: str, filters: list[NFTWebhookFilter]) -> "CreateWebhookParams":
        return cls(network=network, webhook_type=WebhookType.NFT_ACTIVITY, webhook_url=url, nft_filters=filters)

    @classmethod
    def graphql(cls, network: WebhookNetwork, url: str, query: str) -> "CreateWebhookParams":
        return cls(network=network, webhook_type=WebhookType.GRAPHQL, webhook_url=url, graphql_query=query)


class UpdateWebhookParams(WebhookModel):
    webhook_id: str
    is_active: Optional[bool] = None
    name: Optional[str] = None


class WebhookCursors(WebhookModel):
    after: Optional[str] = None


class WebhookPagination(WebhookModel):
    cursors: WebhookCursors = Field(default_factory=WebhookCursors)
    total_count: int = 0


class WebhookAddressesResponse(WebhookModel):
    data: list[str] = Field(default_factory=list)
    pagination: WebhookPagination = Field(default_factory=WebhookPagination)

    @property
    def has_more(self) -> bool:
        return bool(self.pagination.cursors.after)


class ReplaceWebhookAddressesParams(WebhookModel):
    webhook_id: str
    addresses: list[str]


class UpdateWebhookAddressesParams(WebhookModel):
    webhook_id: str
    addresses_to_add: list[str] = Field(default_factory=list)
    addresses_to_remove: list[str] = Field(default_factory=list)


class NFTFiltersResponse(WebhookModel):
    data: list[NFTWebhookFilter] = Field(default_factory=list)
    pagination: WebhookPagination = Field(default_factory=WebhookPagination)


class UpdateNFTFiltersParams(WebhookModel):
    webhook_id: str
    nft_filters_to_add: list[NFTWebhookFilter] = Field(default_factory=list)
    nft_filters_to_remove: list[NFTWebhookFilter] = Field(default_factory=list)


# ---- inbound events (camelCase) ----


class WebhookEvent(ApiModel):
    webhook_id: str
    id: str
    created_at: str
    type: str
    event: Any = None


class ActivityRawContract(ApiModel):
    raw_value: Optional[str] = None
    address: Optional[str] = None
    decimals: Optional[int] = None


class ActivityLog(ApiModel):
    address: str
    topics: list[str] = Field(default_factory=list)
    data: str = "0x"
    block_number: Optional[str] = None
    transaction_hash: Optional[str] = None
    transaction_index: Optional[str] = None
    block_hash: Optional[str] = None
    log_index: Optional[str] = None
    removed: bool = False


class AddressActivity(ApiModel):
    from_address: str
    to_address: Optional[str] = None
    block_num: str
    hash: str
    value: Optional[float] = None
    asset: Optional[str] = None
    category: str
    raw_contract: Optional[ActivityRawContract] = None
    log: Optional[ActivityLog] = None


class AddressActivityEvent(ApiModel):
    network: str
    activity: list[AddressActivity] = Field(default_factory=list)
