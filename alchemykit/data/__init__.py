"""Enhanced data APIs: tokens, asset transfers and NFTs."""

from alchemykit.data.client import DataClient
from alchemykit.data.models import (
    AssetTransfer,
    AssetTransferCategory,
    AssetTransfersParams,
    AssetTransfersResponse,
    NFTFilter,
    NFTMetadataParams,
    NFTsForOwnerParams,
    NFTsForOwnerResponse,
    NFTTokenType,
    OwnedNFT,
    OwnedToken,
    SortOrder,
    TokenAllowanceParams,
    TokenBalance,
    TokenBalancesParams,
    TokenBalancesResponse,
    TokenMetadata,
    TokenSpec,
)

__all__ = [
    "DataClient",
    "AssetTransfer",
    "AssetTransferCategory",
    "AssetTransfersParams",
    "AssetTransfersResponse",
    "NFTFilter",
    "NFTMetadataParams",
    "NFTsForOwnerParams",
    "NFTsForOwnerResponse",
    "NFTTokenType",
    "OwnedNFT",
    "OwnedToken",
    "SortOrder",
    "TokenAllowanceParams",
    "TokenBalance",
    "TokenBalancesParams",
    "TokenBalancesResponse",
    "TokenMetadata",
    "TokenSpec",
]
