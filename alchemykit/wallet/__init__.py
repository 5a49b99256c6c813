"""Wallet-level balance and asset helpers."""

from alchemykit.wallet.client import (
    AssetSummary,
    Balance,
    NFTQueryOptions,
    NFTsResult,
    TokenBalanceInfo,
    TokenBalancesResult,
    WalletClient,
    format_units,
    format_wei,
)

__all__ = [
    "AssetSummary",
    "Balance",
    "NFTQueryOptions",
    "NFTsResult",
    "TokenBalanceInfo",
    "TokenBalancesResult",
    "WalletClient",
    "format_units",
    "format_wei",
]
