"""Standard Ethereum JSON-RPC node methods."""

from alchemykit.node.client import NodeClient
from alchemykit.node.models import (
    AccountProof,
    Block,
    BlockTag,
    CallMsg,
    FeeHistory,
    Log,
    LogFilter,
    SyncStatus,
    Transaction,
    TransactionReceipt,
    Withdrawal,
    block_number_param,
)

__all__ = [
    "NodeClient",
    "AccountProof",
    "Block",
    "BlockTag",
    "CallMsg",
    "FeeHistory",
    "Log",
    "LogFilter",
    "SyncStatus",
    "Transaction",
    "TransactionReceipt",
    "Withdrawal",
    "block_number_param",
]
