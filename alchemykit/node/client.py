"""
Node client: standard Ethereum JSON-RPC methods.

All quantities come back as Python ints; block arguments accept an int, a
hex string or a BlockTag and default to ``latest``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from alchemykit.node.models import (
    AccountProof,
    Block,
    BlockId,
    BlockTag,
    CallMsg,
    FeeHistory,
    Log,
    LogFilter,
    SyncStatus,
    Transaction,
    TransactionReceipt,
    block_number_param,
)
from alchemykit.transport.jsonrpc import BatchCall, BatchResult, JsonRpcClient
from alchemykit.utils.exceptions import InvalidParameterError
from alchemykit.utils.hexutil import HexInt, encode_uint, parse_address, parse_hash


class NodeClient:
    def __init__(self, rpc: JsonRpcClient):
        self.rpc = rpc

    # ---- chain state ----

    async def block_number(self) -> int:
        return await self.rpc.call("eth_blockNumber", [], HexInt)

    async def chain_id(self) -> int:
        return await self.rpc.call("eth_chainId", [], HexInt)

    async def gas_price(self) -> int:
        return await self.rpc.call("eth_gasPrice", [], HexInt)

    async def max_priority_fee_per_gas(self) -> int:
        return await self.rpc.call("eth_maxPriorityFeePerGas", [], HexInt)

    async def blob_base_fee(self) -> int:
        return await self.rpc.call("eth_blobBaseFee", [], HexInt)

    async def fee_history(
        self,
        block_count: int,
        newest_block: BlockId = BlockTag.LATEST,
        reward_percentiles: Sequence[float] | None = None,
    ) -> FeeHistory:
        params = [encode_uint(block_count), block_number_param(newest_block), list(reward_percentiles or [])]
        return await self.rpc.call("eth_feeHistory", params, FeeHistory)

    async def syncing(self) -> SyncStatus:
        return await self.rpc.call("eth_syncing", [], SyncStatus)

    # ---- accounts ----

    async def get_balance(self, address: str, block: BlockId = BlockTag.LATEST) -> int:
        params = [parse_address(address), block_number_param(block)]
        return await self.rpc.call("eth_getBalance", params, HexInt)

    async def get_code(self, address: str, block: BlockId = BlockTag.LATEST) -> str:
        params = [parse_address(address), block_number_param(block)]
        return await self.rpc.call("eth_getCode", params, str)

    async def get_storage_at(self, address: str, position: int | str, block: BlockId = BlockTag.LATEST) -> str:
        slot = encode_uint(position) if isinstance(position, int) else position
        params = [parse_address(address), slot, block_number_param(block)]
        return await self.rpc.call("eth_getStorageAt", params, str)

    async def get_transaction_count(self, address: str, block: BlockId = BlockTag.LATEST) -> int:
        params = [parse_address(address), block_number_param(block)]
        return await self.rpc.call("eth_getTransactionCount", params, HexInt)

    async def get_proof(
        self,
        address: str,
        storage_keys: Sequence[str] = (),
        block: BlockId = BlockTag.LATEST,
    ) -> AccountProof:
        params = [parse_address(address), list(storage_keys), block_number_param(block)]
        return await self.rpc.call("eth_getProof", params, AccountProof)

    # ---- blocks ----

    async def get_block_by_number(self, block: BlockId = BlockTag.LATEST, full_transactions: bool = False) -> Optional[Block]:
        params = [block_number_param(block), full_transactions]
        return await self.rpc.call("eth_getBlockByNumber", params, Optional[Block])

    async def get_block_by_hash(self, block_hash: str, full_transactions: bool = False) -> Optional[Block]:
        params = [parse_hash(block_hash), full_transactions]
        return await self.rpc.call("eth_getBlockByHash", params, Optional[Block])

    async def get_block_transaction_count_by_number(self, block: BlockId = BlockTag.LATEST) -> int:
        return await self.rpc.call("eth_getBlockTransactionCountByNumber", [block_number_param(block)], HexInt)

    async def get_block_transaction_count_by_hash(self, block_hash: str) -> int:
        return await self.rpc.call("eth_getBlockTransactionCountByHash", [parse_hash(block_hash)], HexInt)

    async def get_block_receipts(self, block: BlockId = BlockTag.LATEST) -> list[TransactionReceipt]:
        result = await self.rpc.call("eth_getBlockReceipts", [block_number_param(block)], Optional[list[TransactionReceipt]])
        return result or []

    # ---- transactions ----

    async def get_transaction_by_hash(self, tx_hash: str) -> Optional[Transaction]:
        return await self.rpc.call("eth_getTransactionByHash", [parse_hash(tx_hash)], Optional[Transaction])

    async def get_transaction_by_block_hash_and_index(self, block_hash: str, index: int) -> Optional[Transaction]:
        params = [parse_hash(block_hash), encode_uint(index)]
        return await self.rpc.call("eth_getTransactionByBlockHashAndIndex", params, Optional[Transaction])

    async def get_transaction_by_block_number_and_index(self, block: BlockId, index: int) -> Optional[Transaction]:
        params = [block_number_param(block), encode_uint(index)]
        return await self.rpc.call("eth_getTransactionByBlockNumberAndIndex", params, Optional[Transaction])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        return await self.rpc.call("eth_getTransactionReceipt", [parse_hash(tx_hash)], Optional[TransactionReceipt])

    async def send_raw_transaction(self, signed_tx: str | bytes, *, retry: bool = True) -> str:
        """Broadcast a signed transaction; pass ``retry=False`` to avoid re-sending on 5xx."""
        if isinstance(signed_tx, (bytes, bytearray)):
            payload = "0x" + bytes(signed_tx).hex()
        else:
            payload = signed_tx
        if not payload.startswith("0x") or len(payload) <= 2:
            raise InvalidParameterError("signed transaction must be non-empty 0x-prefixed hex", field="signed_tx")
        return await self.rpc.call("eth_sendRawTransaction", [payload], str, retry=retry)

    # ---- execution ----

    async def call(self, msg: CallMsg | dict[str, Any], block: BlockId = BlockTag.LATEST) -> str:
        msg = msg if isinstance(msg, CallMsg) else CallMsg.model_validate(msg)
        return await self.rpc.call("eth_call", [msg.to_wire(), block_number_param(block)], str)

    async def estimate_gas(self, msg: CallMsg | dict[str, Any], block: BlockId | None = None) -> int:
        msg = msg if isinstance(msg, CallMsg) else CallMsg.model_validate(msg)
        params: list[Any] = [msg.to_wire()]
        if block is not None:
            params.append(block_number_param(block))
        return await self.rpc.call("eth_estimateGas", params, HexInt)

    async def get_logs(self, log_filter: LogFilter | dict[str, Any]) -> list[Log]:
        if not isinstance(log_filter, LogFilter):
            log_filter = LogFilter.model_validate(log_filter)
        result = await self.rpc.call("eth_getLogs", [log_filter.to_wire()], Optional[list[Log]])
        return result or []

    # ---- passthrough ----

    async def call_raw(self, method: str, params: Sequence[Any] | None = None) -> Any:
        return await self.rpc.call_raw(method, params)

    async def batch_call(self, calls: Sequence[BatchCall]) -> list[BatchResult]:
        return await self.rpc.batch_call(calls)
