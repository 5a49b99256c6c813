"""Typed shapes for standard eth_* JSON-RPC results and parameters."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BeforeValidator, Field, model_validator

from alchemykit.models import ApiModel
from alchemykit.utils.exceptions import InvalidBlockNumberError
from alchemykit.utils.hexutil import (
    Address,
    Hash,
    HexInt,
    ZERO_ADDRESS,
    encode_bytes,
    encode_uint,
    is_valid_hex,
)


class BlockTag(str, Enum):
    LATEST = "latest"
    PENDING = "pending"
    EARLIEST = "earliest"
    FINALIZED = "finalized"
    SAFE = "safe"


BlockId = Union[int, str, BlockTag]

_TAGS = {tag.value for tag in BlockTag}


def block_number_param(block: BlockId) -> str:
    """Render a block number or tag as a JSON-RPC parameter."""
    if isinstance(block, BlockTag):
        return block.value
    if isinstance(block, bool):
        raise InvalidBlockNumberError(block)
    if isinstance(block, int):
        if block < 0:
            raise InvalidBlockNumberError(block)
        return encode_uint(block)
    if isinstance(block, str):
        value = block.strip().lower()
        if value in _TAGS:
            return value
        if is_valid_hex(value) and len(value) > 2:
            return value
        if value.isdigit():
            return encode_uint(int(value))
    raise InvalidBlockNumberError(block)


def _bytes_to_hex(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return encode_bytes(bytes(value))
    return value


HexData = Annotated[str, BeforeValidator(_bytes_to_hex)]


class Withdrawal(ApiModel):
    index: HexInt
    validator_index: HexInt
    address: Address
    amount: HexInt


class Transaction(ApiModel):
    hash: Hash
    nonce: HexInt
    block_hash: Optional[Hash] = None
    block_number: Optional[HexInt] = None
    transaction_index: Optional[HexInt] = None
    from_: Address = Field(alias="from")
    to: Optional[Address] = None
    value: HexInt
    gas: HexInt
    gas_price: Optional[HexInt] = None
    max_fee_per_gas: Optional[HexInt] = None
    max_priority_fee_per_gas: Optional[HexInt] = None
    max_fee_per_blob_gas: Optional[HexInt] = None
    input: str = "0x"
    v: Optional[HexInt] = None
    r: Optional[HexInt] = None
    s: Optional[HexInt] = None
    y_parity: Optional[HexInt] = None
    type: Optional[HexInt] = None
    chain_id: Optional[HexInt] = None

    @property
    def is_contract_creation(self) -> bool:
        return not self.to


class Block(ApiModel):
    hash: Optional[Hash] = None
    parent_hash: Hash
    sha3_uncles: Optional[Hash] = None
    miner: Optional[Address] = None
    state_root: Optional[Hash] = None
    transactions_root: Optional[Hash] = None
    receipts_root: Optional[Hash] = None
    logs_bloom: Optional[str] = None
    difficulty: Optional[HexInt] = None
    total_difficulty: Optional[HexInt] = None
    number: Optional[HexInt] = None
    gas_limit: HexInt
    gas_used: HexInt
    timestamp: HexInt
    extra_data: str = "0x"
    mix_hash: Optional[Hash] = None
    nonce: Optional[str] = None
    base_fee_per_gas: Optional[HexInt] = None
    withdrawals_root: Optional[Hash] = None
    blob_gas_used: Optional[HexInt] = None
    excess_blob_gas: Optional[HexInt] = None
    parent_beacon_block_root: Optional[Hash] = None
    size: Optional[HexInt] = None
    uncles: list[Hash] = Field(default_factory=list)
    withdrawals: Optional[list[Withdrawal]] = None
    # Hashes when fetched without full transactions, objects otherwise.
    transactions: list[Union[Transaction, Hash]] = Field(default_factory=list)

    def transaction_hashes(self) -> list[str]:
        return [tx.hash if isinstance(tx, Transaction) else tx for tx in self.transactions]

    def full_transactions(self) -> list[Transaction]:
        return [tx for tx in self.transactions if isinstance(tx, Transaction)]

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)


class Log(ApiModel):
    address: Address
    topics: list[Hash] = Field(default_factory=list)
    data: str = "0x"
    block_number: Optional[HexInt] = None
    transaction_hash: Optional[Hash] = None
    transaction_index: Optional[HexInt] = None
    block_hash: Optional[Hash] = None
    log_index: Optional[HexInt] = None
    removed: bool = False

    def topic(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.topics):
            return self.topics[index]
        return None


class TransactionReceipt(ApiModel):
    transaction_hash: Hash
    transaction_index: HexInt
    block_hash: Hash
    block_number: HexInt
    from_: Address = Field(alias="from")
    to: Optional[Address] = None
    cumulative_gas_used: HexInt
    gas_used: HexInt
    effective_gas_price: Optional[HexInt] = None
    contract_address: Optional[Address] = None
    logs: list[Log] = Field(default_factory=list)
    logs_bloom: Optional[str] = None
    type: Optional[HexInt] = None
    status: Optional[HexInt] = None
    root: Optional[Hash] = None
    blob_gas_used: Optional[HexInt] = None
    blob_gas_price: Optional[HexInt] = None

    @property
    def is_successful(self) -> bool:
        return self.status == 1

    @property
    def is_failed(self) -> bool:
        return self.status == 0

    @property
    def is_contract_creation(self) -> bool:
        return bool(self.contract_address) and self.contract_address != ZERO_ADDRESS


class LogFilter(ApiModel):
    """eth_getLogs filter; ``block_hash`` and a block range are mutually exclusive."""

    from_block: Optional[str] = None
    to_block: Optional[str] = None
    address: Optional[Union[Address, list[Address]]] = None
    topics: Optional[list[Optional[Union[Hash, list[Hash]]]]] = None
    block_hash: Optional[Hash] = None

    @model_validator(mode="before")
    @classmethod
    def _render_blocks(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            for key in ("from_block", "fromBlock", "to_block", "toBlock"):
                if data.get(key) is not None:
                    data[key] = block_number_param(data[key])
        return data

    @model_validator(mode="after")
    def _check_exclusive(self) -> "LogFilter":
        if self.block_hash and (self.from_block or self.to_block):
            raise ValueError("block_hash cannot be combined with from_block/to_block")
        return self

    def set_topic(self, index: int, topic: Union[str, list[str], None]) -> "LogFilter":
        topics = list(self.topics or [])
        while len(topics) <= index:
            topics.append(None)
        topics[index] = topic
        self.topics = topics
        return self


class CallMsg(ApiModel):
    """Message for eth_call / eth_estimateGas."""

    from_: Optional[Address] = Field(default=None, alias="from")
    to: Optional[Address] = None
    gas: Optional[HexInt] = None
    gas_price: Optional[HexInt] = None
    max_fee_per_gas: Optional[HexInt] = None
    max_priority_fee_per_gas: Optional[HexInt] = None
    value: Optional[HexInt] = None
    data: Optional[HexData] = None


class FeeHistory(ApiModel):
    oldest_block: HexInt
    base_fee_per_gas: list[HexInt] = Field(default_factory=list)
    gas_used_ratio: list[float] = Field(default_factory=list)
    reward: Optional[list[list[HexInt]]] = None
    base_fee_per_blob_gas: Optional[list[HexInt]] = None
    blob_gas_used_ratio: Optional[list[float]] = None


class SyncStatus(ApiModel):
    syncing: bool = False
    starting_block: Optional[HexInt] = None
    current_block: Optional[HexInt] = None
    highest_block: Optional[HexInt] = None

    @model_validator(mode="before")
    @classmethod
    def _from_bool(cls, data: Any) -> Any:
        if isinstance(data, bool):
            return {"syncing": data}
        if isinstance(data, dict):
            return {"syncing": True, **data}
        return data


class StorageProof(ApiModel):
    key: str
    value: HexInt
    proof: list[str] = Field(default_factory=list)


class AccountProof(ApiModel):
    address: Address
    account_proof: list[str] = Field(default_factory=list)
    balance: HexInt
    code_hash: Hash
    nonce: HexInt
    storage_hash: Hash
    storage_proof: list[StorageProof] = Field(default_factory=list)
