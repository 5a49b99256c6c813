"""Tests for NodeClient parameter encoding and result decoding."""

from __future__ import annotations

import pytest

from alchemykit.node import NodeClient
from alchemykit.node.models import BlockTag, LogFilter
from alchemykit.transport.jsonrpc import BatchCall
from alchemykit.utils.exceptions import InvalidAddressError, InvalidBlockNumberError, InvalidParameterError

ADDR = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
TX_HASH = "0x" + "ab" * 32
BLOCK_HASH = "0x" + "cd" * 32


@pytest.fixture
def node_factory(rpc_factory, router, recorder):
    def build(results: dict) -> NodeClient:
        return NodeClient(rpc_factory(router(results, recorder)))

    return build


@pytest.mark.asyncio
async def test_quantities_decode_to_int(node_factory) -> None:
    node = node_factory({"eth_blockNumber": "0x12a05f200", "eth_chainId": "0x1", "eth_gasPrice": "0x3b9aca00"})
    assert await node.block_number() == 5_000_000_000
    assert await node.chain_id() == 1
    assert await node.gas_price() == 10**9


@pytest.mark.asyncio
async def test_get_balance_params(node_factory, recorder) -> None:
    node = node_factory({"eth_getBalance": "0xde0b6b3a7640000"})
    assert await node.get_balance(ADDR) == 10**18
    assert recorder.bodies[-1]["params"] == [ADDR.lower(), "latest"]

    await node.get_balance(ADDR, 17_000_000)
    assert recorder.bodies[-1]["params"] == [ADDR.lower(), "0x1036640"]

    await node.get_balance(ADDR, BlockTag.FINALIZED)
    assert recorder.bodies[-1]["params"][1] == "finalized"


@pytest.mark.asyncio
async def test_invalid_inputs_fail_before_any_request(node_factory, recorder) -> None:
    node = node_factory({})
    with pytest.raises(InvalidAddressError):
        await node.get_balance("0x123")
    with pytest.raises(InvalidBlockNumberError):
        await node.get_balance(ADDR, -1)
    with pytest.raises(InvalidBlockNumberError):
        await node.get_block_by_number("yesterday")
    with pytest.raises(InvalidParameterError):
        await node.send_raw_transaction("")
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_get_block_by_number(node_factory, recorder) -> None:
    block = {
        "number": "0x10",
        "hash": BLOCK_HASH,
        "parentHash": "0x" + "00" * 32,
        "timestamp": "0x65a0b2c0",
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x0",
        "baseFeePerGas": "0x7",
        "transactions": [
            {
                "hash": TX_HASH,
                "nonce": "0x0",
                "from": ADDR,
                "to": None,
                "value": "0x0",
                "gas": "0x5208",
                "input": "0x",
            }
        ],
    }
    node = node_factory({"eth_getBlockByNumber": block})
    result = await node.get_block_by_number(16, full_transactions=True)
    assert recorder.bodies[-1]["params"] == ["0x10", True]
    assert result.number == 16
    assert result.base_fee_per_gas == 7
    assert result.transaction_hashes() == [TX_HASH]
    tx = result.full_transactions()[0]
    assert tx.from_ == ADDR.lower()
    assert tx.is_contract_creation


@pytest.mark.asyncio
async def test_missing_objects_are_none(node_factory) -> None:
    node = node_factory(
        {"eth_getBlockByHash": None, "eth_getTransactionByHash": None, "eth_getTransactionReceipt": None}
    )
    assert await node.get_block_by_hash(BLOCK_HASH) is None
    assert await node.get_transaction_by_hash(TX_HASH) is None
    assert await node.get_transaction_receipt(TX_HASH) is None


@pytest.mark.asyncio
async def test_transaction_receipt(node_factory) -> None:
    receipt = {
        "transactionHash": TX_HASH,
        "transactionIndex": "0x1",
        "blockHash": BLOCK_HASH,
        "blockNumber": "0x10",
        "from": ADDR,
        "to": ADDR,
        "cumulativeGasUsed": "0xa410",
        "gasUsed": "0x5208",
        "status": "0x1",
        "logs": [
            {
                "address": ADDR,
                "topics": ["0x" + "ee" * 32],
                "data": "0x",
                "logIndex": "0x0",
            }
        ],
    }
    node = node_factory({"eth_getTransactionReceipt": receipt})
    result = await node.get_transaction_receipt(TX_HASH)
    assert result.is_successful
    assert result.gas_used == 21000
    assert result.logs[0].topic(0) == "0x" + "ee" * 32
    assert result.logs[0].topic(1) is None


@pytest.mark.asyncio
async def test_call_and_estimate_gas_encode_message(node_factory, recorder) -> None:
    node = node_factory({"eth_call": "0x" + "00" * 31 + "12", "eth_estimateGas": "0x5208"})
    out = await node.call({"to": ADDR, "data": bytes.fromhex("313ce567")})
    assert out.endswith("12")
    assert recorder.bodies[-1]["params"] == [{"to": ADDR.lower(), "data": "0x313ce567"}, "latest"]

    assert await node.estimate_gas({"from": ADDR, "to": ADDR, "value": 10**18}) == 21000
    assert recorder.bodies[-1]["params"] == [
        {"from": ADDR.lower(), "to": ADDR.lower(), "value": "0xde0b6b3a7640000"}
    ]


@pytest.mark.asyncio
async def test_get_logs_filter_wire_format(node_factory, recorder) -> None:
    node = node_factory({"eth_getLogs": []})
    log_filter = LogFilter(from_block=100, to_block="latest", address=ADDR).set_topic(1, "0x" + "aa" * 32)
    assert await node.get_logs(log_filter) == []
    assert recorder.bodies[-1]["params"] == [
        {
            "fromBlock": "0x64",
            "toBlock": "latest",
            "address": ADDR.lower(),
            "topics": [None, "0x" + "aa" * 32],
        }
    ]


def test_log_filter_rejects_hash_with_range() -> None:
    with pytest.raises(ValueError):
        LogFilter(block_hash=BLOCK_HASH, from_block=1)


@pytest.mark.asyncio
async def test_send_raw_transaction_accepts_bytes(node_factory, recorder) -> None:
    node = node_factory({"eth_sendRawTransaction": TX_HASH})
    assert await node.send_raw_transaction(b"\x02\xf8") == TX_HASH
    assert recorder.bodies[-1]["params"] == ["0x02f8"]


@pytest.mark.asyncio
async def test_fee_history_and_syncing(node_factory, recorder) -> None:
    node = node_factory(
        {
            "eth_feeHistory": {
                "oldestBlock": "0x10",
                "baseFeePerGas": ["0x1", "0x2"],
                "gasUsedRatio": [0.5],
                "reward": [["0x3"]],
            },
            "eth_syncing": False,
        }
    )
    history = await node.fee_history(1, reward_percentiles=[50])
    assert recorder.bodies[-1]["params"] == ["0x1", "latest", [50]]
    assert history.oldest_block == 16
    assert history.reward == [[3]]
    assert (await node.syncing()).syncing is False


@pytest.mark.asyncio
async def test_batch_passthrough(node_factory) -> None:
    node = node_factory({})

    async def fake_batch(calls):
        return [c.method for c in calls]

    node.rpc.batch_call = fake_batch
    assert await node.batch_call([BatchCall("eth_chainId")]) == ["eth_chainId"]
