"""Tests for hex quantity / data helpers and the pydantic hex types."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from alchemykit.utils.exceptions import InvalidAddressError, InvalidHashError, InvalidParameterError
from alchemykit.utils.hexutil import (
    Address,
    HexInt,
    decode_big_int,
    decode_bytes,
    decode_uint,
    encode_bytes,
    encode_uint,
    is_valid_address,
    parse_address,
    parse_hash,
)

ADDR = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


@pytest.mark.parametrize(("value", "encoded"), [(0, "0x0"), (1, "0x1"), (255, "0xff"), (10**18, "0xde0b6b3a7640000")])
def test_encode_uint(value: int, encoded: str) -> None:
    assert encode_uint(value) == encoded
    assert decode_uint(encoded) == value


def test_decode_uint_edge_cases() -> None:
    assert decode_uint("0x") == 0
    assert decode_uint("0X1F") == 31
    assert decode_uint("ff") == 255
    with pytest.raises(InvalidParameterError):
        decode_uint("0xzz")
    with pytest.raises(InvalidParameterError):
        encode_uint(-1)


@pytest.mark.parametrize("malformed", ["0x-5", "0x+5", "0x1_0", "0x 10", "0x10\n", "-5"])
def test_decode_uint_rejects_malformed_quantities(malformed: str) -> None:
    with pytest.raises(InvalidParameterError):
        decode_uint(malformed)


def test_big_int_handles_sign_and_width() -> None:
    big = 2**256 - 1
    assert decode_big_int(hex(big)) == big
    assert decode_big_int("-0x10") == -16


def test_bytes_helpers() -> None:
    assert encode_bytes(b"\x01\xab") == "0x01ab"
    assert decode_bytes("0x1ab") == b"\x01\xab"
    assert decode_bytes("0x") == b""
    with pytest.raises(InvalidParameterError):
        decode_bytes("0xgg")


def test_address_parsing() -> None:
    assert parse_address(ADDR) == ADDR.lower()
    assert parse_address(ADDR[2:]) == ADDR.lower()
    assert is_valid_address(ADDR)
    assert not is_valid_address(ADDR[:-1])
    with pytest.raises(InvalidAddressError):
        parse_address("0x1234")


def test_hash_parsing() -> None:
    h = "0x" + "AB" * 32
    assert parse_hash(h) == h.lower()
    with pytest.raises(InvalidHashError):
        parse_hash("0xabc")


class _Sample(BaseModel):
    amount: HexInt
    owner: Address


def test_pydantic_hex_types() -> None:
    sample = _Sample(amount="0x2a", owner=ADDR)
    assert sample.amount == 42
    assert sample.owner == ADDR.lower()
    assert sample.model_dump(mode="json") == {"amount": "0x2a", "owner": ADDR.lower()}
    assert _Sample(amount=7, owner=ADDR).amount == 7
