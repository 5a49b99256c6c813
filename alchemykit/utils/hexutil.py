"""
Hex codec helpers.

Quantities and byte blobs cross the wire as ``0x``-prefixed lowercase hex
strings. Numbers carry no leading zeros and zero encodes as ``0x0``; empty
byte data encodes as ``0x``.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from alchemykit.utils.exceptions import (
    InvalidAddressError,
    InvalidHashError,
    InvalidParameterError,
)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_HASH = "0x" + "0" * 64

_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]*$")
_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")


def has_0x_prefix(s: str) -> bool:
    return len(s) >= 2 and s[0] == "0" and s[1] in "xX"


def trim_0x_prefix(s: str) -> str:
    if has_0x_prefix(s):
        return s[2:]
    return s


def add_0x_prefix(s: str) -> str:
    if has_0x_prefix(s):
        return s
    return "0x" + s


def encode_bytes(data: bytes) -> str:
    return "0x" + data.hex()


def decode_bytes(s: str) -> bytes:
    """Decode a hex string; odd-length input is left-padded with a zero nibble."""
    raw = trim_0x_prefix(s)
    if len(raw) % 2 == 1:
        raw = "0" + raw
    try:
        return bytes.fromhex(raw)
    except ValueError as exc:
        raise InvalidParameterError(f"invalid hex string: {s!r}") from exc


def encode_uint(n: int) -> str:
    if n < 0:
        raise InvalidParameterError(f"cannot encode negative quantity: {n}")
    return hex(n)


def decode_uint(s: str) -> int:
    """Decode an unsigned hex quantity; an empty string decodes to 0."""
    raw = trim_0x_prefix(s)
    if raw == "":
        return 0
    # int() also accepts signs, underscores and surrounding whitespace.
    if not _HEX_DIGITS_RE.fullmatch(raw):
        raise InvalidParameterError(f"invalid hex quantity: {s!r}")
    return int(raw, 16)


def encode_big_int(n: int) -> str:
    if n < 0:
        return "-" + hex(-n)
    return hex(n)


def decode_big_int(s: str) -> int:
    if s.startswith("-"):
        return -decode_uint(s[1:])
    return decode_uint(s)


def is_valid_hex(s: str) -> bool:
    return bool(_HEX_RE.match(s))


def is_valid_address(s: str) -> bool:
    return len(s) == 42 and is_valid_hex(s)


def is_valid_hash(s: str) -> bool:
    return len(s) == 66 and is_valid_hex(s)


def parse_address(s: str) -> str:
    """Normalize ``s`` to a lowercase 0x-prefixed address."""
    value = add_0x_prefix(s.strip().lower())
    if not is_valid_address(value):
        raise InvalidAddressError(s)
    return value


def parse_hash(s: str) -> str:
    value = add_0x_prefix(s.strip().lower())
    if not is_valid_hash(value):
        raise InvalidHashError(s)
    return value


def _quantity_to_int(value: Any) -> Any:
    if isinstance(value, str):
        return decode_big_int(value)
    return value


def _address_or_empty(value: Any) -> Any:
    if isinstance(value, str) and value:
        return parse_address(value)
    return value


def _hash_lenient(value: Any) -> Any:
    # Non-standard hashes (some L2 system txs) are kept lowercased instead of rejected.
    if isinstance(value, str) and value:
        try:
            return parse_hash(value)
        except InvalidHashError:
            return value.lower()
    return value


HexInt = Annotated[int, BeforeValidator(_quantity_to_int), PlainSerializer(encode_big_int, return_type=str)]
Address = Annotated[str, BeforeValidator(_address_or_empty)]
Hash = Annotated[str, BeforeValidator(_hash_lenient)]
