"""Tests for the error hierarchy, retry classification and message sanitizing."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from alchemykit.utils.exceptions import (
    AlchemyError,
    APIError,
    APIErrorType,
    ConnectionFailedError,
    DecodeError,
    DeadlineExceededError,
    ErrorKind,
    InvalidAddressError,
    InvalidAPIKeyError,
    MissingResponseError,
    ProtocolError,
    RateLimitedError,
    RequestCancelledError,
    TransportError,
    classify_exception,
    is_auth_error,
    is_rate_limit_error,
    is_retryable,
    sanitize_error_message,
    wrap_transport_exception,
)


@pytest.mark.parametrize(
    ("status", "expected"),
    [(408, True), (429, True), (500, True), (502, True), (599, True), (400, False), (401, False), (404, False)],
)
def test_transport_error_retryability_by_status(status: int, expected: bool) -> None:
    assert is_retryable(TransportError(status)) is expected


@pytest.mark.parametrize(
    ("code", "expected"),
    [(-32603, True), (-32000, True), (-32005, True), (-32099, True), (-32700, False), (-32602, False), (-32601, False), (3, False)],
)
def test_protocol_error_retryability_by_code(code: int, expected: bool) -> None:
    assert is_retryable(ProtocolError(code, "x")) is expected


def test_other_kinds() -> None:
    assert is_retryable(ConnectionFailedError("boom"))
    assert is_retryable(RateLimitedError())
    assert is_retryable(APIError(APIErrorType.RATE_LIMIT_EXCEEDED, "slow down"))
    assert is_retryable(APIError(APIErrorType.INTERNAL_ERROR, "oops"))
    assert not is_retryable(APIError(APIErrorType.INVALID_PARAMS, "bad"))
    assert not is_retryable(DecodeError("garbage"))
    assert not is_retryable(RequestCancelledError())
    assert not is_retryable(DeadlineExceededError())
    assert not is_retryable(MissingResponseError(0, 1, "eth_blockNumber"))
    assert not is_retryable(ValueError("nope"))
    assert not is_retryable(asyncio.CancelledError())
    assert is_retryable(httpx.ConnectError("refused"))


def test_transport_error_message_uses_body_and_hides_key() -> None:
    err = TransportError(
        401,
        "Unauthorized",
        '{"error": {"message": "Must be authenticated!"}}',
        url="https://eth-mainnet.g.alchemy.com/v2/supersecretkey",
    )
    assert err.code == "HTTP_401"
    assert err.kind is ErrorKind.TRANSPORT
    assert "Must be authenticated!" in err.message
    assert "supersecretkey" not in str(err)
    assert "supersecretkey" not in str(err.to_dict())
    assert err.is_unauthorized()
    assert is_auth_error(err)


def test_transport_error_from_response() -> None:
    request = httpx.Request("POST", "https://eth-mainnet.g.alchemy.com/v2/key123")
    response = httpx.Response(503, text="upstream down", request=request)
    err = TransportError.from_response(response)
    assert err.status_code == 503
    assert err.is_server_error()
    assert "key123" not in str(err)


def test_protocol_error_from_error_object_and_data() -> None:
    err = ProtocolError.from_error_object({"code": 3, "message": "execution reverted", "data": "0x08c379a0"})
    assert err.rpc_code == 3
    assert str(err) == "JSON-RPC error 3: execution reverted"
    assert err.data_as(str) == "0x08c379a0"
    with pytest.raises(DecodeError):
        err.data_as(int)


def test_protocol_error_malformed_object() -> None:
    err = ProtocolError.from_error_object("boom")
    assert err.is_internal_error()


def test_str_format() -> None:
    assert str(AlchemyError("broken", code="X")) == "[X] broken"
    assert InvalidAddressError("0x12").retryable is False


def test_invalid_api_key_is_auth_error() -> None:
    err = InvalidAPIKeyError()
    assert is_auth_error(err)
    assert err.status_code == 401
    assert not is_retryable(err)


def test_rate_limit_helpers() -> None:
    assert is_rate_limit_error(TransportError(429))
    assert is_rate_limit_error(RateLimitedError(retry_after=2.0))
    assert not is_rate_limit_error(TransportError(500))


def test_wrap_transport_exception() -> None:
    timeout = wrap_transport_exception(httpx.ReadTimeout("slow"))
    assert isinstance(timeout, ConnectionFailedError)
    assert timeout.timeout is True
    assert timeout.code == "TIMEOUT"

    conn = wrap_transport_exception(httpx.ConnectError("refused"))
    assert isinstance(conn, ConnectionFailedError)
    assert conn.timeout is False


def test_classify_exception() -> None:
    assert classify_exception(TransportError(502)) == ("HTTP_502", ErrorKind.TRANSPORT, True)
    assert classify_exception(httpx.ConnectTimeout("t")) == ("TIMEOUT", ErrorKind.CONNECTION, True)
    assert classify_exception(asyncio.CancelledError()) == ("CANCELLED", ErrorKind.CANCELLED, False)
    code, kind, retry = classify_exception(RuntimeError("?"))
    assert (code, kind, retry) == ("INTERNAL_ERROR", ErrorKind.UNKNOWN, False)


@pytest.mark.parametrize(
    ("raw", "leaked"),
    [
        ("GET https://base-mainnet.g.alchemy.com/nft/v3/abcDEF123/getNFTsForOwner", "abcDEF123"),
        ("POST https://eth-mainnet.g.alchemy.com/v2/k-e_y9", "k-e_y9"),
        ("url?api_key=hunter2&x=1", "hunter2"),
        ("Authorization: Bearer tok.en-value", "tok.en-value"),
    ],
)
def test_sanitize_error_message(raw: str, leaked: str) -> None:
    cleaned = sanitize_error_message(raw)
    assert leaked not in cleaned
    assert "[REDACTED]" in cleaned
