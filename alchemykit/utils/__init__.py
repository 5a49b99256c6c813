"""Utility functions for alchemykit."""

from alchemykit.utils.exceptions import (
    AlchemyError,
    APIError,
    APIErrorType,
    CancellationError,
    ConfigError,
    ConnectionFailedError,
    DeadlineExceededError,
    DecodeError,
    ErrorKind,
    InvalidAPIKeyError,
    InvalidParameterError,
    MissingResponseError,
    ProtocolError,
    RateLimitedError,
    RequestCancelledError,
    TransportError,
    classify_exception,
    error_from_response,
    is_auth_error,
    is_rate_limit_error,
    is_retryable,
    sanitize_error_message,
)
from alchemykit.utils.hexutil import (
    decode_big_int,
    decode_bytes,
    decode_uint,
    encode_big_int,
    encode_bytes,
    encode_uint,
    is_valid_address,
    is_valid_hash,
    is_valid_hex,
    parse_address,
    parse_hash,
)

__all__ = [
    "AlchemyError",
    "APIError",
    "APIErrorType",
    "CancellationError",
    "ConfigError",
    "ConnectionFailedError",
    "DeadlineExceededError",
    "DecodeError",
    "ErrorKind",
    "InvalidAPIKeyError",
    "InvalidParameterError",
    "MissingResponseError",
    "ProtocolError",
    "RateLimitedError",
    "RequestCancelledError",
    "TransportError",
    "classify_exception",
    "error_from_response",
    "is_auth_error",
    "is_rate_limit_error",
    "is_retryable",
    "sanitize_error_message",
    "decode_big_int",
    "decode_bytes",
    "decode_uint",
    "encode_big_int",
    "encode_bytes",
    "encode_uint",
    "is_valid_address",
    "is_valid_hash",
    "is_valid_hex",
    "parse_address",
    "parse_hash",
]
