"""
Exception hierarchy and error classification for alchemykit.

Provides:
- Tagged error classes (every error carries an ErrorKind)
- Retry classification (is_retryable / is_auth_error / is_rate_limit_error)
- Safe error message formatting (API keys and tokens are redacted)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class ErrorKind(Enum):
    """Error kinds for classification."""
    TRANSPORT = "transport"
    CONNECTION = "connection"
    PROTOCOL = "protocol"
    DECODE = "decode"
    CANCELLED = "cancelled"
    MISSING_RESPONSE = "missing_response"
    API = "api"
    CONFIG = "config"
    INVALID_PARAMETER = "invalid_parameter"
    RATE_LIMIT = "rate_limit"
    UNKNOWN = "unknown"


class AlchemyError(Exception):
    """Base exception for all alchemykit errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        kind: ErrorKind = ErrorKind.UNKNOWN,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.details = details or {}

    @property
    def retryable(self) -> bool:
        return is_retryable(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "kind": self.kind.value,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class TransportError(AlchemyError):
    """Non-2xx HTTP response."""

    def __init__(
        self,
        status_code: int,
        status_text: str = "",
        body: str = "",
        url: str | None = None,
    ):
        self.status_code = status_code
        self.status_text = status_text or httpx.codes.get_reason_phrase(status_code)
        self.body = body
        self.url = sanitize_error_message(url) if url else None
        message = f"HTTP {status_code} {self.status_text}".rstrip()
        snippet = _extract_error_message(body)
        if snippet:
            message = f"{message}: {snippet}"
        super().__init__(
            sanitize_error_message(message),
            code=f"HTTP_{status_code}",
            kind=ErrorKind.TRANSPORT,
            details={"status_code": status_code, "url": self.url},
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "TransportError":
        return cls(response.status_code, response.reason_phrase, response.text, _request_url(response))

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    def is_forbidden(self) -> bool:
        return self.status_code == 403

    def is_not_found(self) -> bool:
        return self.status_code == 404


class ConnectionFailedError(AlchemyError):
    """The request never produced a response (connect/read failure or transport timeout)."""

    def __init__(self, message: str, *, timeout: bool = False):
        super().__init__(
            sanitize_error_message(message),
            code="TIMEOUT" if timeout else "CONNECTION_ERROR",
            kind=ErrorKind.CONNECTION,
            details={"timeout": timeout},
        )
        self.timeout = timeout


# JSON-RPC 2.0 reserved codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR_MIN = -32099
SERVER_ERROR_MAX = -32000


class ProtocolError(AlchemyError):
    """Error object returned inside a JSON-RPC response envelope."""

    def __init__(self, rpc_code: int, message: str, data: Any = None):
        self.rpc_code = rpc_code
        self.data = data
        super().__init__(
            message,
            code=f"JSONRPC_{rpc_code}",
            kind=ErrorKind.PROTOCOL,
            details={"rpc_code": rpc_code, "data": data},
        )

    @classmethod
    def from_error_object(cls, obj: Any) -> "ProtocolError":
        if not isinstance(obj, dict):
            return cls(INTERNAL_ERROR, f"malformed error object: {obj!r}")
        try:
            rpc_code = int(obj.get("code", INTERNAL_ERROR))
        except (TypeError, ValueError):
            rpc_code = INTERNAL_ERROR
        return cls(rpc_code, str(obj.get("message") or ""), obj.get("data"))

    def __str__(self) -> str:
        return f"JSON-RPC error {self.rpc_code}: {self.message}"

    def data_as(self, target: Any) -> Any:
        """Decode the opaque ``data`` member into ``target``."""
        if self.data is None:
            return None
        try:
            return TypeAdapter(target).validate_python(self.data)
        except PydanticValidationError as exc:
            raise DecodeError(f"cannot decode error data: {exc}") from exc

    def is_parse_error(self) -> bool:
        return self.rpc_code == PARSE_ERROR

    def is_invalid_request(self) -> bool:
        return self.rpc_code == INVALID_REQUEST

    def is_method_not_found(self) -> bool:
        return self.rpc_code == METHOD_NOT_FOUND

    def is_invalid_params(self) -> bool:
        return self.rpc_code == INVALID_PARAMS

    def is_internal_error(self) -> bool:
        return self.rpc_code == INTERNAL_ERROR

    def is_server_error(self) -> bool:
        return SERVER_ERROR_MIN <= self.rpc_code <= SERVER_ERROR_MAX


class DecodeError(AlchemyError):
    """Malformed JSON or a response that does not match the expected shape."""

    def __init__(self, message: str, body: str | None = None):
        details = {"body": body[:500]} if body else {}
        super().__init__(message, code="DECODE_ERROR", kind=ErrorKind.DECODE, details=details)
        self.body = body


class EmptyResponseError(DecodeError):
    def __init__(self, message: str = "empty response"):
        super().__init__(message)
        self.code = "EMPTY_RESPONSE"


class CancellationError(AlchemyError):
    """The caller's cancellation signal or deadline fired."""

    def __init__(self, message: str, reason: str):
        super().__init__(
            message,
            code="CANCELLED" if reason == "canceled" else "DEADLINE_EXCEEDED",
            kind=ErrorKind.CANCELLED,
            details={"reason": reason},
        )
        self.reason = reason


class RequestCancelledError(CancellationError):
    def __init__(self, message: str = "request canceled"):
        super().__init__(message, reason="canceled")


class DeadlineExceededError(CancellationError):
    def __init__(self, message: str = "request deadline exceeded"):
        super().__init__(message, reason="deadline")


class MissingResponseError(AlchemyError):
    """A batch slot whose id never came back from the server."""

    def __init__(self, index: int, request_id: int, method: str):
        super().__init__(
            f"missing response for call {index}",
            code="MISSING_RESPONSE",
            kind=ErrorKind.MISSING_RESPONSE,
            details={"index": index, "request_id": request_id, "method": method},
        )
        self.index = index
        self.request_id = request_id
        self.method = method


class APIErrorType(Enum):
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INVALID_API_KEY = "INVALID_API_KEY"
    INVALID_PARAMS = "INVALID_PARAMS"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNSUPPORTED_METHOD = "UNSUPPORTED_METHOD"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class APIError(AlchemyError):
    """Provider-level error reported outside the JSON-RPC envelope."""

    def __init__(
        self,
        error_type: APIErrorType,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            code=error_type.value,
            kind=ErrorKind.API,
            details={**(details or {}), "status_code": status_code},
        )
        self.error_type = error_type
        self.status_code = status_code


class InvalidAPIKeyError(APIError):
    """The provider rejected the credentials (HTTP 401)."""

    def __init__(self, message: str = "invalid API key", url: str | None = None):
        super().__init__(
            APIErrorType.INVALID_API_KEY,
            sanitize_error_message(message),
            status_code=401,
            details={"url": sanitize_error_message(url) if url else None},
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "InvalidAPIKeyError":
        snippet = _extract_error_message(response.text)
        message = f"invalid API key: {snippet}" if snippet else "invalid API key"
        return cls(message, _request_url(response))


class RateLimitedError(TransportError):
    """HTTP 429 from the provider; always retryable."""

    def __init__(
        self,
        message: str = "rate limit exceeded",
        retry_after: float | None = None,
        *,
        body: str = "",
        url: str | None = None,
    ):
        super().__init__(429, "Too Many Requests", body, url)
        if not body:
            self.message = message
        self.code = "RATE_LIMITED"
        self.kind = ErrorKind.RATE_LIMIT
        self.details["retry_after"] = retry_after
        self.retry_after = retry_after

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RateLimitedError":
        return cls(
            retry_after=_parse_retry_after(response.headers.get("retry-after")),
            body=response.text,
            url=_request_url(response),
        )


def error_from_response(response: httpx.Response) -> AlchemyError:
    """Map a non-2xx response onto the most specific error class."""
    if response.status_code == 429:
        return RateLimitedError.from_response(response)
    if response.status_code == 401:
        return InvalidAPIKeyError.from_response(response)
    return TransportError.from_response(response)


def _request_url(response: httpx.Response) -> str | None:
    try:
        return str(response.request.url)
    except RuntimeError:
        return None


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


class ConfigError(AlchemyError):
    """Invalid client configuration."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFIG_ERROR", kind=ErrorKind.CONFIG, details=details)
        self.field = field


class MissingAPIKeyError(ConfigError):
    def __init__(self, message: str = "API key is required"):
        super().__init__(message, field="api_key")
        self.code = "MISSING_API_KEY"


class NetworkNotFoundError(ConfigError):
    def __init__(self, network: str):
        super().__init__(f"network not found: {network}", field="network")
        self.code = "NETWORK_NOT_FOUND"
        self.network = network


class InvalidParameterError(AlchemyError, ValueError):
    """Bad caller input (address, hash, block number, hex string...)."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="INVALID_PARAMETER", kind=ErrorKind.INVALID_PARAMETER, details=details)
        self.field = field


class InvalidAddressError(InvalidParameterError):
    def __init__(self, value: str):
        super().__init__(f"invalid address: {value}", field="address")
        self.code = "INVALID_ADDRESS"


class InvalidHashError(InvalidParameterError):
    def __init__(self, value: str):
        super().__init__(f"invalid hash: {value}", field="hash")
        self.code = "INVALID_HASH"


class InvalidBlockNumberError(InvalidParameterError):
    def __init__(self, value: Any):
        super().__init__(f"invalid block number: {value}", field="block")
        self.code = "INVALID_BLOCK_NUMBER"


_RETRYABLE_STATUSES = {408, 429}
_RETRYABLE_API_TYPES = {APIErrorType.RATE_LIMIT_EXCEEDED, APIErrorType.INTERNAL_ERROR}


def is_retryable_status(status_code: int) -> bool:
    return status_code in _RETRYABLE_STATUSES or 500 <= status_code <= 599


def is_retryable_rpc_code(rpc_code: int) -> bool:
    return rpc_code == INTERNAL_ERROR or SERVER_ERROR_MIN <= rpc_code <= SERVER_ERROR_MAX


def is_retryable(exc: BaseException) -> bool:
    """Whether ``exc`` is eligible for automatic re-attempt."""
    if isinstance(exc, AlchemyError):
        kind = exc.kind
        if kind is ErrorKind.TRANSPORT:
            return is_retryable_status(exc.status_code)
        if kind is ErrorKind.PROTOCOL:
            return is_retryable_rpc_code(exc.rpc_code)
        if kind is ErrorKind.API:
            return exc.error_type in _RETRYABLE_API_TYPES
        return kind in (ErrorKind.CONNECTION, ErrorKind.RATE_LIMIT)
    if isinstance(exc, httpx.HTTPStatusError):
        return is_retryable_status(exc.response.status_code)
    # Caller-side cancellation and deadlines are never retried.
    if isinstance(exc, (asyncio.CancelledError, asyncio.TimeoutError)):
        return False
    return isinstance(exc, httpx.TransportError)


def is_auth_error(exc: BaseException) -> bool:
    if isinstance(exc, TransportError):
        return exc.status_code in (401, 403)
    if isinstance(exc, APIError):
        return exc.error_type is APIErrorType.INVALID_API_KEY or exc.status_code in (401, 403)
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in (401, 403)
    return False


def is_rate_limit_error(exc: BaseException) -> bool:
    if isinstance(exc, RateLimitedError):
        return True
    if isinstance(exc, TransportError):
        return exc.status_code == 429
    if isinstance(exc, APIError):
        return exc.error_type is APIErrorType.RATE_LIMIT_EXCEEDED
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429
    return False


def wrap_transport_exception(exc: Exception) -> AlchemyError:
    """Map a raw httpx exception raised while sending into an alchemykit error."""
    if isinstance(exc, AlchemyError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return ConnectionFailedError(f"request timed out: {exc}", timeout=True)
    if isinstance(exc, httpx.TransportError):
        return ConnectionFailedError(f"network error: {exc}")
    if isinstance(exc, httpx.HTTPStatusError):
        return TransportError.from_response(exc.response)
    return AlchemyError(sanitize_error_message(str(exc)), code="INTERNAL_ERROR")


_SENSITIVE_PATTERNS = [
    (re.compile(r"(/v2/|/nft/v3/)[A-Za-z0-9_\-]+"), r"\1[REDACTED]"),
    (re.compile(r"(api[_-]?key|token|secret|auth)([=:]\s*['\"]?)([^\s'\"&]+)", re.IGNORECASE), r"\1\2[REDACTED]"),
    (re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE), "Bearer [REDACTED]"),
]


def sanitize_error_message(message: str) -> str:
    """Remove API keys and auth tokens from error messages and URLs."""
    sanitized = message
    for pattern, replacement in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def _extract_error_message(body: str) -> str:
    text = (body or "").strip()
    if not text:
        return ""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return text[:200]
    if isinstance(parsed, dict):
        err = parsed.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
        for key in ("message", "detail", "error"):
            val = parsed.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    return text[:200]


def classify_exception(exc: BaseException) -> tuple[str, ErrorKind, bool]:
    """
    Classify an exception and return (error_code, kind, should_retry).

    Works for alchemykit errors as well as raw httpx / asyncio exceptions.
    """
    if isinstance(exc, AlchemyError):
        return exc.code, exc.kind, is_retryable(exc)

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return f"HTTP_{status}", ErrorKind.TRANSPORT, is_retryable_status(status)

    if isinstance(exc, httpx.TimeoutException):
        return "TIMEOUT", ErrorKind.CONNECTION, True

    if isinstance(exc, httpx.TransportError):
        return "CONNECTION_ERROR", ErrorKind.CONNECTION, True

    if isinstance(exc, asyncio.CancelledError):
        return "CANCELLED", ErrorKind.CANCELLED, False

    if isinstance(exc, asyncio.TimeoutError):
        return "DEADLINE_EXCEEDED", ErrorKind.CANCELLED, False

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorKind.DECODE, False

    if isinstance(exc, PydanticValidationError):
        return "DECODE_ERROR", ErrorKind.DECODE, False

    if isinstance(exc, ValueError):
        return "INVALID_PARAMETER", ErrorKind.INVALID_PARAMETER, False

    return "INTERNAL_ERROR", ErrorKind.UNKNOWN, False
