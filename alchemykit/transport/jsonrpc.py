"""JSON-RPC 2.0 envelope codec: single calls and id-correlated batch calls."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Sequence

from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from alchemykit.transport.http import HttpExecutor, decode_json_body
from alchemykit.utils.exceptions import (
    AlchemyError,
    DecodeError,
    EmptyResponseError,
    MissingResponseError,
    ProtocolError,
    error_from_response,
)

JSONRPC_VERSION = "2.0"


class IdCounter:
    """Thread-safe monotonic request id source, owned by one client."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


@dataclass
class BatchCall:
    method: str
    params: list[Any] = field(default_factory=list)
    result_type: Any = None


@dataclass
class BatchResult:
    method: str
    result: Any = None
    error: AlchemyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.result


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def decode_result(raw: Any, result_type: Any) -> Any:
    """Validate a raw ``result`` payload into ``result_type`` (None keeps it raw)."""
    if result_type is None:
        return raw
    try:
        return _adapter(result_type).validate_python(raw)
    except PydanticValidationError as exc:
        raise DecodeError(f"cannot decode result into {result_type!r}: {exc}") from exc
    except TypeError:
        # Unhashable target types bypass the adapter cache.
        try:
            return TypeAdapter(result_type).validate_python(raw)
        except PydanticValidationError as exc:
            raise DecodeError(f"cannot decode result into {result_type!r}: {exc}") from exc


class JsonRpcClient:
    def __init__(self, executor: HttpExecutor, *, path: str = "", id_counter: IdCounter | None = None):
        self.executor = executor
        self.path = path
        self._ids = id_counter or IdCounter()

    @staticmethod
    def envelope(method: str, params: Sequence[Any] | None, request_id: int) -> dict[str, Any]:
        return {
            "jsonrpc": JSONRPC_VERSION,
            "method": method,
            "params": list(params or []),
            "id": request_id,
        }

    async def _post_once(self, request) -> Any:
        response = await self.executor.attempt(request)
        if not response.is_success:
            raise error_from_response(response)
        return decode_json_body(response)

    async def call_raw(self, method: str, params: Sequence[Any] | None = None, *, retry: bool = True) -> Any:
        """Call ``method`` and return the undecoded ``result`` member."""
        request_id = self._ids.next()
        request = self.executor.build_request(
            "POST", self.path, json_body=self.envelope(method, params, request_id)
        )

        async def attempt() -> Any:
            body = await self._post_once(request)
            return _unwrap_single(body, request_id)

        logger.debug(f"jsonrpc call {method} id={request_id}")
        return await self.executor.retrier.run(attempt, retry=retry)

    async def call(
        self,
        method: str,
        params: Sequence[Any] | None = None,
        result_type: Any = None,
        *,
        retry: bool = True,
    ) -> Any:
        raw = await self.call_raw(method, params, retry=retry)
        return decode_result(raw, result_type)

    async def batch_call(self, calls: Sequence[BatchCall], *, retry: bool = True) -> list[BatchResult]:
        """
        Send ``calls`` as one JSON array and return results in input order.

        Ids are 1..N, local to this request. Each slot fails on its own
        (protocol error, missing response, decode error) without affecting
        its siblings.
        """
        if not calls:
            return []
        envelopes = [self.envelope(c.method, c.params, i + 1) for i, c in enumerate(calls)]
        request = self.executor.build_request("POST", self.path, json_body=envelopes)

        async def attempt() -> list[Any]:
            body = await self._post_once(request)
            if body is None:
                raise EmptyResponseError("empty batch response")
            if isinstance(body, dict) and body.get("error") is not None:
                raise ProtocolError.from_error_object(body["error"])
            if not isinstance(body, list):
                raise DecodeError("batch response is not a JSON array", body=str(body)[:500])
            return body

        logger.debug(f"jsonrpc batch of {len(calls)} calls")
        body = await self.executor.retrier.run(attempt, retry=retry)

        by_id: dict[int, dict[str, Any]] = {}
        for item in body:
            if isinstance(item, dict) and isinstance(item.get("id"), int):
                by_id[item["id"]] = item

        results: list[BatchResult] = []
        for index, call in enumerate(calls):
            request_id = index + 1
            item = by_id.get(request_id)
            if item is None:
                results.append(BatchResult(call.method, error=MissingResponseError(index, request_id, call.method)))
                continue
            if item.get("error") is not None:
                results.append(BatchResult(call.method, error=ProtocolError.from_error_object(item["error"])))
                continue
            try:
                results.append(BatchResult(call.method, result=decode_result(item.get("result"), call.result_type)))
            except DecodeError as exc:
                results.append(BatchResult(call.method, error=exc))
        return results


def _unwrap_single(body: Any, request_id: int) -> Any:
    if body is None:
        raise EmptyResponseError("empty JSON-RPC response")
    if not isinstance(body, dict):
        raise DecodeError("response is not a JSON-RPC envelope", body=str(body)[:500])
    if body.get("error") is not None:
        raise ProtocolError.from_error_object(body["error"])
    if "result" not in body:
        raise DecodeError("response has neither result nor error", body=str(body)[:500])
    if body.get("id") != request_id:
        logger.debug(f"jsonrpc id mismatch: sent {request_id}, got {body.get('id')!r}")
    return body["result"]
