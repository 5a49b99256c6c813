"""HTTP request executor: middleware chain + retry loop over httpx.AsyncClient."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

import httpx
from loguru import logger

from alchemykit.transport.backoff import BackoffPolicy, Retrier
from alchemykit.transport.middleware import Handler, Middleware, compose
from alchemykit.utils.exceptions import (
    AlchemyError,
    DecodeError,
    error_from_response,
    is_retryable_status,
    wrap_transport_exception,
)

DEFAULT_TIMEOUT = 30.0

QueryParams = Mapping[str, str | int | bool | Sequence[str] | None]


class HttpExecutor:
    """
    Issues logical requests against one base URL.

    Every attempt runs through the composed middleware chain. Retryable
    failures (429, 408, 5xx and connection errors) are retried under the
    backoff policy; any other non-2xx response is handed back untouched by
    ``execute`` and turned into an error by the JSON helpers.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        policy: BackoffPolicy | None = None,
        retrier: Retrier | None = None,
        middlewares: Sequence[Middleware] = (),
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retrier = retrier or Retrier(policy)
        self.middlewares = list(middlewares)
        self._client = client
        self._owns_client = client is None
        self._handler: Handler = compose(self.middlewares, self._send)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close HTTP client if this executor created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _send(self, request: httpx.Request) -> httpx.Response:
        return await self._get_client().send(request)

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    def build_request(
        self,
        method: str,
        path: str = "",
        *,
        params: QueryParams | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        cleaned = _clean_params(params) if params else None
        return self._get_client().build_request(
            method,
            self.url_for(path),
            params=cleaned,
            json=json_body,
            headers=request_headers,
        )

    async def attempt(self, request: httpx.Request) -> httpx.Response:
        """Run a single attempt through the middleware chain."""
        try:
            response = await self._handler(request)
        except AlchemyError:
            raise
        except httpx.HTTPError as exc:
            raise wrap_transport_exception(exc) from exc
        if response.is_success:
            return response
        if is_retryable_status(response.status_code):
            # Drain before the connection goes back to the pool.
            await response.aread()
            await response.aclose()
            raise error_from_response(response)
        return response

    async def execute(self, request: httpx.Request, *, retry: bool = True) -> httpx.Response:
        return await self.retrier.run(lambda: self.attempt(request), retry=retry)

    async def request_json(
        self,
        method: str,
        path: str = "",
        *,
        params: QueryParams | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
        retry: bool = True,
    ) -> Any:
        request = self.build_request(method, path, params=params, json_body=json_body, headers=headers)
        response = await self.execute(request, retry=retry)
        if not response.is_success:
            raise error_from_response(response)
        return decode_json_body(response)

    async def post_json(self, path: str, body: Any, *, retry: bool = True) -> Any:
        return await self.request_json("POST", path, json_body=body, retry=retry)

    async def get_json(self, path: str = "", *, retry: bool = True) -> Any:
        return await self.request_json("GET", path, retry=retry)

    async def get_with_query(self, path: str, query: QueryParams, *, retry: bool = True) -> Any:
        return await self.request_json("GET", path, params=query, retry=retry)


def decode_json_body(response: httpx.Response) -> Any:
    text = response.text
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.debug(f"non-json body with status {response.status_code}: {text[:120]!r}")
        raise DecodeError(f"invalid JSON response: {exc}", body=text) from exc


def _clean_params(params: QueryParams) -> dict[str, Any]:
    """Drop None values and render booleans the way the provider expects."""
    out: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            if value:
                out[key] = [str(v) for v in value]
        else:
            out[key] = str(value)
    return out
