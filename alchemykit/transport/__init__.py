"""HTTP transport: middleware, retry/backoff, JSON-RPC codec."""

from alchemykit.transport.backoff import BackoffPolicy, Retrier, compute_delay
from alchemykit.transport.context import CallScope, call_scope, current_scope
from alchemykit.transport.http import HttpExecutor
from alchemykit.transport.jsonrpc import BatchCall, BatchResult, IdCounter, JsonRpcClient
from alchemykit.transport.middleware import (
    ChainMiddleware,
    FunctionMiddleware,
    HeaderMiddleware,
    LoggingMiddleware,
    MetricsMiddleware,
    Middleware,
    UserAgentMiddleware,
    chain,
    compose,
    middleware,
)

__all__ = [
    "BackoffPolicy",
    "Retrier",
    "compute_delay",
    "CallScope",
    "call_scope",
    "current_scope",
    "HttpExecutor",
    "BatchCall",
    "BatchResult",
    "IdCounter",
    "JsonRpcClient",
    "ChainMiddleware",
    "FunctionMiddleware",
    "HeaderMiddleware",
    "LoggingMiddleware",
    "MetricsMiddleware",
    "Middleware",
    "UserAgentMiddleware",
    "chain",
    "compose",
    "middleware",
]
