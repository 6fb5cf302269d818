"""
Platform RPC

Synchronous JSON-RPC over HTTP for application code running off the UI thread:

1. Requester: builds a JSON POST, sends it through the shared transport and hands the body to a callback
2. Transport: process-wide HTTP client built on a requests Session
3. Headers: application identity headers merged into every request

All outbound calls support OpenTelemetry trace context injection and client metrics.
"""

import logging

from platform_rpc.errors import (
    RpcError,
    RestrictedContextViolation,
    TransportFailure,
    PayloadSerializationError,
)
from platform_rpc.requester import RpcRequester, RpcRequest, RpcResult, RpcStatus

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "RpcRequester",
    "RpcRequest",
    "RpcResult",
    "RpcStatus",
    "RpcError",
    "RestrictedContextViolation",
    "TransportFailure",
    "PayloadSerializationError",
]
