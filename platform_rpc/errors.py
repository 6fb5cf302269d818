"""
Error types raised by the RPC requester and its collaborators.
"""
from typing import Optional


class RpcError(Exception):
    """Base class for all platform RPC errors."""


class RestrictedContextViolation(RpcError, RuntimeError):
    """Raised when a blocking call is made from a context that forbids blocking.

    This is a programmer error and is never converted into a result.
    """

    def __init__(self, operation: str, context_name: str):
        self.operation = operation
        self.context_name = context_name
        super().__init__(f"{operation}: blocking network call on restricted context '{context_name}'")


class TransportFailure(RpcError, ConnectionError):
    """Raised by a transport when a request could not complete."""

    def __init__(self, message: str, url: Optional[str] = None, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(message)


class PayloadSerializationError(RpcError, ValueError):
    """Raised when a payload cannot be encoded as JSON."""
