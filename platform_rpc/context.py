"""
Execution context capability checks

Blocking network calls must not run on latency-sensitive contexts such as a UI
event loop. Callers mark such a context with ``non_blocking_context`` (bound to
the current thread or async task through a context variable), or pass an
``ExecutionContext`` explicitly at the call site.
"""

import logging
import contextvars
from dataclasses import dataclass
from contextlib import contextmanager
from typing import Iterator, Optional

from platform_rpc.errors import RestrictedContextViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionContext:
    """Named execution context and whether it may block on I/O"""
    name: str
    allows_blocking: bool = True


WORKER_CONTEXT = ExecutionContext("worker", allows_blocking=True)

_current_context = contextvars.ContextVar("current_execution_context", default=None)


def current_context() -> ExecutionContext:
    """Return the context bound to the current thread/task, or the worker context"""
    context = _current_context.get()
    return context if context is not None else WORKER_CONTEXT


@contextmanager
def bind_context(context: ExecutionContext) -> Iterator[ExecutionContext]:
    """Bind ``context`` as the current execution context for the enclosed block"""
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


def non_blocking_context(name: str = "ui"):
    """Mark the enclosed block as a context where blocking calls are forbidden"""
    return bind_context(ExecutionContext(name, allows_blocking=False))


def ensure_blocking_allowed(context: Optional[ExecutionContext] = None,
                            operation: str = "blocking call") -> ExecutionContext:
    """Fail fast if the effective context forbids blocking

    Args:
        context: Explicit context from the call site; the bound context is used when None
        operation: Name of the operation, used in the error message

    Returns:
        ExecutionContext: The context that was checked

    Raises:
        RestrictedContextViolation: The context does not allow blocking
    """
    effective = context if context is not None else current_context()
    if not effective.allows_blocking:
        logger.error(f"{operation}: network on restricted context '{effective.name}'")
        raise RestrictedContextViolation(operation, effective.name)
    return effective
