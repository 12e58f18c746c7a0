"""
Correlation ID Middleware
Request tracing for stdlib and structlog log entries
"""

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id

__all__ = ["CorrelationIdMiddleware", "get_correlation_id", "bind_correlation_id"]


def get_correlation_id() -> str:
    """
    Get current correlation ID from async context.

    Returns:
        str: The correlation ID or 'none' if not available
    """
    return correlation_id.get() or 'none'


async def bind_correlation_id(request, call_next):
    """
    HTTP middleware binding the request correlation ID into structlog's
    context so every event logged while serving the request carries it.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=get_correlation_id())
    try:
        return await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()
