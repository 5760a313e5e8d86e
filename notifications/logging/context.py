"""Thread-local context management for request and tenant tracking."""

import threading

_request_context = threading.local()


def set_request_id(request_id: str) -> None:
    """Store the request ID in thread-local storage.

    Args:
        request_id: The unique request identifier to store.
    """
    _request_context.request_id = request_id


def get_request_id() -> str | None:
    """Retrieve the request ID from thread-local storage.

    Returns:
        The current request ID, or None if not set.
    """
    return getattr(_request_context, "request_id", None)


def set_tenant_id(cuid: str) -> None:
    """Store the tenant (client) ID the current request acts for."""
    _request_context.cuid = cuid


def get_tenant_id() -> str | None:
    """Retrieve the tenant ID from thread-local storage, if any."""
    return getattr(_request_context, "cuid", None)


def clear_request_context() -> None:
    """Clear request and tenant IDs from thread-local storage.

    Called after request processing is complete so context does not
    bleed between requests served by the same thread.
    """
    for attribute in ("request_id", "cuid"):
        if hasattr(_request_context, attribute):
            delattr(_request_context, attribute)
