"""Request ID middleware for distributed tracing."""

import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from notifications.constants import CLIENT_ID_HEADER, REQUEST_ID_HEADER
from notifications.logging.context import (
    clear_request_context,
    set_request_id,
    set_tenant_id,
)


class RequestIDMiddleware:
    """Middleware to carry request and tenant ids through a request.

    This middleware:
    - Reuses an incoming X-Request-ID header or generates a new UUID
    - Records the X-Client-ID header as the tenant the request acts for
    - Stores both in thread-local storage so every log line carries them
    - Adds the request ID to the response headers
    - Clears the thread-local storage after the request completes
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_request_id(request_id)
        request.request_id = request_id  # type: ignore[attr-defined]

        cuid = request.headers.get(CLIENT_ID_HEADER)
        if cuid:
            set_tenant_id(cuid)

        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_context()
