"""Unit tests for RequestIDMiddleware."""

import unittest
import uuid

from django.http import HttpRequest, HttpResponse

from notifications.constants import CLIENT_ID_HEADER, REQUEST_ID_HEADER
from notifications.logging.context import get_request_id, get_tenant_id
from notifications.middleware import RequestIDMiddleware


class TestRequestIDMiddleware(unittest.TestCase):
    """Test cases for RequestIDMiddleware."""

    def setUp(self):
        """Set up test fixtures."""
        self.seen = {}

        def get_response(request):
            self.seen["request_id"] = get_request_id()
            self.seen["cuid"] = get_tenant_id()
            return HttpResponse("OK")

        self.middleware = RequestIDMiddleware(get_response)

    def _create_request(self, headers=None):
        """Helper to create a test request."""
        request = HttpRequest()
        request.method = "GET"
        request.path = "/test/"
        for key, value in (headers or {}).items():
            request.META[f"HTTP_{key.upper().replace('-', '_')}"] = value
        return request

    def test_generates_request_id_when_not_present(self):
        request = self._create_request()

        response = self.middleware(request)

        uuid.UUID(request.request_id)
        self.assertEqual(response[REQUEST_ID_HEADER], request.request_id)
        self.assertEqual(self.seen["request_id"], request.request_id)

    def test_uses_existing_request_id(self):
        existing_id = str(uuid.uuid4())
        request = self._create_request(headers={REQUEST_ID_HEADER: existing_id})

        response = self.middleware(request)

        self.assertEqual(request.request_id, existing_id)
        self.assertEqual(response[REQUEST_ID_HEADER], existing_id)

    def test_records_tenant_from_client_header(self):
        request = self._create_request(headers={CLIENT_ID_HEADER: "tenant01"})

        self.middleware(request)

        self.assertEqual(self.seen["cuid"], "tenant01")

    def test_clears_context_after_request(self):
        request = self._create_request(
            headers={REQUEST_ID_HEADER: "req-1", CLIENT_ID_HEADER: "tenant01"}
        )

        self.middleware(request)

        self.assertIsNone(get_request_id())
        self.assertIsNone(get_tenant_id())

    def test_clears_context_when_view_raises(self):
        def failing_response(request):
            raise RuntimeError("view failed")

        middleware = RequestIDMiddleware(failing_response)

        with self.assertRaises(RuntimeError):
            middleware(self._create_request(headers={REQUEST_ID_HEADER: "req-2"}))

        self.assertIsNone(get_request_id())
