"""Component tests for the health probe endpoints.

Requests go through the full Django stack: URL routing, middleware and the
DRF views.
"""

from unittest.mock import MagicMock, patch

from django.db.utils import OperationalError
from django.test import Client, TestCase

import redis

from notifications.services import health_service


class TestHealthEndpoints(TestCase):
    """Component tests for liveness and readiness over HTTP."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = Client()
        self.redis_client = MagicMock()
        self.redis_client.ping.return_value = True
        self._original_redis_client = health_service._redis_client
        health_service._redis_client = self.redis_client
        self._clear_cache()

    def tearDown(self):
        health_service._redis_client = self._original_redis_client
        self._clear_cache()

    def _clear_cache(self):
        health_service._db_health_cache = None
        health_service._db_health_cache_time = 0.0
        health_service._redis_health_cache = None
        health_service._redis_health_cache_time = 0.0

    def test_liveness(self):
        response = self.client.get("/api/v1/notification-hub/health/live")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "alive")
        self.assertIn("service", response.json())

    def test_readiness_when_healthy(self):
        response = self.client.get("/api/v1/notification-hub/health/ready")

        data = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["status"], "ready")
        self.assertTrue(data["ready"])
        self.assertFalse(data["degraded"])
        self.assertTrue(data["dependencies"]["database"]["healthy"])
        self.assertTrue(data["dependencies"]["redis"]["healthy"])

    @patch("notifications.services.health_service.connection.ensure_connection")
    def test_readiness_degraded_when_database_down(self, mock_ensure_connection):
        mock_ensure_connection.side_effect = OperationalError("Connection refused")

        response = self.client.get("/api/v1/notification-hub/health/ready")

        data = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["status"], "degraded")
        self.assertTrue(data["ready"])
        self.assertEqual(data["dependencies"]["database"]["status"], "unhealthy")

    def test_readiness_degraded_when_redis_down(self):
        self.redis_client.ping.side_effect = redis.ConnectionError("refused")

        response = self.client.get("/api/v1/notification-hub/health/ready")

        data = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertTrue(data["degraded"])
        self.assertEqual(data["dependencies"]["redis"]["status"], "error")

    def test_request_id_is_echoed(self):
        response = self.client.get(
            "/api/v1/notification-hub/health/live", HTTP_X_REQUEST_ID="req-123"
        )

        self.assertEqual(response["X-Request-ID"], "req-123")
