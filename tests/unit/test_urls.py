"""Unit tests for URL configuration."""

from django.test import SimpleTestCase
from django.urls import resolve, reverse

from notifications.views import LivenessCheckView, ReadinessCheckView


class TestHealthURLPatterns(SimpleTestCase):
    """Tests for the health probe routes."""

    def test_liveness_url_resolves(self):
        resolved = resolve("/api/v1/notification-hub/health/live")

        self.assertEqual(resolved.func.cls, LivenessCheckView)
        self.assertEqual(resolved.url_name, "health-live")

    def test_readiness_url_resolves(self):
        resolved = resolve("/api/v1/notification-hub/health/ready")

        self.assertEqual(resolved.func.cls, ReadinessCheckView)

    def test_reverse_lookups(self):
        self.assertEqual(reverse("health-live"), "/api/v1/notification-hub/health/live")
        self.assertEqual(reverse("health-ready"), "/api/v1/notification-hub/health/ready")
