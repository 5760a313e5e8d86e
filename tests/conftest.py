"""Pytest configuration and shared fixtures."""

import os
from unittest.mock import MagicMock

import django
from django.test import Client

import pytest

# Configure Django settings for tests
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_hub.settings_test")
django.setup()

from notifications.config import NotificationConfig  # noqa: E402


@pytest.fixture
def api_client():
    """Provide Django test client."""
    return Client()


@pytest.fixture
def notification_config():
    """Default configuration, independent of Django settings."""
    return NotificationConfig()


@pytest.fixture
def redis_client():
    """Redis client double; pipelines return a separate mock."""
    client = MagicMock()
    client.pipeline.return_value.execute.return_value = [1, True]
    return client
