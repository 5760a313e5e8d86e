"""Logging utilities for the notification hub."""

from notifications.logging.config import setup_logging
from notifications.logging.context import (
    clear_request_context,
    get_request_id,
    get_tenant_id,
    set_request_id,
    set_tenant_id,
)

__all__ = [
    "clear_request_context",
    "get_request_id",
    "get_tenant_id",
    "set_request_id",
    "set_tenant_id",
    "setup_logging",
]
