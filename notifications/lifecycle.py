"""Pure helpers for notification identity, expiry and relative age.

These functions carry no persistence state so the defaulting and computed
values of a notification can be exercised without touching the database.
"""

import uuid
from datetime import datetime, timedelta

NUID_LENGTH = 12
DEFAULT_EXPIRY_DAYS = 30


def generate_nuid(length: int = NUID_LENGTH) -> str:
    """Generate a short public notification identifier.

    Args:
        length: Number of hex characters to keep (1-32).

    Returns:
        A lowercase hex string cut from a random UUID.
    """
    length = max(1, min(32, length))
    return uuid.uuid4().hex[:length]


def default_expires_at(now: datetime, days: int = DEFAULT_EXPIRY_DAYS) -> datetime:
    """Return the expiry timestamp applied when a producer supplies none."""
    return now + timedelta(days=days)


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """Return True when the expiry timestamp lies in the past."""
    if expires_at is None:
        return False
    return expires_at < now


def time_ago(created_at: datetime, now: datetime) -> str:
    """Render the age of a notification as a human-relative string.

    Examples: ``"3 days ago"``, ``"1 hour ago"``, ``"0 minutes ago"``.
    """
    elapsed_seconds = max(0, int((now - created_at).total_seconds()))
    hours = elapsed_seconds // 3600
    days = hours // 24

    if days > 0:
        return _pluralize(days, "day")
    if hours > 0:
        return _pluralize(hours, "hour")
    return _pluralize(elapsed_seconds // 60, "minute")


def _pluralize(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"
