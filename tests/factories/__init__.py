"""Builders for notification test data."""

from uuid import uuid4

from faker import Faker

fake = Faker()


def make_cuid() -> str:
    """Tenant id in the accepted alphanumeric format."""
    return uuid4().hex[:12]


def make_user_id() -> str:
    return uuid4().hex[:16]


def notification_data(**overrides) -> dict:
    """Payload for an individual notification; keys may be overridden."""
    data = {
        "cuid": make_cuid(),
        "title": fake.sentence(nb_words=6)[:200],
        "message": fake.text(max_nb_chars=200),
        "type": "maintenance",
        "recipient_type": "individual",
        "recipient": make_user_id(),
        "priority": "medium",
        "metadata": {"source": fake.word()},
    }
    data.update(overrides)
    return data


def announcement_data(**overrides) -> dict:
    """Payload for a tenant-wide announcement."""
    data = notification_data(
        type="announcement", recipient_type="announcement", recipient=None
    )
    data.update(overrides)
    return data
