"""Repository over the notification table.

The access layer describes reads as a :class:`QuerySpec` and writes as
filter/value pairs; the Django queryset API stays inside this module.
"""

from dataclasses import dataclass, field
from typing import Any

from django.db.models import Count, Q

from notifications.models import Notification


@dataclass(frozen=True)
class QuerySpec:
    """Filter, sort and window of a read against the store."""

    filter: Q = field(default_factory=Q)
    sort: tuple[str, ...] = ("-created_at", "-id")
    skip: int = 0
    limit: int | None = None


class NotificationStore:
    """Store handle injected into the notification access layer.

    Wraps a model class so tests and alternate backends can substitute
    another model or a fake with the same methods.
    """

    def __init__(self, model: type[Notification] = Notification):
        self.model = model

    def insert(self, values: dict[str, Any]) -> Notification:
        return self.model.objects.create(**values)

    def insert_many(self, rows: list[dict[str, Any]]) -> list[Notification]:
        """Insert all rows with one multi-row statement."""
        return self.model.objects.bulk_create([self.model(**row) for row in rows])

    def query(self, spec: QuerySpec) -> list[Notification]:
        queryset = self.model.objects.filter(spec.filter).order_by(*spec.sort)
        if spec.limit is None:
            return list(queryset[spec.skip :])
        return list(queryset[spec.skip : spec.skip + spec.limit])

    def find_one(self, filter: Q) -> Notification | None:
        return self.model.objects.filter(filter).first()

    def count(self, filter: Q) -> int:
        return self.model.objects.filter(filter).count()

    def count_by(self, field_name: str, filter: Q) -> dict[Any, int]:
        """Count matching rows grouped by one column in a single aggregation."""
        rows = (
            self.model.objects.filter(filter)
            .order_by()
            .values(field_name)
            .annotate(total=Count("id"))
        )
        return {row[field_name]: row["total"] for row in rows}

    def update_many(self, filter: Q, values: dict[str, Any]) -> int:
        """Apply ``values`` to every matching row; return the number changed."""
        return self.model.objects.filter(filter).update(**values)

    def delete_many(self, filter: Q) -> int:
        """Delete every matching row; return the number removed."""
        deleted, _ = self.model.objects.filter(filter).delete()
        return deleted
