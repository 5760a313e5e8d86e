"""Notification access layer.

Every read is scoped to a tenant (``cuid``) and to what the requesting user
may see: their own individual notifications plus the tenant's announcements.
Store failures are re-raised as :class:`StoreError`; absence is reported as
``None`` / ``False`` and never raised here.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

import structlog
from django.db import DatabaseError
from django.db.models import Q
from django.utils import timezone
from pydantic import ValidationError

from notifications.config import NotificationConfig, get_notification_config
from notifications.enums import NotificationType, RecipientType
from notifications.exceptions import NotificationValidationError, StoreError
from notifications.lifecycle import default_expires_at
from notifications.models import Notification
from notifications.repositories import NotificationStore, QuerySpec
from notifications.schemas.notification import (
    NotificationCreate,
    NotificationFilters,
    NotificationUpdate,
    PaginationQuery,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AudienceTargeting:
    """Roles and vendor of the requesting user.

    When passed to a read, announcements narrowed with ``target_roles`` or
    ``target_vendor`` are only visible to matching users. Untargeted
    announcements stay visible to everyone in the tenant.
    """

    roles: tuple[str, ...] = ()
    vendor_id: str | None = None


@dataclass
class NotificationPage:
    """One page of a user's notifications plus the unpaged total."""

    data: list[Notification]
    total: int
    skip: int = 0
    limit: int = 20

    @property
    def has_more(self) -> bool:
        return self.skip + len(self.data) < self.total


def _validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return exc.errors(include_url=False, include_context=False, include_input=False)


class NotificationDAO:
    """Typed query and command operations over the notification store."""

    def __init__(
        self,
        store: NotificationStore | None = None,
        config: NotificationConfig | None = None,
    ):
        self.store = store or NotificationStore()
        self.config = config or get_notification_config()

    # Writes

    def create(self, data: NotificationCreate | Mapping[str, Any]) -> Notification:
        """Validate and insert one notification.

        Raises:
            NotificationValidationError: Required fields are missing or malformed.
            StoreError: The insert failed.
        """
        validated = self._validate(data)
        values = self._prepare_record(validated, timezone.now())

        with self._store_operation("create"):
            notification = self.store.insert(values)

        logger.debug(
            "notification_created",
            nuid=notification.nuid,
            cuid=notification.cuid,
            recipient_type=notification.recipient_type,
        )
        return notification

    def bulk_create(
        self, notifications: list[NotificationCreate | Mapping[str, Any]]
    ) -> list[Notification]:
        """Validate every document, then insert all of them in one statement.

        Nothing is inserted when any document fails validation; the raised
        error lists the failing positions.
        """
        if not notifications:
            return []

        validated = []
        failures = []
        for index, item in enumerate(notifications):
            try:
                validated.append(self._validate(item))
            except NotificationValidationError as exc:
                failures.append({"index": index, "errors": exc.errors})

        if failures:
            indexes = ", ".join(str(failure["index"]) for failure in failures)
            raise NotificationValidationError(
                f"Invalid notifications at indexes: {indexes}", errors=failures
            )

        now = timezone.now()
        rows = [self._prepare_record(item, now) for item in validated]

        with self._store_operation("bulk_create"):
            created = self.store.insert_many(rows)

        logger.info(
            "notifications_bulk_created",
            count=len(created),
            tenants=sorted({row["cuid"] for row in rows}),
        )
        return created

    def mark_as_read(self, notification_id: int) -> Notification | None:
        """Mark a notification read; a second call leaves ``read_at`` untouched."""
        now = timezone.now()
        with self._store_operation("mark_as_read"):
            self.store.update_many(
                Q(id=notification_id, is_read=False, deleted_at__isnull=True),
                {"is_read": True, "read_at": now, "updated_at": now},
            )
            return self.store.find_one(Q(id=notification_id, deleted_at__isnull=True))

    def mark_all_as_read_for_user(
        self,
        user_id: Any,
        cuid: str,
        targeting: AudienceTargeting | None = None,
    ) -> dict[str, int]:
        """Mark every unread notification the user can see as read."""
        now = timezone.now()
        with self._store_operation("mark_all_as_read_for_user"):
            modified = self.store.update_many(
                self._visible_to(user_id, cuid, targeting) & Q(is_read=False),
                {"is_read": True, "read_at": now, "updated_at": now},
            )

        logger.info(
            "notifications_marked_read",
            cuid=cuid,
            user_id=str(user_id),
            modified_count=modified,
        )
        return {"modified_count": modified}

    def update_by_id(
        self, notification_id: int, updates: NotificationUpdate | Mapping[str, Any]
    ) -> Notification | None:
        """Update the mutable fields of a notification.

        ``is_read=True`` goes through the same conditional transition as
        :meth:`mark_as_read`. Read notifications cannot be marked unread.
        """
        try:
            changes = (
                updates
                if isinstance(updates, NotificationUpdate)
                else NotificationUpdate.model_validate(updates)
            )
        except ValidationError as exc:
            raise NotificationValidationError(
                "Invalid notification update", errors=_validation_errors(exc)
            ) from exc

        if changes.is_read is False:
            raise NotificationValidationError(
                "Read notifications cannot be marked unread"
            )

        values = changes.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"is_read"}
        )
        if values:
            values["updated_at"] = timezone.now()
            with self._store_operation("update_by_id"):
                self.store.update_many(
                    Q(id=notification_id, deleted_at__isnull=True), values
                )

        if changes.is_read:
            self.mark_as_read(notification_id)

        return self.find_by_id(notification_id)

    def soft_delete_by_nuid(self, nuid: str, cuid: str) -> bool:
        """Hide a notification from reads until cleanup removes it."""
        now = timezone.now()
        with self._store_operation("soft_delete_by_nuid"):
            updated = self.store.update_many(
                Q(nuid=nuid, cuid=cuid, deleted_at__isnull=True),
                {"deleted_at": now, "updated_at": now},
            )
        return updated > 0

    def delete_by_nuid(self, nuid: str, cuid: str) -> bool:
        """Permanently delete a notification of the tenant."""
        with self._store_operation("delete_by_nuid"):
            deleted = self.store.delete_many(Q(nuid=nuid, cuid=cuid))
        return deleted > 0

    def cleanup(self, older_than_days: int | None = None) -> dict[str, int]:
        """Hard delete notifications soft-deleted more than N days ago.

        Runs across all tenants; it is a maintenance sweep, not a request path.
        """
        if older_than_days is None:
            older_than_days = self.config.cleanup_retention_days
        cutoff = timezone.now() - timedelta(days=older_than_days)

        with self._store_operation("cleanup"):
            deleted = self.store.delete_many(
                Q(deleted_at__isnull=False, deleted_at__lt=cutoff)
            )

        logger.info(
            "notifications_cleanup_completed",
            older_than_days=older_than_days,
            deleted_count=deleted,
        )
        return {"deleted_count": deleted}

    def purge_expired(self, now: datetime | None = None) -> dict[str, int]:
        """Hard delete notifications whose ``expires_at`` has passed."""
        now = now or timezone.now()
        with self._store_operation("purge_expired"):
            deleted = self.store.delete_many(Q(expires_at__lt=now))

        logger.info("notifications_expired_purged", deleted_count=deleted)
        return {"deleted_count": deleted}

    # Reads

    def find_for_user(
        self,
        user_id: Any,
        cuid: str,
        filters: NotificationFilters | Mapping[str, Any] | None = None,
        pagination: PaginationQuery | Mapping[str, Any] | None = None,
        targeting: AudienceTargeting | None = None,
    ) -> NotificationPage:
        """Return one page of the notifications visible to a user."""
        condition = self._visible_to(user_id, cuid, targeting) & self._filter_q(filters)
        page = self._pagination(pagination)
        limit = min(page.limit, self.config.max_page_size)

        spec = QuerySpec(
            filter=condition,
            sort=self._sort_keys(page.sort_by),
            skip=page.offset,
            limit=limit,
        )
        with self._store_operation("find_for_user"):
            data = self.store.query(spec)
            total = self.store.count(condition)

        return NotificationPage(data=data, total=total, skip=page.offset, limit=limit)

    def get_unread_count(
        self,
        user_id: Any,
        cuid: str,
        filters: NotificationFilters | Mapping[str, Any] | None = None,
        targeting: AudienceTargeting | None = None,
    ) -> int:
        condition = (
            self._visible_to(user_id, cuid, targeting)
            & self._filter_q(filters)
            & Q(is_read=False)
        )
        with self._store_operation("get_unread_count"):
            return self.store.count(condition)

    def get_unread_count_by_type(
        self,
        user_id: Any,
        cuid: str,
        targeting: AudienceTargeting | None = None,
    ) -> dict[str, int]:
        """Unread counts for every notification type, zero when none."""
        condition = self._visible_to(user_id, cuid, targeting) & Q(is_read=False)
        with self._store_operation("get_unread_count_by_type"):
            counts = self.store.count_by("notification_type", condition)
        return {item.value: counts.get(item.value, 0) for item in NotificationType}

    def find_by_resource(
        self, resource_name: str, resource_id: Any, cuid: str
    ) -> list[Notification]:
        condition = Q(
            cuid=cuid,
            deleted_at__isnull=True,
            resource_info__resource_name=_plain(resource_name),
            resource_info__resource_id=_plain(resource_id),
        )
        with self._store_operation("find_by_resource"):
            return self.store.query(QuerySpec(filter=condition))

    def find_by_nuid(self, nuid: str, cuid: str) -> Notification | None:
        with self._store_operation("find_by_nuid"):
            return self.store.find_one(
                Q(nuid=nuid, cuid=cuid, deleted_at__isnull=True)
            )

    def find_by_id(self, notification_id: int) -> Notification | None:
        with self._store_operation("find_by_id"):
            return self.store.find_one(Q(id=notification_id, deleted_at__isnull=True))

    # Helpers

    def is_visible_to(
        self,
        notification: Notification,
        user_id: Any,
        targeting: AudienceTargeting | None = None,
    ) -> bool:
        """Apply the visibility rule to an already loaded notification."""
        if notification.recipient_type == RecipientType.INDIVIDUAL.value:
            return notification.recipient == str(user_id)
        if targeting is None:
            return True
        if not notification.target_roles and not notification.target_vendor:
            return True
        roles = {role.lower() for role in targeting.roles}
        if any(role.lower() in roles for role in notification.target_roles or []):
            return True
        return (
            bool(targeting.vendor_id)
            and notification.target_vendor == targeting.vendor_id
        )

    def _visible_to(
        self, user_id: Any, cuid: str, targeting: AudienceTargeting | None
    ) -> Q:
        individual = Q(
            recipient_type=RecipientType.INDIVIDUAL.value, recipient=str(user_id)
        )
        announcement = Q(recipient_type=RecipientType.ANNOUNCEMENT.value)

        if targeting is not None:
            audience = Q(target_roles__isnull=True, target_vendor__isnull=True)
            for role in targeting.roles:
                # Matches the JSON-encoded list element, quotes included
                audience |= Q(target_roles__icontains=f'"{role}"')
            if targeting.vendor_id:
                audience |= Q(target_vendor=targeting.vendor_id)
            announcement &= audience

        return Q(cuid=cuid, deleted_at__isnull=True) & (individual | announcement)

    def _filter_q(
        self, filters: NotificationFilters | Mapping[str, Any] | None
    ) -> Q:
        if filters is None:
            return Q()
        if not isinstance(filters, NotificationFilters):
            try:
                filters = NotificationFilters.model_validate(filters)
            except ValidationError as exc:
                raise NotificationValidationError(
                    "Invalid notification filters", errors=_validation_errors(exc)
                ) from exc

        condition = Q()
        if filters.notification_type is not None:
            condition &= _match_any("notification_type", filters.notification_type)
        if filters.priority is not None:
            condition &= _match_any("priority", filters.priority)
        if filters.is_read is not None:
            condition &= Q(is_read=filters.is_read)
        if filters.resource_name is not None:
            condition &= Q(resource_info__resource_name=filters.resource_name)
        if filters.resource_id is not None:
            condition &= Q(resource_info__resource_id=filters.resource_id)
        if filters.date_from is not None:
            condition &= Q(created_at__gte=filters.date_from)
        if filters.date_to is not None:
            condition &= Q(created_at__lte=filters.date_to)
        return condition

    def _pagination(
        self, pagination: PaginationQuery | Mapping[str, Any] | None
    ) -> PaginationQuery:
        try:
            if pagination is None:
                return PaginationQuery(limit=self.config.default_page_size)
            if isinstance(pagination, PaginationQuery):
                if "limit" in pagination.model_fields_set:
                    return pagination
                return pagination.model_copy(
                    update={"limit": self.config.default_page_size}
                )
            return PaginationQuery.model_validate(
                {"limit": self.config.default_page_size, **pagination}
            )
        except ValidationError as exc:
            raise NotificationValidationError(
                "Invalid pagination", errors=_validation_errors(exc)
            ) from exc

    @staticmethod
    def _sort_keys(sort_by: str) -> tuple[str, ...]:
        tiebreaker = "-id" if sort_by.startswith("-") else "id"
        return (sort_by, tiebreaker)

    def _validate(
        self, data: NotificationCreate | Mapping[str, Any]
    ) -> NotificationCreate:
        if isinstance(data, NotificationCreate):
            return data
        try:
            return NotificationCreate.model_validate(data)
        except ValidationError as exc:
            raise NotificationValidationError(
                "Invalid notification data", errors=_validation_errors(exc)
            ) from exc

    def _prepare_record(
        self, notification: NotificationCreate, now: datetime
    ) -> dict[str, Any]:
        record = notification.to_record()
        if record.get("expires_at") is None:
            record["expires_at"] = default_expires_at(
                now, self.config.default_expiry_days
            )
        return record

    @contextmanager
    def _store_operation(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DatabaseError as err:
            logger.error(
                "notification_store_operation_failed",
                operation=operation,
                error=str(err),
                error_type=type(err).__name__,
            )
            raise StoreError(operation, str(err)) from err


def _match_any(field_name: str, value: Any) -> Q:
    if isinstance(value, list):
        return Q(**{f"{field_name}__in": [_plain(item) for item in value]})
    return Q(**{field_name: _plain(value)})


def _plain(value: Any) -> str:
    if isinstance(value, Enum):
        return value.value
    return str(value)
