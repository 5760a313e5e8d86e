"""Notification model for tenant-scoped, user-facing notifications.

This module defines the persisted notification record. Every row belongs to
exactly one tenant (``cuid``) and is either addressed to one user
(individual) or to the whole tenant (announcement).
"""

from typing import ClassVar

from django.db import models
from django.db.models import Q
from django.utils import timezone

from notifications.enums import NotificationPriority, NotificationType, RecipientType
from notifications.lifecycle import generate_nuid, is_expired, time_ago


class Notification(models.Model):
    """Core notification model.

    Attributes:
        nuid: Immutable short public identifier.
        cuid: Tenant (client) identifier; every query filters on it.
        recipient_type: Individual or announcement addressing.
        recipient: User id, present only for individual notifications.
        target_roles: Optional role narrowing for announcements.
        target_vendor: Optional vendor narrowing for announcements.
        title: Short headline (max 200 characters).
        message: Body text (max 500 characters).
        notification_type: Content type from NotificationType.
        priority: Priority from NotificationPriority.
        resource_info: Link to the entity the notification is about.
        is_read: Whether the notification has been read.
        read_at: When it was first read; set once.
        action_url: Optional deep link.
        metadata: Opaque key-value bag.
        author: Optional originating user id.
        expires_at: Purge eligibility timestamp; always set.
        deleted_at: Soft-delete marker.
        created_at: When the notification was created.
        updated_at: When the notification was last updated.
    """

    nuid = models.CharField(
        max_length=32,
        unique=True,
        default=generate_nuid,
        editable=False,
        help_text="Public notification identifier",
    )
    cuid = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Tenant (client) identifier",
    )
    recipient_type = models.CharField(
        max_length=20,
        choices=[(item.value, item.value) for item in RecipientType],
        default=RecipientType.INDIVIDUAL.value,
    )
    recipient = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="User id of the recipient for individual notifications",
    )
    target_roles = models.JSONField(
        null=True,
        blank=True,
        help_text="Roles an announcement is narrowed to",
    )
    target_vendor = models.CharField(max_length=64, null=True, blank=True)
    title = models.CharField(max_length=200)
    message = models.CharField(max_length=500)
    notification_type = models.CharField(
        max_length=20,
        choices=[(item.value, item.value) for item in NotificationType],
    )
    priority = models.CharField(
        max_length=10,
        choices=[(item.value, item.value) for item in NotificationPriority],
        default=NotificationPriority.MEDIUM.value,
    )
    resource_info = models.JSONField(
        null=True,
        blank=True,
        help_text="resource_name, resource_uid, resource_id plus extra keys",
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    action_url = models.CharField(max_length=2048, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    author = models.CharField(max_length=64, null=True, blank=True)
    expires_at = models.DateTimeField(db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "notifications"
        ordering: ClassVar[list[str]] = ["-created_at", "-id"]
        indexes: ClassVar[list] = [
            models.Index(
                fields=["cuid", "recipient_type", "recipient", "-created_at"],
                name="notif_recipient_list_idx",
            ),
            models.Index(
                fields=["cuid", "recipient", "is_read"],
                name="notif_unread_idx",
            ),
            models.Index(
                fields=["cuid", "notification_type", "-created_at"],
                name="notif_type_idx",
            ),
            models.Index(fields=["cuid", "-created_at"], name="notif_tenant_idx"),
        ]
        constraints: ClassVar[list] = [
            models.CheckConstraint(
                condition=(
                    Q(
                        recipient_type=RecipientType.INDIVIDUAL.value,
                        recipient__isnull=False,
                    )
                    | Q(
                        recipient_type=RecipientType.ANNOUNCEMENT.value,
                        recipient__isnull=True,
                    )
                ),
                name="notif_recipient_matches_type",
            ),
            models.CheckConstraint(
                condition=(
                    Q(is_read=True, read_at__isnull=False)
                    | Q(is_read=False, read_at__isnull=True)
                ),
                name="notif_read_at_matches_is_read",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation of notification."""
        return f"{self.notification_type} notification {self.nuid} for {self.cuid}"

    def __repr__(self) -> str:
        """Return detailed representation of notification."""
        return (
            f"<Notification(nuid={self.nuid}, "
            f"cuid={self.cuid}, "
            f"recipient_type={self.recipient_type}, "
            f"is_read={self.is_read})>"
        )

    @property
    def is_expired(self) -> bool:
        """Whether the notification is past its expiry timestamp."""
        return is_expired(self.expires_at, timezone.now())

    @property
    def time_ago(self) -> str:
        """Human-relative age of the notification."""
        return time_ago(self.created_at, timezone.now())
