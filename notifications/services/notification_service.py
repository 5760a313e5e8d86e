"""Delivery orchestrator: persists notifications and pushes them to channels.

The notification store is the source of truth. Publishing is a best-effort
nudge; a failed publish is logged and never fails the write. Sessions that
missed messages call :meth:`NotificationService.reconcile` on reconnect.
"""

import threading
from collections.abc import Callable, Mapping
from typing import Any

import structlog
from django.utils import timezone

from notifications.caching import SSECache
from notifications.constants import NOTIFICATION_EVENT
from notifications.dao import AudienceTargeting, NotificationDAO
from notifications.enums import (
    AnnouncementChannel,
    NotificationPriority,
    NotificationType,
    RecipientType,
)
from notifications.exceptions import (
    NotificationError,
    NotificationNotFoundError,
    TenantValidationError,
)
from notifications.models import Notification
from notifications.schemas.notification import (
    NotificationCreate,
    NotificationDetail,
    NotificationFilters,
    NotificationListResponse,
    PaginationQuery,
    UnreadCountResponse,
)
from notifications.schemas.sse import CacheResult, SSEMessage

logger = structlog.get_logger(__name__)

SessionCallback = Callable[[str, str], None]
Session = tuple[list[str], SessionCallback]


class NotificationService:
    """Composes the access layer and the channel cache."""

    def __init__(
        self,
        dao: NotificationDAO | None = None,
        sse_cache: SSECache | None = None,
    ):
        self.dao = dao or NotificationDAO()
        self.sse_cache = sse_cache or SSECache()
        self._sessions: dict[tuple[str, str], list[Session]] = {}
        self._sessions_lock = threading.Lock()

    # Producers

    def create_notification(
        self, data: NotificationCreate | Mapping[str, Any]
    ) -> Notification:
        """Persist one notification, then publish it to its channel."""
        notification = self.dao.create(data)
        logger.info(
            "notification_created",
            nuid=notification.nuid,
            cuid=notification.cuid,
            notification_type=notification.notification_type,
            recipient_type=notification.recipient_type,
        )
        self.deliver(notification)
        return notification

    def create_bulk_notifications(
        self, items: list[NotificationCreate | Mapping[str, Any]]
    ) -> list[Notification]:
        """Persist many notifications in one insert, then publish each one."""
        notifications = self.dao.bulk_create(items)
        for notification in notifications:
            self.deliver(notification)
        return notifications

    def create_system_notification(
        self,
        cuid: str,
        title: str,
        message: str,
        target_users: list[Any] | None = None,
        priority: NotificationPriority | str = NotificationPriority.MEDIUM,
        **extra: Any,
    ) -> list[Notification]:
        """Notify the listed users individually, or the whole tenant at once.

        Args:
            cuid: Tenant to notify
            title: Notification title
            message: Notification body
            target_users: User ids for individual fan-out; an announcement
                is created when omitted
            priority: Notification priority
            **extra: Further notification fields such as ``metadata``
        """
        base = {
            **extra,
            "cuid": cuid,
            "title": title,
            "message": message,
            "type": NotificationType.SYSTEM.value,
            "priority": NotificationPriority(priority).value,
        }
        if target_users:
            return self.create_bulk_notifications(
                [
                    {
                        **base,
                        "recipient_type": RecipientType.INDIVIDUAL.value,
                        "recipient": user_id,
                    }
                    for user_id in target_users
                ]
            )
        return [
            self.create_notification(
                {**base, "recipient_type": RecipientType.ANNOUNCEMENT.value}
            )
        ]

    def channel_for(self, notification: Notification) -> str:
        """Return the channel a stored notification is published on."""
        if notification.recipient_type == RecipientType.INDIVIDUAL.value:
            return self.sse_cache.generate_personal_channel(
                notification.recipient, notification.cuid
            )
        if notification.priority == NotificationPriority.URGENT.value:
            partition = AnnouncementChannel.URGENT
        elif notification.notification_type == NotificationType.SYSTEM.value:
            partition = AnnouncementChannel.SYSTEM
        else:
            partition = AnnouncementChannel.GENERAL
        return self.sse_cache.generate_announcement_channel(
            notification.cuid, partition
        )

    def deliver(self, notification: Notification) -> CacheResult:
        """Publish a stored notification; failures are logged, not raised."""
        channel = self.channel_for(notification)
        message = SSEMessage(
            event=NOTIFICATION_EVENT,
            data=NotificationDetail.from_notification(notification).model_dump(
                mode="json", by_alias=True
            ),
        )
        result = self.sse_cache.publish_to_channel(channel, message)

        if result.success:
            logger.info(
                "notification_delivered",
                nuid=notification.nuid,
                cuid=notification.cuid,
                channel=channel,
                receivers=result.data.get("receivers"),
            )
        else:
            logger.warning(
                "notification_delivery_failed",
                nuid=notification.nuid,
                cuid=notification.cuid,
                channel=channel,
                error=result.error,
            )
        return result

    # Consumers

    def get_notifications(
        self,
        user_id: Any,
        cuid: str,
        filters: NotificationFilters | Mapping[str, Any] | None = None,
        pagination: PaginationQuery | Mapping[str, Any] | None = None,
        targeting: AudienceTargeting | None = None,
    ) -> NotificationListResponse:
        page = self.dao.find_for_user(
            user_id, cuid, filters=filters, pagination=pagination, targeting=targeting
        )
        unread_count = self.dao.get_unread_count(user_id, cuid, targeting=targeting)
        now = timezone.now()
        return NotificationListResponse(
            data=[
                NotificationDetail.from_notification(item, now) for item in page.data
            ],
            total=page.total,
            unread_count=unread_count,
            skip=page.skip,
            limit=page.limit,
            has_more=page.has_more,
        )

    def get_unread_count(
        self, user_id: Any, cuid: str, targeting: AudienceTargeting | None = None
    ) -> UnreadCountResponse:
        return UnreadCountResponse(
            count=self.dao.get_unread_count(user_id, cuid, targeting=targeting),
            by_type=self.dao.get_unread_count_by_type(
                user_id, cuid, targeting=targeting
            ),
        )

    def get_notification(
        self,
        nuid: str,
        user_id: Any,
        cuid: str,
        targeting: AudienceTargeting | None = None,
    ) -> NotificationDetail:
        """Return a notification the user can see.

        Raises:
            NotificationNotFoundError: Missing, deleted, or not visible to the user.
        """
        notification = self._get_visible(nuid, user_id, cuid, targeting)
        return NotificationDetail.from_notification(notification)

    def mark_as_read(
        self,
        nuid: str,
        user_id: Any,
        cuid: str,
        targeting: AudienceTargeting | None = None,
    ) -> NotificationDetail:
        notification = self._get_visible(nuid, user_id, cuid, targeting)
        updated = self.dao.mark_as_read(notification.id)
        if updated is None:
            raise NotificationNotFoundError(nuid, cuid)
        return NotificationDetail.from_notification(updated)

    def mark_all_as_read(
        self, user_id: Any, cuid: str, targeting: AudienceTargeting | None = None
    ) -> dict[str, int]:
        return self.dao.mark_all_as_read_for_user(user_id, cuid, targeting=targeting)

    def delete_notification(
        self,
        nuid: str,
        user_id: Any,
        cuid: str,
        targeting: AudienceTargeting | None = None,
        hard: bool = False,
    ) -> bool:
        """Soft-delete (or with ``hard=True`` remove) a visible notification."""
        self._get_visible(nuid, user_id, cuid, targeting)
        if hard:
            deleted = self.dao.delete_by_nuid(nuid, cuid)
        else:
            deleted = self.dao.soft_delete_by_nuid(nuid, cuid)
        if not deleted:
            raise NotificationNotFoundError(nuid, cuid)

        logger.info("notification_deleted", nuid=nuid, cuid=cuid, hard=hard)
        return True

    # Delivery sessions

    def connect(self, user_id: Any, cuid: str, callback: SessionCallback) -> list[str]:
        """Subscribe a delivery session to its personal and announcement channels.

        Raises:
            TenantValidationError: ``cuid`` has an invalid format.
            NotificationError: The pub/sub subscription failed.
        """
        if not self.sse_cache.config.is_valid_tenant_id(cuid):
            raise TenantValidationError(cuid)

        channels = [
            self.sse_cache.generate_personal_channel(user_id, cuid),
            *self.sse_cache.generate_announcement_channels(cuid),
        ]
        subscribed = self.sse_cache.subscribe_to_channels(channels, cuid, callback)
        if not subscribed.success:
            raise NotificationError(
                f"Failed to subscribe to channels: {subscribed.error}", status_code=503
            )

        self.sse_cache.store_user_channels(user_id, cuid, channels)
        for channel in channels:
            self.sse_cache.add_user_to_channel(channel, user_id, cuid)

        with self._sessions_lock:
            self._sessions.setdefault((str(user_id), cuid), []).append(
                (channels, callback)
            )

        logger.info("delivery_session_connected", cuid=cuid, user_id=str(user_id))
        return channels

    def disconnect(
        self, user_id: Any, cuid: str, callback: SessionCallback | None = None
    ) -> bool:
        """Tear down a user's delivery session.

        With ``callback`` only that session is closed; without it every open
        session of the user is. The subscriber sets and the stored channel list
        are cleared once the user has no session left. When this process holds
        no session for the user, the stored channel list is used and only the
        personal channel is released locally.

        Returns:
            False when no matching session was open.
        """
        key = (str(user_id), cuid)
        with self._sessions_lock:
            sessions = self._sessions.get(key, [])
            if callback is None:
                closing, remaining = sessions, []
            else:
                closing = [s for s in sessions if s[1] == callback]
                remaining = [s for s in sessions if s[1] != callback]
            if remaining:
                self._sessions[key] = remaining
            else:
                self._sessions.pop(key, None)

        if closing:
            for channels, session_callback in closing:
                self.sse_cache.unsubscribe_from_channels(
                    channels, cuid, session_callback
                )
            if remaining:
                logger.info(
                    "delivery_session_closed",
                    cuid=cuid,
                    user_id=str(user_id),
                    open_sessions=len(remaining),
                )
                return True
            channels = closing[0][0]
        elif sessions:
            return False
        else:
            stored = self.sse_cache.get_user_channels(user_id, cuid)
            if not stored.success:
                return False
            channels = stored.data
            personal = self.sse_cache.generate_personal_channel(user_id, cuid)
            if personal in channels:
                self.sse_cache.unsubscribe_from_channels([personal], cuid)

        for channel in channels:
            self.sse_cache.remove_user_from_channel(channel, user_id, cuid)
        self.sse_cache.remove_user_channels(user_id, cuid)

        logger.info("delivery_session_disconnected", cuid=cuid, user_id=str(user_id))
        return True

    def reconcile(
        self,
        user_id: Any,
        cuid: str,
        pagination: PaginationQuery | Mapping[str, Any] | None = None,
        targeting: AudienceTargeting | None = None,
    ) -> dict[str, Any]:
        """Return unread counts and the latest page for a reconnecting session."""
        return {
            "unread": self.get_unread_count(user_id, cuid, targeting=targeting),
            "latest": self.get_notifications(
                user_id, cuid, pagination=pagination, targeting=targeting
            ),
        }

    def _get_visible(
        self,
        nuid: str,
        user_id: Any,
        cuid: str,
        targeting: AudienceTargeting | None,
    ) -> Notification:
        notification = self.dao.find_by_nuid(nuid, cuid)
        if notification is None or not self.dao.is_visible_to(
            notification, user_id, targeting
        ):
            raise NotificationNotFoundError(nuid, cuid)
        return notification
