"""Tests for NotificationService."""

import json
from unittest.mock import MagicMock

import pytest
import redis

from notifications.caching import SSECache
from notifications.dao import AudienceTargeting, NotificationDAO
from notifications.exceptions import (
    NotificationError,
    NotificationNotFoundError,
    TenantValidationError,
)
from notifications.models import Notification
from notifications.services import NotificationService
from tests.factories import announcement_data, make_cuid, make_user_id, notification_data


@pytest.mark.django_db
class TestNotificationService:
    """Test suite for NotificationService."""

    @pytest.fixture
    def notification_service(self, redis_client, notification_config):
        """Create NotificationService over the test database and a mock Redis."""
        redis_client.publish.return_value = 1
        return NotificationService(
            dao=NotificationDAO(config=notification_config),
            sse_cache=SSECache(client=redis_client, config=notification_config),
        )

    @pytest.fixture
    def tenant(self):
        return make_cuid()

    @pytest.fixture
    def user(self):
        return make_user_id()

    def _published(self, redis_client):
        return [
            (call.args[0], json.loads(call.args[1]))
            for call in redis_client.publish.call_args_list
        ]

    def test_create_notification_publishes_to_personal_channel(
        self, notification_service, redis_client, tenant, user
    ):
        notification = notification_service.create_notification(
            notification_data(cuid=tenant, recipient=user)
        )

        [(channel, payload)] = self._published(redis_client)
        assert channel == f"notifications:{tenant}:user:{user}"
        assert payload["event"] == "notification"
        assert payload["data"]["nuid"] == notification.nuid
        assert payload["data"]["recipientType"] == "individual"
        assert payload["data"]["isRead"] is False

    @pytest.mark.parametrize(
        ("overrides", "partition"),
        [
            ({}, "general"),
            ({"priority": "urgent"}, "urgent"),
            ({"type": "system"}, "system"),
            ({"type": "system", "priority": "urgent"}, "urgent"),
        ],
    )
    def test_announcements_are_routed_by_priority_and_type(
        self, notification_service, redis_client, tenant, overrides, partition
    ):
        notification_service.create_notification(
            announcement_data(cuid=tenant, **overrides)
        )

        [(channel, _)] = self._published(redis_client)
        assert channel == f"announcements:{tenant}:{partition}"

    def test_publish_failure_does_not_fail_the_write(
        self, notification_service, redis_client, tenant
    ):
        redis_client.publish.side_effect = redis.ConnectionError("down")

        notification = notification_service.create_notification(
            notification_data(cuid=tenant)
        )

        assert Notification.objects.filter(nuid=notification.nuid).exists()

    def test_deliver_returns_cache_result(
        self, notification_service, redis_client, tenant
    ):
        notification = notification_service.dao.create(notification_data(cuid=tenant))
        redis_client.publish.side_effect = redis.ConnectionError("down")

        result = notification_service.deliver(notification)

        assert result.success is False

    def test_create_bulk_notifications_publishes_each(
        self, notification_service, redis_client, tenant
    ):
        created = notification_service.create_bulk_notifications(
            [notification_data(cuid=tenant), announcement_data(cuid=tenant)]
        )

        channels = [channel for channel, _ in self._published(redis_client)]
        assert len(created) == 2
        assert channels == [
            f"notifications:{tenant}:user:{created[0].recipient}",
            f"announcements:{tenant}:general",
        ]

    def test_system_notification_for_target_users(
        self, notification_service, tenant
    ):
        users = [make_user_id(), make_user_id()]

        created = notification_service.create_system_notification(
            tenant, "Maintenance", "Water off at noon", target_users=users
        )

        assert [item.recipient for item in created] == users
        assert {item.notification_type for item in created} == {"system"}
        assert {item.recipient_type for item in created} == {"individual"}

    def test_system_notification_for_whole_tenant(
        self, notification_service, redis_client, tenant
    ):
        [created] = notification_service.create_system_notification(
            tenant,
            "Upgrade",
            "Portal offline tonight",
            priority="high",
            metadata={"window": "22:00-23:00"},
        )

        [(channel, _)] = self._published(redis_client)
        assert created.recipient_type == "announcement"
        assert created.priority == "high"
        assert created.metadata == {"window": "22:00-23:00"}
        assert channel == f"announcements:{tenant}:system"

    def test_get_notifications(self, notification_service, tenant, user):
        for _ in range(3):
            notification_service.dao.create(notification_data(cuid=tenant, recipient=user))
        notification_service.dao.create(announcement_data(cuid=tenant))

        response = notification_service.get_notifications(
            user, tenant, pagination={"limit": 2}
        )

        assert response.total == 4
        assert response.unread_count == 4
        assert len(response.data) == 2
        assert response.has_more is True
        assert response.data[0].time_ago == "0 minutes ago"

    def test_get_unread_count(self, notification_service, tenant, user):
        notification_service.dao.create(
            notification_data(cuid=tenant, recipient=user, type="payment")
        )

        response = notification_service.get_unread_count(user, tenant)

        assert response.count == 1
        assert response.by_type["payment"] == 1
        assert response.by_type["task"] == 0

    def test_get_notification_checks_visibility(
        self, notification_service, tenant, user
    ):
        own = notification_service.dao.create(
            notification_data(cuid=tenant, recipient=user)
        )
        other = notification_service.dao.create(notification_data(cuid=tenant))
        managers = notification_service.dao.create(
            announcement_data(cuid=tenant, target_roles=["manager"])
        )

        assert notification_service.get_notification(own.nuid, user, tenant).nuid == own.nuid
        with pytest.raises(NotificationNotFoundError):
            notification_service.get_notification(other.nuid, user, tenant)
        with pytest.raises(NotificationNotFoundError):
            notification_service.get_notification(own.nuid, user, make_cuid())
        with pytest.raises(NotificationNotFoundError):
            notification_service.get_notification(
                managers.nuid, user, tenant, AudienceTargeting(roles=("staff",))
            )

    def test_mark_as_read(self, notification_service, tenant, user):
        own = notification_service.dao.create(
            notification_data(cuid=tenant, recipient=user)
        )

        detail = notification_service.mark_as_read(own.nuid, user, tenant)

        assert detail.is_read is True
        assert detail.read_at is not None

    def test_mark_all_as_read(self, notification_service, tenant, user):
        notification_service.dao.create(notification_data(cuid=tenant, recipient=user))
        notification_service.dao.create(announcement_data(cuid=tenant))

        assert notification_service.mark_all_as_read(user, tenant) == {
            "modified_count": 2
        }

    def test_delete_notification_soft_by_default(
        self, notification_service, tenant, user
    ):
        own = notification_service.dao.create(
            notification_data(cuid=tenant, recipient=user)
        )

        assert notification_service.delete_notification(own.nuid, user, tenant) is True

        assert Notification.objects.get(pk=own.pk).deleted_at is not None
        with pytest.raises(NotificationNotFoundError):
            notification_service.delete_notification(own.nuid, user, tenant)

    def test_delete_notification_hard(self, notification_service, tenant, user):
        own = notification_service.dao.create(
            notification_data(cuid=tenant, recipient=user)
        )

        notification_service.delete_notification(own.nuid, user, tenant, hard=True)

        assert not Notification.objects.filter(pk=own.pk).exists()

    def test_delete_notification_of_other_user(self, notification_service, tenant):
        other = notification_service.dao.create(notification_data(cuid=tenant))

        with pytest.raises(NotificationNotFoundError):
            notification_service.delete_notification(other.nuid, make_user_id(), tenant)

        assert Notification.objects.get(pk=other.pk).deleted_at is None


class TestDeliverySessions:
    """Test suite for connect, disconnect and reconcile."""

    TENANT = "tenant01"

    @pytest.fixture
    def notification_service(self, redis_client, notification_config):
        return NotificationService(
            dao=MagicMock(spec=NotificationDAO),
            sse_cache=SSECache(client=redis_client, config=notification_config),
        )

    def test_connect_subscribes_to_personal_and_announcement_channels(
        self, notification_service, redis_client
    ):
        callback = MagicMock()

        channels = notification_service.connect("u1", self.TENANT, callback)

        assert channels == [
            "notifications:tenant01:user:u1",
            "announcements:tenant01:general",
            "announcements:tenant01:urgent",
            "announcements:tenant01:system",
        ]
        assert notification_service.sse_cache.subscribed_channels == sorted(channels)
        pipe = redis_client.pipeline.return_value
        pipe.hset.assert_called_once()
        assert pipe.sadd.call_count == 4

    def test_connect_rejects_invalid_tenant(self, notification_service, redis_client):
        with pytest.raises(TenantValidationError):
            notification_service.connect("u1", "bad-tenant", MagicMock())

        redis_client.pubsub.assert_not_called()

    def test_connect_reports_subscription_failure(
        self, notification_service, redis_client
    ):
        redis_client.pubsub.side_effect = redis.ConnectionError("down")

        with pytest.raises(NotificationError) as exc_info:
            notification_service.connect("u1", self.TENANT, MagicMock())

        assert exc_info.value.status_code == 503

    def test_disconnect_tears_down_session(self, notification_service, redis_client):
        channels = notification_service.connect("u1", self.TENANT, MagicMock())
        worker = redis_client.pubsub.return_value.run_in_thread.return_value

        assert notification_service.disconnect("u1", self.TENANT) is True

        assert notification_service.sse_cache.subscribed_channels == []
        worker.stop.assert_called_once_with()
        assert redis_client.srem.call_count == len(channels)
        redis_client.delete.assert_called_once_with("sse:user:channels:tenant01:u1")

    def test_disconnect_uses_stored_channels(self, notification_service, redis_client):
        redis_client.hgetall.return_value = {
            "channels": json.dumps(["notifications:tenant01:user:u1"])
        }

        assert notification_service.disconnect("u1", self.TENANT) is True

        redis_client.srem.assert_called_once_with(
            "sse:channel:notifications:tenant01:user:u1:subscribers", "u1:tenant01"
        )

    def test_disconnect_from_stored_channels_keeps_other_users(
        self, notification_service, redis_client
    ):
        other = MagicMock()
        notification_service.connect("u2", self.TENANT, other)
        redis_client.hgetall.return_value = {
            "channels": json.dumps(
                ["notifications:tenant01:user:u1", "announcements:tenant01:general"]
            )
        }

        assert notification_service.disconnect("u1", self.TENANT) is True

        listeners = notification_service.sse_cache._callbacks
        assert listeners["announcements:tenant01:general"] == [other]
        assert listeners["notifications:tenant01:user:u2"] == [other]
        assert redis_client.srem.call_count == 2
        redis_client.delete.assert_called_once_with("sse:user:channels:tenant01:u1")

    def test_disconnect_one_tab_keeps_the_other(
        self, notification_service, redis_client
    ):
        first_tab, second_tab = MagicMock(), MagicMock()
        channels = notification_service.connect("u1", self.TENANT, first_tab)
        notification_service.connect("u1", self.TENANT, second_tab)

        assert notification_service.disconnect("u1", self.TENANT, second_tab) is True

        listeners = notification_service.sse_cache._callbacks
        assert listeners == {channel: [first_tab] for channel in channels}
        redis_client.srem.assert_not_called()
        redis_client.delete.assert_not_called()

        assert notification_service.disconnect("u1", self.TENANT, first_tab) is True

        assert notification_service.sse_cache.subscribed_channels == []
        assert redis_client.srem.call_count == len(channels)
        redis_client.delete.assert_called_once_with("sse:user:channels:tenant01:u1")

    def test_disconnect_without_user_closes_every_tab(self, notification_service):
        notification_service.connect("u1", self.TENANT, MagicMock())
        notification_service.connect("u1", self.TENANT, MagicMock())

        assert notification_service.disconnect("u1", self.TENANT) is True

        assert notification_service.sse_cache.subscribed_channels == []

    def test_disconnect_unknown_callback(self, notification_service, redis_client):
        callback = MagicMock()
        notification_service.connect("u1", self.TENANT, callback)

        assert notification_service.disconnect("u1", self.TENANT, MagicMock()) is False

        assert len(notification_service.sse_cache.subscribed_channels) == 4
        redis_client.delete.assert_not_called()

    def test_disconnect_without_session(self, notification_service, redis_client):
        redis_client.hgetall.return_value = {}

        assert notification_service.disconnect("u1", self.TENANT) is False

    def test_reconcile(self, notification_service):
        dao = notification_service.dao
        dao.get_unread_count.return_value = 2
        dao.get_unread_count_by_type.return_value = {"task": 2}
        dao.find_for_user.return_value = MagicMock(
            data=[], total=0, skip=0, limit=20, has_more=False
        )

        state = notification_service.reconcile("u1", self.TENANT)

        assert state["unread"].count == 2
        assert state["unread"].by_type == {"task": 2}
        assert state["latest"].total == 0
        assert state["latest"].unread_count == 2
