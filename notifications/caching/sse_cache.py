"""Channel naming, pub/sub fan-out and subscriber bookkeeping.

Channel names embed the tenant id, so announcement traffic of one tenant
never reaches subscribers of another. Delivery is fire-and-forget: a
session that is not subscribed when a message is published misses it and
reconciles through the notification store on reconnect.
"""

import json
import threading
import time
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

import redis
import structlog
from pydantic import ValidationError

from notifications.caching.base_cache import BaseCache, cache_operation
from notifications.constants import (
    ANNOUNCEMENT_CHANNEL_FORMAT,
    CHANNEL_SUBSCRIBERS_KEY_FORMAT,
    LISTENER_RETRY_DELAY,
    PERSONAL_CHANNEL_FORMAT,
    PUBSUB_SLEEP_TIME,
    SUBSCRIBER_MEMBER_FORMAT,
    USER_CHANNELS_KEY_FORMAT,
)
from notifications.enums import AnnouncementChannel
from notifications.exceptions import SerializationError
from notifications.schemas.sse import CacheResult, SSEMessage

logger = structlog.get_logger(__name__)

ChannelCallback = Callable[[str, str], None]


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID | Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_message(message: SSEMessage | Mapping[str, Any]) -> str:
    """Encode a channel message as JSON.

    Raises:
        SerializationError: The payload is circular or holds unsupported types.
    """
    try:
        if isinstance(message, SSEMessage):
            payload = message.model_dump(mode="json")
        else:
            payload = dict(message)
        return json.dumps(payload, default=_json_default)
    except (TypeError, ValueError) as exc:
        if "circular" in str(exc).lower():
            raise SerializationError(
                "Failed to serialize message: circular structure detected"
            ) from exc
        raise SerializationError(f"Failed to serialize message: {exc}") from exc


class SSECache(BaseCache):
    """Fan-out of notification events over Redis pub/sub.

    One pub/sub connection and listener thread serve every subscription made
    through an instance. Several callbacks may share a channel; the channel
    is unsubscribed once its last callback is removed and the listener stops
    once no channel remains.
    """

    def __init__(self, client=None, config=None, cache_name="SSECache"):
        super().__init__(client=client, config=config, cache_name=cache_name)
        self._lock = threading.RLock()
        self._pubsub: redis.client.PubSub | None = None
        self._worker: redis.client.PubSubWorkerThread | None = None
        self._callbacks: dict[str, list[ChannelCallback]] = {}

    # Channel naming

    @staticmethod
    def generate_personal_channel(user_id: Any, cuid: str) -> str:
        return PERSONAL_CHANNEL_FORMAT.format(cuid=cuid, user_id=user_id)

    @staticmethod
    def generate_announcement_channels(cuid: str) -> list[str]:
        """Return the general, urgent and system announcement channels."""
        return [
            ANNOUNCEMENT_CHANNEL_FORMAT.format(cuid=cuid, partition=partition.value)
            for partition in AnnouncementChannel
        ]

    @staticmethod
    def generate_announcement_channel(cuid: str, partition: AnnouncementChannel) -> str:
        return ANNOUNCEMENT_CHANNEL_FORMAT.format(
            cuid=cuid, partition=AnnouncementChannel(partition).value
        )

    @property
    def subscribed_channels(self) -> list[str]:
        with self._lock:
            return sorted(self._callbacks)

    # User channel lists

    @cache_operation("store_user_channels")
    def store_user_channels(
        self, user_id: Any, cuid: str, channels: list[str]
    ) -> CacheResult:
        """Remember the channels of a delivery session for a sliding TTL."""
        self.ensure_valid_tenant(cuid)
        if not user_id or not channels:
            return CacheResult.fail("User ID and channels are required")

        key = USER_CHANNELS_KEY_FORMAT.format(cuid=cuid, user_id=user_id)
        result = self.set_hash(
            key,
            {
                "channels": json.dumps(list(channels)),
                "user_id": str(user_id),
                "cuid": cuid,
                "timestamp": datetime.now(UTC).isoformat(),
            },
            ttl=self.config.channel_ttl_seconds,
        )
        if not result.success:
            return CacheResult.fail("Failed to store user channels")

        logger.debug(
            "user_channels_stored", cuid=cuid, user_id=str(user_id), channels=channels
        )
        return CacheResult.ok(
            {"user_id": str(user_id), "cuid": cuid, "channels": list(channels)}
        )

    @cache_operation("get_user_channels")
    def get_user_channels(self, user_id: Any, cuid: str) -> CacheResult:
        """Return the stored channel list and push its expiry forward."""
        self.ensure_valid_tenant(cuid)
        if not user_id:
            return CacheResult.fail("User ID is required")

        key = USER_CHANNELS_KEY_FORMAT.format(cuid=cuid, user_id=user_id)
        result = self.get_hash(key, refresh_ttl=self.config.channel_ttl_seconds)
        if not result.success:
            return CacheResult.fail("User channels not found")

        return CacheResult.ok(json.loads(result.data.get("channels") or "[]"))

    @cache_operation("remove_user_channels")
    def remove_user_channels(self, user_id: Any, cuid: str) -> CacheResult:
        self.ensure_valid_tenant(cuid)
        if not user_id:
            return CacheResult.fail("User ID is required")

        key = USER_CHANNELS_KEY_FORMAT.format(cuid=cuid, user_id=user_id)
        result = self.delete_keys(key)
        if not result.success:
            return CacheResult.fail("Failed to remove user channels")

        logger.debug("user_channels_removed", cuid=cuid, user_id=str(user_id))
        return CacheResult.ok({"user_id": str(user_id), "cuid": cuid})

    # Channel subscriber sets

    @cache_operation("add_user_to_channel")
    def add_user_to_channel(self, channel: str, user_id: Any, cuid: str) -> CacheResult:
        self.ensure_valid_tenant(cuid)
        if not channel or not user_id:
            return CacheResult.fail("Channel and user ID are required")

        member = SUBSCRIBER_MEMBER_FORMAT.format(user_id=user_id, cuid=cuid)
        result = self.add_to_set(
            CHANNEL_SUBSCRIBERS_KEY_FORMAT.format(channel=channel),
            member,
            ttl=self.config.channel_ttl_seconds,
        )
        if not result.success:
            return CacheResult.fail("Failed to add user to channel")
        return CacheResult.ok({"channel": channel, "member": member})

    @cache_operation("remove_user_from_channel")
    def remove_user_from_channel(
        self, channel: str, user_id: Any, cuid: str
    ) -> CacheResult:
        self.ensure_valid_tenant(cuid)
        if not channel or not user_id:
            return CacheResult.fail("Channel and user ID are required")

        member = SUBSCRIBER_MEMBER_FORMAT.format(user_id=user_id, cuid=cuid)
        result = self.remove_from_set(
            CHANNEL_SUBSCRIBERS_KEY_FORMAT.format(channel=channel), member
        )
        if not result.success:
            return CacheResult.fail("Failed to remove user from channel")
        return CacheResult.ok({"channel": channel, "member": member, **result.data})

    @cache_operation("get_users_for_channel")
    def get_users_for_channel(self, channel: str) -> CacheResult:
        """Return the ``user_id:cuid`` members subscribed to ``channel``."""
        if not channel:
            return CacheResult.fail("Channel is required")

        result = self.get_set_members(
            CHANNEL_SUBSCRIBERS_KEY_FORMAT.format(channel=channel)
        )
        if not result.success:
            return CacheResult.fail("Failed to get channel subscribers")
        return result

    # Pub/sub

    @cache_operation("publish_to_channel")
    def publish_to_channel(
        self, channel: str, message: SSEMessage | Mapping[str, Any]
    ) -> CacheResult:
        """Publish a message once; subscribers that are not listening miss it.

        A mapping is wrapped in the SSE envelope first, so it needs an ``event``
        and gets a generated ``id`` and ``timestamp`` when it has none.
        """
        if not channel or message is None:
            return CacheResult.fail("Channel and message are required")
        if not isinstance(message, SSEMessage):
            try:
                message = SSEMessage.model_validate(message)
            except ValidationError as exc:
                fields = sorted(
                    {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
                )
                return CacheResult.fail(f"Invalid message: {', '.join(fields)}")

        payload = serialize_message(message)
        result = self.publish(channel, payload)
        if not result.success:
            return result

        message_id = message.id
        logger.debug(
            "channel_message_published",
            channel=channel,
            message_id=message_id,
            receivers=result.data["receivers"],
        )
        return CacheResult.ok(
            {
                "channel": channel,
                "message_id": message_id,
                "receivers": result.data["receivers"],
            }
        )

    @cache_operation("subscribe_to_channels")
    def subscribe_to_channels(
        self, channels: list[str], cuid: str, callback: ChannelCallback
    ) -> CacheResult:
        """Invoke ``callback(channel, payload)`` for every message on ``channels``.

        Callbacks run on the pub/sub listener thread. Every channel must
        belong to the tenant.
        """
        self.ensure_valid_tenant(cuid)
        if not channels:
            return CacheResult.fail("Channels are required")
        if not callable(callback):
            return CacheResult.fail("Callback must be callable")

        invalid = [channel for channel in channels if cuid not in channel.split(":")]
        if invalid:
            return CacheResult.fail(
                f"Invalid channels for client {cuid}: {', '.join(invalid)}"
            )

        with self._lock:
            if self._pubsub is None:
                self._pubsub = self.client.pubsub(ignore_subscribe_messages=True)

            new_channels = [
                channel for channel in channels if channel not in self._callbacks
            ]
            if new_channels:
                self._pubsub.subscribe(
                    **{channel: self._dispatch for channel in new_channels}
                )
            for channel in channels:
                listeners = self._callbacks.setdefault(channel, [])
                if callback not in listeners:
                    listeners.append(callback)

            if self._worker is None:
                self._worker = self._pubsub.run_in_thread(
                    sleep_time=PUBSUB_SLEEP_TIME,
                    daemon=True,
                    exception_handler=self._on_listener_error,
                )

        logger.info("channels_subscribed", cuid=cuid, channels=list(channels))
        return CacheResult.ok({"subscribed_channels": list(channels), "cuid": cuid})

    @cache_operation("unsubscribe_from_channels")
    def unsubscribe_from_channels(
        self,
        channels: list[str],
        cuid: str,
        callback: ChannelCallback | None = None,
    ) -> CacheResult:
        """Remove ``callback`` (or every callback) from ``channels``."""
        self.ensure_valid_tenant(cuid)

        released = []
        with self._lock:
            for channel in channels or []:
                listeners = self._callbacks.get(channel)
                if listeners is None:
                    continue
                if callback is not None and callback in listeners:
                    listeners.remove(callback)
                if callback is None or not listeners:
                    del self._callbacks[channel]
                    released.append(channel)

            if self._pubsub is not None and released:
                self._pubsub.unsubscribe(*released)
            if not self._callbacks:
                self._stop_listener()

        logger.info("channels_unsubscribed", cuid=cuid, channels=list(channels or []))
        return CacheResult.ok(
            {
                "unsubscribed_channels": released,
                "remaining_channels": self.subscribed_channels,
            }
        )

    def close(self) -> None:
        """Drop every subscription and stop the listener thread."""
        with self._lock:
            self._callbacks.clear()
            self._stop_listener()

    def _stop_listener(self) -> None:
        if self._worker is not None:
            self._worker.stop()
            self._worker = None
        if self._pubsub is not None:
            self._pubsub.close()
            self._pubsub = None

    def _dispatch(self, message: dict[str, Any]) -> None:
        channel = message.get("channel")
        with self._lock:
            listeners = list(self._callbacks.get(channel, ()))
        for listener in listeners:
            try:
                listener(channel, message.get("data"))
            except Exception:
                logger.exception("channel_callback_failed", channel=channel)

    def _on_listener_error(self, exc: Exception, pubsub: Any, thread: Any) -> None:
        # redis-py reconnects and resubscribes on the next read
        logger.error(
            "pubsub_listener_failed",
            error=str(exc),
            error_type=type(exc).__name__,
            channels=self.subscribed_channels,
        )
        time.sleep(LISTENER_RETRY_DELAY)
