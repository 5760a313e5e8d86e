"""Constants used throughout the notifications app."""

# HTTP Headers
REQUEST_ID_HEADER = "X-Request-ID"
CLIENT_ID_HEADER = "X-Client-ID"

# Channel and cache key formats
PERSONAL_CHANNEL_FORMAT = "notifications:{cuid}:user:{user_id}"
ANNOUNCEMENT_CHANNEL_FORMAT = "announcements:{cuid}:{partition}"
USER_CHANNELS_KEY_FORMAT = "sse:user:channels:{cuid}:{user_id}"
CHANNEL_SUBSCRIBERS_KEY_FORMAT = "sse:channel:{channel}:subscribers"
SUBSCRIBER_MEMBER_FORMAT = "{user_id}:{cuid}"

# Event name pushed with every new notification
NOTIFICATION_EVENT = "notification"

# Seconds the pub/sub listener thread blocks waiting for a message
PUBSUB_SLEEP_TIME = 0.1

# Seconds the listener waits after a connection error before reading again
LISTENER_RETRY_DELAY = 1.0

# Seconds a readiness result is reused
HEALTH_CACHE_SECONDS = 5

# Scheduler job ids
CLEANUP_JOB_ID = "notifications-cleanup-deleted"
EXPIRY_PURGE_JOB_ID = "notifications-purge-expired"
