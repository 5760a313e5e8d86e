"""Django settings for the notification hub.

Values are read from environment variables with development defaults.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("SECRET_KEY", "django-insecure-notification-hub-dev-key")

DEBUG = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "django_rq",
    "notifications",
]

MIDDLEWARE = [
    "notifications.middleware.RequestIDMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "notification_hub.urls"

WSGI_APPLICATION = "notification_hub.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DATABASE_NAME", "notification_hub"),
        "USER": os.getenv("DATABASE_USER", "postgres"),
        "PASSWORD": os.getenv("DATABASE_PASSWORD", "postgres"),
        "HOST": os.getenv("DATABASE_HOST", "localhost"),
        "PORT": os.getenv("DATABASE_PORT", "5432"),
        "CONN_MAX_AGE": int(os.getenv("DATABASE_CONN_MAX_AGE", "60")),
        "OPTIONS": {"connect_timeout": 5},
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": REDIS_URL,
    }
}

RQ_QUEUES = {
    "default": {
        "URL": REDIS_URL,
        "DEFAULT_TIMEOUT": 300,
    }
}

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "EXCEPTION_HANDLER": "notifications.exceptions.custom_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

NOTIFICATIONS = {
    "default_expiry_days": int(os.getenv("NOTIFICATION_EXPIRY_DAYS", "30")),
    "cleanup_retention_days": int(os.getenv("NOTIFICATION_RETENTION_DAYS", "30")),
    "channel_ttl_seconds": int(os.getenv("SSE_CHANNEL_TTL_SECONDS", "7200")),
    "tenant_id_pattern": os.getenv("TENANT_ID_PATTERN", r"^[A-Za-z0-9]{6,32}$"),
    "redis_url": REDIS_URL,
    "cleanup_cron": os.getenv("NOTIFICATION_CLEANUP_CRON", "0 3 * * *"),
    "expiry_purge_cron": os.getenv("NOTIFICATION_EXPIRY_PURGE_CRON", "30 3 * * *"),
    "default_page_size": 20,
    "max_page_size": 100,
}

# structlog configures the root logger in NotificationsConfig.ready()
LOGGING_CONFIG = None

TEST_MODE = False
