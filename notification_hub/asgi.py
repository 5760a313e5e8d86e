"""ASGI config for the notification hub."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_hub.settings")

application = get_asgi_application()
