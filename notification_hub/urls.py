"""URL configuration for the notification hub."""

from django.urls import include, path

urlpatterns = [
    path("api/v1/notification-hub/", include("notifications.urls")),
]
