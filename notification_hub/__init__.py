"""Django project package for the notification hub."""
