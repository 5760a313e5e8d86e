"""Background jobs for notification maintenance."""

from notifications.jobs.maintenance_jobs import (
    cleanup_deleted_notifications_job,
    purge_expired_notifications_job,
    schedule_maintenance_jobs,
)

__all__ = [
    "cleanup_deleted_notifications_job",
    "purge_expired_notifications_job",
    "schedule_maintenance_jobs",
]
