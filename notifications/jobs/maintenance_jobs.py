"""Scheduled maintenance of the notification store.

Two independent sweeps run on the rq-scheduler:

- soft-delete retention: rows whose ``deleted_at`` is older than the
  retention window are removed;
- expiry purge: rows whose ``expires_at`` has passed are removed, whether or
  not they were ever soft-deleted.
"""

import django_rq
import structlog

from notifications.config import get_notification_config
from notifications.constants import CLEANUP_JOB_ID, EXPIRY_PURGE_JOB_ID
from notifications.dao import NotificationDAO

logger = structlog.get_logger(__name__)

QUEUE_NAME = "default"


def cleanup_deleted_notifications_job(
    older_than_days: int | None = None,
) -> dict[str, int]:
    """Hard delete notifications soft-deleted more than ``older_than_days`` ago.

    Executed by RQ workers. Store errors propagate so RQ records the job as
    failed.
    """
    result = NotificationDAO().cleanup(older_than_days)
    logger.info(
        "cleanup_deleted_notifications_job_completed",
        older_than_days=older_than_days,
        deleted_count=result["deleted_count"],
    )
    return result


def purge_expired_notifications_job() -> dict[str, int]:
    """Hard delete notifications past their ``expires_at``."""
    result = NotificationDAO().purge_expired()
    logger.info(
        "purge_expired_notifications_job_completed",
        deleted_count=result["deleted_count"],
    )
    return result


def schedule_maintenance_jobs(scheduler=None) -> list[str]:
    """Register both sweeps as cron jobs, replacing earlier registrations.

    Args:
        scheduler: rq-scheduler instance; the default queue's scheduler
            when omitted

    Returns:
        Ids of the registered jobs
    """
    config = get_notification_config()
    scheduler = scheduler or django_rq.get_scheduler(QUEUE_NAME)
    schedule = {
        CLEANUP_JOB_ID: (cleanup_deleted_notifications_job, config.cleanup_cron),
        EXPIRY_PURGE_JOB_ID: (
            purge_expired_notifications_job,
            config.expiry_purge_cron,
        ),
    }

    for job in scheduler.get_jobs():
        if job.id in schedule:
            scheduler.cancel(job)

    for job_id, (func, cron_string) in schedule.items():
        scheduler.cron(
            cron_string,
            func=func,
            id=job_id,
            queue_name=QUEUE_NAME,
            use_local_timezone=False,
        )
        logger.info(
            "maintenance_job_scheduled",
            job_id=job_id,
            cron=cron_string,
            func=func.__name__,
        )

    return list(schedule)
