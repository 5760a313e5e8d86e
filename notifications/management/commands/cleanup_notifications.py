"""Run or schedule notification maintenance sweeps."""

from django.core.management.base import BaseCommand, CommandError

from notifications.exceptions import StoreError
from notifications.jobs import (
    cleanup_deleted_notifications_job,
    purge_expired_notifications_job,
    schedule_maintenance_jobs,
)


class Command(BaseCommand):
    """Remove old soft-deleted notifications, expired ones, or schedule both."""

    help = "Delete notifications soft-deleted before the retention window"

    def add_arguments(self, parser):
        parser.add_argument(
            "--older-than-days",
            type=int,
            default=None,
            help="Retention window in days (default: NOTIFICATIONS setting)",
        )
        parser.add_argument(
            "--purge-expired",
            action="store_true",
            help="Also delete notifications past their expiry timestamp",
        )
        parser.add_argument(
            "--schedule",
            action="store_true",
            help="Register the maintenance cron jobs instead of running them",
        )

    def handle(self, *args, **options):
        if options["schedule"]:
            job_ids = schedule_maintenance_jobs()
            self.stdout.write(
                self.style.SUCCESS(f"Scheduled jobs: {', '.join(job_ids)}")
            )
            return

        older_than_days = options["older_than_days"]
        if older_than_days is not None and older_than_days < 0:
            raise CommandError("--older-than-days must not be negative")

        try:
            cleaned = cleanup_deleted_notifications_job(older_than_days)
            self.stdout.write(
                self.style.SUCCESS(
                    f"Deleted {cleaned['deleted_count']} soft-deleted notifications"
                )
            )
            if options["purge_expired"]:
                purged = purge_expired_notifications_job()
                self.stdout.write(
                    self.style.SUCCESS(
                        f"Deleted {purged['deleted_count']} expired notifications"
                    )
                )
        except StoreError as exc:
            raise CommandError(str(exc)) from exc
