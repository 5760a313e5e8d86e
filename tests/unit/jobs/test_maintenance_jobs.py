"""Tests for notification maintenance jobs."""

from datetime import timedelta
from unittest.mock import Mock, patch

from django.test import TestCase
from django.utils import timezone

from notifications.constants import CLEANUP_JOB_ID, EXPIRY_PURGE_JOB_ID
from notifications.dao import NotificationDAO
from notifications.jobs import (
    cleanup_deleted_notifications_job,
    purge_expired_notifications_job,
    schedule_maintenance_jobs,
)
from notifications.models import Notification
from tests.factories import notification_data


class TestMaintenanceJobs(TestCase):
    """Test suite for the cleanup and expiry purge jobs."""

    def setUp(self):
        """Set up test fixtures."""
        dao = NotificationDAO()
        self.old_deleted = dao.create(notification_data())
        self.recent_deleted = dao.create(notification_data())
        self.expired = dao.create(
            notification_data(expires_at=timezone.now() - timedelta(hours=1))
        )
        self.live = dao.create(notification_data())

        now = timezone.now()
        Notification.objects.filter(pk=self.old_deleted.pk).update(
            deleted_at=now - timedelta(days=31)
        )
        Notification.objects.filter(pk=self.recent_deleted.pk).update(
            deleted_at=now - timedelta(days=29)
        )

    def test_cleanup_job(self):
        result = cleanup_deleted_notifications_job(30)

        self.assertEqual(result, {"deleted_count": 1})
        self.assertFalse(Notification.objects.filter(pk=self.old_deleted.pk).exists())
        self.assertTrue(Notification.objects.filter(pk=self.recent_deleted.pk).exists())

    def test_cleanup_job_with_configured_retention(self):
        with self.settings(NOTIFICATIONS={"cleanup_retention_days": 7}):
            result = cleanup_deleted_notifications_job()

        self.assertEqual(result, {"deleted_count": 2})

    def test_purge_expired_job(self):
        result = purge_expired_notifications_job()

        self.assertEqual(result, {"deleted_count": 1})
        self.assertFalse(Notification.objects.filter(pk=self.expired.pk).exists())
        self.assertTrue(Notification.objects.filter(pk=self.live.pk).exists())


class TestScheduleMaintenanceJobs(TestCase):
    """Test suite for registering the maintenance cron jobs."""

    def setUp(self):
        """Set up test fixtures."""
        self.scheduler = Mock()
        self.stale = Mock(id=CLEANUP_JOB_ID)
        self.unrelated = Mock(id="some-other-job")
        self.scheduler.get_jobs.return_value = [self.stale, self.unrelated]

    def test_registers_both_sweeps(self):
        job_ids = schedule_maintenance_jobs(self.scheduler)

        self.assertEqual(job_ids, [CLEANUP_JOB_ID, EXPIRY_PURGE_JOB_ID])
        calls = self.scheduler.cron.call_args_list
        self.assertEqual(calls[0].args, ("0 3 * * *",))
        self.assertIs(calls[0].kwargs["func"], cleanup_deleted_notifications_job)
        self.assertEqual(calls[0].kwargs["id"], CLEANUP_JOB_ID)
        self.assertEqual(calls[1].args, ("30 3 * * *",))
        self.assertIs(calls[1].kwargs["func"], purge_expired_notifications_job)
        self.assertEqual(calls[1].kwargs["queue_name"], "default")

    def test_replaces_earlier_registrations(self):
        schedule_maintenance_jobs(self.scheduler)

        self.scheduler.cancel.assert_called_once_with(self.stale)

    def test_uses_configured_cron(self):
        with self.settings(NOTIFICATIONS={"cleanup_cron": "15 1 * * *"}):
            schedule_maintenance_jobs(self.scheduler)

        self.assertEqual(self.scheduler.cron.call_args_list[0].args, ("15 1 * * *",))

    @patch("notifications.jobs.maintenance_jobs.django_rq.get_scheduler")
    def test_defaults_to_queue_scheduler(self, mock_get_scheduler):
        mock_get_scheduler.return_value = self.scheduler

        schedule_maintenance_jobs()

        mock_get_scheduler.assert_called_once_with("default")
