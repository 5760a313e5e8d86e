import notifications.lifecycle
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "nuid",
                    models.CharField(
                        default=notifications.lifecycle.generate_nuid,
                        editable=False,
                        help_text="Public notification identifier",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "cuid",
                    models.CharField(
                        db_index=True,
                        help_text="Tenant (client) identifier",
                        max_length=64,
                    ),
                ),
                (
                    "recipient_type",
                    models.CharField(
                        choices=[
                            ("individual", "individual"),
                            ("announcement", "announcement"),
                        ],
                        default="individual",
                        max_length=20,
                    ),
                ),
                (
                    "recipient",
                    models.CharField(
                        blank=True,
                        help_text="User id of the recipient for individual notifications",
                        max_length=64,
                        null=True,
                    ),
                ),
                (
                    "target_roles",
                    models.JSONField(
                        blank=True,
                        help_text="Roles an announcement is narrowed to",
                        null=True,
                    ),
                ),
                (
                    "target_vendor",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                ("title", models.CharField(max_length=200)),
                ("message", models.CharField(max_length=500)),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("announcement", "announcement"),
                            ("maintenance", "maintenance"),
                            ("property", "property"),
                            ("message", "message"),
                            ("comment", "comment"),
                            ("payment", "payment"),
                            ("system", "system"),
                            ("task", "task"),
                            ("user", "user"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[
                            ("low", "low"),
                            ("medium", "medium"),
                            ("high", "high"),
                            ("urgent", "urgent"),
                        ],
                        default="medium",
                        max_length=10,
                    ),
                ),
                (
                    "resource_info",
                    models.JSONField(
                        blank=True,
                        help_text="resource_name, resource_uid, resource_id plus extra keys",
                        null=True,
                    ),
                ),
                ("is_read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                (
                    "action_url",
                    models.CharField(blank=True, max_length=2048, null=True),
                ),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("author", models.CharField(blank=True, max_length=64, null=True)),
                ("expires_at", models.DateTimeField(db_index=True)),
                (
                    "deleted_at",
                    models.DateTimeField(blank=True, db_index=True, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "notifications",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["cuid", "recipient_type", "recipient", "-created_at"],
                        name="notif_recipient_list_idx",
                    ),
                    models.Index(
                        fields=["cuid", "recipient", "is_read"],
                        name="notif_unread_idx",
                    ),
                    models.Index(
                        fields=["cuid", "notification_type", "-created_at"],
                        name="notif_type_idx",
                    ),
                    models.Index(
                        fields=["cuid", "-created_at"], name="notif_tenant_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("recipient_type", "individual"),
                                ("recipient__isnull", False),
                            ),
                            models.Q(
                                ("recipient_type", "announcement"),
                                ("recipient__isnull", True),
                            ),
                            _connector="OR",
                        ),
                        name="notif_recipient_matches_type",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("is_read", True), ("read_at__isnull", False)),
                            models.Q(("is_read", False), ("read_at__isnull", True)),
                            _connector="OR",
                        ),
                        name="notif_read_at_matches_is_read",
                    ),
                ],
            },
        ),
    ]
