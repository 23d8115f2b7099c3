import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("registration_approved", "Registration Approved"),
                            ("registration_rejected", "Registration Rejected"),
                            ("event_registration", "Event Registration"),
                            ("event_reminder", "Event Reminder"),
                            ("event_updated", "Event Updated"),
                            ("event_cancelled", "Event Cancelled"),
                            ("organizer_application", "Organizer Application"),
                            ("organizer_approved", "Organizer Approved"),
                            ("organizer_rejected", "Organizer Rejected"),
                            ("organizer_member_added", "Organizer Member Added"),
                            ("organizer_member_removed", "Organizer Member Removed"),
                            ("discussion_reply", "Discussion Reply"),
                            ("event_review", "Event Review"),
                            ("event_review_reminder", "Event Review Reminder"),
                        ],
                        db_index=True,
                        max_length=50,
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("content", models.TextField()),
                (
                    "read_at",
                    models.DateTimeField(
                        blank=True, db_index=True, help_text="When user marked notification as read", null=True
                    ),
                ),
                (
                    "related_event",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notifications",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "read_at"], name="idx_notif_user_read"),
                    models.Index(fields=["user", "created_at"], name="idx_notif_user_created"),
                    models.Index(fields=["notification_type", "related_event"], name="idx_notif_type_event"),
                ],
            },
        ),
    ]
