"""Models for the notification system."""

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel
from notifications.enums import NotificationType


class NotificationQuerySet(models.QuerySet["Notification"]):
    def for_user(self, user: models.Model) -> "NotificationQuerySet":
        return self.filter(user=user)

    def unread(self) -> "NotificationQuerySet":
        return self.filter(read_at__isnull=True)


class NotificationManager(models.Manager["Notification"]):
    def get_queryset(self) -> NotificationQuerySet:
        return NotificationQuerySet(self.model, using=self._db)

    def for_user(self, user: models.Model) -> NotificationQuerySet:
        return self.get_queryset().for_user(user)

    def unread(self) -> NotificationQuerySet:
        return self.get_queryset().unread()


class Notification(TimeStampedModel):
    """A one-way in-app message to one recipient about one semantic event."""

    notification_type = models.CharField(
        max_length=50,
        db_index=True,
        choices=NotificationType.choices,
    )
    title = models.CharField(max_length=255)
    content = models.TextField()

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications", db_index=True
    )
    # Cancellation notices outlive the event they refer to.
    related_event = models.ForeignKey(
        "events.Event",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    read_at = models.DateTimeField(
        null=True, blank=True, db_index=True, help_text="When user marked notification as read"
    )

    objects = NotificationManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "read_at"], name="idx_notif_user_read"),
            models.Index(fields=["user", "created_at"], name="idx_notif_user_created"),
            models.Index(fields=["notification_type", "related_event"], name="idx_notif_type_event"),
        ]
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"

    def __str__(self) -> str:
        return f"{self.notification_type} for user {self.user_id} at {self.created_at}"

    def mark_read(self) -> None:
        """Mark notification as read."""
        if not self.read_at:
            self.read_at = timezone.now()
            self.save(update_fields=["read_at", "updated_at"])

    def mark_unread(self) -> None:
        """Mark notification as unread."""
        if self.read_at:
            self.read_at = None
            self.save(update_fields=["read_at", "updated_at"])

    @property
    def is_read(self) -> bool:
        """Check if notification has been read."""
        return self.read_at is not None
