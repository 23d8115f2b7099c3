import re
import typing as t
import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser, UserManager
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Q

from common.models import ExifStripMixin, TimeStampedModel
from common.utils import PHONE_RE

from . import roles
from .roles import Role


class LightEventUserQueryset(models.QuerySet["LightEventUser"]):
    """Queryset for LightEventUser."""

    def admins(self) -> t.Self:
        return self.filter(role=Role.ADMIN, is_active=True)


class LightEventUserManager(UserManager["LightEventUser"]):
    def get_queryset(self) -> LightEventUserQueryset:
        """Get queryset for LightEventUser."""
        return LightEventUserQueryset(self.model, using=self._db)

    def admins(self) -> LightEventUserQueryset:
        return self.get_queryset().admins()


class LightEventUser(ExifStripMixin, AbstractUser):
    IMAGE_FIELDS = ("avatar",)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nickname = models.CharField(db_index=True, max_length=100, blank=True, help_text="Display name")
    contact_email = models.EmailField(blank=True, help_text="Email shared with organizers")
    contact_phone = models.CharField(
        max_length=32,
        blank=True,
        validators=[RegexValidator(PHONE_RE, message="Invalid phone number.")],
        help_text="Phone shared with organizers",
    )
    bio = models.TextField(blank=True, max_length=1000)
    avatar = models.ImageField(upload_to="avatars/", null=True, blank=True)
    organizer_name = models.CharField(max_length=200, blank=True)
    organizer_description = models.TextField(blank=True, max_length=1000)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER, db_index=True)

    objects = LightEventUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's nickname, or their full name, or a name derived from the username."""
        return self.nickname or self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()

    @property
    def is_admin(self) -> bool:
        return roles.is_admin(self.role)

    @property
    def can_create_events(self) -> bool:
        return roles.can_create_events(self.role)


class OrganizerApplication(TimeStampedModel):
    """A user's request to be promoted to the organizer role."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organizer_applications")
    organizer_name = models.CharField(max_length=200)
    organizer_description = models.TextField(max_length=1000)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=32, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    admin_notes = models.TextField(blank=True, max_length=1000)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_organizer_applications",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(status="pending"),
                name="unique_pending_organizer_application",
            )
        ]

    def __str__(self) -> str:
        return f"{self.organizer_name} ({self.status})"
