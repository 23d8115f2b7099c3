import typing as t
from datetime import datetime

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounts.models import LightEventUser
from common.models import ExifStripMixin, TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def with_organizer(self) -> t.Self:
        """Select the primary organizer as well."""
        return self.select_related("organizer")

    def active(self) -> t.Self:
        """Events that are neither drafts nor cancelled."""
        return self.exclude(status__in=[Event.EventStatus.DRAFT, Event.EventStatus.CANCELLED])

    def managed_by(self, user: LightEventUser) -> t.Self:
        """Events the user organizes, either as primary organizer or as co-organizer."""
        return self.filter(Q(organizer=user) | Q(co_organizers=user)).distinct()

    def for_user(self, user: LightEventUser | AnonymousUser) -> t.Self:
        """Events visible to the user.

        Everyone sees non-draft events; drafts are only visible to the people managing them.
        Admins see everything.
        """
        base_qs = self.select_related("organizer")
        if user.is_anonymous:
            return base_qs.exclude(status=Event.EventStatus.DRAFT)
        if user.is_admin:  # type: ignore[union-attr]
            return base_qs
        managed_ids = Event.objects.managed_by(user).values("id")  # type: ignore[arg-type]
        return base_qs.filter(~Q(status=Event.EventStatus.DRAFT) | Q(id__in=managed_ids))


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset for events."""
        return EventQuerySet(self.model, using=self._db)

    def active(self) -> EventQuerySet:
        return self.get_queryset().active()

    def managed_by(self, user: LightEventUser) -> EventQuerySet:
        return self.get_queryset().managed_by(user)

    def for_user(self, user: LightEventUser | AnonymousUser) -> EventQuerySet:
        return self.get_queryset().for_user(user)


class Event(ExifStripMixin, TimeStampedModel):
    IMAGE_FIELDS = ("cover_image",)

    class EventType(models.TextChoices):
        CONFERENCE = "conference"
        TRAINING = "training"
        SOCIAL = "social"
        SPORTS = "sports"
        PERFORMANCE = "performance"
        WORKSHOP = "workshop"
        MEETUP = "meetup"
        OTHER = "other"

    class EventStatus(models.TextChoices):
        DRAFT = "draft"
        PUBLISHED = "published"
        REGISTRATION_OPEN = "registration_open"
        REGISTRATION_CLOSED = "registration_closed"
        ONGOING = "ongoing"
        ENDED = "ended"
        CANCELLED = "cancelled"

    organizer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events")
    co_organizers = models.ManyToManyField(  # type: ignore[var-annotated]
        settings.AUTH_USER_MODEL, related_name="co_organized_events", blank=True, through="EventOrganizer"
    )
    title = models.CharField(max_length=200, db_index=True)
    description = models.TextField(max_length=5000)
    event_type = models.CharField(choices=EventType.choices, max_length=20, db_index=True, default=EventType.OTHER)
    status = models.CharField(choices=EventStatus.choices, max_length=20, default=EventStatus.DRAFT, db_index=True)
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)
    location = models.CharField(max_length=255)
    detailed_address = models.CharField(max_length=500, blank=True)
    cover_image = models.ImageField(upload_to="event_covers/", null=True, blank=True)
    contact_info = models.CharField(max_length=255, blank=True)
    tags = models.JSONField(default=list, blank=True)
    max_participants = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)], help_text="No limit when empty"
    )
    is_paid = models.BooleanField(default=False)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    price_description = models.CharField(max_length=255, blank=True)
    registration_deadline = models.DateTimeField(
        null=True, blank=True, help_text="Defaults to the start time when empty"
    )
    requires_approval = models.BooleanField(default=False)

    objects = EventManager()

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["status", "start_time"], name="idx_status_start"),
            models.Index(fields=["event_type", "start_time"], name="idx_type_start"),
        ]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        """Validate timing and pricing."""
        super().clean()
        errors: dict[str, str] = {}
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            errors["end_time"] = "End time must be after start time."
        if self.registration_deadline and self.end_time and self.registration_deadline > self.end_time:
            errors["registration_deadline"] = "Registration deadline must not be after the end time."
        if self.is_paid and not self.price:
            errors["price"] = "Paid events need a price."
        if not isinstance(self.tags, list) or not all(isinstance(tag, str) for tag in self.tags):
            errors["tags"] = "Tags must be a list of strings."
        if errors:
            raise DjangoValidationError(errors)

    @property
    def effective_registration_deadline(self) -> datetime:
        return self.registration_deadline or self.start_time

    @property
    def has_ended(self) -> bool:
        """Past the end time. Display only, never stored as a status."""
        return timezone.now() > self.end_time

    def is_manager(self, user: LightEventUser | AnonymousUser) -> bool:
        """Primary organizer, any co-organizer or an admin."""
        if user.is_anonymous:
            return False
        if user.is_admin or self.organizer_id == user.pk:  # type: ignore[union-attr]
            return True
        return EventOrganizer.objects.filter(event=self, user_id=user.pk).exists()

    def manager_users(self) -> list[LightEventUser]:
        """The primary organizer followed by the co-organizers."""
        co_organizers = [link.user for link in self.organizer_links.select_related("user")]
        return [self.organizer, *[u for u in co_organizers if u.pk != self.organizer_id]]


class EventOrganizer(TimeStampedModel):
    """A co-organizer sharing management rights over one event."""

    class OrganizerRole(models.TextChoices):
        LEADER = "leader"
        MEMBER = "member"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="organizer_links")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_organizer_links")
    role = models.CharField(choices=OrganizerRole.choices, max_length=10, default=OrganizerRole.MEMBER)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="unique_event_organizer"),
        ]
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.user_id} ({self.role}) @ {self.event_id}"
