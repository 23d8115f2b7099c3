import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.db.models import Q

from common.models import TimeStampedModel

from .event import Event


class RegistrationQuerySet(models.QuerySet["Registration"]):
    def with_status(self, statuses: t.Iterable[str]) -> t.Self:
        return self.filter(status__in=list(statuses))

    def confirmed(self) -> t.Self:
        """Registrations whose owner attends: approved, paid or checked in."""
        return self.with_status(Registration.CONFIRMED_STATUSES)

    def broadcast_audience(self) -> t.Self:
        """Everyone who should hear about changes to the event."""
        return self.with_status(Registration.BROADCAST_STATUSES)

    def non_terminal(self) -> t.Self:
        return self.exclude(status__in=list(Registration.TERMINAL_STATUSES))


class RegistrationManager(models.Manager["Registration"]):
    def get_queryset(self) -> RegistrationQuerySet:
        return RegistrationQuerySet(self.model, using=self._db)

    def confirmed(self) -> RegistrationQuerySet:
        return self.get_queryset().confirmed()

    def broadcast_audience(self) -> RegistrationQuerySet:
        return self.get_queryset().broadcast_audience()

    def with_status(self, statuses: t.Iterable[str]) -> RegistrationQuerySet:
        return self.get_queryset().with_status(statuses)


class Registration(TimeStampedModel):
    """One participant's registration to one event.

    pending -> approved | rejected
    pending -> payment_pending -> paid
    approved | paid -> checked_in
    any non-terminal -> cancelled (event cancellation or deletion)
    """

    class Status(models.TextChoices):
        PENDING = "pending"
        APPROVED = "approved"
        REJECTED = "rejected"
        PAYMENT_PENDING = "payment_pending"
        PAID = "paid"
        CHECKED_IN = "checked_in"
        CANCELLED = "cancelled"

    # A verification code exists exactly while the registration is in one of these.
    CONFIRMED_STATUSES = frozenset({Status.APPROVED, Status.PAID, Status.CHECKED_IN})
    CHECK_IN_ALLOWED_STATUSES = frozenset({Status.APPROVED, Status.PAID})
    BROADCAST_STATUSES = frozenset(
        {Status.PENDING, Status.APPROVED, Status.PAYMENT_PENDING, Status.PAID, Status.CHECKED_IN}
    )
    TERMINAL_STATUSES = frozenset({Status.REJECTED, Status.CHECKED_IN, Status.CANCELLED})

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    participant_name = models.CharField(max_length=150)
    participant_email = models.EmailField()
    participant_phone = models.CharField(max_length=32, blank=True)
    status = models.CharField(choices=Status.choices, max_length=20, default=Status.PENDING, db_index=True)
    payment_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    verification_code = models.CharField(max_length=16, null=True, blank=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_registrations",
    )

    objects = RegistrationManager()

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="unique_event_registration"),
            models.UniqueConstraint(
                fields=["event", "verification_code"],
                condition=Q(verification_code__isnull=False),
                name="unique_event_verification_code",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="idx_registration_event_status"),
        ]

    def __str__(self) -> str:
        return f"{self.participant_name} -> {self.event_id} ({self.status})"

    def clean(self) -> None:
        """A verification code is present if and only if the registration is confirmed."""
        super().clean()
        has_code = bool(self.verification_code)
        if self.status in self.CONFIRMED_STATUSES and not has_code:
            raise DjangoValidationError({"verification_code": "Confirmed registrations need a verification code."})
        if self.status not in self.CONFIRMED_STATUSES and has_code:
            raise DjangoValidationError({"verification_code": "Only confirmed registrations carry a code."})

    @property
    def is_confirmed(self) -> bool:
        return self.status in self.CONFIRMED_STATUSES
