"""Registration lifecycle: register, approve, reject, pay, check in, cancel."""

import structlog
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from accounts.models import LightEventUser
from accounts.service.account import ProfileSnapshot, profile_snapshot
from common.exceptions import NotFoundError, PermissionDeniedError, StorageError
from events.exceptions import (
    AlreadyUsedError,
    CapacityExceededError,
    InvalidCodeError,
    InvalidTransitionError,
    NotAnOrganizerError,
    RegistrationRejectedError,
    RejectionReason,
)
from events.models import Event, Registration
from notifications.enums import NotificationType
from notifications.service import messages
from notifications.service.emitter import notify, notify_many

from .capacity import OCCUPYING_AT_APPROVAL, check_capacity, registration_occupying_statuses
from .codes import issue_code, normalize_code

logger = structlog.get_logger(__name__)

Status = Registration.Status


class RegistrationLifecycle:
    """Owns the state of the registrations of one event.

    Every transition runs in a transaction holding a row lock on the event, so
    capacity checks and the writes they guard cannot interleave.
    """

    def __init__(self, event: Event) -> None:
        """Initialize the lifecycle for an event."""
        self.event = event

    def _lock_event(self) -> Event:
        try:
            self.event = Event.objects.select_for_update().select_related("organizer").get(pk=self.event.pk)
        except Event.DoesNotExist as e:
            raise NotFoundError("Event not found.") from e
        return self.event

    def _lock_registration(self, registration: Registration) -> Registration:
        try:
            return (
                Registration.objects.select_for_update()
                .select_related("user")
                .get(pk=registration.pk, event=self.event)
            )
        except Registration.DoesNotExist as e:
            raise NotFoundError("Registration not found.") from e

    def _assert_manager(self, user: LightEventUser) -> None:
        if not self.event.is_manager(user):
            raise NotAnOrganizerError("Only the organizers of this event can do this.")

    def _save(self, registration: Registration, **kwargs: object) -> None:
        try:
            with transaction.atomic():
                registration.save(**kwargs)  # type: ignore[arg-type]
        except IntegrityError:
            # unique constraint violations are translated by the caller
            raise
        except DatabaseError as e:  # pragma: no cover
            raise StorageError("Could not store the registration.") from e

    @transaction.atomic
    def register(self, user: LightEventUser, snapshot: ProfileSnapshot | None = None) -> Registration:
        """Register the user for the event.

        The new registration is ``pending`` when the event requires approval,
        ``payment_pending`` when it is paid, and ``approved`` (with a
        verification code) otherwise.

        Raises:
            RegistrationRejectedError
        """
        event = self._lock_event()
        if event.status == Event.EventStatus.DRAFT:
            raise RegistrationRejectedError(RejectionReason.DRAFT_EVENT)
        if event.status == Event.EventStatus.CANCELLED:
            raise RegistrationRejectedError(RejectionReason.EVENT_CANCELLED)
        if timezone.now() >= event.effective_registration_deadline:
            raise RegistrationRejectedError(RejectionReason.DEADLINE_PASSED)
        if Registration.objects.filter(event=event, user=user).exists():
            raise RegistrationRejectedError(RejectionReason.ALREADY_REGISTERED)

        if event.requires_approval:
            status = Status.PENDING
        elif event.is_paid:
            status = Status.PAYMENT_PENDING
        else:
            status = Status.APPROVED

        occupying = registration_occupying_statuses(event)
        capacity = check_capacity(event, occupying, adding=int(status in occupying))
        if not capacity.allowed:
            logger.info(
                "registration_capacity_exceeded",
                event_id=str(event.id),
                occupied=capacity.occupied,
                limit=capacity.limit,
            )
            raise RegistrationRejectedError(
                RejectionReason.CAPACITY_EXCEEDED,
                f"{RejectionReason.CAPACITY_EXCEEDED} ({capacity.occupied}/{capacity.limit})",
            )

        snapshot = snapshot or profile_snapshot(user)
        registration = Registration(
            event=event,
            user=user,
            participant_name=snapshot.name,
            participant_email=snapshot.email,
            participant_phone=snapshot.phone,
            status=status,
            payment_amount=event.price if event.is_paid else None,
            verification_code=issue_code(event) if status in Registration.CONFIRMED_STATUSES else None,
        )
        try:
            self._save(registration)
        except IntegrityError as e:
            raise RegistrationRejectedError(RejectionReason.ALREADY_REGISTERED) from e

        logger.info(
            "registration_created",
            registration_id=str(registration.id),
            event_id=str(event.id),
            user_id=str(user.id),
            status=status,
        )
        notify_many(
            event.manager_users(),
            messages.registration_submitted(snapshot.name, event.title),
            NotificationType.EVENT_REGISTRATION,
            related_event=event,
        )
        return registration

    @transaction.atomic
    def approve(self, registration: Registration, organizer: LightEventUser) -> Registration:
        """Approve a pending registration.

        Paid events move on to ``payment_pending``; free events become ``approved``
        and receive a verification code. Capacity is re-checked excluding the
        registration under review.

        Raises:
            NotAnOrganizerError, InvalidTransitionError, CapacityExceededError
        """
        event = self._lock_event()
        self._assert_manager(organizer)
        registration = self._lock_registration(registration)
        if registration.status != Status.PENDING:
            raise InvalidTransitionError(registration.status, "approve")

        new_status = Status.PAYMENT_PENDING if event.is_paid else Status.APPROVED
        capacity = check_capacity(
            event, OCCUPYING_AT_APPROVAL, adding=int(new_status in OCCUPYING_AT_APPROVAL), exclude=registration
        )
        if not capacity.allowed:
            assert capacity.limit is not None
            raise CapacityExceededError(occupied=capacity.would_be, limit=capacity.limit)

        registration.status = new_status
        if new_status in Registration.CONFIRMED_STATUSES:
            registration.verification_code = issue_code(event)
        self._save(registration)

        logger.info(
            "registration_approved",
            registration_id=str(registration.id),
            event_id=str(event.id),
            organizer_id=str(organizer.id),
            status=new_status,
        )
        notify(
            registration.user,
            messages.registration_decided(event.title, approved=True),
            NotificationType.REGISTRATION_APPROVED,
            related_event=event,
        )
        return registration

    @transaction.atomic
    def reject(self, registration: Registration, organizer: LightEventUser) -> Registration:
        """Reject a pending registration.

        Raises:
            NotAnOrganizerError, InvalidTransitionError
        """
        event = self._lock_event()
        self._assert_manager(organizer)
        registration = self._lock_registration(registration)
        if registration.status != Status.PENDING:
            raise InvalidTransitionError(registration.status, "reject")

        registration.status = Status.REJECTED
        self._save(registration)

        logger.info(
            "registration_rejected",
            registration_id=str(registration.id),
            event_id=str(event.id),
            organizer_id=str(organizer.id),
        )
        notify(
            registration.user,
            messages.registration_decided(event.title, approved=False),
            NotificationType.REGISTRATION_REJECTED,
            related_event=event,
        )
        return registration

    @transaction.atomic
    def check_in(self, target: Registration | str, organizer: LightEventUser) -> Registration:
        """Check a participant in, by registration or by presented verification code.

        The transition is a single conditional update, so two simultaneous scans
        of the same code cannot both succeed.

        Raises:
            NotAnOrganizerError, InvalidCodeError, AlreadyUsedError, InvalidTransitionError
        """
        self._assert_manager(organizer)
        if isinstance(target, Registration):
            lookup = Q(pk=target.pk)
        else:
            lookup = Q(verification_code=normalize_code(target))

        now = timezone.now()
        updated = (
            Registration.objects.filter(lookup, event=self.event)
            .with_status(Registration.CHECK_IN_ALLOWED_STATUSES)
            .update(status=Status.CHECKED_IN, checked_in_at=now, checked_in_by=organizer, updated_at=now)
        )
        registration = Registration.objects.select_related("user").filter(lookup, event=self.event).first()
        if updated == 0:
            if registration is None:
                raise InvalidCodeError("Invalid verification code.")
            if registration.status == Status.CHECKED_IN:
                raise AlreadyUsedError("This verification code has already been used.")
            raise InvalidTransitionError(registration.status, "check in")

        assert registration is not None
        logger.info(
            "registration_checked_in",
            registration_id=str(registration.id),
            event_id=str(self.event.id),
            organizer_id=str(organizer.id),
        )
        return registration

    @transaction.atomic
    def simulate_payment(self, registration: Registration, user: LightEventUser) -> Registration:
        """Placeholder payment: ``payment_pending`` becomes ``paid`` and receives a code.

        Raises:
            PermissionDeniedError, InvalidTransitionError
        """
        event = self._lock_event()
        registration = self._lock_registration(registration)
        if registration.user_id != user.pk:
            raise PermissionDeniedError("You can only pay for your own registration.")
        if registration.status != Status.PAYMENT_PENDING:
            raise InvalidTransitionError(registration.status, "pay for")

        registration.status = Status.PAID
        registration.verification_code = issue_code(event)
        self._save(registration)

        logger.info("registration_paid", registration_id=str(registration.id), event_id=str(event.id))
        return registration

    @transaction.atomic
    def cancel_all(self, reason: str = "") -> int:
        """Tell every participant the event is off and cancel the open registrations.

        Must run before the event is deleted: the notifications need the
        registrations that the deletion cascade removes.

        Returns:
            The number of participants notified.
        """
        event = self._lock_event()
        audience = list(Registration.objects.broadcast_audience().filter(event=event).select_related("user"))
        notify_many(
            [registration.user for registration in audience],
            messages.event_cancelled(event.title, reason),
            NotificationType.EVENT_CANCELLED,
            related_event=event,
        )
        cancelled = (
            Registration.objects.filter(event=event)
            .non_terminal()
            .update(status=Status.CANCELLED, verification_code=None, updated_at=timezone.now())
        )
        logger.info(
            "registrations_cancelled_for_event",
            event_id=str(event.id),
            notified=len(audience),
            cancelled=cancelled,
        )
        return len(audience)
