"""Event management: create, update, cancel, delete and co-organizers."""

import structlog
from django.core.files import File
from django.db import transaction
from django.db.models import Q, QuerySet

from accounts import roles
from accounts.models import LightEventUser
from common.exceptions import NotFoundError, PreconditionFailedError
from common.utils import update_db_instance
from events.exceptions import NotAnOrganizerError
from events.models import Event, EventOrganizer, Registration
from events.schema import CoOrganizerAddSchema, EventCreateSchema, EventUpdateSchema
from notifications.enums import NotificationType
from notifications.service import messages
from notifications.service.emitter import notify, notify_many

from .registration import RegistrationLifecycle

logger = structlog.get_logger(__name__)


def create_event(organizer: LightEventUser, payload: EventCreateSchema) -> Event:
    """Create an event owned by the organizer.

    Raises:
        NotAnOrganizerError: the user's role cannot create events.
    """
    if not roles.can_create_events(organizer.role):
        raise NotAnOrganizerError("Only organizers can create events.")
    event = Event.objects.create(organizer=organizer, **payload.model_dump(exclude_none=True))
    logger.info("event_created", event_id=str(event.id), organizer_id=str(organizer.id), status=event.status)
    return event


@transaction.atomic
def update_event(event: Event, payload: EventUpdateSchema) -> Event:
    """Apply the provided fields and tell every participant about the change."""
    event = Event.objects.select_for_update().get(pk=event.pk)
    if event.status == Event.EventStatus.CANCELLED:
        raise PreconditionFailedError("A cancelled event cannot be edited.")
    data = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"notify_message"})
    if data.get("status") == Event.EventStatus.CANCELLED:
        raise PreconditionFailedError("Use the cancel endpoint to cancel an event.")
    if (
        data.get("status") == Event.EventStatus.DRAFT
        and event.status != Event.EventStatus.DRAFT
        and Registration.objects.broadcast_audience().filter(event=event).exists()
    ):
        raise PreconditionFailedError("An event with active registrations cannot go back to draft.")
    event = update_db_instance(event, **data)
    logger.info("event_updated", event_id=str(event.id), fields=sorted(data))

    participants = [r.user for r in Registration.objects.broadcast_audience().filter(event=event).select_related("user")]
    notify_many(
        participants,
        messages.event_updated(event.title, payload.notify_message),
        NotificationType.EVENT_UPDATED,
        related_event=event,
    )
    return event


@transaction.atomic
def cancel_event(event: Event, reason: str = "") -> Event:
    """Cancel the event and every open registration, notifying participants."""
    event = Event.objects.select_for_update().get(pk=event.pk)
    if event.status == Event.EventStatus.CANCELLED:
        raise PreconditionFailedError("The event is already cancelled.")
    RegistrationLifecycle(event).cancel_all(reason)
    event = update_db_instance(event, status=Event.EventStatus.CANCELLED)
    logger.info("event_cancelled", event_id=str(event.id))
    return event


@transaction.atomic
def delete_event(event: Event, reason: str = "") -> int:
    """Notify participants, then delete the event and its dependent rows.

    Returns:
        The number of participants notified.
    """
    event_id = str(event.id)
    notified = RegistrationLifecycle(event).cancel_all(reason)
    event.delete()
    logger.info("event_deleted", event_id=event_id, notified=notified)
    return notified


@transaction.atomic
def add_co_organizer(event: Event, payload: CoOrganizerAddSchema) -> EventOrganizer:
    """Grant a user management rights over the event, looked up by email.

    Raises:
        NotFoundError: no user with that email.
        PreconditionFailedError: the user already manages the event.
    """
    email = payload.email
    user = LightEventUser.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).first()
    if user is None:
        raise NotFoundError("No user with this email.")
    if user.pk == event.organizer_id or EventOrganizer.objects.filter(event=event, user=user).exists():
        raise PreconditionFailedError("This user already organizes the event.")

    link = EventOrganizer.objects.create(event=event, user=user, role=payload.role)
    logger.info("co_organizer_added", event_id=str(event.id), user_id=str(user.id), role=payload.role)
    notify(
        user,
        messages.co_organizer_added(event.title),
        NotificationType.ORGANIZER_MEMBER_ADDED,
        related_event=event,
    )
    return link


@transaction.atomic
def remove_co_organizer(event: Event, user: LightEventUser) -> None:
    """Revoke a co-organizer's management rights.

    Raises:
        NotFoundError: the user is not a co-organizer of the event.
    """
    deleted, _ = EventOrganizer.objects.filter(event=event, user=user).delete()
    if not deleted:
        raise NotFoundError("This user is not a co-organizer of the event.")
    logger.info("co_organizer_removed", event_id=str(event.id), user_id=str(user.id))
    notify(
        user,
        messages.co_organizer_removed(event.title),
        NotificationType.ORGANIZER_MEMBER_REMOVED,
        related_event=event,
    )


def my_registrations(user: LightEventUser) -> QuerySet[Registration]:
    """The user's registrations, most recent first."""
    return (
        Registration.objects.filter(user=user)
        .select_related("event", "event__organizer")
        .order_by("-created_at")
    )


def my_organized_events(user: LightEventUser) -> QuerySet[Event]:
    """Events the user organizes or co-organizes, by start time."""
    return Event.objects.managed_by(user).with_organizer().order_by("start_time")


@transaction.atomic
def set_cover_image(event: Event, image: File) -> Event:  # type: ignore[type-arg]
    """Replace the cover image. The previous file is removed once the change commits."""
    previous = event.cover_image.name if event.cover_image else None
    event.cover_image = image
    event.save()
    if previous and previous != event.cover_image.name:
        storage = event.cover_image.storage
        transaction.on_commit(lambda: storage.delete(previous))
    logger.info("event_cover_image_updated", event_id=str(event.id))
    return event
