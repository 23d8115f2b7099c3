"""Daily reminder jobs: upcoming events and post-event reviews."""

import datetime
import typing as t
from uuid import UUID

import structlog
from django.db.models import QuerySet
from django.utils import timezone

from events.models import Event, Registration
from notifications.enums import NotificationType
from notifications.models import Notification
from notifications.service import messages
from notifications.service.emitter import Message, notify_many

logger = structlog.get_logger(__name__)


def local_day_bounds(day: datetime.date) -> tuple[datetime.datetime, datetime.datetime]:
    """Start (inclusive) and end (exclusive) of a calendar day in the site's time zone."""
    tz = timezone.get_current_timezone()
    start = datetime.datetime.combine(day, datetime.time.min, tzinfo=tz)
    return start, start + datetime.timedelta(days=1)


class ReminderService:
    """Send one notification of a given type per (event, participant).

    Recipients are the participants holding a confirmed registration. Users who
    already received a notification of the same type for the same event are
    skipped, so a job can safely run more than once a day.
    """

    def __init__(self, notification_type: NotificationType) -> None:
        """Initialize the service for one reminder type."""
        self.notification_type = notification_type

    def already_notified(self, event: Event) -> set[UUID]:
        return set(
            Notification.objects.filter(
                notification_type=self.notification_type, related_event=event
            ).values_list("user_id", flat=True)
        )

    def remind(self, events: QuerySet[Event], build_message: t.Callable[[Event], Message]) -> int:
        """Notify the confirmed participants of every event. Returns the number of notifications sent."""
        sent = 0
        for event in events:
            skip = self.already_notified(event)
            recipients = [
                registration.user
                for registration in Registration.objects.confirmed().filter(event=event).select_related("user")
                if registration.user_id not in skip
            ]
            if not recipients:
                continue
            created = notify_many(recipients, build_message(event), self.notification_type, related_event=event)
            logger.info(
                "reminders_sent",
                notification_type=self.notification_type,
                event_id=str(event.id),
                recipients=len(created),
                skipped=len(skip),
            )
            sent += len(created)
        return sent


def events_starting_on(day: datetime.date) -> QuerySet[Event]:
    start, end = local_day_bounds(day)
    return Event.objects.active().filter(start_time__gte=start, start_time__lt=end)


def events_ended_on(day: datetime.date) -> QuerySet[Event]:
    start, end = local_day_bounds(day)
    return Event.objects.active().filter(end_time__gte=start, end_time__lt=end)


def send_event_reminders(today: datetime.date | None = None) -> int:
    """Remind participants of events starting tomorrow."""
    today = today or timezone.localdate()
    events = events_starting_on(today + datetime.timedelta(days=1))
    return ReminderService(NotificationType.EVENT_REMINDER).remind(
        events, lambda event: messages.event_reminder(event.title, event.start_time)
    )


def send_review_reminders(today: datetime.date | None = None) -> int:
    """Invite participants of events that ended yesterday to leave a review."""
    today = today or timezone.localdate()
    events = events_ended_on(today - datetime.timedelta(days=1))
    return ReminderService(NotificationType.EVENT_REVIEW_REMINDER).remind(
        events, lambda event: messages.review_reminder(event.title)
    )
