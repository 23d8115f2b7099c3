"""Best-effort notification emitter.

Every business operation that informs a counterparty goes through ``notify`` or
``notify_many``. Storage failures are logged and swallowed: the triggering
transition is never blocked or rolled back by a failed notification.
"""

import typing as t
from collections.abc import Iterable

import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from notifications.enums import NotificationType
from notifications.exceptions import NotificationError
from notifications.models import Notification

if t.TYPE_CHECKING:
    from accounts.models import LightEventUser
    from events.models import Event

logger = structlog.get_logger(__name__)


class Message(t.NamedTuple):
    """Rendered title and content of a notification."""

    title: str
    content: str


def _create(notifications: list[Notification]) -> list[Notification]:
    """Insert notifications inside a savepoint so a failure leaves the outer transaction usable."""
    try:
        with transaction.atomic():
            if len(notifications) == 1:
                notifications[0].save()
                return notifications
            return Notification.objects.bulk_create(notifications)
    except (DatabaseError, ValidationError) as e:
        raise NotificationError(str(e)) from e


def notify(
    user: "LightEventUser",
    message: Message,
    notification_type: NotificationType,
    related_event: "Event | None" = None,
) -> Notification | None:
    """Create a single notification for one recipient.

    Returns:
        The created notification, or None if it could not be stored.
    """
    try:
        (notification,) = _create(
            [
                Notification(
                    user=user,
                    title=message.title,
                    content=message.content,
                    notification_type=notification_type,
                    related_event=related_event,
                )
            ]
        )
    except NotificationError:
        logger.exception(
            "notification_create_failed",
            notification_type=notification_type,
            user_id=str(user.pk),
        )
        return None

    logger.info(
        "notification_created",
        notification_id=str(notification.id),
        notification_type=notification_type,
        user_id=str(user.pk),
    )
    return notification


def notify_many(
    users: Iterable["LightEventUser"],
    message: Message,
    notification_type: NotificationType,
    related_event: "Event | None" = None,
) -> list[Notification]:
    """Create the same notification for several recipients in one insert.

    Recipients are de-duplicated. Returns an empty list when nothing could be stored.
    """
    recipients = list({user.pk: user for user in users}.values())
    if not recipients:
        return []

    notifications = [
        Notification(
            user=user,
            title=message.title,
            content=message.content,
            notification_type=notification_type,
            related_event=related_event,
        )
        for user in recipients
    ]
    try:
        created = _create(notifications)
    except NotificationError:
        logger.exception(
            "notifications_bulk_create_failed",
            notification_type=notification_type,
            count=len(recipients),
        )
        return []

    logger.info(
        "notifications_bulk_created",
        count=len(created),
        notification_type=notification_type,
    )
    return created
