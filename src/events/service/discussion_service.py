"""Event discussion board: threads, replies, pinning and soft deletion."""

import structlog
from django.db import transaction
from django.db.models import Prefetch, QuerySet

from accounts.models import LightEventUser
from common.exceptions import PermissionDeniedError, PreconditionFailedError
from events.exceptions import NotAnOrganizerError
from events.models import Discussion, Event
from notifications.enums import NotificationType
from notifications.service import messages
from notifications.service.emitter import notify

logger = structlog.get_logger(__name__)


def list_threads(event: Event) -> QuerySet[Discussion]:
    """Visible top-level posts with their visible replies, pinned first, then by latest activity."""
    return (
        Discussion.objects.filter(event=event, is_deleted=False)
        .threads()
        .select_related("author")
        .prefetch_related(
            Prefetch(
                "replies",
                queryset=Discussion.objects.filter(is_deleted=False)
                .select_related("author", "reply_to_user")
                .order_by("created_at"),
                to_attr="visible_replies",
            )
        )
    )


def post_discussion(event: Event, author: LightEventUser, content: str) -> Discussion:
    if event.status == Event.EventStatus.DRAFT:
        raise PreconditionFailedError("Discussions open once the event is published.")
    discussion = Discussion.objects.create(event=event, author=author, content=content)
    logger.info("discussion_posted", discussion_id=str(discussion.id), event_id=str(event.id))
    return discussion


@transaction.atomic
def reply(target: Discussion, author: LightEventUser, content: str) -> Discussion:
    """Reply to a post or to a reply.

    Replies always hang off the top-level post; replying to a reply records the
    person being answered. The target's author is notified unless they reply to themselves.
    """
    if target.is_deleted:
        raise PreconditionFailedError("You cannot reply to a deleted post.")
    thread = target if target.parent_id is None else target.parent
    assert thread is not None
    new_reply = Discussion.objects.create(
        event=target.event,
        author=author,
        content=content,
        parent=thread,
        reply_to_user=target.author if target.parent_id is not None else None,
    )
    logger.info(
        "discussion_reply_posted",
        discussion_id=str(new_reply.id),
        thread_id=str(thread.id),
        event_id=str(target.event_id),
    )
    if target.author_id != author.pk:
        notify(
            target.author,
            messages.discussion_reply(author.get_display_name(), target.event.title),
            NotificationType.DISCUSSION_REPLY,
            related_event=target.event,
        )
    return new_reply


def toggle_pin(discussion: Discussion, user: LightEventUser) -> Discussion:
    """Pin or unpin a top-level post. Managers only."""
    if not discussion.event.is_manager(user):
        raise NotAnOrganizerError("Only the organizers of this event can pin discussions.")
    if discussion.parent_id is not None:
        raise PreconditionFailedError("Only top-level posts can be pinned.")
    discussion.is_pinned = not discussion.is_pinned
    discussion.save(update_fields=["is_pinned", "updated_at"])
    logger.info("discussion_pin_toggled", discussion_id=str(discussion.id), is_pinned=discussion.is_pinned)
    return discussion


def delete_discussion(discussion: Discussion, user: LightEventUser) -> None:
    """Soft-delete a post. Its author or an event manager may do so."""
    if discussion.author_id != user.pk and not discussion.event.is_manager(user):
        raise PermissionDeniedError("You cannot delete this post.")
    discussion.is_deleted = True
    discussion.save(update_fields=["is_deleted", "updated_at"])
    logger.info("discussion_deleted", discussion_id=str(discussion.id), deleted_by=str(user.pk))
