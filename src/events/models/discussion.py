import typing as t

from django.conf import settings
from django.db import models
from django.db.models import Max
from django.db.models.functions import Coalesce

from common.models import TimeStampedModel

from .event import Event


class DiscussionQuerySet(models.QuerySet["Discussion"]):
    def threads(self) -> t.Self:
        """Top-level posts, pinned first, then by the latest activity in the thread."""
        return (
            self.filter(parent__isnull=True)
            .annotate(last_activity_at=Coalesce(Max("replies__created_at"), "created_at"))
            .order_by("-is_pinned", "-last_activity_at")
        )


class Discussion(TimeStampedModel):
    """A post in an event's discussion board.

    The tree has two levels: top-level posts and their replies. A reply to a
    reply is attached to the top-level post and remembers whom it answers.
    """

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="discussions")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="discussions")
    content = models.TextField(max_length=1000)
    parent = models.ForeignKey(
        "self", on_delete=models.CASCADE, null=True, blank=True, related_name="replies"
    )
    reply_to_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="discussion_mentions",
    )
    is_pinned = models.BooleanField(default=False)
    is_deleted = models.BooleanField(default=False)

    objects = DiscussionQuerySet.as_manager()

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event", "parent"], name="idx_discussion_event_parent"),
        ]

    def __str__(self) -> str:
        return f"{self.author_id}: {self.content[:30]}"

    @property
    def is_thread(self) -> bool:
        return self.parent_id is None
