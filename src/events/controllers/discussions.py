import typing as t
from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.authentication import OptionalAuth
from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from events import models, schema
from events.service import discussion_service


@api_controller("/events/{uuid:event_id}/discussions", auth=OptionalAuth(), tags=["Discussions"])
class DiscussionController(UserAwareController):
    """The discussion board of an event."""

    def get_event(self, event_id: UUID) -> models.Event:
        """Wrapper helper."""
        return t.cast(
            models.Event,
            self.get_object_or_exception(models.Event.objects.for_user(self.maybe_user()), pk=event_id),
        )

    def get_discussion(self, event_id: UUID, discussion_id: UUID) -> models.Discussion:
        event = self.get_event(event_id)
        return t.cast(
            models.Discussion,
            self.get_object_or_exception(
                models.Discussion.objects.select_related("event", "author"),
                pk=discussion_id,
                event=event,
                is_deleted=False,
            ),
        )

    @route.get("/", url_name="list_discussions", response=list[schema.DiscussionThreadSchema])
    def list_discussions(self, event_id: UUID) -> QuerySet[models.Discussion]:
        """Threads with their replies. Pinned threads first, then the most recently active."""
        return discussion_service.list_threads(self.get_event(event_id))

    @route.post(
        "/",
        url_name="post_discussion",
        auth=JWTAuth(),
        response={201: schema.DiscussionThreadSchema},
        throttle=WriteThrottle(),
    )
    def post_discussion(
        self, event_id: UUID, payload: schema.DiscussionCreateSchema
    ) -> tuple[int, models.Discussion]:
        """Start a new thread."""
        event = self.get_event(event_id)
        return 201, discussion_service.post_discussion(event, self.user(), payload.content)

    @route.post(
        "/{uuid:discussion_id}/replies",
        url_name="reply_to_discussion",
        auth=JWTAuth(),
        response={201: schema.DiscussionReplySchema},
        throttle=WriteThrottle(),
    )
    def reply(
        self, event_id: UUID, discussion_id: UUID, payload: schema.DiscussionCreateSchema
    ) -> tuple[int, models.Discussion]:
        """Reply to a thread or to a reply. Replies to replies are shown in the same thread."""
        target = self.get_discussion(event_id, discussion_id)
        return 201, discussion_service.reply(target, self.user(), payload.content)

    @route.post(
        "/{uuid:discussion_id}/pin",
        url_name="toggle_discussion_pin",
        auth=JWTAuth(),
        response=schema.DiscussionThreadSchema,
    )
    def toggle_pin(self, event_id: UUID, discussion_id: UUID) -> models.Discussion:
        """Pin or unpin a thread. Event organizers only."""
        discussion = self.get_discussion(event_id, discussion_id)
        return discussion_service.toggle_pin(discussion, self.user())

    @route.delete(
        "/{uuid:discussion_id}",
        url_name="delete_discussion",
        auth=JWTAuth(),
        response={204: None},
    )
    def delete_discussion(self, event_id: UUID, discussion_id: UUID) -> tuple[int, None]:
        """Delete a post. Its author and the event organizers may do so."""
        discussion = self.get_discussion(event_id, discussion_id)
        discussion_service.delete_discussion(discussion, self.user())
        return 204, None
