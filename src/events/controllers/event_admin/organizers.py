from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from accounts.models import LightEventUser
from common.throttling import WriteThrottle
from events import models, schema
from events.controllers.permissions import IsEventManager, IsPrimaryOrganizer
from events.service import event_service

from .base import EventAdminBaseController


@api_controller(
    "/event-admin/{event_id}",
    auth=JWTAuth(),
    permissions=[IsEventManager()],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminOrganizersController(EventAdminBaseController):
    """Co-organizer management."""

    @route.get("/organizers", url_name="list_co_organizers", response=list[schema.CoOrganizerSchema])
    def list_co_organizers(self, event_id: UUID) -> QuerySet[models.EventOrganizer]:
        """List the co-organizers of the event."""
        event = self.get_one(event_id)
        return event.organizer_links.select_related("user")

    @route.post(
        "/organizers",
        url_name="add_co_organizer",
        response={201: schema.CoOrganizerSchema},
        permissions=[IsPrimaryOrganizer()],
    )
    def add_co_organizer(
        self, event_id: UUID, payload: schema.CoOrganizerAddSchema
    ) -> tuple[int, models.EventOrganizer]:
        """Add a co-organizer by email. They get full management rights over this event."""
        event = self.get_one(event_id)
        return 201, event_service.add_co_organizer(event, payload)

    @route.delete(
        "/organizers/{user_id}",
        url_name="remove_co_organizer",
        response={204: None},
        permissions=[IsPrimaryOrganizer()],
    )
    def remove_co_organizer(self, event_id: UUID, user_id: UUID) -> tuple[int, None]:
        """Remove a co-organizer."""
        event = self.get_one(event_id)
        user = get_object_or_404(LightEventUser, pk=user_id)
        event_service.remove_co_organizer(event, user)
        return 204, None
