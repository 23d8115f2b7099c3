from uuid import UUID

from ninja import File
from ninja.files import UploadedFile
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.schema import ResponseMessage, ValidationErrorResponse
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
class EventAdminCoreController(EventAdminBaseController):
    """Edit, cancel and delete events."""

    @route.put(
        "",
        url_name="edit_event",
        response={200: schema.EventDetailSchema, 400: ValidationErrorResponse},
    )
    def update_event(self, event_id: UUID, payload: schema.EventUpdateSchema) -> models.Event:
        """Update the event. Every participant is notified, with the optional ``notify_message``."""
        event = self.get_one(event_id)
        return event_service.update_event(event, payload)

    @route.post(
        "/cancel",
        url_name="cancel_event",
        response={200: schema.EventDetailSchema},
    )
    def cancel_event(self, event_id: UUID, payload: schema.EventCancelSchema) -> models.Event:
        """Cancel the event.

        Open registrations are cancelled and their verification codes voided;
        every participant receives a cancellation notice with the reason.
        """
        event = self.get_one(event_id)
        return event_service.cancel_event(event, payload.reason)

    @route.delete(
        "",
        url_name="delete_event",
        response={200: ResponseMessage},
        permissions=[IsPrimaryOrganizer()],
    )
    def delete_event(self, event_id: UUID, reason: str = "") -> ResponseMessage:
        """Delete the event. Participants are notified before the event and its registrations go away."""
        event = self.get_one(event_id)
        notified = event_service.delete_event(event, reason)
        return ResponseMessage(message=f"Event deleted; {notified} participants notified.")

    @route.post(
        "/upload-cover-image",
        url_name="event_upload_cover_image",
        response=schema.EventDetailSchema,
    )
    def upload_cover_image(self, event_id: UUID, cover_image: File[UploadedFile]) -> models.Event:
        """Upload the event's cover image. EXIF metadata is stripped."""
        event = self.get_one(event_id)
        return event_service.set_cover_image(event, cover_image)
