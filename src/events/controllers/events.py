import typing as t
from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching
from ninja_jwt.authentication import JWTAuth

from accounts.service.account import profile_snapshot
from common.authentication import OptionalAuth
from common.controllers import UserAwareController
from common.schema import ValidationErrorResponse
from common.throttling import WriteThrottle
from events import filters, models, schema
from events.service import event_service
from events.service.registration import RegistrationLifecycle


@api_controller("/events", auth=OptionalAuth(), tags=["Events"])
class EventController(UserAwareController):
    """Browse events, create them and register for them."""

    def get_queryset(self) -> QuerySet[models.Event]:
        """Events visible to the current user."""
        return models.Event.objects.for_user(self.maybe_user()).with_organizer()

    def get_one(self, event_id: UUID) -> models.Event:
        """Wrapper helper."""
        return t.cast(models.Event, self.get_object_or_exception(self.get_queryset(), pk=event_id))

    @route.get("/", url_name="list_events", response=PaginatedResponseSchema[schema.EventSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(Searching, search_fields=["title", "description", "location"])
    def list_events(
        self,
        params: filters.EventFilterSchema = Query(...),  # type: ignore[type-arg]
        order_by: t.Literal["start_time", "-start_time"] = "start_time",
    ) -> QuerySet[models.Event]:
        """Browse events visible to the current user.

        Anonymous users and participants see every non-draft event; drafts are
        listed only for the people who manage them. Filter by type, status or a
        free-text search over title, description and location.
        """
        return params.filter(self.get_queryset()).order_by(order_by)

    @route.get("/{uuid:event_id}", url_name="get_event", response=schema.EventDetailSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        """Event details with the number of occupied seats."""
        return self.get_one(event_id)

    @route.post(
        "/",
        url_name="create_event",
        auth=JWTAuth(),
        response={201: schema.EventDetailSchema, 400: ValidationErrorResponse},
        throttle=WriteThrottle(),
    )
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, models.Event]:
        """Create an event. Requires the organizer role.

        Events are published immediately unless created with status ``draft``.
        """
        return 201, event_service.create_event(self.user(), payload)

    @route.post(
        "/{uuid:event_id}/register",
        url_name="register_for_event",
        auth=JWTAuth(),
        response={201: schema.RegistrationSchema},
        throttle=WriteThrottle(),
    )
    def register(self, event_id: UUID, payload: schema.RegistrationCreateSchema) -> tuple[int, models.Registration]:
        """Register for an event.

        Your profile's name and contact details are copied onto the registration;
        send any of them in the payload to override. The registration starts as
        ``pending`` for events that require approval, ``payment_pending`` for
        paid events and ``approved`` (with a verification code) otherwise.
        """
        event = self.get_one(event_id)
        user = self.user()
        overrides = {
            "name": payload.participant_name,
            "email": payload.participant_email,
            "phone": payload.participant_phone,
        }
        snapshot = profile_snapshot(user).model_copy(update={k: v for k, v in overrides.items() if v is not None})
        return 201, RegistrationLifecycle(event).register(user, snapshot)

    @route.get(
        "/{uuid:event_id}/my-registration",
        url_name="get_my_registration",
        auth=JWTAuth(),
        response=schema.RegistrationSchema,
    )
    def get_my_registration(self, event_id: UUID) -> models.Registration:
        """Your registration for this event, including the verification code once confirmed."""
        event = self.get_one(event_id)
        return t.cast(
            models.Registration,
            self.get_object_or_exception(models.Registration.objects.all(), event=event, user=self.user()),
        )
