from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.throttling import CheckInThrottle, UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.controllers.permissions import IsEventManager
from events.service.registration import RegistrationLifecycle, resolve_code

from .base import EventAdminBaseController


@api_controller(
    "/event-admin/{event_id}",
    auth=JWTAuth(),
    permissions=[IsEventManager()],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminRegistrationsController(EventAdminBaseController):
    """Registration review and check-in."""

    def get_registration(self, event: models.Event, registration_id: UUID) -> models.Registration:
        return get_object_or_404(models.Registration, pk=registration_id, event=event)

    @route.get(
        "/registrations",
        url_name="list_registrations",
        response=PaginatedResponseSchema[schema.AdminRegistrationSchema],
        throttle=UserDefaultThrottle(),
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_registrations(
        self,
        event_id: UUID,
        params: filters.RegistrationFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Registration]:
        """List the registrations of the event.

        Filter by status or search the participant's name, email and phone.
        """
        event = self.get_one(event_id)
        qs = models.Registration.objects.filter(event=event).select_related("user", "checked_in_by")
        return params.filter(qs).order_by("-created_at")

    @route.post(
        "/registrations/{registration_id}/approve",
        url_name="approve_registration",
        response=schema.AdminRegistrationSchema,
    )
    def approve_registration(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Approve a pending registration.

        Free events issue the verification code right away; paid events move
        on to ``payment_pending``. Fails when the event is full.
        """
        event = self.get_one(event_id)
        registration = self.get_registration(event, registration_id)
        return RegistrationLifecycle(event).approve(registration, self.user())

    @route.post(
        "/registrations/{registration_id}/reject",
        url_name="reject_registration",
        response=schema.AdminRegistrationSchema,
    )
    def reject_registration(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Reject a pending registration."""
        event = self.get_one(event_id)
        registration = self.get_registration(event, registration_id)
        return RegistrationLifecycle(event).reject(registration, self.user())

    @route.post(
        "/registrations/{registration_id}/check-in",
        url_name="check_in_registration",
        response=schema.AdminRegistrationSchema,
        throttle=CheckInThrottle(),
    )
    def check_in_registration(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Check a participant in from the registration list."""
        event = self.get_one(event_id)
        registration = self.get_registration(event, registration_id)
        return RegistrationLifecycle(event).check_in(registration, self.user())

    @route.post(
        "/check-in",
        url_name="check_in_by_code",
        response=schema.AdminRegistrationSchema,
        throttle=CheckInThrottle(),
    )
    def check_in_by_code(self, event_id: UUID, payload: schema.CheckInSchema) -> models.Registration:
        """Check a participant in with the verification code they present.

        Codes are case-insensitive. A code can be used once.
        """
        event = self.get_one(event_id)
        return RegistrationLifecycle(event).check_in(payload.code, self.user())

    @route.get(
        "/codes/{code}",
        url_name="resolve_verification_code",
        response=schema.AdminRegistrationSchema,
        throttle=CheckInThrottle(),
    )
    def resolve_verification_code(self, event_id: UUID, code: str) -> models.Registration:
        """Look up the registration a verification code belongs to, without checking in."""
        event = self.get_one(event_id)
        return resolve_code(code, event)
