import typing as t
from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from events import models, schema
from events.service import event_service
from events.service.registration import RegistrationLifecycle


@api_controller("/dashboard", auth=JWTAuth(), tags=["Dashboard"])
class DashboardController(UserAwareController):
    """The current user's registrations and organized events."""

    @route.get(
        "/registrations",
        url_name="dashboard_registrations",
        response=PaginatedResponseSchema[schema.MyRegistrationSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def my_registrations(self) -> QuerySet[models.Registration]:
        """Your registrations, newest first, with their events."""
        return event_service.my_registrations(self.user())

    @route.get(
        "/organized-events",
        url_name="dashboard_organized_events",
        response=PaginatedResponseSchema[schema.EventSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def my_organized_events(self) -> QuerySet[models.Event]:
        """Events you organize or co-organize, drafts included."""
        return event_service.my_organized_events(self.user())

    @route.post(
        "/registrations/{uuid:registration_id}/pay",
        url_name="pay_registration",
        response=schema.RegistrationSchema,
        throttle=WriteThrottle(),
    )
    def pay(self, registration_id: UUID) -> models.Registration:
        """Pay for a registration awaiting payment.

        Payment is simulated: the registration becomes ``paid`` and receives its
        verification code.
        """
        registration = t.cast(
            models.Registration,
            self.get_object_or_exception(
                models.Registration.objects.select_related("event"), pk=registration_id, user=self.user()
            ),
        )
        return RegistrationLifecycle(registration.event).simulate_payment(registration, self.user())
