import typing as t
from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.authentication import OptionalAuth
from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from events import models, schema
from events.service import review_service
from events.service.review_service import ReviewEligibility, ReviewSummary


@api_controller("/events/{uuid:event_id}/reviews", auth=OptionalAuth(), tags=["Reviews"])
class ReviewController(UserAwareController):
    def get_event(self, event_id: UUID) -> models.Event:
        """Wrapper helper."""
        return t.cast(
            models.Event,
            self.get_object_or_exception(models.Event.objects.for_user(self.maybe_user()), pk=event_id),
        )

    @route.get("/", url_name="list_reviews", response=PaginatedResponseSchema[schema.ReviewSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_reviews(self, event_id: UUID) -> QuerySet[models.Review]:
        """Public reviews of the event, newest first."""
        return review_service.list_public_reviews(self.get_event(event_id))

    @route.get("/summary", url_name="review_summary", response=schema.ReviewSummarySchema)
    def review_summary(self, event_id: UUID) -> ReviewSummary:
        """Number of public reviews and their average rating."""
        return review_service.review_summary(self.get_event(event_id))

    @route.get(
        "/eligibility",
        url_name="review_eligibility",
        auth=JWTAuth(),
        response=schema.ReviewEligibilitySchema,
    )
    def review_eligibility(self, event_id: UUID) -> ReviewEligibility:
        """Whether you may review this event, and the reason if not.

        Only confirmed participants may review, once, after the event has ended.
        """
        return review_service.review_eligibility(self.user(), self.get_event(event_id))

    @route.post(
        "/",
        url_name="submit_review",
        auth=JWTAuth(),
        response={201: schema.ReviewSchema},
        throttle=WriteThrottle(),
    )
    def submit_review(self, event_id: UUID, payload: schema.ReviewCreateSchema) -> tuple[int, models.Review]:
        """Rate the event from 1 to 5, with an optional comment."""
        event = self.get_event(event_id)
        review = review_service.submit_review(
            event, self.user(), rating=payload.rating, comment=payload.comment, is_public=payload.is_public
        )
        return 201, review
