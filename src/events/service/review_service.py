"""Reviews: who may rate an event, and the ratings themselves."""

import structlog
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, QuerySet
from django.utils import timezone
from pydantic import BaseModel

from accounts.models import LightEventUser
from events.exceptions import ReviewNotAllowedError
from events.models import Event, Registration, Review
from notifications.enums import NotificationType
from notifications.service import messages
from notifications.service.emitter import notify

logger = structlog.get_logger(__name__)


class ReviewEligibility(BaseModel):
    allowed: bool
    reason: str | None = None


class ReviewSummary(BaseModel):
    count: int
    average: float | None = None


def review_eligibility(user: LightEventUser, event: Event) -> ReviewEligibility:
    """Check whether the user may review the event, and why not."""
    if not timezone.now() > event.end_time:
        return ReviewEligibility(allowed=False, reason="The event has not ended yet.")
    if not Registration.objects.confirmed().filter(event=event, user=user).exists():
        return ReviewEligibility(allowed=False, reason="Only confirmed participants can review this event.")
    if Review.objects.filter(event=event, user=user).exists():
        return ReviewEligibility(allowed=False, reason="You have already reviewed this event.")
    return ReviewEligibility(allowed=True)


def can_review(user: LightEventUser, event: Event) -> bool:
    return review_eligibility(user, event).allowed


@transaction.atomic
def submit_review(
    event: Event, user: LightEventUser, rating: int, comment: str = "", is_public: bool = True
) -> Review:
    """Store a review and tell the organizer the rating.

    Raises:
        ReviewNotAllowedError
    """
    eligibility = review_eligibility(user, event)
    if not eligibility.allowed:
        raise ReviewNotAllowedError(eligibility.reason or "You cannot review this event.")

    try:
        with transaction.atomic():
            review = Review.objects.create(event=event, user=user, rating=rating, comment=comment, is_public=is_public)
    except IntegrityError as e:
        raise ReviewNotAllowedError("You have already reviewed this event.") from e
    logger.info("review_submitted", review_id=str(review.id), event_id=str(event.id), rating=rating)
    notify(
        event.organizer,
        messages.event_review(user.get_display_name(), event.title, rating),
        NotificationType.EVENT_REVIEW,
        related_event=event,
    )
    return review


def list_public_reviews(event: Event) -> QuerySet[Review]:
    return Review.objects.filter(event=event, is_public=True).select_related("user").order_by("-created_at")


def review_summary(event: Event) -> ReviewSummary:
    """Count and average rating of the public reviews."""
    aggregate = list_public_reviews(event).aggregate(count=Count("id"), average=Avg("rating"))
    average = aggregate["average"]
    return ReviewSummary(count=aggregate["count"], average=round(average, 2) if average is not None else None)
