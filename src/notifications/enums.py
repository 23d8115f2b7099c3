"""Enums for the notification system."""

from django.db.models import TextChoices


class NotificationType(TextChoices):
    """All notification types in the system.

    The type is a closed set; clients use it to pick an icon and a route.
    """

    # Registration lifecycle
    REGISTRATION_APPROVED = "registration_approved"
    REGISTRATION_REJECTED = "registration_rejected"
    EVENT_REGISTRATION = "event_registration"

    # Event notifications
    EVENT_REMINDER = "event_reminder"
    EVENT_UPDATED = "event_updated"
    EVENT_CANCELLED = "event_cancelled"

    # Organizer applications
    ORGANIZER_APPLICATION = "organizer_application"
    ORGANIZER_APPROVED = "organizer_approved"
    ORGANIZER_REJECTED = "organizer_rejected"

    # Co-organizers
    ORGANIZER_MEMBER_ADDED = "organizer_member_added"
    ORGANIZER_MEMBER_REMOVED = "organizer_member_removed"

    # Reviews and discussions
    DISCUSSION_REPLY = "discussion_reply"
    EVENT_REVIEW = "event_review"
    EVENT_REVIEW_REMINDER = "event_review_reminder"
