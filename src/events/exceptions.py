"""Business-rule failures raised by the events services."""

from enum import StrEnum

from django.utils.translation import gettext_noop

from common.exceptions import NotFoundError, PermissionDeniedError, PreconditionFailedError


class RejectionReason(StrEnum):
    """Why a registration attempt was refused.

    Note: Strings are marked with gettext_noop() for translation extraction.
    """

    ALREADY_REGISTERED = gettext_noop("You are already registered for this event.")
    CAPACITY_EXCEEDED = gettext_noop("The event is full.")
    DEADLINE_PASSED = gettext_noop("The registration deadline has passed.")
    DRAFT_EVENT = gettext_noop("The event is not published yet.")
    EVENT_CANCELLED = gettext_noop("The event has been cancelled.")


class RegistrationRejectedError(PreconditionFailedError):
    """Raised when a registration attempt violates a precondition."""

    code = "registration_rejected"

    def __init__(self, reason: RejectionReason, message: str | None = None) -> None:
        super().__init__(message or str(reason))
        self.reason = reason


class CapacityExceededError(PreconditionFailedError):
    """Raised when approving a registration would exceed the event's capacity."""

    code = "capacity_exceeded"

    def __init__(self, occupied: int, limit: int) -> None:
        super().__init__(f"The event is full ({occupied}/{limit}).")
        self.occupied = occupied
        self.limit = limit


class InvalidTransitionError(PreconditionFailedError):
    """Raised when a registration is not in a state that allows the requested transition."""

    code = "invalid_transition"

    def __init__(self, current: str, action: str) -> None:
        super().__init__(f"Cannot {action} a registration that is {current}.")
        self.current = current
        self.action = action


class AlreadyUsedError(PreconditionFailedError):
    """Raised when a verification code has already been consumed by a check-in."""

    code = "already_used"


class ReviewNotAllowedError(PreconditionFailedError):
    """Raised when a user may not review an event."""

    code = "review_not_allowed"


class NotAnOrganizerError(PermissionDeniedError):
    """Raised when the acting user does not manage the event."""

    code = "not_an_organizer"


class InvalidCodeError(NotFoundError):
    """Raised when no registration of the event matches a verification code."""

    code = "invalid_code"
