"""Verification codes: single-use check-in tokens."""

import secrets
import string

import structlog
from django.conf import settings

from common.exceptions import StorageError
from events.exceptions import InvalidCodeError
from events.models import Event, Registration

logger = structlog.get_logger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int | None = None) -> str:
    """Draw a code uniformly from ``[A-Z0-9]``."""
    length = length or settings.VERIFICATION_CODE_LENGTH
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return code.strip().upper()


def issue_code(event: Event) -> str:
    """Issue a code that is not yet used by any registration of the event.

    Raises:
        StorageError: no free code was found within the configured attempts.
    """
    for attempt in range(settings.VERIFICATION_CODE_MAX_ATTEMPTS):
        code = generate_code()
        if not Registration.objects.filter(event=event, verification_code=code).exists():
            return code
        logger.warning("verification_code_collision", event_id=str(event.id), attempt=attempt)
    raise StorageError("Could not issue a unique verification code.")


def resolve_code(code: str, event: Event) -> Registration:
    """Find the registration of the event holding the code (case-insensitive).

    Raises:
        InvalidCodeError: no registration of this event holds the code.
    """
    registration = (
        Registration.objects.select_related("user", "event")
        .filter(event=event, verification_code=normalize_code(code))
        .first()
    )
    if registration is None:
        raise InvalidCodeError("Invalid verification code.")
    return registration
