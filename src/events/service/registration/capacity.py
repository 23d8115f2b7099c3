"""Capacity guard: does one more occupant fit into the event?"""

import typing as t

from pydantic import BaseModel

from events.models import Event, Registration

Status = Registration.Status

# Which statuses hold a seat depends on where the check happens. Pending
# registrations of approval-required events do not hold a seat, so more of them
# than the capacity may exist; the surplus is refused at approval time.
OCCUPYING_AT_REGISTRATION_WITH_APPROVAL = frozenset({Status.APPROVED, Status.PAID, Status.CHECKED_IN})
OCCUPYING_AT_REGISTRATION = frozenset({Status.APPROVED, Status.PAYMENT_PENDING, Status.PAID, Status.CHECKED_IN})
OCCUPYING_AT_APPROVAL = OCCUPYING_AT_REGISTRATION


class CapacityCheck(BaseModel):
    """Result of a capacity check."""

    allowed: bool
    occupied: int
    limit: int | None = None
    adding: int = 0

    @property
    def would_be(self) -> int:
        return self.occupied + self.adding


def registration_occupying_statuses(event: Event) -> frozenset[str]:
    if event.requires_approval:
        return OCCUPYING_AT_REGISTRATION_WITH_APPROVAL
    return OCCUPYING_AT_REGISTRATION


def check_capacity(
    event: Event,
    occupying_statuses: t.Iterable[str],
    *,
    adding: int,
    exclude: Registration | None = None,
) -> CapacityCheck:
    """Count the registrations that hold a seat and compare against the event limit.

    ``adding`` is 1 when the candidate will itself hold a seat after the
    transition, 0 otherwise. ``exclude`` leaves the candidate's own row out of
    the count. Events without a limit always pass.
    """
    qs = Registration.objects.filter(event=event).with_status(occupying_statuses)
    if exclude is not None:
        qs = qs.exclude(pk=exclude.pk)
    occupied = qs.count()
    limit = event.max_participants
    if limit is None:
        return CapacityCheck(allowed=True, occupied=occupied, limit=None, adding=adding)
    return CapacityCheck(allowed=occupied + adding <= limit, occupied=occupied, limit=limit, adding=adding)
