"""User roles and the capabilities they grant.

A user holds exactly one role. Capabilities are derived from it; call sites ask
for a capability, never for a role name.
"""

from django.db.models import TextChoices


class Role(TextChoices):
    USER = "user", "User"
    ORGANIZER = "organizer", "Organizer"
    ADMIN = "admin", "Admin"


def is_admin(role: str) -> bool:
    return role == Role.ADMIN


def can_create_events(role: str) -> bool:
    """Organizers and admins may publish events."""
    return role in (Role.ORGANIZER, Role.ADMIN)


def can_review_organizer_applications(role: str) -> bool:
    return is_admin(role)


def can_apply_as_organizer(role: str) -> bool:
    return not can_create_events(role)
