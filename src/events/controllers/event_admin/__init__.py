"""Event admin controllers package.

Endpoints for the people who run an event: editing and cancelling it,
managing co-organizers, and handling registrations and check-in.
"""

from .core import EventAdminCoreController
from .organizers import EventAdminOrganizersController
from .registrations import EventAdminRegistrationsController

EVENT_ADMIN_CONTROLLERS: list[type] = [
    EventAdminCoreController,
    EventAdminOrganizersController,
    EventAdminRegistrationsController,
]

__all__ = [
    "EventAdminCoreController",
    "EventAdminOrganizersController",
    "EventAdminRegistrationsController",
    "EVENT_ADMIN_CONTROLLERS",
]
