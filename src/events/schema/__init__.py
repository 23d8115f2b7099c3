"""Events schema package.

All schemas are re-exported here.
"""

from .event import (
    CoOrganizerAddSchema,
    CoOrganizerSchema,
    EventCancelSchema,
    EventCreateSchema,
    EventDetailSchema,
    EventEditSchema,
    EventSchema,
    EventUpdateSchema,
)
from .registration import (
    AdminRegistrationSchema,
    CheckInSchema,
    MyRegistrationSchema,
    RegistrationCreateSchema,
    RegistrationSchema,
)
from .review import (
    DiscussionCreateSchema,
    DiscussionReplySchema,
    DiscussionThreadSchema,
    ReviewCreateSchema,
    ReviewEligibilitySchema,
    ReviewSchema,
    ReviewSummarySchema,
)

__all__ = [
    "AdminRegistrationSchema",
    "CheckInSchema",
    "CoOrganizerAddSchema",
    "CoOrganizerSchema",
    "DiscussionCreateSchema",
    "DiscussionReplySchema",
    "DiscussionThreadSchema",
    "EventCancelSchema",
    "EventCreateSchema",
    "EventDetailSchema",
    "EventEditSchema",
    "EventSchema",
    "EventUpdateSchema",
    "MyRegistrationSchema",
    "RegistrationCreateSchema",
    "RegistrationSchema",
    "ReviewCreateSchema",
    "ReviewEligibilitySchema",
    "ReviewSchema",
    "ReviewSummarySchema",
]
