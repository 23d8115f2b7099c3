from .discussion import Discussion
from .event import Event, EventOrganizer
from .registration import Registration
from .review import Review

__all__ = [
    "Discussion",
    "Event",
    "EventOrganizer",
    "Registration",
    "Review",
]
