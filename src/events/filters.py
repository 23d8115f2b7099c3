from django.db.models import Q
from ninja import FilterSchema

from events.models import Event, Registration


class EventFilterSchema(FilterSchema):
    event_type: Event.EventType | None = None
    status: Event.EventStatus | None = None


class RegistrationFilterSchema(FilterSchema):
    status: Registration.Status | None = None
    search: str | None = None

    def filter_search(self, search: str | None) -> Q:
        """Match the participant's name, email or phone."""
        if not search:
            return Q()
        return (
            Q(participant_name__icontains=search)
            | Q(participant_email__icontains=search)
            | Q(participant_phone__icontains=search)
        )
