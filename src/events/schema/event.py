"""Event-related schemas."""

import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Schema
from pydantic import AwareDatetime, Field, StringConstraints, field_validator, model_validator

from accounts.schema import MinimalUserSchema
from common.schema import NonEmptyText, OneToTwoHundredString, SanitizedText, StrippedString
from events.models import Event, EventOrganizer

TagString = t.Annotated[str, StringConstraints(min_length=1, max_length=30, strip_whitespace=True)]


class EventEditSchema(Schema):
    title: OneToTwoHundredString | None = None
    description: SanitizedText | None = None
    event_type: Event.EventType | None = None
    start_time: AwareDatetime | None = None
    end_time: AwareDatetime | None = None
    location: StrippedString | None = Field(None, max_length=255)
    detailed_address: StrippedString | None = Field(None, max_length=500)
    contact_info: StrippedString | None = Field(None, max_length=255)
    tags: list[TagString] | None = Field(None, max_length=10)
    max_participants: int | None = Field(None, ge=1)
    is_paid: bool | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    price_description: StrippedString | None = Field(None, max_length=255)
    registration_deadline: AwareDatetime | None = None
    requires_approval: bool | None = None
    status: Event.EventStatus | None = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Event.EventStatus | None) -> Event.EventStatus | None:
        if v == Event.EventStatus.CANCELLED:
            raise ValueError("Use the cancel endpoint to cancel an event.")
        return v

    @model_validator(mode="after")
    def validate_times(self) -> t.Self:
        """Cross-check the times when both are given."""
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("End time must be after start time.")
        return self


class EventUpdateSchema(EventEditSchema):
    notify_message: SanitizedText = Field("", description="Optional message sent to participants with the update")


class EventCreateSchema(EventEditSchema):
    title: OneToTwoHundredString
    description: NonEmptyText
    event_type: Event.EventType = Event.EventType.OTHER
    start_time: AwareDatetime
    end_time: AwareDatetime
    location: StrippedString = Field(..., min_length=1, max_length=255)
    tags: list[TagString] = Field(default_factory=list, max_length=10)
    is_paid: bool = False
    requires_approval: bool = False
    status: t.Literal[Event.EventStatus.DRAFT, Event.EventStatus.PUBLISHED] = Event.EventStatus.PUBLISHED


class EventCancelSchema(Schema):
    reason: SanitizedText = ""


class EventSchema(Schema):
    id: UUID
    title: str
    description: str
    event_type: Event.EventType
    status: Event.EventStatus
    start_time: datetime
    end_time: datetime
    location: str
    detailed_address: str
    cover_image: str | None = None
    contact_info: str
    tags: list[str]
    max_participants: int | None
    is_paid: bool
    price: Decimal | None
    price_description: str
    registration_deadline: datetime | None
    effective_registration_deadline: datetime
    requires_approval: bool
    has_ended: bool
    organizer: MinimalUserSchema
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def resolve_cover_image(obj: Event) -> str | None:
        return obj.cover_image.url if obj.cover_image else None


class EventDetailSchema(EventSchema):
    occupied_seats: int = 0

    @staticmethod
    def resolve_occupied_seats(obj: Event) -> int:
        from events.service.registration.capacity import registration_occupying_statuses

        return obj.registrations.all().with_status(registration_occupying_statuses(obj)).count()


class CoOrganizerAddSchema(Schema):
    email: StrippedString = Field(..., min_length=3, max_length=254)
    role: EventOrganizer.OrganizerRole = EventOrganizer.OrganizerRole.MEMBER


class CoOrganizerSchema(Schema):
    user: MinimalUserSchema
    role: EventOrganizer.OrganizerRole
    created_at: datetime
