"""Registration-related schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Schema
from pydantic import Field

from accounts.schema import MinimalUserSchema
from common.schema import ContactEmail, ContactPhone, StrippedString
from events.models import Registration

from .event import EventSchema


class RegistrationCreateSchema(Schema):
    """Optional overrides of the profile snapshot taken at registration time."""

    participant_name: StrippedString | None = Field(None, min_length=1, max_length=150)
    participant_email: ContactEmail | None = None
    participant_phone: ContactPhone | None = None


class RegistrationSchema(Schema):
    """A participant's view of their own registration."""

    id: UUID
    event_id: UUID
    status: Registration.Status
    participant_name: str
    participant_email: str
    participant_phone: str
    payment_amount: Decimal | None
    verification_code: str | None
    checked_in_at: datetime | None
    created_at: datetime
    updated_at: datetime


class MyRegistrationSchema(RegistrationSchema):
    event: EventSchema


class AdminRegistrationSchema(RegistrationSchema):
    """An organizer's view of a registration."""

    user: MinimalUserSchema
    checked_in_by: MinimalUserSchema | None = None


class CheckInSchema(Schema):
    code: StrippedString = Field(..., min_length=1, max_length=16)
