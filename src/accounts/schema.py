"""Schema for accounts module."""

import datetime
import typing as t

from ninja import ModelSchema, Schema
from pydantic import UUID4, EmailStr, Field, model_validator

from accounts.models import LightEventUser, OrganizerApplication
from accounts.password_validation import validate_password
from common.schema import ContactEmail, ContactPhone, OneToTwoHundredString, SanitizedText, StrippedString


class LightEventUserSchema(ModelSchema):
    id: UUID4
    display_name: str
    role: str
    avatar: str | None = None

    class Meta:
        model = LightEventUser
        fields = [
            "email",
            "nickname",
            "contact_email",
            "contact_phone",
            "bio",
            "organizer_name",
            "organizer_description",
            "role",
        ]

    @staticmethod
    def resolve_avatar(obj: LightEventUser) -> str | None:
        return obj.avatar.url if obj.avatar else None


class MinimalUserSchema(Schema):
    id: UUID4
    display_name: str


class PasswordMixin(Schema):
    password1: str = Field(..., description="Password", min_length=8, max_length=150)
    password2: str = Field(..., description="Password confirmation", min_length=8, max_length=150)

    @model_validator(mode="after")
    def password_match(self) -> t.Self:
        """Validate that the passwords match."""
        if self.password1 != self.password2:
            raise ValueError("Passwords do not match")
        return self


class RegisterUserSchema(PasswordMixin):
    email: EmailStr
    nickname: StrippedString = Field("", max_length=100)

    @model_validator(mode="after")
    def validate_password(self) -> t.Self:
        """Validate the password."""
        tmp_user = LightEventUser(email=self.email, username=self.email, nickname=self.nickname)
        validate_password(self.password1, user=tmp_user)
        return self


class ProfileUpdateSchema(Schema):
    nickname: StrippedString | None = Field(None, max_length=100)
    contact_email: ContactEmail | None = None
    contact_phone: ContactPhone | None = None
    bio: SanitizedText | None = None
    organizer_name: StrippedString | None = Field(None, max_length=200)
    organizer_description: SanitizedText | None = None


class OrganizerApplicationCreateSchema(Schema):
    organizer_name: OneToTwoHundredString
    organizer_description: SanitizedText
    contact_email: ContactEmail
    contact_phone: ContactPhone = ""


class OrganizerApplicationSchema(ModelSchema):
    id: UUID4
    user: MinimalUserSchema
    reviewed_at: datetime.datetime | None = None

    class Meta:
        model = OrganizerApplication
        fields = [
            "organizer_name",
            "organizer_description",
            "contact_email",
            "contact_phone",
            "status",
            "admin_notes",
            "created_at",
        ]


class OrganizerApplicationReviewSchema(Schema):
    approved: bool
    admin_notes: SanitizedText = ""
