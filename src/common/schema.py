"""Common schemas for the API."""

import typing as t

from ninja import Schema
from pydantic import AfterValidator, StringConstraints

from .utils import is_valid_email, is_valid_phone, sanitize_text

StrippedString = t.Annotated[str, StringConstraints(strip_whitespace=True)]
OneToOneFiftyString = t.Annotated[str, StringConstraints(min_length=1, max_length=150, strip_whitespace=True)]
OneToTwoHundredString = t.Annotated[str, StringConstraints(min_length=1, max_length=200, strip_whitespace=True)]


def _validate_email(value: str) -> str:
    if not is_valid_email(value):
        raise ValueError("Invalid email address.")
    return value


def _validate_phone(value: str) -> str:
    if value and not is_valid_phone(value):
        raise ValueError("Invalid phone number.")
    return value


ContactEmail = t.Annotated[str, StringConstraints(strip_whitespace=True, max_length=254), AfterValidator(_validate_email)]
ContactPhone = t.Annotated[str, StringConstraints(strip_whitespace=True, max_length=32), AfterValidator(_validate_phone)]
SanitizedText = t.Annotated[str, AfterValidator(sanitize_text)]


class VersionResponse(Schema):
    version: str


class ResponseOk(Schema):
    status: t.Literal["ok"] = "ok"


class ResponseMessage(Schema):
    message: str


class ValidationErrorResponse(Schema):
    errors: dict[str, str | list[str]]


def _sanitize_non_empty(value: str) -> str:
    value = sanitize_text(value)
    if not value:
        raise ValueError("This field cannot be empty.")
    return value


NonEmptyText = t.Annotated[str, AfterValidator(_sanitize_non_empty)]
