"""Review and discussion schemas."""

from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import Field

from accounts.schema import MinimalUserSchema
from common.schema import NonEmptyText, SanitizedText


class ReviewCreateSchema(Schema):
    rating: int = Field(..., ge=1, le=5)
    comment: SanitizedText = ""
    is_public: bool = True


class ReviewSchema(Schema):
    id: UUID
    user: MinimalUserSchema
    rating: int
    comment: str
    is_public: bool
    created_at: datetime


class ReviewSummarySchema(Schema):
    count: int
    average: float | None = None


class ReviewEligibilitySchema(Schema):
    allowed: bool
    reason: str | None = None


class DiscussionCreateSchema(Schema):
    content: NonEmptyText


class DiscussionReplySchema(Schema):
    id: UUID
    author: MinimalUserSchema
    reply_to_user: MinimalUserSchema | None = None
    content: str
    created_at: datetime


class DiscussionThreadSchema(Schema):
    id: UUID
    author: MinimalUserSchema
    content: str
    is_pinned: bool
    created_at: datetime
    last_activity_at: datetime | None = None
    replies: list[DiscussionReplySchema]

    @staticmethod
    def resolve_replies(obj: object) -> list[object]:
        return list(getattr(obj, "visible_replies", []))
