"""Schemas for notification API."""

from datetime import datetime
from uuid import UUID

from ninja import Schema

from notifications.enums import NotificationType


class NotificationSchema(Schema):
    """Schema for notification response."""

    id: UUID
    notification_type: NotificationType
    title: str
    content: str
    related_event_id: UUID | None = None
    is_read: bool
    read_at: datetime | None
    created_at: datetime


class UnreadCountSchema(Schema):
    """Schema for unread count response."""

    count: int


class MarkAllReadResponseSchema(Schema):
    """How many notifications were flipped to read."""

    updated: int
