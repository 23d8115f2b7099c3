"""Django admin for notifications."""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = [
        "notification_type",
        "user_email",
        "title_short",
        "related_event",
        "is_read",
        "created_at",
    ]
    list_filter = ["notification_type", "read_at", "created_at"]
    search_fields = ["user__email", "user__username", "title", "content"]
    raw_id_fields = ["user", "related_event"]
    readonly_fields = ["id", "notification_type", "created_at", "updated_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        ("Basic Information", {"fields": ("id", "notification_type", "user", "related_event")}),
        ("Message", {"fields": ("title", "content")}),
        ("Status", {"fields": ("read_at",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    def user_email(self, obj: Notification) -> str:
        """Get user email."""
        return obj.user.email

    user_email.short_description = "User"  # type: ignore[attr-defined]

    def title_short(self, obj: Notification) -> str:
        """Get shortened title."""
        if len(obj.title) > 50:
            return obj.title[:50] + "..."
        return obj.title

    title_short.short_description = "Title"  # type: ignore[attr-defined]

    def is_read(self, obj: Notification) -> bool:
        return obj.is_read

    is_read.boolean = True  # type: ignore[attr-defined]
    is_read.short_description = "Read"  # type: ignore[attr-defined]
