from django.contrib import admin

from events import models


class EventOrganizerInline(admin.TabularInline):  # type: ignore[type-arg]
    model = models.EventOrganizer
    extra = 0
    raw_id_fields = ["user"]
    fields = ["user", "role", "created_at"]
    readonly_fields = ["created_at"]


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["title", "organizer", "event_type", "status", "start_time", "max_participants", "is_paid"]
    list_filter = ["status", "event_type", "is_paid", "requires_approval"]
    search_fields = ["title", "description", "location", "organizer__email"]
    raw_id_fields = ["organizer"]
    readonly_fields = ["id", "created_at", "updated_at"]
    date_hierarchy = "start_time"
    ordering = ["-start_time"]
    inlines = [EventOrganizerInline]


@admin.register(models.Registration)
class RegistrationAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["participant_name", "event", "status", "verification_code", "checked_in_at", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["participant_name", "participant_email", "participant_phone", "verification_code"]
    raw_id_fields = ["event", "user", "checked_in_by"]
    readonly_fields = ["id", "verification_code", "checked_in_at", "checked_in_by", "created_at", "updated_at"]
    ordering = ["-created_at"]


@admin.register(models.Review)
class ReviewAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["event", "user", "rating", "is_public", "created_at"]
    list_filter = ["rating", "is_public"]
    search_fields = ["event__title", "user__email", "comment"]
    raw_id_fields = ["event", "user"]


@admin.register(models.Discussion)
class DiscussionAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["event", "author", "content_short", "parent", "is_pinned", "is_deleted", "created_at"]
    list_filter = ["is_pinned", "is_deleted"]
    search_fields = ["content", "author__email", "event__title"]
    raw_id_fields = ["event", "author", "parent", "reply_to_user"]

    def content_short(self, obj: models.Discussion) -> str:
        """Get shortened content."""
        if len(obj.content) > 50:
            return obj.content[:50] + "..."
        return obj.content

    content_short.short_description = "Content"  # type: ignore[attr-defined]
