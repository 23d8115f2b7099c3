"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from accounts.models import LightEventUser, OrganizerApplication


@admin.register(LightEventUser)
class LightEventUserAdmin(UserAdmin):  # type: ignore[type-arg]
    list_display = ["username", "email", "nickname", "role", "is_active", "date_joined"]
    list_filter = ["role", "is_active", "is_staff"]
    search_fields = ["username", "email", "nickname", "organizer_name"]
    ordering = ["-date_joined"]

    fieldsets = (
        *UserAdmin.fieldsets,  # type: ignore[misc]
        (
            "Profile",
            {
                "fields": (
                    "nickname",
                    "contact_email",
                    "contact_phone",
                    "bio",
                    "avatar",
                )
            },
        ),
        (
            "Organizer",
            {
                "fields": (
                    "role",
                    "organizer_name",
                    "organizer_description",
                )
            },
        ),
    )


@admin.register(OrganizerApplication)
class OrganizerApplicationAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["organizer_name", "user", "status", "created_at", "reviewed_by", "reviewed_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["organizer_name", "user__email", "contact_email"]
    raw_id_fields = ["user", "reviewed_by"]
    readonly_fields = ["id", "created_at", "updated_at", "reviewed_at"]
    ordering = ["-created_at"]
