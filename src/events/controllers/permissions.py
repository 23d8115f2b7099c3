from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.permissions import BasePermission

from events import models


class RootPermission(BasePermission):
    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Must implement abstract method. This is due to an error in Ninja Extra.

        This Method will be ignored, only has_object_permission will be called.
        """
        return True


class IsEventManager(RootPermission):
    def has_object_permission(self, request: HttpRequest, controller: ControllerBase, obj: models.Event) -> bool:
        """Primary organizer, co-organizers and admins."""
        return obj.is_manager(request.user)  # type: ignore[arg-type]


class IsPrimaryOrganizer(RootPermission):
    def has_object_permission(self, request: HttpRequest, controller: ControllerBase, obj: models.Event) -> bool:
        """Only the primary organizer or an admin may delete the event or change its team."""
        user = request.user
        return obj.organizer_id == user.id or bool(getattr(user, "is_admin", False))
