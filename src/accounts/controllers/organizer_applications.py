import typing as t
from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route
from ninja_extra.exceptions import PermissionDenied
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.permissions import BasePermission
from ninja_jwt.authentication import JWTAuth

from accounts import roles, schema
from accounts.models import OrganizerApplication
from accounts.service import organizer_application as application_service
from common.controllers import UserAwareController
from common.throttling import WriteThrottle


class IsAdmin(BasePermission):
    def has_permission(self, request: t.Any, controller: t.Any) -> bool:
        """Only admins may review applications."""
        if roles.can_review_organizer_applications(getattr(request.user, "role", "")):
            return True
        raise PermissionDenied("Only admins can review organizer applications.")


@api_controller("/organizer-applications", auth=JWTAuth(), tags=["Organizer Applications"])
class OrganizerApplicationController(UserAwareController):
    @route.post(
        "/",
        url_name="submit_organizer_application",
        response={201: schema.OrganizerApplicationSchema},
        throttle=WriteThrottle(),
    )
    def submit(self, payload: schema.OrganizerApplicationCreateSchema) -> tuple[int, OrganizerApplication]:
        """Apply to become an organizer. Admins are notified and review the application."""
        return 201, application_service.submit_organizer_application(self.user(), payload)

    @route.get("/mine", url_name="my_organizer_applications", response=list[schema.OrganizerApplicationSchema])
    def my_applications(self) -> QuerySet[OrganizerApplication]:
        """Your applications, newest first."""
        return OrganizerApplication.objects.filter(user=self.user()).select_related("user").order_by("-created_at")

    @route.get(
        "/",
        url_name="list_organizer_applications",
        response=PaginatedResponseSchema[schema.OrganizerApplicationSchema],
        permissions=[IsAdmin()],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_applications(
        self, status: OrganizerApplication.Status | None = None
    ) -> QuerySet[OrganizerApplication]:
        """List applications for review, oldest first. Admins only."""
        qs = OrganizerApplication.objects.select_related("user").order_by("created_at")
        if status:
            qs = qs.filter(status=status)
        return qs

    @route.post(
        "/{uuid:application_id}/review",
        url_name="review_organizer_application",
        response=schema.OrganizerApplicationSchema,
        permissions=[IsAdmin()],
        throttle=WriteThrottle(),
    )
    def review(
        self, application_id: UUID, payload: schema.OrganizerApplicationReviewSchema
    ) -> OrganizerApplication:
        """Approve or reject an application. Approval makes the applicant an organizer."""
        application = get_object_or_404(OrganizerApplication, pk=application_id)
        return application_service.review_organizer_application(
            application, self.user(), approved=payload.approved, notes=payload.admin_notes
        )
