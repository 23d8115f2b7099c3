"""Organizer applications: users ask to be promoted, admins decide."""

import structlog
from django.db import transaction
from django.utils import timezone

from accounts import roles, schema
from accounts.models import LightEventUser, OrganizerApplication
from common.exceptions import NotFoundError, PermissionDeniedError, PreconditionFailedError
from notifications.enums import NotificationType
from notifications.service import messages
from notifications.service.emitter import notify, notify_many

logger = structlog.get_logger(__name__)


@transaction.atomic
def submit_organizer_application(
    user: LightEventUser, payload: schema.OrganizerApplicationCreateSchema
) -> OrganizerApplication:
    """File an application and tell every admin about it.

    Raises:
        PreconditionFailedError: the user already organizes events or has a pending application.
    """
    user = LightEventUser.objects.select_for_update().get(pk=user.pk)
    if not roles.can_apply_as_organizer(user.role):
        raise PreconditionFailedError("You are already an organizer.")
    if OrganizerApplication.objects.filter(user=user, status=OrganizerApplication.Status.PENDING).exists():
        raise PreconditionFailedError("You already have a pending organizer application.")

    application = OrganizerApplication.objects.create(user=user, **payload.model_dump())
    logger.info("organizer_application_submitted", application_id=str(application.id), user_id=str(user.id))

    notify_many(
        LightEventUser.objects.admins(),
        messages.organizer_application(user.get_display_name(), application.organizer_name),
        NotificationType.ORGANIZER_APPLICATION,
    )
    return application


@transaction.atomic
def review_organizer_application(
    application: OrganizerApplication, admin: LightEventUser, *, approved: bool, notes: str = ""
) -> OrganizerApplication:
    """Approve or reject a pending application.

    Approval promotes the applicant to organizer and copies the organizer details
    into their profile.
    """
    if not roles.can_review_organizer_applications(admin.role):
        raise PermissionDeniedError("Only admins can review organizer applications.")
    try:
        application = OrganizerApplication.objects.select_for_update().select_related("user").get(pk=application.pk)
    except OrganizerApplication.DoesNotExist as e:
        raise NotFoundError("Organizer application not found.") from e
    if application.status != OrganizerApplication.Status.PENDING:
        raise PreconditionFailedError("This application has already been reviewed.")

    application.status = OrganizerApplication.Status.APPROVED if approved else OrganizerApplication.Status.REJECTED
    application.admin_notes = notes
    application.reviewed_by = admin
    application.reviewed_at = timezone.now()
    application.save()

    applicant = application.user
    if approved:
        applicant.role = roles.Role.ORGANIZER
        applicant.organizer_name = application.organizer_name
        applicant.organizer_description = application.organizer_description
        applicant.contact_email = applicant.contact_email or application.contact_email
        applicant.contact_phone = applicant.contact_phone or application.contact_phone
        applicant.save(
            update_fields=["role", "organizer_name", "organizer_description", "contact_email", "contact_phone"]
        )

    logger.info(
        "organizer_application_reviewed",
        application_id=str(application.id),
        reviewer_id=str(admin.id),
        approved=approved,
    )
    notify(
        applicant,
        messages.organizer_decision(application.organizer_name, approved, notes),
        NotificationType.ORGANIZER_APPROVED if approved else NotificationType.ORGANIZER_REJECTED,
    )
    return application
