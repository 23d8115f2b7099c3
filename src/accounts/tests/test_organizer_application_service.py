import pytest

from accounts.models import LightEventUser, OrganizerApplication
from accounts.roles import Role
from accounts.schema import OrganizerApplicationCreateSchema
from accounts.service import organizer_application as application_service
from common.exceptions import PermissionDeniedError, PreconditionFailedError
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def _payload() -> OrganizerApplicationCreateSchema:
    return OrganizerApplicationCreateSchema(
        organizer_name="Trail Runners",
        organizer_description="Weekly runs in the hills.",
        contact_email="runners@example.com",
        contact_phone="13700000000",
    )


def test_submit_notifies_admins(user: LightEventUser, admin_user: LightEventUser) -> None:
    application = application_service.submit_organizer_application(user, _payload())

    assert application.status == OrganizerApplication.Status.PENDING
    notice = Notification.objects.get(notification_type=NotificationType.ORGANIZER_APPLICATION)
    assert notice.user == admin_user


def test_one_pending_application_at_a_time(user: LightEventUser) -> None:
    application_service.submit_organizer_application(user, _payload())

    with pytest.raises(PreconditionFailedError):
        application_service.submit_organizer_application(user, _payload())


def test_organizers_cannot_apply(organizer: LightEventUser) -> None:
    with pytest.raises(PreconditionFailedError):
        application_service.submit_organizer_application(organizer, _payload())


def test_approval_promotes_the_applicant(user: LightEventUser, admin_user: LightEventUser) -> None:
    application = application_service.submit_organizer_application(user, _payload())

    application = application_service.review_organizer_application(
        application, admin_user, approved=True, notes="Welcome"
    )

    user.refresh_from_db()
    assert application.status == OrganizerApplication.Status.APPROVED
    assert application.reviewed_by == admin_user
    assert user.role == Role.ORGANIZER
    assert user.organizer_name == "Trail Runners"
    assert user.contact_email == "runners@example.com"
    # the profile phone was already set and is kept
    assert user.contact_phone == "13800000000"
    notice = Notification.objects.get(user=user, notification_type=NotificationType.ORGANIZER_APPROVED)
    assert "Welcome" in notice.content


def test_rejection_keeps_the_role(user: LightEventUser, admin_user: LightEventUser) -> None:
    application = application_service.submit_organizer_application(user, _payload())

    application_service.review_organizer_application(application, admin_user, approved=False)

    user.refresh_from_db()
    assert user.role == Role.USER
    assert Notification.objects.filter(user=user, notification_type=NotificationType.ORGANIZER_REJECTED).exists()
    # a new application can be filed after a rejection
    application_service.submit_organizer_application(user, _payload())


def test_application_is_reviewed_once(user: LightEventUser, admin_user: LightEventUser) -> None:
    application = application_service.submit_organizer_application(user, _payload())
    application_service.review_organizer_application(application, admin_user, approved=False)

    with pytest.raises(PreconditionFailedError):
        application_service.review_organizer_application(application, admin_user, approved=True)


def test_only_admins_review(user: LightEventUser, organizer: LightEventUser) -> None:
    application = application_service.submit_organizer_application(user, _payload())

    with pytest.raises(PermissionDeniedError):
        application_service.review_organizer_application(application, organizer, approved=True)
