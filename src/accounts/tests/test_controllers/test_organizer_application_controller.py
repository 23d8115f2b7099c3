import orjson
import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from accounts.models import LightEventUser, OrganizerApplication
from accounts.roles import Role

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "organizer_name": "Book Club",
    "organizer_description": "Monthly reading nights.",
    "contact_email": "club@example.com",
}


def test_apply_and_get_approved(user_client: Client, admin_client_jwt: Client, user: LightEventUser) -> None:
    response = user_client.post(
        reverse("api:submit_organizer_application"), data=orjson.dumps(PAYLOAD), content_type="application/json"
    )
    assert response.status_code == 201, response.content
    application_id = response.json()["id"]

    listing = admin_client_jwt.get(reverse("api:list_organizer_applications"), {"status": "pending"})
    assert [a["id"] for a in listing.json()["results"]] == [application_id]

    response = admin_client_jwt.post(
        reverse("api:review_organizer_application", kwargs={"application_id": application_id}),
        data=orjson.dumps({"approved": True}),
        content_type="application/json",
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    user.refresh_from_db()
    assert user.role == Role.ORGANIZER


def test_mine(user_client: Client, user: LightEventUser) -> None:
    OrganizerApplication.objects.create(user=user, **PAYLOAD)

    response = user_client.get(reverse("api:my_organizer_applications"))

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_non_admins_cannot_review(user_client: Client, user: LightEventUser) -> None:
    application = OrganizerApplication.objects.create(user=user, **PAYLOAD)

    listing = user_client.get(reverse("api:list_organizer_applications"))
    review = user_client.post(
        reverse("api:review_organizer_application", kwargs={"application_id": application.id}),
        data=orjson.dumps({"approved": True}),
        content_type="application/json",
    )

    assert listing.status_code == 403
    assert review.status_code == 403


def test_duplicate_pending_application(user_client: Client, user: LightEventUser) -> None:
    OrganizerApplication.objects.create(user=user, **PAYLOAD)

    response = user_client.post(
        reverse("api:submit_organizer_application"), data=orjson.dumps(PAYLOAD), content_type="application/json"
    )

    assert response.status_code == 400
