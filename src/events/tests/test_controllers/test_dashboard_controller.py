import typing as t

import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from accounts.models import LightEventUser
from events.models import Event, Registration
from events.service.registration import RegistrationLifecycle

pytestmark = pytest.mark.django_db


def test_my_registrations(user_client: Client, user: LightEventUser, event: Event) -> None:
    RegistrationLifecycle(event).register(user)

    response = user_client.get(reverse("api:dashboard_registrations"))

    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 1
    assert results[0]["event"]["title"] == event.title


def test_my_organized_events_include_drafts(
    organizer_client: Client, event_factory: t.Callable[..., Event]
) -> None:
    event_factory(status=Event.EventStatus.DRAFT)
    event_factory()

    response = organizer_client.get(reverse("api:dashboard_organized_events"))

    assert response.status_code == 200
    assert response.json()["count"] == 2


def test_pay_for_registration(
    user_client: Client, user: LightEventUser, event_factory: t.Callable[..., Event]
) -> None:
    event = event_factory(is_paid=True, price="20.00")
    registration = RegistrationLifecycle(event).register(user)
    assert registration.status == Registration.Status.PAYMENT_PENDING

    response = user_client.post(reverse("api:pay_registration", kwargs={"registration_id": registration.id}))

    assert response.status_code == 200, response.content
    data = response.json()
    assert data["status"] == "paid"
    assert data["verification_code"]


def test_cannot_pay_for_someone_else(
    organizer_client: Client, user: LightEventUser, event_factory: t.Callable[..., Event]
) -> None:
    event = event_factory(is_paid=True, price="20.00")
    registration = RegistrationLifecycle(event).register(user)

    response = organizer_client.post(reverse("api:pay_registration", kwargs={"registration_id": registration.id}))

    assert response.status_code == 404


def test_dashboard_requires_login(client: Client) -> None:
    assert client.get(reverse("api:dashboard_registrations")).status_code == 401
