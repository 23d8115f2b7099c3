import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from accounts.models import LightEventUser
from conftest import LightEventUserFactory
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def _notification(user: LightEventUser, notification_type: NotificationType = NotificationType.EVENT_UPDATED) -> Notification:
    return Notification.objects.create(user=user, title="Title", content="Content", notification_type=notification_type)


def test_list_only_own_notifications(
    user_client: Client, user: LightEventUser, user_factory: LightEventUserFactory
) -> None:
    mine = _notification(user)
    _notification(user_factory())

    response = user_client.get(reverse("api:list_notifications"))

    assert response.status_code == 200
    assert [n["id"] for n in response.json()["results"]] == [str(mine.id)]


def test_filters(user_client: Client, user: LightEventUser) -> None:
    _notification(user, NotificationType.EVENT_CANCELLED)
    read = _notification(user, NotificationType.EVENT_UPDATED)
    read.mark_read()

    unread = user_client.get(reverse("api:list_notifications"), {"unread_only": "true"}).json()
    by_type = user_client.get(reverse("api:list_notifications"), {"notification_type": "event_updated"}).json()

    assert [n["notification_type"] for n in unread["results"]] == ["event_cancelled"]
    assert [n["id"] for n in by_type["results"]] == [str(read.id)]


def test_unread_count_and_mark_all(user_client: Client, user: LightEventUser) -> None:
    _notification(user)
    _notification(user)

    assert user_client.get(reverse("api:unread_count")).json() == {"count": 2}

    response = user_client.post(reverse("api:mark_all_notifications_read"))

    assert response.json() == {"updated": 2}
    assert user_client.get(reverse("api:unread_count")).json() == {"count": 0}


def test_mark_read_and_unread(user_client: Client, user: LightEventUser) -> None:
    notification = _notification(user)

    response = user_client.post(reverse("api:mark_notification_read", kwargs={"notification_id": notification.id}))
    assert response.status_code == 200
    assert response.json()["is_read"] is True

    response = user_client.post(reverse("api:mark_notification_unread", kwargs={"notification_id": notification.id}))
    assert response.json()["is_read"] is False


def test_cannot_touch_other_users_notifications(
    user_client: Client, user_factory: LightEventUserFactory
) -> None:
    notification = _notification(user_factory())

    response = user_client.post(reverse("api:mark_notification_read", kwargs={"notification_id": notification.id}))

    assert response.status_code == 404
    notification.refresh_from_db()
    assert notification.read_at is None
