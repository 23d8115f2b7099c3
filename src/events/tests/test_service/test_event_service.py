import typing as t
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from accounts.models import LightEventUser
from common.exceptions import NotFoundError, PreconditionFailedError
from conftest import LightEventUserFactory
from events.exceptions import NotAnOrganizerError
from events.models import Event, EventOrganizer, Registration
from events.schema import CoOrganizerAddSchema, EventCreateSchema, EventUpdateSchema
from events.service import event_service
from events.service.registration import RegistrationLifecycle, issue_code
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def _create_payload(**overrides: t.Any) -> EventCreateSchema:
    start = timezone.now() + timedelta(days=3)
    data: dict[str, t.Any] = {
        "title": "Board game night",
        "description": "Bring your favourite game.",
        "start_time": start,
        "end_time": start + timedelta(hours=4),
        "location": "Cafe",
    }
    data.update(overrides)
    return EventCreateSchema(**data)


class TestCreateEvent:
    def test_organizer_creates_published_event(self, organizer: LightEventUser) -> None:
        event = event_service.create_event(organizer, _create_payload(tags=["games"], max_participants=10))

        assert event.organizer == organizer
        assert event.status == Event.EventStatus.PUBLISHED
        assert event.tags == ["games"]
        assert event.max_participants == 10

    def test_draft_can_be_requested(self, organizer: LightEventUser) -> None:
        event = event_service.create_event(organizer, _create_payload(status=Event.EventStatus.DRAFT))

        assert event.status == Event.EventStatus.DRAFT

    def test_plain_user_cannot_create(self, user: LightEventUser) -> None:
        with pytest.raises(NotAnOrganizerError):
            event_service.create_event(user, _create_payload())

    def test_admin_can_create(self, admin_user: LightEventUser) -> None:
        assert event_service.create_event(admin_user, _create_payload()).organizer == admin_user

    def test_end_before_start_is_invalid(self) -> None:
        start = timezone.now() + timedelta(days=1)
        with pytest.raises(ValueError):
            _create_payload(start_time=start, end_time=start - timedelta(hours=1))


class TestUpdateEvent:
    def test_update_notifies_participants(self, event: Event, user_factory: LightEventUserFactory) -> None:
        lifecycle = RegistrationLifecycle(event)
        participants = [user_factory(), user_factory()]
        for participant in participants:
            lifecycle.register(participant)

        event = event_service.update_event(
            event, EventUpdateSchema(location="Library", notify_message="We moved to the library")
        )

        assert event.location == "Library"
        notices = Notification.objects.filter(notification_type=NotificationType.EVENT_UPDATED)
        assert {n.user_id for n in notices} == {p.id for p in participants}
        assert all(n.content == "We moved to the library" for n in notices)

    def test_cancelled_event_cannot_be_updated(self, event_factory: t.Callable[..., Event]) -> None:
        event = event_factory(status=Event.EventStatus.CANCELLED)

        with pytest.raises(PreconditionFailedError):
            event_service.update_event(event, EventUpdateSchema(title="New"))

    def test_cancelled_status_is_not_editable(self) -> None:
        with pytest.raises(ValueError):
            EventUpdateSchema(status=Event.EventStatus.CANCELLED)

    def test_cannot_return_to_draft_with_registrations(self, event: Event, user: LightEventUser) -> None:
        registration = RegistrationLifecycle(event).register(user)

        with pytest.raises(PreconditionFailedError):
            event_service.update_event(event, EventUpdateSchema(status=Event.EventStatus.DRAFT))

        event.refresh_from_db()
        registration.refresh_from_db()
        assert event.status == Event.EventStatus.PUBLISHED
        assert registration.status == Registration.Status.APPROVED

    def test_return_to_draft_without_registrations(self, event: Event) -> None:
        event = event_service.update_event(event, EventUpdateSchema(status=Event.EventStatus.DRAFT))

        assert event.status == Event.EventStatus.DRAFT


class TestCancelAndDelete:
    def test_cancel_event(self, event: Event, user: LightEventUser) -> None:
        registration = RegistrationLifecycle(event).register(user)

        event = event_service.cancel_event(event, "Typhoon warning")

        assert event.status == Event.EventStatus.CANCELLED
        registration.refresh_from_db()
        assert registration.status == Registration.Status.CANCELLED
        assert registration.verification_code is None
        notice = Notification.objects.get(user=user, notification_type=NotificationType.EVENT_CANCELLED)
        assert "Typhoon warning" in notice.content

    def test_cannot_cancel_twice(self, event: Event) -> None:
        event_service.cancel_event(event)

        with pytest.raises(PreconditionFailedError):
            event_service.cancel_event(event)

    def test_second_cancel_with_stale_instance_sends_nothing(self, event: Event, user: LightEventUser) -> None:
        RegistrationLifecycle(event).register(user)
        stale = Event.objects.get(pk=event.pk)
        event_service.cancel_event(event, "Storm")

        with pytest.raises(PreconditionFailedError):
            event_service.cancel_event(stale, "Storm")

        assert Notification.objects.filter(notification_type=NotificationType.EVENT_CANCELLED).count() == 1

    def test_delete_notifies_before_removing(self, event: Event, user_factory: LightEventUserFactory) -> None:
        lifecycle = RegistrationLifecycle(event)
        participants = [user_factory() for _ in range(3)]
        for participant in participants:
            lifecycle.register(participant)
        event_id = event.id

        notified = event_service.delete_event(event, "Venue closed")

        assert notified == 3
        assert not Event.objects.filter(pk=event_id).exists()
        assert not Registration.objects.filter(event_id=event_id).exists()
        notices = Notification.objects.filter(notification_type=NotificationType.EVENT_CANCELLED)
        assert notices.count() == 3
        assert {n.user_id for n in notices} == {p.id for p in participants}
        assert all(n.related_event_id is None for n in notices)

    def test_delete_paid_event_with_mixed_registrations(
        self, event_factory: t.Callable[..., Event], user_factory: LightEventUserFactory
    ) -> None:
        event = event_factory(is_paid=True, price=Decimal("20.00"), requires_approval=True)
        lifecycle = RegistrationLifecycle(event)
        waiting, paying, approved = user_factory(), user_factory(), user_factory()
        lifecycle.register(waiting)
        registration = lifecycle.approve(lifecycle.register(paying), event.organizer)
        lifecycle.simulate_payment(registration, paying)
        Registration.objects.create(
            event=event,
            user=approved,
            participant_name="Bo",
            participant_email="bo@example.com",
            status=Registration.Status.APPROVED,
            payment_amount=event.price,
            verification_code=issue_code(event),
        )
        event_id = event.id

        notified = event_service.delete_event(event, "Venue closed")

        assert notified == 3
        assert not Registration.objects.filter(event_id=event_id).exists()
        notices = Notification.objects.filter(notification_type=NotificationType.EVENT_CANCELLED)
        assert {n.user_id for n in notices} == {waiting.id, paying.id, approved.id}
        assert all(n.related_event_id is None for n in notices)



class TestCoOrganizers:
    def test_add_and_remove(self, event: Event, user_factory: LightEventUserFactory) -> None:
        helper = user_factory(email="helper@example.com", username="helper@example.com")

        link = event_service.add_co_organizer(event, CoOrganizerAddSchema(email="HELPER@example.com"))

        assert link.user == helper
        assert event.is_manager(helper)
        assert Notification.objects.filter(
            user=helper, notification_type=NotificationType.ORGANIZER_MEMBER_ADDED
        ).exists()

        event_service.remove_co_organizer(event, helper)

        assert not EventOrganizer.objects.filter(event=event, user=helper).exists()
        assert not event.is_manager(helper)
        assert Notification.objects.filter(
            user=helper, notification_type=NotificationType.ORGANIZER_MEMBER_REMOVED
        ).exists()

    def test_unknown_email(self, event: Event) -> None:
        with pytest.raises(NotFoundError):
            event_service.add_co_organizer(event, CoOrganizerAddSchema(email="nobody@example.com"))

    def test_primary_organizer_cannot_be_added(self, event: Event, organizer: LightEventUser) -> None:
        with pytest.raises(PreconditionFailedError):
            event_service.add_co_organizer(event, CoOrganizerAddSchema(email=organizer.email))

    def test_remove_non_member(self, event: Event, user: LightEventUser) -> None:
        with pytest.raises(NotFoundError):
            event_service.remove_co_organizer(event, user)


class TestListings:
    def test_my_registrations(self, event_factory: t.Callable[..., Event], user: LightEventUser) -> None:
        first, second = event_factory(), event_factory(title="Second")
        RegistrationLifecycle(first).register(user)
        RegistrationLifecycle(second).register(user)

        assert {r.event_id for r in event_service.my_registrations(user)} == {first.id, second.id}

    def test_my_organized_events_includes_co_organized(
        self, event_factory: t.Callable[..., Event], organizer: LightEventUser, user_factory: LightEventUserFactory
    ) -> None:
        other_organizer = user_factory()
        own = event_factory(status=Event.EventStatus.DRAFT)
        shared = event_factory(organizer=other_organizer)
        EventOrganizer.objects.create(event=shared, user=organizer)
        event_factory(organizer=other_organizer)

        assert set(event_service.my_organized_events(organizer)) == {own, shared}


class TestVisibility:
    def test_drafts_visible_to_managers_only(
        self, event_factory: t.Callable[..., Event], organizer: LightEventUser, user: LightEventUser
    ) -> None:
        draft = event_factory(status=Event.EventStatus.DRAFT)
        published = event_factory()

        assert set(Event.objects.for_user(user)) == {published}
        assert set(Event.objects.for_user(organizer)) == {draft, published}
