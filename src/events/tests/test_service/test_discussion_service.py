import typing as t

import pytest

from accounts.models import LightEventUser
from common.exceptions import PermissionDeniedError, PreconditionFailedError
from conftest import LightEventUserFactory
from events.exceptions import NotAnOrganizerError
from events.models import Event
from events.service import discussion_service
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def test_reply_to_reply_joins_the_thread(event: Event, user_factory: LightEventUserFactory) -> None:
    alice, bob, carol = user_factory(), user_factory(), user_factory()
    thread = discussion_service.post_discussion(event, alice, "Is parking available?")
    first = discussion_service.reply(thread, bob, "Yes, underground.")

    second = discussion_service.reply(first, carol, "How much does it cost?")

    assert first.parent == thread
    assert first.reply_to_user is None
    assert second.parent == thread
    assert second.reply_to_user == bob
    replies = Notification.objects.filter(notification_type=NotificationType.DISCUSSION_REPLY)
    assert {n.user_id for n in replies} == {alice.id, bob.id}


def test_replying_to_yourself_does_not_notify(event: Event, user: LightEventUser) -> None:
    thread = discussion_service.post_discussion(event, user, "Anyone carpooling?")

    discussion_service.reply(thread, user, "Leaving at 8.")

    assert not Notification.objects.filter(notification_type=NotificationType.DISCUSSION_REPLY).exists()


def test_threads_order_pinned_first_then_activity(
    event: Event, organizer: LightEventUser, user_factory: LightEventUserFactory
) -> None:
    author = user_factory()
    old = discussion_service.post_discussion(event, author, "old")
    pinned = discussion_service.post_discussion(event, author, "pinned")
    recent = discussion_service.post_discussion(event, author, "recent")
    discussion_service.toggle_pin(pinned, organizer)
    discussion_service.reply(old, organizer, "bump")

    threads = list(discussion_service.list_threads(event))

    assert threads[0] == pinned
    assert threads[1:] == [old, recent]
    assert [r.content for r in threads[1].visible_replies] == ["bump"]


def test_deleted_posts_are_hidden(event: Event, user: LightEventUser, organizer: LightEventUser) -> None:
    thread = discussion_service.post_discussion(event, user, "hello")
    reply = discussion_service.reply(thread, organizer, "hi")
    discussion_service.delete_discussion(reply, organizer)

    threads = list(discussion_service.list_threads(event))
    assert threads == [thread]
    assert threads[0].visible_replies == []

    discussion_service.delete_discussion(thread, user)
    assert list(discussion_service.list_threads(event)) == []


def test_only_managers_pin(event: Event, user: LightEventUser) -> None:
    thread = discussion_service.post_discussion(event, user, "hello")

    with pytest.raises(NotAnOrganizerError):
        discussion_service.toggle_pin(thread, user)


def test_pin_toggles(event: Event, organizer: LightEventUser, user: LightEventUser) -> None:
    thread = discussion_service.post_discussion(event, user, "hello")

    assert discussion_service.toggle_pin(thread, organizer).is_pinned
    assert not discussion_service.toggle_pin(thread, organizer).is_pinned


def test_strangers_cannot_delete(event: Event, user: LightEventUser, user_factory: LightEventUserFactory) -> None:
    thread = discussion_service.post_discussion(event, user, "hello")

    with pytest.raises(PermissionDeniedError):
        discussion_service.delete_discussion(thread, user_factory())


def test_drafts_have_no_discussions(event_factory: t.Callable[..., Event], user: LightEventUser) -> None:
    draft = event_factory(status=Event.EventStatus.DRAFT)

    with pytest.raises(PreconditionFailedError):
        discussion_service.post_discussion(draft, user, "hello")
