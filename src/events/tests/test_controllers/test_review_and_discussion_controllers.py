from datetime import timedelta

import orjson
import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client
from freezegun import freeze_time

from accounts.models import LightEventUser
from conftest import auth_client
from events.models import Discussion, Event, Review
from events.service.registration import RegistrationLifecycle

pytestmark = pytest.mark.django_db


class TestReviews:
    def test_review_after_the_event(self, event: Event, user: LightEventUser) -> None:
        RegistrationLifecycle(event).register(user)
        url = reverse("api:submit_review", kwargs={"event_id": event.id})

        with freeze_time(event.end_time + timedelta(days=1)):
            # token issued inside the frozen clock so it is not expired
            client = auth_client(user)
            eligibility = client.get(reverse("api:review_eligibility", kwargs={"event_id": event.id}))
            response = client.post(
                url, data=orjson.dumps({"rating": 5, "comment": "Lovely"}), content_type="application/json"
            )

        assert eligibility.json() == {"allowed": True, "reason": None}
        assert response.status_code == 201, response.content
        assert Review.objects.get(event=event, user=user).rating == 5

    def test_review_before_the_end(self, user_client: Client, event: Event, user: LightEventUser) -> None:
        RegistrationLifecycle(event).register(user)

        response = user_client.post(
            reverse("api:submit_review", kwargs={"event_id": event.id}),
            data=orjson.dumps({"rating": 4}),
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "review_not_allowed"

    def test_rating_out_of_range(self, user_client: Client, event: Event) -> None:
        response = user_client.post(
            reverse("api:submit_review", kwargs={"event_id": event.id}),
            data=orjson.dumps({"rating": 6}),
            content_type="application/json",
        )

        assert response.status_code == 422

    def test_public_listing_and_summary(self, client: Client, event: Event, user: LightEventUser) -> None:
        Review.objects.create(event=event, user=user, rating=4, comment="Good")

        listing = client.get(reverse("api:list_reviews", kwargs={"event_id": event.id}))
        summary = client.get(reverse("api:review_summary", kwargs={"event_id": event.id}))

        assert listing.json()["count"] == 1
        assert summary.json() == {"count": 1, "average": 4.0}


class TestDiscussions:
    def test_post_reply_and_list(self, user_client: Client, organizer_client: Client, event: Event) -> None:
        created = user_client.post(
            reverse("api:post_discussion", kwargs={"event_id": event.id}),
            data=orjson.dumps({"content": "Is there parking?"}),
            content_type="application/json",
        )
        assert created.status_code == 201, created.content
        thread_id = created.json()["id"]

        reply = organizer_client.post(
            reverse("api:reply_to_discussion", kwargs={"event_id": event.id, "discussion_id": thread_id}),
            data=orjson.dumps({"content": "Yes"}),
            content_type="application/json",
        )
        assert reply.status_code == 201

        listing = user_client.get(reverse("api:list_discussions", kwargs={"event_id": event.id}))
        assert listing.status_code == 200
        threads = listing.json()
        assert len(threads) == 1
        assert [r["content"] for r in threads[0]["replies"]] == ["Yes"]

    def test_empty_content_is_rejected(self, user_client: Client, event: Event) -> None:
        response = user_client.post(
            reverse("api:post_discussion", kwargs={"event_id": event.id}),
            data=orjson.dumps({"content": "   "}),
            content_type="application/json",
        )

        assert response.status_code == 422

    def test_pin_is_for_organizers(
        self, user_client: Client, organizer_client: Client, event: Event, user: LightEventUser
    ) -> None:
        thread = Discussion.objects.create(event=event, author=user, content="hello")
        url = reverse("api:toggle_discussion_pin", kwargs={"event_id": event.id, "discussion_id": thread.id})

        assert user_client.post(url).status_code == 403
        response = organizer_client.post(url)

        assert response.status_code == 200
        assert response.json()["is_pinned"] is True

    def test_author_deletes_post(self, user_client: Client, event: Event, user: LightEventUser) -> None:
        thread = Discussion.objects.create(event=event, author=user, content="hello")

        response = user_client.delete(
            reverse("api:delete_discussion", kwargs={"event_id": event.id, "discussion_id": thread.id})
        )

        assert response.status_code == 204
        thread.refresh_from_db()
        assert thread.is_deleted
