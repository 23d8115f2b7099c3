"""
This conftest.py provides fixtures shared by every app's tests.
"""

import secrets
import string
import typing as t
from datetime import datetime, timedelta

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import LightEventUser
from accounts.roles import Role
from events.models import Event


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits so tests are never throttled."""
    for throttle in (
        "AnonDefaultThrottle",
        "UserDefaultThrottle",
        "AuthThrottle",
        "UserRegistrationThrottle",
        "WriteThrottle",
        "CheckInThrottle",
    ):
        monkeypatch.setattr(f"common.throttling.{throttle}.rate", "10000/min")


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Clear the cache before each test. Throttle history lives there."""
    cache.clear()


class LightEventUserFactory:
    """Factory for creating LightEventUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> LightEventUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username)
        password = kwargs.pop("password", "password")
        nickname = kwargs.pop("nickname", self.fake.first_name())
        return LightEventUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            nickname=nickname,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> LightEventUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> LightEventUserFactory:
    return LightEventUserFactory()


@pytest.fixture
def user(user_factory: LightEventUserFactory) -> LightEventUser:
    """A plain participant."""
    return user_factory(contact_phone="13800000000")


@pytest.fixture
def organizer(user_factory: LightEventUserFactory) -> LightEventUser:
    return user_factory(role=Role.ORGANIZER, organizer_name="Weekend Hikers")


@pytest.fixture
def admin_user(user_factory: LightEventUserFactory) -> LightEventUser:
    return user_factory(role=Role.ADMIN)


def auth_client(user: LightEventUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: LightEventUser) -> Client:
    return auth_client(user)


@pytest.fixture
def organizer_client(organizer: LightEventUser) -> Client:
    return auth_client(organizer)


@pytest.fixture
def admin_client_jwt(admin_user: LightEventUser) -> Client:
    return auth_client(admin_user)


@pytest.fixture
def next_week() -> datetime:
    return timezone.now() + timedelta(days=7)


@pytest.fixture
def event_factory(organizer: LightEventUser, next_week: datetime) -> t.Callable[..., Event]:
    """Create published events owned by the organizer fixture unless told otherwise."""

    def _create(**kwargs: t.Any) -> Event:
        start = kwargs.pop("start_time", next_week)
        defaults: dict[str, t.Any] = {
            "organizer": organizer,
            "title": "Morning hike",
            "description": "A walk in the hills.",
            "location": "West Lake",
            "status": Event.EventStatus.PUBLISHED,
            "start_time": start,
            "end_time": start + timedelta(hours=3),
        }
        defaults.update(kwargs)
        return Event.objects.create(**defaults)

    return _create


@pytest.fixture
def event(event_factory: t.Callable[..., Event]) -> Event:
    """A free, published event without approval or capacity limits."""
    return event_factory()
