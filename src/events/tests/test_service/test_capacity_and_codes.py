import typing as t

import pytest
from django.core.exceptions import ValidationError
from django.test import override_settings

from accounts.models import LightEventUser
from common.exceptions import StorageError
from conftest import LightEventUserFactory
from events.exceptions import InvalidCodeError
from events.models import Event, Registration
from events.service.registration import check_capacity, issue_code, resolve_code
from events.service.registration.capacity import (
    OCCUPYING_AT_APPROVAL,
    OCCUPYING_AT_REGISTRATION,
    OCCUPYING_AT_REGISTRATION_WITH_APPROVAL,
    registration_occupying_statuses,
)
from events.service.registration.codes import CODE_ALPHABET, generate_code, normalize_code

pytestmark = pytest.mark.django_db

Status = Registration.Status


def _registration(event: Event, user: LightEventUser, status: str, code: str | None = None) -> Registration:
    return Registration.objects.create(
        event=event,
        user=user,
        participant_name="p",
        participant_email="p@example.com",
        status=status,
        verification_code=code,
    )


class TestCheckCapacity:
    def test_unlimited_event_always_passes(self, event: Event, user: LightEventUser) -> None:
        _registration(event, user, Status.APPROVED, "AAAA0001")

        result = check_capacity(event, OCCUPYING_AT_REGISTRATION, adding=1)

        assert result.allowed
        assert result.limit is None
        assert result.occupied == 1

    def test_counts_only_occupying_statuses(
        self, event_factory: t.Callable[..., Event], user_factory: LightEventUserFactory
    ) -> None:
        event = event_factory(max_participants=2)
        _registration(event, user_factory(), Status.APPROVED, "AAAA0001")
        _registration(event, user_factory(), Status.PENDING)
        _registration(event, user_factory(), Status.REJECTED)
        _registration(event, user_factory(), Status.CANCELLED)

        result = check_capacity(event, OCCUPYING_AT_REGISTRATION, adding=1)

        assert result.occupied == 1
        assert result.allowed

    def test_full_event_refuses(self, event_factory: t.Callable[..., Event], user_factory: LightEventUserFactory) -> None:
        event = event_factory(max_participants=1)
        _registration(event, user_factory(), Status.PAYMENT_PENDING)

        result = check_capacity(event, OCCUPYING_AT_REGISTRATION, adding=1)

        assert not result.allowed
        assert result.would_be == 2

    def test_not_adding_never_refuses_a_full_event(
        self, event_factory: t.Callable[..., Event], user_factory: LightEventUserFactory
    ) -> None:
        event = event_factory(max_participants=1)
        _registration(event, user_factory(), Status.APPROVED, "AAAA0001")

        assert check_capacity(event, OCCUPYING_AT_REGISTRATION, adding=0).allowed

    def test_exclude_leaves_candidate_out(
        self, event_factory: t.Callable[..., Event], user_factory: LightEventUserFactory
    ) -> None:
        event = event_factory(max_participants=1)
        candidate = _registration(event, user_factory(), Status.APPROVED, "AAAA0001")

        result = check_capacity(event, OCCUPYING_AT_APPROVAL, adding=1, exclude=candidate)

        assert result.occupied == 0
        assert result.allowed

    def test_occupying_statuses_depend_on_approval(self, event_factory: t.Callable[..., Event]) -> None:
        assert registration_occupying_statuses(event_factory()) == OCCUPYING_AT_REGISTRATION
        assert (
            registration_occupying_statuses(event_factory(requires_approval=True))
            == OCCUPYING_AT_REGISTRATION_WITH_APPROVAL
        )
        assert Status.PAYMENT_PENDING not in OCCUPYING_AT_REGISTRATION_WITH_APPROVAL


class TestCodes:
    def test_generated_code_shape(self) -> None:
        code = generate_code()

        assert len(code) == 8
        assert set(code) <= set(CODE_ALPHABET)

    def test_normalize_code(self) -> None:
        assert normalize_code("  ab12cd34 ") == "AB12CD34"

    def test_issue_code_retries_on_collision(
        self, event: Event, user: LightEventUser, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _registration(event, user, Status.APPROVED, "TAKEN000")
        codes = iter(["TAKEN000", "FREE0000"])
        monkeypatch.setattr("events.service.registration.codes.generate_code", lambda: next(codes))

        assert issue_code(event) == "FREE0000"

    @override_settings(VERIFICATION_CODE_MAX_ATTEMPTS=3)
    def test_issue_code_gives_up(self, event: Event, user: LightEventUser, monkeypatch: pytest.MonkeyPatch) -> None:
        _registration(event, user, Status.APPROVED, "TAKEN000")
        monkeypatch.setattr("events.service.registration.codes.generate_code", lambda: "TAKEN000")

        with pytest.raises(StorageError):
            issue_code(event)

    def test_same_code_in_another_event_is_free(
        self, event_factory: t.Callable[..., Event], user: LightEventUser, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        first, second = event_factory(), event_factory(title="Other")
        _registration(first, user, Status.APPROVED, "SHARED00")
        monkeypatch.setattr("events.service.registration.codes.generate_code", lambda: "SHARED00")

        assert issue_code(second) == "SHARED00"

    def test_resolve_code_is_case_insensitive(self, event: Event, user: LightEventUser) -> None:
        registration = _registration(event, user, Status.APPROVED, "ABCD1234")

        assert resolve_code("abcd1234", event) == registration

    def test_resolve_unknown_code(self, event: Event) -> None:
        with pytest.raises(InvalidCodeError):
            resolve_code("ZZZZ9999", event)


class TestRegistrationModel:
    def test_confirmed_registration_requires_code(self, event: Event, user: LightEventUser) -> None:
        with pytest.raises(ValidationError):
            _registration(event, user, Status.APPROVED)

    def test_pending_registration_cannot_hold_code(self, event: Event, user: LightEventUser) -> None:
        with pytest.raises(ValidationError):
            _registration(event, user, Status.PENDING, "ABCD1234")
