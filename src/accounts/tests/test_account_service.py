import pytest
from ninja.errors import HttpError

from accounts.models import LightEventUser
from accounts.schema import ProfileUpdateSchema, RegisterUserSchema
from accounts.service import account as account_service
from accounts.service.account import profile_snapshot
from conftest import LightEventUserFactory

pytestmark = pytest.mark.django_db


def test_register_user() -> None:
    payload = RegisterUserSchema(
        email="new@example.com", nickname="Newbie", password1="Tr1cky-Passw0rd", password2="Tr1cky-Passw0rd"
    )

    user = account_service.register_user(payload)

    assert user.username == "new@example.com"
    assert user.role == "user"
    assert user.check_password("Tr1cky-Passw0rd")


def test_register_duplicate_email(user_factory: LightEventUserFactory) -> None:
    user_factory(username="taken@example.com", email="taken@example.com")
    payload = RegisterUserSchema(
        email="TAKEN@example.com", password1="Tr1cky-Passw0rd", password2="Tr1cky-Passw0rd"
    )

    with pytest.raises(HttpError):
        account_service.register_user(payload)


def test_passwords_must_match() -> None:
    with pytest.raises(ValueError):
        RegisterUserSchema(email="a@example.com", password1="Tr1cky-Passw0rd", password2="Other-Passw0rd")


def test_update_profile_only_touches_given_fields(user: LightEventUser) -> None:
    user = account_service.update_profile(user, ProfileUpdateSchema(nickname="Robin", bio="<b>hi</b>"))

    assert user.nickname == "Robin"
    assert user.bio == "bhi/b"
    assert user.contact_phone == "13800000000"


def test_profile_snapshot_falls_back_to_account_email(user_factory: LightEventUserFactory) -> None:
    user = user_factory(email="me@example.com", nickname="", contact_email="")

    snapshot = profile_snapshot(user)

    assert snapshot.email == "me@example.com"
    assert snapshot.phone == ""
    assert snapshot.name == user.get_display_name()


def test_profile_snapshot_prefers_contact_details(user_factory: LightEventUserFactory) -> None:
    user = user_factory(nickname="Kim", contact_email="kim@work.example", contact_phone="555 0101")

    snapshot = profile_snapshot(user)

    assert snapshot.model_dump() == {"name": "Kim", "email": "kim@work.example", "phone": "555 0101"}


def test_delete_account(user: LightEventUser) -> None:
    account_service.delete_account(user)

    assert not LightEventUser.objects.filter(pk=user.pk).exists()
