import structlog
from django.core.files import File
from django.db import transaction
from ninja.errors import HttpError
from pydantic import BaseModel

from accounts import schema
from accounts.models import LightEventUser
from common.utils import update_db_instance

logger = structlog.get_logger(__name__)


class ProfileSnapshot(BaseModel):
    """Participant contact details copied onto a registration when it is created."""

    name: str
    email: str
    phone: str = ""


def profile_snapshot(user: LightEventUser) -> ProfileSnapshot:
    """Capture the user's current name, contact email and phone.

    Falls back to the display name, the account email and an empty phone.
    """
    return ProfileSnapshot(
        name=user.get_display_name(),
        email=user.contact_email or user.email,
        phone=user.contact_phone or "",
    )


def register_user(payload: schema.RegisterUserSchema) -> LightEventUser:
    """Create a new account. The email doubles as the username."""
    logger.info("user_registration_started", email=payload.email)
    if LightEventUser.objects.filter(username__iexact=payload.email).exists():
        logger.warning("user_registration_duplicate", email=payload.email)
        raise HttpError(400, "A user with this email already exists.")
    new_user = LightEventUser.objects.create_user(
        username=payload.email,
        email=payload.email,
        password=payload.password1,
        nickname=payload.nickname,
    )
    logger.info("user_registration_completed", user_id=str(new_user.id))
    return new_user


def update_profile(user: LightEventUser, payload: schema.ProfileUpdateSchema) -> LightEventUser:
    """Update only the provided profile fields."""
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    user = update_db_instance(user, **data)
    logger.info("profile_updated", user_id=str(user.id), fields=sorted(data))
    return user


@transaction.atomic
def delete_account(user: LightEventUser) -> None:
    """Purge the user's stored assets and remove the identity.

    Registrations, reviews and notifications follow the foreign keys' cascade policy.
    """
    user_id = str(user.id)
    if user.avatar:
        # the file goes only once the row is gone
        avatar = user.avatar
        transaction.on_commit(lambda: avatar.storage.delete(avatar.name))
    user.delete()
    logger.info("account_deleted", user_id=user_id)


@transaction.atomic
def set_avatar(user: LightEventUser, image: File) -> LightEventUser:  # type: ignore[type-arg]
    """Replace the avatar. The previous file is removed once the change commits."""
    previous = user.avatar.name if user.avatar else None
    user.avatar = image
    user.save()
    if previous and previous != user.avatar.name:
        storage = user.avatar.storage
        transaction.on_commit(lambda: storage.delete(previous))
    logger.info("avatar_updated", user_id=str(user.id))
    return user
