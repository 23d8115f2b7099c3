"""This module contains the controllers for the account app."""

import typing as t

from ninja import File
from ninja.files import UploadedFile
from ninja_extra import ControllerBase, api_controller, route, status
from ninja_jwt.authentication import JWTAuth

from accounts import schema
from accounts.models import LightEventUser
from accounts.schema import LightEventUserSchema, ProfileUpdateSchema
from accounts.service import account as account_service
from common.schema import ResponseMessage
from common.throttling import AuthThrottle, UserRegistrationThrottle, WriteThrottle


@api_controller("/account", tags=["Account"], throttle=AuthThrottle())
class AccountController(ControllerBase):
    def user(self) -> LightEventUser:
        """Get the user for this request."""
        return t.cast(LightEventUser, self.context.request.user)  # type: ignore[union-attr]

    @route.get(
        "/me",
        response=LightEventUserSchema,
        url_name="me",
        auth=JWTAuth(),
    )
    def me(self) -> LightEventUser:
        """Retrieve the authenticated user's profile, including the role."""
        return self.user()

    @route.put(
        "/me",
        response=LightEventUserSchema,
        url_name="update-profile",
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def update_profile(self, payload: ProfileUpdateSchema) -> LightEventUser:
        """Update the authenticated user's profile.

        Only provided fields are updated. Contact email and phone are the defaults
        copied onto new registrations.
        """
        return account_service.update_profile(self.user(), payload)

    @route.post(
        "/me/avatar",
        response=LightEventUserSchema,
        url_name="upload-avatar",
        auth=JWTAuth(),
        throttle=WriteThrottle(),
    )
    def upload_avatar(self, avatar: File[UploadedFile]) -> LightEventUser:
        """Upload a profile picture. EXIF metadata is stripped."""
        return account_service.set_avatar(self.user(), avatar)

    @route.post(
        "/register",
        response={201: LightEventUserSchema},
        url_name="register-account",
        throttle=UserRegistrationThrottle(),
    )
    def register(self, payload: schema.RegisterUserSchema) -> tuple[int, LightEventUser]:
        """Create a new account with email and password.

        Returns 400 if an account with the email already exists. Log in afterwards
        with POST /auth/token/pair.
        """
        return status.HTTP_201_CREATED, account_service.register_user(payload)

    @route.delete(
        "/me",
        response=ResponseMessage,
        url_name="delete-account",
        auth=JWTAuth(),
    )
    def delete_account(self) -> ResponseMessage:
        """Permanently delete the account and its avatar. This cannot be undone."""
        account_service.delete_account(self.user())
        return ResponseMessage(message="Your account has been deleted.")
