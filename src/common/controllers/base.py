import typing as t

from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase

from accounts.models import LightEventUser


class UserAwareController(ControllerBase):
    def maybe_user(self) -> LightEventUser | AnonymousUser:
        """Get the user for this request."""
        return t.cast(LightEventUser | AnonymousUser, self.context.request.user)  # type: ignore[union-attr]

    def user(self) -> LightEventUser:
        """Get the user for this request."""
        return t.cast(LightEventUser, self.context.request.user)  # type: ignore[union-attr]
