"""This module contains the controllers for the authentication app."""

import typing as t

from ninja_extra import api_controller, route
from ninja_jwt.controller import TokenObtainPairController
from ninja_jwt.schema import TokenObtainPairInputSchema, TokenObtainPairOutputSchema

from accounts.service import auth as auth_service
from common.throttling import AuthThrottle

from ..models import LightEventUser


@api_controller("/auth", tags=["Auth"], throttle=AuthThrottle())
class AuthController(TokenObtainPairController):
    @route.post("/token/pair", response=TokenObtainPairOutputSchema, url_name="token_obtain_pair")
    def obtain_token(self, user_token: TokenObtainPairInputSchema) -> TokenObtainPairOutputSchema:
        """Authenticate with email and password to obtain JWT access/refresh tokens.

        The access token carries the user's role so clients can adapt the UI
        without another request.
        """
        user = t.cast(LightEventUser, user_token._user)
        return auth_service.get_token_pair_for_user(user)
