"""Authentication service layer."""

import structlog
from django.utils import timezone
from ninja_jwt.schema import TokenObtainPairOutputSchema
from ninja_jwt.tokens import RefreshToken

from accounts.models import LightEventUser

logger = structlog.get_logger(__name__)


def get_token_pair_for_user(user: LightEventUser) -> TokenObtainPairOutputSchema:
    """Get a token pair for the user, carrying the role claims the clients need."""
    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])

    logger.info("token_pair_generated", user_id=str(user.id))
    token = RefreshToken.for_user(user)
    token.payload.update(
        {
            "sub": str(user.id),
            "role": user.role,
            "display_name": user.get_display_name(),
        }
    )
    return TokenObtainPairOutputSchema(
        username=user.username,
        access=str(token.access_token),  # type: ignore[attr-defined]
        refresh=str(token),
    )
