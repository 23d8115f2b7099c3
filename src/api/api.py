from django.conf import settings
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from accounts.controllers.account import AccountController
from accounts.controllers.auth import AuthController
from accounts.controllers.organizer_applications import OrganizerApplicationController
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers.dashboard import DashboardController
from events.controllers.discussions import DiscussionController
from events.controllers.event_admin import EVENT_ADMIN_CONTROLLERS
from events.controllers.events import EventController
from events.controllers.reviews import ReviewController
from notifications.controllers.notification_controller import NotificationController

from .exception_handlers import EXCEPTION_HANDLERS

api = NinjaExtraAPI(
    title="LightEvent API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"LightEvent API {settings.VERSION}",
    app_name=f"lightevent-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse}, url_name="version")
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk}, url_name="healthcheck")
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, ResponseOk()


api.register_controllers(
    # Auth/Account controllers
    AuthController,
    AccountController,
    OrganizerApplicationController,
    # Event controllers
    DashboardController,
    EventController,
    *EVENT_ADMIN_CONTROLLERS,
    ReviewController,
    DiscussionController,
    # Notification controllers
    NotificationController,
)

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
