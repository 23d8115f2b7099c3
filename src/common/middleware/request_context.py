"""Bind request metadata to the structlog context."""

import typing as t
import uuid

import structlog
from django.http import HttpRequest, HttpResponse


class RequestContextMiddleware:
    """Enriches structlog context with request metadata.

    Every log event emitted while handling the request carries the request id,
    method, path, client IP and, when authenticated through the session, the user id.
    The request id is echoed back in the ``X-Request-ID`` header.
    """

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        context: dict[str, t.Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.path,
            "ip_address": self._get_client_ip(request),
        }
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            context["user_id"] = str(user.pk)
        structlog.contextvars.bind_contextvars(**context)

        try:
            response = self.get_response(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response["X-Request-ID"] = request_id
        return response

    def _get_client_ip(self, request: HttpRequest) -> str:
        """The first X-Forwarded-For hop when proxied, REMOTE_ADDR otherwise."""
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            return str(x_forwarded_for.split(",")[0].strip())
        return str(request.META.get("REMOTE_ADDR", "unknown"))
