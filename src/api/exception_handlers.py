"""Exception handlers for the API."""

import typing as t
from copy import deepcopy

import structlog
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from common.exceptions import (
    LightEventError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionFailedError,
    StorageError,
)
from events.exceptions import NotAnOrganizerError

logger = structlog.get_logger(__name__)


def _error_response(status: int, exc: LightEventError) -> Response:
    return Response(status=status, data={"detail": exc.message, "code": exc.code})


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    logger.exception(
        "internal_server_error",
        method=request.method,
        path=request.path,
        headers=obfuscate(dict(request.headers)),
        user=str(request.user) if getattr(request, "user", None) else None,
    )
    return Response(status=500, data={"detail": "Internal Server Error."})


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error raised by a model's full_clean.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("validation_error", path=request.path, errors=getattr(exc, "messages", None))
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[union-attr]
    return Response(status=400, data={"errors": error_dict})


def handle_precondition_failed_error(
    request: HttpRequest, exc: PreconditionFailedError | t.Type[PreconditionFailedError]
) -> Response:
    """Business rule violated: wrong state, duplicate, deadline or capacity."""
    return _error_response(400, t.cast(PreconditionFailedError, exc))


def handle_permission_denied_error(
    request: HttpRequest, exc: PermissionDeniedError | t.Type[PermissionDeniedError]
) -> Response:
    """The user may not act on this resource."""
    return _error_response(403, t.cast(PermissionDeniedError, exc))


def handle_not_found_error(request: HttpRequest, exc: NotFoundError | t.Type[NotFoundError]) -> Response:
    """Handle a not found error, including unknown verification codes."""
    return _error_response(404, t.cast(NotFoundError, exc))


def handle_storage_error(request: HttpRequest, exc: StorageError | t.Type[StorageError]) -> Response:
    """The database refused the write."""
    logger.error("storage_error", path=request.path, detail=str(exc))
    return _error_response(503, t.cast(StorageError, exc))


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data


EXCEPTION_HANDLERS: dict[type[Exception], t.Callable[[HttpRequest, t.Any], Response]] = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    PreconditionFailedError: handle_precondition_failed_error,
    PermissionDeniedError: handle_permission_denied_error,
    NotAnOrganizerError: handle_permission_denied_error,
    NotFoundError: handle_not_found_error,
    StorageError: handle_storage_error,
}
