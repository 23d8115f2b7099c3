"""Domain error taxonomy shared by all apps.

Each family maps to one HTTP status in ``api.exception_handlers``.
"""


class LightEventError(Exception):
    """Base class for business-rule failures with a user-facing message."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PreconditionFailedError(LightEventError):
    """A business precondition does not hold (wrong state, duplicate, limit reached)."""

    code = "precondition_failed"


class PermissionDeniedError(PreconditionFailedError):
    """The acting user is not allowed to perform the operation."""

    code = "permission_denied"


class NotFoundError(LightEventError):
    """The referenced resource does not exist or is not visible to the actor."""

    code = "not_found"


class StorageError(LightEventError):
    """The underlying persistence layer failed."""

    code = "storage_error"
