class NotificationError(Exception):
    """Raised when a notification could not be stored.

    Never escapes the emitter: callers of a business operation do not see it.
    """
