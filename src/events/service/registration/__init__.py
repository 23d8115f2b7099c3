from .capacity import CapacityCheck, check_capacity
from .codes import issue_code, resolve_code
from .lifecycle import RegistrationLifecycle

__all__ = [
    "CapacityCheck",
    "RegistrationLifecycle",
    "check_capacity",
    "issue_code",
    "resolve_code",
]
