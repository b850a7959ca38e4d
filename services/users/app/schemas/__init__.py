from .user import (
    OrderSummary,
    PasswordChangeRequest,
    UserCandidate,
    UserRecord,
    UserResponse,
)
from .validation import FieldError, ValidationResult

__all__ = [
    "FieldError",
    "OrderSummary",
    "PasswordChangeRequest",
    "UserCandidate",
    "UserRecord",
    "UserResponse",
    "ValidationResult",
]
