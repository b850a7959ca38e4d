from .audit_log import AuditLog
from .document_type import DocumentType
from .order import Order
from .role import Role
from .user import DEFAULT_AREA_CODE, User, UserStatus

__all__ = [
    "AuditLog",
    "DocumentType",
    "Order",
    "Role",
    "User",
    "UserStatus",
    "DEFAULT_AREA_CODE",
]
