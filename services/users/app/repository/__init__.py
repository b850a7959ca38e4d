from . import (
    audit_log_repository,
    document_type_repository,
    order_repository,
    role_repository,
    user_repository,
)
from .errors import DuplicateKeyError, ReferenceNotFoundError, RepositoryError

__all__ = [
    "audit_log_repository",
    "document_type_repository",
    "order_repository",
    "role_repository",
    "user_repository",
    "DuplicateKeyError",
    "ReferenceNotFoundError",
    "RepositoryError",
]
