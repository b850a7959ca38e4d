from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from passlib.context import CryptContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models.audit_log import AuditLog
from app.models.order import Order
from app.models.user import User, UserStatus
from app.repository import (
    audit_log_repository,
    order_repository,
    role_repository,
    user_repository,
)
from app.repository.errors import ReferenceNotFoundError, RepositoryError
from app.schemas.user import UserCandidate
from app.schemas.validation import FieldError, ValidationResult
from app.validation.user_validator import (
    validate_password_change,
    validate_user,
    with_defaults,
)

logger = logging.getLogger(__name__)

_STORAGE_MANAGED_FIELDS = {"id", "password", "create_date", "update_date"}


class ServiceError(Exception):
    """Raised when the service cannot complete an operation."""


class UserNotFoundError(ServiceError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User with id {user_id} not found")


class UserHasOrdersError(ServiceError):
    def __init__(self, user_id: str, order_count: int):
        self.user_id = user_id
        self.order_count = order_count
        super().__init__(f"User {user_id} still has {order_count} order(s)")


class UserService:
    def __init__(self, db: Session, pwd_context: CryptContext | None = None):
        self.db = db
        self.pwd_context = pwd_context

    def register_user(self, candidate: Mapping[str, Any] | UserCandidate) -> ValidationResult[User]:
        """Validate a new user, hash its password and store it.

        Validation failures are returned without touching the database.
        ``DuplicateKeyError`` and ``ReferenceNotFoundError`` from the
        repository propagate unchanged.
        """
        result = validate_user(with_defaults(candidate))
        if not result.ok:
            return ValidationResult.failure(result.errors)

        record = result.value
        user = User(**record.model_dump(exclude=_STORAGE_MANAGED_FIELDS), id=record.id)
        if record.password:
            user.password = hash_password(record.password, self.pwd_context)

        self._write(
            user,
            action="register_user",
            message=f"User {record.id} registered",
            failure_detail="Failed to register user",
        )
        logger.info("Registered user %s with role %s", user.id, user.role_id)
        return ValidationResult.success(user)

    def update_user(self, user_id: str, changes: Mapping[str, Any]) -> ValidationResult[User]:
        """Apply ``changes`` to an existing user and re-validate the whole record.

        The identifier is immutable and passwords go through
        ``change_password``.
        """
        user = self.get_user(user_id)
        provided = UserCandidate.model_validate(dict(changes)).model_dump(exclude_unset=True)

        errors: list[FieldError] = []
        new_id = provided.pop("id", None)
        if new_id is not None and str(new_id).strip() != user.id:
            errors.append(FieldError(field="id", message="Identification number cannot be changed"))
        if provided.pop("password", None) is not None:
            errors.append(
                FieldError(
                    field="password",
                    message="The password can only be changed with a password change request",
                )
            )
        if errors:
            return ValidationResult.failure(errors)

        current = UserCandidate.model_validate(user).model_dump()
        current.pop("password", None)
        result = validate_user({**current, **provided})
        if not result.ok:
            return ValidationResult.failure(result.errors)

        for field_name, value in result.value.model_dump(exclude=_STORAGE_MANAGED_FIELDS).items():
            setattr(user, field_name, value)

        self._write(
            user,
            action="update_user",
            message=f"User {user_id} updated: {', '.join(sorted(provided)) or 'no changes'}",
            failure_detail="Failed to update user",
        )
        return ValidationResult.success(user)

    def change_password(self, user_id: str, candidate: Mapping[str, Any]) -> ValidationResult[User]:
        result = validate_password_change(candidate)
        if not result.ok:
            return ValidationResult.failure(result.errors)

        user = self.get_user(user_id)
        user.password = hash_password(result.value.password, self.pwd_context)
        self._write(
            user,
            action="change_password",
            message=f"Password changed for user {user_id}",
            failure_detail="Failed to change password",
        )
        return ValidationResult.success(user)

    def activate_user(self, user_id: str) -> User:
        return self._set_status(user_id, UserStatus.ACTIVE)

    def deactivate_user(self, user_id: str) -> User:
        return self._set_status(user_id, UserStatus.INACTIVE)

    def verify_password(self, user_id: str, password: str) -> bool:
        user = self.get_user(user_id)
        return verify_password(password, user.password, self.pwd_context)

    def get_user(self, user_id: str) -> User:
        try:
            user = user_repository.get_user_by_id(self.db, user_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._log_error(user_id, "get_user_error", f"Database error: {exc}")
            raise ServiceError("Failed to retrieve user") from exc
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            return user_repository.get_user_by_email(self.db, email)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._log_error(None, "find_user_by_email_error", f"Database error: {exc}")
            raise ServiceError("Failed to retrieve user by email") from exc

    def list_users(
        self, status: UserStatus | None = None, role_id: int | None = None
    ) -> List[User]:
        try:
            if role_id is not None:
                if not role_repository.get_role_by_id(self.db, role_id):
                    raise ReferenceNotFoundError("Role", "role_id", role_id)
                users = user_repository.get_users_by_role(self.db, role_id)
                if status is not None:
                    users = [user for user in users if user.status == status]
                return users
            if status is not None:
                return user_repository.get_users_by_status(self.db, status)
            return user_repository.get_all_users(self.db)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._log_error(None, "list_users_error", f"Database error: {exc}")
            raise ServiceError("Failed to retrieve users") from exc

    def list_user_orders(self, user_id: str) -> List[Order]:
        self.get_user(user_id)
        try:
            return order_repository.get_orders_by_user(self.db, user_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._log_error(user_id, "list_user_orders_error", f"Database error: {exc}")
            raise ServiceError("Failed to retrieve user orders") from exc

    def delete_user(self, user_id: str) -> None:
        """Delete a user that no order references. Orders are never cascaded."""
        user = self.get_user(user_id)
        order_count = order_repository.count_orders_by_user(self.db, user_id)
        if order_count:
            raise UserHasOrdersError(user_id, order_count)

        try:
            user_repository.delete_user(self.db, user)
            self._audit(user_id, "delete_user", f"User {user_id} deleted")
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._log_error(user_id, "delete_user_error", f"Database error: {exc}")
            raise ServiceError("Failed to delete user") from exc
        logger.info("Deleted user %s", user_id)

    def _set_status(self, user_id: str, new_status: UserStatus) -> User:
        user = self.get_user(user_id)
        if user.status == new_status:
            return user
        user.status = new_status
        self._write(
            user,
            action="set_status",
            message=f"User {user_id} status set to {new_status.value}",
            failure_detail="Failed to update user status",
        )
        return user

    def _write(self, user: User, *, action: str, message: str, failure_detail: str) -> None:
        try:
            user_repository.save_user(self.db, user)
            self._audit(user.id, action, message)
            self.db.commit()
            self.db.refresh(user)
        except RepositoryError as exc:
            self.db.rollback()
            self._log_error(user.id, f"{action}_conflict", str(exc))
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._log_error(user.id, f"{action}_error", f"Database error: {exc}")
            raise ServiceError(failure_detail) from exc

    def _audit(self, user_id: str | None, action: str, message: str) -> None:
        audit_entry = AuditLog(
            user_id=user_id,
            entity="UserService",
            action=action,
            message=message,
            state="success",
        )
        audit_log_repository.create_audit_log(self.db, audit_entry)

    def _log_error(self, user_id: str | None, action: str, message: str) -> None:
        logger.error("%s: %s", action, message)
        try:
            audit_entry = AuditLog(
                user_id=user_id,
                entity="UserService",
                action=action,
                message=message,
                state="error",
            )
            audit_log_repository.create_audit_log(self.db, audit_entry)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not write audit entry for %s", action)
