"""Field-level validation for user records and password changes.

Validators are pure: they never touch the database and never raise for bad
input. Failures come back as a list of ``FieldError`` inside a
``ValidationResult``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.models.user import UserStatus
from app.schemas.user import PasswordChangeRequest, UserCandidate, UserRecord
from app.schemas.validation import FieldError, ValidationResult
from app.validation.postal_code import normalize_locale

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
Candidate = Union[Mapping[str, Any], UserCandidate, None]

REQUIRED_MESSAGES: dict[str, str] = {
    "id": "Identification number is required",
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "birthdate": "Date of birth is required",
    "email": "Email is required",
    "status": "The user status is required",
    "document_type_id": "The type of document is required",
    "role_id": "The role is required",
    "password": "The password is required",
    "repeat_password": "Repeat password is required",
}

FIELD_LABELS: dict[str, str] = {
    "id": "Identification number",
    "first_name": "First name",
    "last_name": "Last name",
    "birthdate": "Date of birth",
    "address": "Address",
    "postal_code": "Postal code",
    "email": "Email",
    "area_code": "Area code",
    "phone_number": "Phone number",
    "terms_and_conditions": "Terms and conditions",
    "status": "Status",
    "role_id": "Role",
    "document_type_id": "Document type",
}

EMAIL_INVALID_MESSAGE = "The email is not valid"
POSTAL_CODE_INVALID_MESSAGE = "The postal code is not valid"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"

_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}
_DATE_ERROR_PREFIXES = ("date_", "datetime_")


def _field_keys(model: Type[BaseModel]) -> dict[str, str]:
    keys: dict[str, str] = {}
    for name, info in model.model_fields.items():
        keys[name] = name
        if info.alias:
            keys[info.alias] = name
    return keys


_USER_KEYS = _field_keys(UserRecord)
_PASSWORD_KEYS = _field_keys(PasswordChangeRequest)


def _as_mapping(candidate: Candidate) -> dict[str, Any]:
    if candidate is None:
        return {}
    if isinstance(candidate, BaseModel):
        # model_dump() honours exclude=True and would drop the password
        return {name: getattr(candidate, name) for name in type(candidate).model_fields}
    return dict(candidate)


def _prune_blank(data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None and whitespace-only strings so they read as missing."""
    pruned: dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        pruned[key] = value
    return pruned


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _message_for(field_name: str, error: Mapping[str, Any]) -> str:
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    label = FIELD_LABELS.get(field_name, field_name)

    if error_type in _REQUIRED_ERROR_TYPES and field_name in REQUIRED_MESSAGES:
        return REQUIRED_MESSAGES[field_name]
    if error_type == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters"
    if field_name == "email":
        return EMAIL_INVALID_MESSAGE
    if error_type == "postal_code":
        return POSTAL_CODE_INVALID_MESSAGE
    if error_type == "enum":
        allowed = ", ".join(status.value for status in UserStatus)
        return f"{label} must be one of: {allowed}"
    if error_type.startswith(_DATE_ERROR_PREFIXES):
        return f"{label} is not a valid date"
    if error_type in {"greater_than_equal", "int_parsing", "int_type", "int_from_float"}:
        return f"{label} must reference an existing identifier"
    return str(error.get("msg", "Invalid value"))


def _to_field_errors(exc: ValidationError, keys: Mapping[str, str]) -> list[FieldError]:
    errors: list[FieldError] = []
    seen: set[tuple[str, str]] = set()
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        raw_key = str(loc[0])
        field_name = keys.get(raw_key, raw_key)
        message = _message_for(field_name, error)
        if (field_name, message) in seen:
            continue
        seen.add((field_name, message))
        errors.append(FieldError(field=field_name, message=message))
    return errors


def _run(
    model: Type[ModelT],
    data: Mapping[str, Any],
    keys: Mapping[str, str],
    context: Optional[dict[str, Any]] = None,
) -> ValidationResult[ModelT]:
    try:
        return ValidationResult.success(model.model_validate(data, context=context))
    except ValidationError as exc:
        return ValidationResult.failure(_to_field_errors(exc, keys))


def with_defaults(candidate: Candidate = None) -> UserCandidate:
    """Return a copy of ``candidate`` with registration defaults filled in.

    Only absent values are filled: ``status`` becomes ``INACTIVE``,
    ``area_code`` the configured default (``"57"``) and
    ``terms_and_conditions`` ``False``.
    """
    current = UserCandidate.model_validate(_as_mapping(candidate))
    updates: dict[str, Any] = {}
    if _is_absent(current.status):
        updates["status"] = UserStatus.INACTIVE
    if _is_absent(current.area_code):
        updates["area_code"] = settings.DEFAULT_AREA_CODE
    if _is_absent(current.terms_and_conditions):
        updates["terms_and_conditions"] = False
    return current.model_copy(update=updates)


def validate_user(
    candidate: Candidate,
    *,
    postal_code_locale: Optional[str] = None,
) -> ValidationResult[UserRecord]:
    """Check presence, format and length rules for a user candidate.

    Does not apply defaults (see ``with_defaults``) and does not check
    uniqueness of ``id`` or ``email``. An unknown postal code locale is a
    configuration error and raises ``ValueError``.
    """
    locale = normalize_locale(postal_code_locale or settings.POSTAL_CODE_LOCALE)
    data = _prune_blank(_as_mapping(candidate))
    context = {"postal_code_locale": locale}
    result = _run(UserRecord, data, _USER_KEYS, context)
    if not result.ok:
        logger.debug("User candidate rejected on fields %s", sorted(result.fields()))
    return result


def validate_password_change(
    candidate: Union[Mapping[str, Any], PasswordChangeRequest, None],
    *,
    require_match: Optional[bool] = None,
) -> ValidationResult[PasswordChangeRequest]:
    """Both passwords are required; equality is checked unless disabled."""
    data = _as_mapping(candidate)
    # Passwords are not stripped: whitespace is significant, only "" is missing.
    data = {key: value for key, value in data.items() if value is not None and value != ""}

    result = _run(PasswordChangeRequest, data, _PASSWORD_KEYS)
    if not result.ok:
        return result

    must_match = settings.PASSWORD_REQUIRE_MATCH if require_match is None else require_match
    request = result.value
    if must_match and request.password != request.repeat_password:
        return ValidationResult.failure(
            [FieldError(field="repeat_password", message=PASSWORD_MISMATCH_MESSAGE)]
        )
    return result


__all__ = [
    "EMAIL_INVALID_MESSAGE",
    "PASSWORD_MISMATCH_MESSAGE",
    "POSTAL_CODE_INVALID_MESSAGE",
    "REQUIRED_MESSAGES",
    "validate_password_change",
    "validate_user",
    "with_defaults",
]
