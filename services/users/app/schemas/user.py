from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from app.core.config import settings
from app.models.user import UserStatus
from app.validation.postal_code import is_postal_code

IdentificationStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=50),
]
NameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=50),
]
AddressStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]
PostalCodeStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]
AreaCodeStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=5)]
PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20)]
PasswordStr = Annotated[str, StringConstraints(min_length=1)]
ReferenceId = Annotated[int, Field(ge=1)]

EMAIL_MAX_LENGTH = 50


class CamelModel(BaseModel):
    """Accepts both camelCase (transport) and snake_case (attribute) keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserCandidate(CamelModel):
    """Unvalidated user input. Any field may be missing or malformed."""

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    first_name: Any = None
    last_name: Any = None
    birthdate: Any = None
    address: Any = None
    postal_code: Any = None
    email: Any = None
    password: Any = None
    area_code: Any = None
    phone_number: Any = None
    terms_and_conditions: Any = None
    status: Any = None
    role_id: Any = None
    document_type_id: Any = None


class UserRecord(CamelModel):
    """A user that passed field-level validation.

    Uniqueness of ``id`` and ``email`` is not checked here; the repository
    enforces it when the record is written.
    """

    id: IdentificationStr
    first_name: NameStr
    last_name: NameStr
    birthdate: date
    address: Optional[AddressStr] = None
    postal_code: Optional[PostalCodeStr] = None
    email: EmailStr
    password: Optional[str] = Field(default=None, exclude=True, repr=False)
    area_code: Optional[AreaCodeStr] = None
    phone_number: Optional[PhoneStr] = None
    terms_and_conditions: bool = False
    status: UserStatus
    role_id: ReferenceId
    document_type_id: ReferenceId
    create_date: Optional[datetime] = None
    update_date: Optional[datetime] = None

    @field_validator("birthdate", mode="before")
    @classmethod
    def _birthdate_from_datetime(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _email_length(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if len(value) > EMAIL_MAX_LENGTH:
                raise PydanticCustomError(
                    "string_too_long",
                    "String should have at most {max_length} characters",
                    {"max_length": EMAIL_MAX_LENGTH},
                )
        return value

    @field_validator("postal_code")
    @classmethod
    def _postal_code_format(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None or value == "":
            return None
        locale = (info.context or {}).get("postal_code_locale") or settings.POSTAL_CODE_LOCALE
        if not is_postal_code(value, locale):
            raise PydanticCustomError("postal_code", "The postal code is not valid")
        return value


class OrderSummary(CamelModel):
    id: int
    total: Decimal
    status: str
    create_date: Optional[datetime] = None


class UserResponse(UserRecord):
    """Presentation shape of a stored user, including its orders."""

    orders: list[OrderSummary] = Field(default_factory=list)


class PasswordChangeRequest(CamelModel):
    password: PasswordStr = Field(repr=False)
    repeat_password: PasswordStr = Field(repr=False)


__all__ = [
    "CamelModel",
    "OrderSummary",
    "PasswordChangeRequest",
    "UserCandidate",
    "UserRecord",
    "UserResponse",
]
