from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class FieldError(BaseModel):
    """One violated rule on one field."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    value: Optional[T] = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def fields(self) -> set[str]:
        return {error.field for error in self.errors}

    def messages_for(self, field_name: str) -> list[str]:
        return [error.message for error in self.errors if error.field == field_name]

    @classmethod
    def success(cls, value: T) -> "ValidationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, errors: list[FieldError]) -> "ValidationResult[T]":
        return cls(value=None, errors=list(errors))


__all__ = ["FieldError", "ValidationResult"]
