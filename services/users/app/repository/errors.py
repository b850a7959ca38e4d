"""Errors raised by the storage layer.

They describe conflicts the database would otherwise report as generic
integrity failures, so callers can tell them apart.
"""
from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base class for storage errors."""


class DuplicateKeyError(RepositoryError):
    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} with {field} '{value}' already exists")


class ReferenceNotFoundError(RepositoryError):
    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} referenced by {field}={value!r} not found")


__all__ = ["RepositoryError", "DuplicateKeyError", "ReferenceNotFoundError"]
