"""Password hashing helpers.

User records only carry the hashed value; hashing happens here and is
invoked by the service layer.
"""
from __future__ import annotations

from passlib.context import CryptContext

from app.core.config import settings


def build_password_context(schemes: list[str] | None = None) -> CryptContext:
    return CryptContext(schemes=schemes or settings.PASSWORD_HASH_SCHEMES, deprecated="auto")


_pwd_context = build_password_context()


def hash_password(password: str, context: CryptContext | None = None) -> str:
    return (context or _pwd_context).hash(password)


def verify_password(password: str, password_hash: str | None, context: CryptContext | None = None) -> bool:
    if not password_hash:
        return False
    return (context or _pwd_context).verify(password, password_hash)


__all__ = ["build_password_context", "hash_password", "verify_password"]
