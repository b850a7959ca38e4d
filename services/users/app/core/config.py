"""Configuration for the users service."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _to_bool(value: str, *, default: bool = False) -> bool:
    lowered = value.strip().lower()
    if not lowered:
        return default
    return lowered in {"true", "1", "yes", "y", "on"}


def _to_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    PROJECT_NAME: str = os.getenv("USERS_PROJECT_NAME", "Users Service")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./users.db")
    DATABASE_ECHO: bool = _to_bool(os.getenv("DATABASE_ECHO", "false"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Defaults applied to new user records before validation.
    DEFAULT_AREA_CODE: str = os.getenv("DEFAULT_AREA_CODE", "57")
    POSTAL_CODE_LOCALE: str = os.getenv("POSTAL_CODE_LOCALE", "any")

    PASSWORD_REQUIRE_MATCH: bool = _to_bool(
        os.getenv("PASSWORD_REQUIRE_MATCH", "true"), default=True
    )
    PASSWORD_HASH_SCHEMES: list[str] = _to_list(os.getenv("PASSWORD_HASH_SCHEMES", "bcrypt"))


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

__all__ = ["settings", "get_settings", "Settings"]
