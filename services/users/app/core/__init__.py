"""Core utilities for the users service."""

from app.core.config import settings
from app.core.logging import configure_logging

__all__ = ["settings", "configure_logging"]
