"""Models package - settings, Pydantic schemas and domain exceptions."""

from .config import Settings, get_settings, settings

__all__ = [
    "Settings",
    "get_settings",
    "settings",
]
