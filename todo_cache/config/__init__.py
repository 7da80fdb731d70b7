"""Configuration module for todo-cache."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
