"""
Todo-Cache Configuration Settings

This module contains all configuration constants for the todo-cache server.
Every value can be overridden from the environment; command line flags
passed to the server entry point take precedence over both.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("TODO_CACHE_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("TODO_CACHE_PORT", "4000"))

    # Store settings
    MAX_ENTRIES: int = int(os.environ.get("TODO_CACHE_MAX_ENTRIES", "25"))
    ENTRY_TTL: float = float(os.environ.get("TODO_CACHE_ENTRY_TTL", "300"))  # 0 means no expiration
    CLEANUP_INTERVAL: float = float(os.environ.get("TODO_CACHE_CLEANUP_INTERVAL", "60"))  # 0 disables the sweeper

    # Record service settings
    MUTATION_DELAY: float = float(os.environ.get("TODO_CACHE_MUTATION_DELAY", "5.0"))

    # Protocol limits
    MAX_ID_LENGTH: int = 64
    MAX_TYPE_LENGTH: int = 64
    MAX_DESCRIPTION_LENGTH: int = 1024
    # Bytes; must fit a maximal request of 4-byte UTF-8 characters plus the command name
    READ_BUFFER_SIZE: int = 4 * (MAX_ID_LENGTH + MAX_TYPE_LENGTH + MAX_DESCRIPTION_LENGTH) + 64

    # Logging settings
    DEBUG: bool = os.environ.get("TODO_CACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("TODO_CACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
