"""Configuration module for the Lighthouse backend.

Provides centralized configuration management with type-safe enums.

Usage:
    from lighthouse.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from lighthouse.core.config.enums import Environment
from lighthouse.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
