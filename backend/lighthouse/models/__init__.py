"""Models for the application."""

from ._base import Base
from .api_key import APIKey
from .check import Check
from .monthly_usage import MonthlyUsage
from .organization import Organization

__all__ = [
    "Base",
    "APIKey",
    "Check",
    "MonthlyUsage",
    "Organization",
]
