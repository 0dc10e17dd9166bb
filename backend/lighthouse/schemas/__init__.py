"""Pydantic schemas."""

from .entitlement import EntitlementDimension, EntitlementResult, LimitCheck
from .plan import Plan
from .usage import MonthlyUsageCounts, UsageSnapshot

__all__ = [
    "EntitlementDimension",
    "EntitlementResult",
    "LimitCheck",
    "MonthlyUsageCounts",
    "Plan",
    "UsageSnapshot",
]
