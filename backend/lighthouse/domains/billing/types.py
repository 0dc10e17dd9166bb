"""Billing domain types and shared pure functions.

Plan limits as a frozen value type, the built-in tier table, and small
helpers for the ``UNLIMITED`` sentinel. No IO.
"""

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping

from lighthouse.schemas.plan import Plan

# Limit value meaning "no ceiling". Must be checked before any comparison.
UNLIMITED = -1

_MIB = 1024 * 1024
_GIB = 1024 * _MIB


@dataclass(frozen=True)
class PlanConfig:
    """Entitlements of one plan tier."""

    name: str
    max_checks: int
    check_interval_min_seconds: int
    log_retention_days: int
    log_volume_bytes_per_month: int
    max_status_pages: int
    max_api_keys: int
    audit_log_retention_days: int
    ai_level1_limit: int
    ai_level2_limit: int
    ai_level3_limit: int
    # Empty string when not configured; never None
    stripe_price_id: str = ""
    monthly_price_cents: int = 0

    def with_price_id(self, price_id: str) -> "PlanConfig":
        """Return a copy bound to a billing-provider price ID."""
        return replace(self, stripe_price_id=price_id or "")


def is_unlimited(limit: int) -> bool:
    """Check whether a limit is the unlimited sentinel."""
    return limit == UNLIMITED


# Plan configuration. Price IDs are filled in from settings by the catalog.
DEFAULT_PLAN_CONFIGS: Mapping[Plan, PlanConfig] = MappingProxyType(
    {
        Plan.FREE: PlanConfig(
            name="Free",
            max_checks=10,
            check_interval_min_seconds=300,
            log_retention_days=7,
            log_volume_bytes_per_month=500 * _MIB,
            max_status_pages=0,
            max_api_keys=2,
            audit_log_retention_days=0,
            ai_level1_limit=1,
            ai_level2_limit=0,
            ai_level3_limit=0,
            monthly_price_cents=0,
        ),
        Plan.INDIE_PRO: PlanConfig(
            name="Indie Pro",
            max_checks=25,
            check_interval_min_seconds=60,
            log_retention_days=30,
            log_volume_bytes_per_month=5 * _GIB,
            max_status_pages=1,
            max_api_keys=10,
            audit_log_retention_days=7,
            ai_level1_limit=UNLIMITED,
            ai_level2_limit=30,
            ai_level3_limit=0,
            monthly_price_cents=1900,
        ),
        Plan.TEAM: PlanConfig(
            name="Team",
            max_checks=75,
            check_interval_min_seconds=30,
            log_retention_days=90,
            log_volume_bytes_per_month=20 * _GIB,
            max_status_pages=3,
            max_api_keys=25,
            audit_log_retention_days=30,
            ai_level1_limit=UNLIMITED,
            ai_level2_limit=UNLIMITED,
            ai_level3_limit=30,
            monthly_price_cents=4900,
        ),
        Plan.AGENCY: PlanConfig(
            name="Agency",
            max_checks=250,
            check_interval_min_seconds=30,
            log_retention_days=180,
            log_volume_bytes_per_month=50 * _GIB,
            max_status_pages=UNLIMITED,
            max_api_keys=UNLIMITED,
            audit_log_retention_days=365,
            ai_level1_limit=UNLIMITED,
            ai_level2_limit=UNLIMITED,
            ai_level3_limit=UNLIMITED,
            monthly_price_cents=14900,
        ),
    }
)
