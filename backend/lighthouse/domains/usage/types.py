"""Usage domain types and pure business logic.

No IO; everything here is deterministic.
"""

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional
from uuid import UUID

from lighthouse.core.datetime_utils import Clock, as_utc, utc_now
from lighthouse.domains.billing.types import PlanConfig
from lighthouse.schemas.entitlement import EntitlementResult
from lighthouse.schemas.plan import Plan
from lighthouse.schemas.usage import UsageSnapshot

# AI tier number -> ledger column. Tiers outside this map are ignored.
AI_TIER_FIELDS: Mapping[int, str] = MappingProxyType(
    {
        1: "ai_level1_calls",
        2: "ai_level2_calls",
        3: "ai_level3_calls",
    }
)

LOG_VOLUME_FIELD = "log_volume_bytes"


@dataclass(frozen=True, order=True)
class BillingMonth:
    """A calendar month in UTC; the key space of the usage ledger."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def from_datetime(cls, value: datetime) -> "BillingMonth":
        """Month containing ``value`` once converted to UTC."""
        value = as_utc(value)
        return cls(year=value.year, month=value.month)

    @classmethod
    def current(cls, clock: Clock = utc_now) -> "BillingMonth":
        """Month that is current according to ``clock``."""
        return cls.from_datetime(clock())

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def ai_tier_field(tier: int) -> Optional[str]:
    """Ledger column for an AI tier, or None for an unknown tier."""
    return AI_TIER_FIELDS.get(tier)


@dataclass(frozen=True)
class EntitlementReport:
    """Plan, usage and evaluated entitlements for one organization."""

    organization_id: UUID
    plan: Plan
    plan_config: PlanConfig
    usage: UsageSnapshot
    entitlements: EntitlementResult
