"""Plan catalog — read-only lookup from plan to entitlements.

Built once at import time from the default tier table plus the
billing-provider price IDs in settings, then never mutated. Lookups never
raise: anything unrecognized resolves to the free tier, and a WARNING is
logged so operators can spot bad plan values in the organization table.
"""

import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Protocol, Union

from lighthouse.core.config import Settings, settings
from lighthouse.domains.billing.types import DEFAULT_PLAN_CONFIGS, PlanConfig
from lighthouse.schemas.plan import Plan

logger = logging.getLogger(__name__)


class _HasPlan(Protocol):
    """Anything carrying an organization's plan, e.g. ``models.Organization``."""

    id: Any
    plan: Any


class PlanCatalog:
    """Immutable mapping of plan tiers to their configuration."""

    def __init__(self, configs: Mapping[Plan, PlanConfig]) -> None:
        """Freeze the given configs. A free-tier entry is required."""
        if Plan.FREE not in configs:
            raise ValueError("Plan catalog must contain the free tier")
        # Copy first so later changes to the caller's dict cannot leak in
        self._configs: Mapping[Plan, PlanConfig] = MappingProxyType(dict(configs))

    @classmethod
    def from_settings(cls, config: Settings) -> "PlanCatalog":
        """Build the catalog with price IDs taken from configuration."""
        price_ids = {
            Plan.INDIE_PRO: config.STRIPE_INDIE_PRICE_ID,
            Plan.TEAM: config.STRIPE_TEAM_PRICE_ID,
            Plan.AGENCY: config.STRIPE_AGENCY_PRICE_ID,
        }
        configs = {
            plan: plan_config.with_price_id(price_ids.get(plan, plan_config.stripe_price_id))
            for plan, plan_config in DEFAULT_PLAN_CONFIGS.items()
        }
        return cls(configs)

    @property
    def configs(self) -> Mapping[Plan, PlanConfig]:
        """Read-only view of every tier."""
        return self._configs

    def __iter__(self) -> Iterator[Plan]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def resolve_plan(self, raw: Union[Plan, str, None]) -> Plan:
        """Turn a stored plan value into a ``Plan``, defaulting to free.

        ``None`` means "no plan" and resolves quietly; any other unknown
        value is logged at WARNING.
        """
        if isinstance(raw, Plan):
            return raw
        if Plan.is_valid(raw):
            return Plan(raw)
        if raw is not None:
            logger.warning("Unrecognized plan %r; treating it as %s", raw, Plan.FREE.value)
        return Plan.FREE

    def lookup(self, plan: Union[Plan, str, None]) -> PlanConfig:
        """Get the configuration for a plan. Unknown plans get the free tier."""
        resolved = self.resolve_plan(plan)
        return self._configs.get(resolved, self._configs[Plan.FREE])

    def lookup_by_price_id(self, price_id: Optional[str]) -> tuple[Plan, bool]:
        """Find the plan billed under a provider price ID.

        Scans tiers in catalog order and returns the first match. Empty
        price IDs mean "not configured" and never match, so unconfigured
        paid tiers cannot collide with each other or with free.

        Returns:
            (plan, True) on a match, otherwise (Plan.FREE, False)
        """
        if not price_id:
            return Plan.FREE, False
        for plan, plan_config in self._configs.items():
            if plan_config.stripe_price_id and plan_config.stripe_price_id == price_id:
                return plan, True
        return Plan.FREE, False

    def plan_for_organization(self, organization: Optional[_HasPlan]) -> Plan:
        """Resolve an organization's plan, logging a warning for invalid values."""
        if organization is None:
            return Plan.FREE
        raw = organization.plan
        if not Plan.is_valid(raw):
            logger.warning(
                "Organization %s has unrecognized plan %r; treating it as %s",
                organization.id,
                raw,
                Plan.FREE.value,
            )
            return Plan.FREE
        return Plan(raw)

    def for_organization(self, organization: Optional[_HasPlan]) -> PlanConfig:
        """Get the configuration for an organization's plan."""
        return self.lookup(self.plan_for_organization(organization))


# Singleton catalog
plan_catalog = PlanCatalog.from_settings(settings)
