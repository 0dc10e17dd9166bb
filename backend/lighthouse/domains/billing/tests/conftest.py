"""Billing domain test fixtures."""

import pytest

from lighthouse.domains.billing.catalog import PlanCatalog
from lighthouse.domains.billing.types import DEFAULT_PLAN_CONFIGS, PlanConfig
from lighthouse.schemas.plan import Plan


def _make_catalog(**price_ids: str) -> PlanCatalog:
    """Catalog over the default tiers with price IDs keyed by plan value."""
    configs = {
        plan: config.with_price_id(price_ids.get(plan.value, ""))
        for plan, config in DEFAULT_PLAN_CONFIGS.items()
    }
    return PlanCatalog(configs)


def _make_config(**overrides) -> PlanConfig:
    """A free-tier config with selected limits replaced."""
    fields = {**DEFAULT_PLAN_CONFIGS[Plan.FREE].__dict__, **overrides}
    return PlanConfig(**fields)


@pytest.fixture
def catalog():
    return _make_catalog()
