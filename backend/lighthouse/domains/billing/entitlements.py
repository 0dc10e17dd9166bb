"""Entitlement evaluator.

Pure functions comparing a ``UsageSnapshot`` against a ``PlanConfig``.
Nothing here touches storage or raises for an exceeded limit; a blocked
dimension is an ordinary result with ``allowed=False``.
"""

from typing import Union

from lighthouse.domains.billing.catalog import PlanCatalog, plan_catalog
from lighthouse.domains.billing.types import PlanConfig, is_unlimited
from lighthouse.schemas.entitlement import EntitlementDimension, EntitlementResult, LimitCheck
from lighthouse.schemas.plan import Plan
from lighthouse.schemas.usage import UsageSnapshot


def check_limit(dimension: EntitlementDimension, current: int, limit: int) -> LimitCheck:
    """Evaluate one dimension.

    Reaching the limit blocks the next unit: allowed iff ``current < limit``.
    Existing usage at or above the limit is never reported as anything but
    blocked, and ``remaining`` bottoms out at zero.
    """
    if is_unlimited(limit):
        return LimitCheck(
            dimension=dimension,
            allowed=True,
            current=current,
            limit=limit,
            unlimited=True,
            remaining=None,
        )
    return LimitCheck(
        dimension=dimension,
        allowed=current < limit,
        current=current,
        limit=limit,
        unlimited=False,
        remaining=max(limit - current, 0),
    )


def evaluate(plan_config: PlanConfig, snapshot: UsageSnapshot) -> EntitlementResult:
    """Evaluate every dimension of ``snapshot`` against ``plan_config``."""
    return EntitlementResult(
        checks=check_limit(
            EntitlementDimension.CHECKS, snapshot.check_count, plan_config.max_checks
        ),
        api_keys=check_limit(
            EntitlementDimension.API_KEYS, snapshot.api_key_count, plan_config.max_api_keys
        ),
        log_volume=check_limit(
            EntitlementDimension.LOG_VOLUME,
            snapshot.log_volume_bytes,
            plan_config.log_volume_bytes_per_month,
        ),
        status_pages=check_limit(
            EntitlementDimension.STATUS_PAGES,
            snapshot.status_page_count,
            plan_config.max_status_pages,
        ),
        ai_level1=check_limit(
            EntitlementDimension.AI_LEVEL1, snapshot.ai_level1_calls, plan_config.ai_level1_limit
        ),
        ai_level2=check_limit(
            EntitlementDimension.AI_LEVEL2, snapshot.ai_level2_calls, plan_config.ai_level2_limit
        ),
        ai_level3=check_limit(
            EntitlementDimension.AI_LEVEL3, snapshot.ai_level3_calls, plan_config.ai_level3_limit
        ),
    )


def evaluate_plan(
    plan: Union[Plan, str, None],
    snapshot: UsageSnapshot,
    catalog: PlanCatalog = plan_catalog,
) -> EntitlementResult:
    """Resolve ``plan`` through the catalog (unknown -> free) and evaluate."""
    return evaluate(catalog.lookup(plan), snapshot)
