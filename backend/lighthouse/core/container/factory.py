"""Container Factory.

All construction logic lives here. The factory reads settings and builds
the container; broken wiring fails at startup rather than on first use.
"""

import logging

from lighthouse.core.config import Settings
from lighthouse.core.container.container import Container
from lighthouse.core.datetime_utils import Clock, utc_now
from lighthouse.domains.billing.catalog import PlanCatalog
from lighthouse.domains.usage.ledger import MonthlyUsageLedger
from lighthouse.domains.usage.repository import MonthlyUsageRepository, ResourceCountRepository
from lighthouse.domains.usage.service import EntitlementService
from lighthouse.domains.usage.snapshot import UsageSnapshotBuilder
from lighthouse.domains.usage.synchronizer import ResourceCountSynchronizer

logger = logging.getLogger(__name__)


def create_container(settings: Settings, clock: Clock = utc_now) -> Container:
    """Build the container from settings.

    Args:
        settings: Application settings
        clock: UTC clock used to decide the current billing month

    Returns:
        Fully wired container
    """
    plan_catalog = PlanCatalog.from_settings(settings)
    configured = [plan.value for plan in plan_catalog if plan_catalog.lookup(plan).stripe_price_id]
    logger.info("Plan catalog built; price IDs configured for: %s", configured or "none")

    usage_repo = MonthlyUsageRepository()
    resource_repo = ResourceCountRepository()

    usage_ledger = MonthlyUsageLedger(usage_repo=usage_repo, clock=clock)
    snapshot_builder = UsageSnapshotBuilder(ledger=usage_ledger, resource_repo=resource_repo)
    resource_sync = ResourceCountSynchronizer(
        ledger=usage_ledger,
        usage_repo=usage_repo,
        resource_repo=resource_repo,
    )
    entitlement_service = EntitlementService(
        catalog=plan_catalog,
        snapshot_builder=snapshot_builder,
    )

    return Container(
        plan_catalog=plan_catalog,
        usage_ledger=usage_ledger,
        snapshot_builder=snapshot_builder,
        resource_sync=resource_sync,
        entitlement_service=entitlement_service,
    )
