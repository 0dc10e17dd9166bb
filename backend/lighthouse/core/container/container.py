"""Dependency Injection Container.

The container is a simple immutable dataclass that holds protocol implementations.
It has no construction logic — that belongs in the factory.
"""

from dataclasses import dataclass

from lighthouse.domains.billing.catalog import PlanCatalog
from lighthouse.domains.usage.protocols import (
    EntitlementServiceProtocol,
    ResourceCountSynchronizerProtocol,
    UsageLedgerProtocol,
    UsageSnapshotBuilderProtocol,
)


@dataclass(frozen=True)
class Container:
    """Immutable container holding the metering services.

    Usage:
        # Production: use the global container built by factory
        from lighthouse.core.container import container
        total = await container.usage_ledger.increment_log_volume(db, org_id, 512)

        # Testing: construct directly with fakes
        ledger = MonthlyUsageLedger(FakeMonthlyUsageRepository())
        test_container = Container(plan_catalog=..., usage_ledger=ledger, ...)
    """

    # Plan tiers and their limits (read-only)
    plan_catalog: PlanCatalog

    # Monthly counters: creation, log volume and AI call increments
    usage_ledger: UsageLedgerProtocol

    # Live counts + ledger counters -> UsageSnapshot
    snapshot_builder: UsageSnapshotBuilderProtocol

    # Post-mutation reconciliation of cached counts
    resource_sync: ResourceCountSynchronizerProtocol

    # Allow/deny answers for request handlers
    entitlement_service: EntitlementServiceProtocol
