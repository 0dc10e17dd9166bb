"""Usage domain protocols.

UsageLedger: per-(org, month) counters; creation and increments.
UsageSnapshotBuilder: live counts + ledger counters -> UsageSnapshot.
ResourceCountSynchronizer: overwrites cached counts from live counts.
EntitlementService: plan + snapshot -> allow/deny answers for callers.
"""

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.usage.types import BillingMonth, EntitlementReport
from lighthouse.models.monthly_usage import MonthlyUsage
from lighthouse.models.organization import Organization
from lighthouse.schemas.entitlement import EntitlementDimension, LimitCheck
from lighthouse.schemas.usage import MonthlyUsageCounts, UsageSnapshot


@runtime_checkable
class UsageLedgerProtocol(Protocol):
    """Monthly usage ledger.

    Every method is safe to call concurrently for the same organization
    and period without caller-side coordination.
    """

    def current_period(self) -> BillingMonth:
        """Calendar month (UTC) the ledger considers current."""
        ...

    async def get_or_create(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> MonthlyUsage:
        """Return the period's row, creating it on first use."""
        ...

    async def increment_log_volume(
        self,
        db: AsyncSession,
        organization_id: UUID,
        delta_bytes: int,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Add ingested bytes and return the new monthly total."""
        ...

    async def increment_ai_calls(
        self,
        db: AsyncSession,
        organization_id: UUID,
        tier: int,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Count one AI call of ``tier`` (1-3). Other tiers are ignored."""
        ...


@runtime_checkable
class UsageSnapshotBuilderProtocol(Protocol):
    """Builds usage snapshots for entitlement checks."""

    async def build(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> UsageSnapshot:
        """Compose live resource counts with the period's ledger counters."""
        ...


@runtime_checkable
class ResourceCountSynchronizerProtocol(Protocol):
    """Reconciles cached ledger counts with live resource tables."""

    async def sync(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> MonthlyUsageCounts:
        """Recount and overwrite; errors propagate."""
        ...

    async def sync_best_effort(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
    ) -> bool:
        """Recount and overwrite; failures are logged and reported as False."""
        ...


@runtime_checkable
class EntitlementServiceProtocol(Protocol):
    """Answers "is this allowed" for an organization."""

    async def get_report(
        self,
        db: AsyncSession,
        organization: Organization,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> EntitlementReport:
        """Plan, usage and every evaluated dimension."""
        ...

    async def check(
        self,
        db: AsyncSession,
        organization: Organization,
        dimension: EntitlementDimension,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> LimitCheck:
        """Evaluate a single dimension."""
        ...

    async def is_allowed(
        self,
        db: AsyncSession,
        organization: Organization,
        dimension: EntitlementDimension,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> bool:
        """Whether one more unit of ``dimension`` fits the plan."""
        ...

    async def ensure_allowed(
        self,
        db: AsyncSession,
        organization: Organization,
        dimension: EntitlementDimension,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> LimitCheck:
        """Evaluate a dimension and raise UsageLimitExceededError when blocked."""
        ...
