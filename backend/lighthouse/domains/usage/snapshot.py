"""Usage snapshot builder.

Checks and API keys are counted live from their own tables so a snapshot
never drifts from reality; log volume, AI calls and status pages come from
the current month's ledger row. Status pages stay cache-sourced until
there is a live status-page count to read from.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.usage.protocols import UsageLedgerProtocol, UsageSnapshotBuilderProtocol
from lighthouse.domains.usage.repository import ResourceCountRepositoryProtocol
from lighthouse.domains.usage.types import BillingMonth
from lighthouse.schemas.usage import UsageSnapshot


class UsageSnapshotBuilder(UsageSnapshotBuilderProtocol):
    """Composes a ``UsageSnapshot``; any failed sub-read aborts the build."""

    def __init__(
        self,
        ledger: UsageLedgerProtocol,
        resource_repo: ResourceCountRepositoryProtocol,
    ) -> None:
        """Initialize with the ledger and the live resource counters."""
        self._ledger = ledger
        self._resource_repo = resource_repo

    async def build(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> UsageSnapshot:
        """Build the organization's snapshot for ``period`` (default: current month).

        The ledger row may be created on the way; pass ``uow`` to keep that
        insert inside the caller's transaction instead of committing it.
        """
        check_count = await self._resource_repo.count_live_checks(db, organization_id)
        api_key_count = await self._resource_repo.count_live_api_keys(db, organization_id)
        usage = await self._ledger.get_or_create(db, organization_id, period=period, uow=uow)

        return usage.to_snapshot().model_copy(
            update={"check_count": check_count, "api_key_count": api_key_count}
        )
