"""Resource count synchronizer.

Called after a check or API key is created or deleted. Overwrites the
cached counts on the current ledger row with live counts; it never adds.
Reads for enforcement do not depend on it, since the snapshot builder
counts those resources live.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.usage.protocols import (
    ResourceCountSynchronizerProtocol,
    UsageLedgerProtocol,
)
from lighthouse.domains.usage.repository import (
    MonthlyUsageRepositoryProtocol,
    ResourceCountRepositoryProtocol,
)
from lighthouse.domains.usage.types import BillingMonth
from lighthouse.schemas.usage import MonthlyUsageCounts

logger = logging.getLogger(__name__)


class ResourceCountSynchronizer(ResourceCountSynchronizerProtocol):
    """Recounts live resources and writes the totals onto the ledger row."""

    def __init__(
        self,
        ledger: UsageLedgerProtocol,
        usage_repo: MonthlyUsageRepositoryProtocol,
        resource_repo: ResourceCountRepositoryProtocol,
    ) -> None:
        """Initialize with the ledger and both repositories."""
        self._ledger = ledger
        self._usage_repo = usage_repo
        self._resource_repo = resource_repo

    async def sync(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> MonthlyUsageCounts:
        """Overwrite ``check_count`` and ``api_key_count`` with live values.

        Returns:
            The counts that were written
        """
        usage = await self._ledger.get_or_create(db, organization_id, period=period, uow=uow)

        counts = MonthlyUsageCounts(
            check_count=await self._resource_repo.count_live_checks(db, organization_id),
            api_key_count=await self._resource_repo.count_live_api_keys(db, organization_id),
        )
        await self._usage_repo.set_counts(db, id=usage.id, counts=counts.model_dump(), uow=uow)
        return counts

    async def sync_best_effort(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
    ) -> bool:
        """Run ``sync`` for a mutation that has already been committed.

        A failure here must not undo the triggering action, so it is logged
        and reported as ``False`` instead of raised.
        """
        try:
            await self.sync(db, organization_id, period=period)
        except Exception:
            logger.error(
                "Failed to sync resource counts for org %s", organization_id, exc_info=True
            )
            try:
                await db.rollback()
            except Exception:
                logger.warning(
                    "Rollback after failed resource sync also failed for org %s",
                    organization_id,
                    exc_info=True,
                )
            return False
        return True
