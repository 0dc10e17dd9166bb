"""Monthly usage ledger — one row per organization per UTC calendar month.

Rows are created lazily on first access with an insert that is a no-op when
the (organization_id, year, month) key already exists, followed by a read
by that key. The read, not the insert, is what makes ``get_or_create``
idempotent: whoever created the row, every caller gets it back.

Counters are only ever changed with single ``col = col + delta`` updates, so
concurrent ingestion never loses an increment. There is no in-process
locking; uniqueness and atomicity are delegated to the database.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.core.datetime_utils import Clock, utc_now
from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.usage.exceptions import MonthlyUsageNotFoundError
from lighthouse.domains.usage.protocols import UsageLedgerProtocol
from lighthouse.domains.usage.repository import MonthlyUsageRepositoryProtocol
from lighthouse.domains.usage.types import LOG_VOLUME_FIELD, BillingMonth, ai_tier_field
from lighthouse.models.monthly_usage import MonthlyUsage

logger = logging.getLogger(__name__)


class MonthlyUsageLedger(UsageLedgerProtocol):
    """Reads and atomically mutates the per-month usage rows.

    Storage errors are never caught here; they reach the caller unchanged.
    """

    def __init__(
        self,
        usage_repo: MonthlyUsageRepositoryProtocol,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the ledger with its repository and a UTC clock."""
        self._usage_repo = usage_repo
        self._clock = clock

    def current_period(self) -> BillingMonth:
        """Calendar month (UTC) the ledger considers current."""
        return BillingMonth.current(self._clock)

    async def get_or_create(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> MonthlyUsage:
        """Return the period's row, creating an all-zero row on first use.

        Args:
            db: Database session
            organization_id: Organization ID
            period: Month to resolve; defaults to the clock's current month
            uow: Optional unit of work; when given the caller commits

        Raises:
            MonthlyUsageNotFoundError: If the row is missing right after the insert
        """
        period = period or self.current_period()

        await self._usage_repo.insert_ignore(
            db,
            organization_id=organization_id,
            year=period.year,
            month=period.month,
            uow=uow,
        )
        usage = await self._usage_repo.get_by_period(
            db, organization_id=organization_id, year=period.year, month=period.month
        )
        if usage is None:
            raise MonthlyUsageNotFoundError(organization_id, str(period))
        return usage

    async def increment_log_volume(
        self,
        db: AsyncSession,
        organization_id: UUID,
        delta_bytes: int,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Add ingested bytes to the month's log volume and return the new total.

        If the increment succeeds but the read-back fails, the bytes are
        already recorded; the caller only lost the latest total.

        Raises:
            ValueError: If ``delta_bytes`` is negative
        """
        if delta_bytes < 0:
            raise ValueError(f"delta_bytes must be non-negative, got {delta_bytes}")

        usage = await self.get_or_create(db, organization_id, period=period, uow=uow)
        if delta_bytes == 0:
            return usage.log_volume_bytes

        await self._usage_repo.increment(
            db, id=usage.id, increments={LOG_VOLUME_FIELD: delta_bytes}, uow=uow
        )
        updated = await self._usage_repo.get(db, id=usage.id)
        if updated is None:
            raise MonthlyUsageNotFoundError(organization_id, f"{usage.year}-{usage.month:02d}")

        logger.debug(
            "Recorded %d log bytes for org %s (total=%d)",
            delta_bytes,
            organization_id,
            updated.log_volume_bytes,
        )
        return updated.log_volume_bytes

    async def increment_ai_calls(
        self,
        db: AsyncSession,
        organization_id: UUID,
        tier: int,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Count one AI call for tier 1, 2 or 3.

        The increment is unconditional; whether the call was allowed is the
        entitlement evaluator's business. Any other tier is ignored without
        touching storage and logged at WARNING.
        """
        field = ai_tier_field(tier)
        if field is None:
            logger.warning(
                "Ignoring AI call with unknown tier %r for org %s", tier, organization_id
            )
            return

        usage = await self.get_or_create(db, organization_id, period=period, uow=uow)
        await self._usage_repo.increment(db, id=usage.id, increments={field: 1}, uow=uow)

    async def get_current_log_volume(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Bytes ingested so far this month."""
        usage = await self.get_or_create(db, organization_id, period=period, uow=uow)
        return usage.log_volume_bytes

    async def get_history(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        limit: int = 12,
    ) -> list[MonthlyUsage]:
        """Most recent ledger rows for display, newest month first."""
        return await self._usage_repo.get_all_by_organization(
            db, organization_id=organization_id, limit=limit
        )
