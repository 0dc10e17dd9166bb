"""CRUD operations for the MonthlyUsage model.

Every mutation here is a single SQL statement. Counters are bumped with
``column = column + delta`` so concurrent writers never lose an update, and
row creation relies on the ``uq_monthly_usage_org_month`` constraint instead
of any application-side locking.
"""

from typing import Mapping, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.models.monthly_usage import MonthlyUsage

# Counters that may only grow within a month.
INCREMENTABLE_FIELDS: frozenset[str] = frozenset(
    {"log_volume_bytes", "ai_level1_calls", "ai_level2_calls", "ai_level3_calls"}
)

# Cached resource counts that are overwritten with absolute values.
SETTABLE_FIELDS: frozenset[str] = frozenset({"check_count", "status_page_count", "api_key_count"})

UNIQUE_CONSTRAINT = "uq_monthly_usage_org_month"


class CRUDMonthlyUsage:
    """CRUD operations for the MonthlyUsage model."""

    def __init__(self) -> None:
        """Initialize the CRUD object for MonthlyUsage."""
        self.model = MonthlyUsage

    async def _finish(self, db: AsyncSession, uow: Optional[UnitOfWork]) -> None:
        if uow is None:
            await db.commit()
        else:
            await db.flush()

    async def insert_ignore(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        year: int,
        month: int,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Insert an all-zero row for the period unless one already exists.

        Uses PostgreSQL ``INSERT ... ON CONFLICT DO NOTHING`` on the
        (organization_id, year, month) constraint. Concurrent callers for the
        same period either insert the row or no-op; none of them errors.

        Args:
            db: Database session
            organization_id: Organization ID
            year: Calendar year (UTC)
            month: Calendar month, 1-12 (UTC)
            uow: Optional unit of work; when given the caller commits
        """
        stmt = (
            insert(self.model)
            .values(organization_id=organization_id, year=year, month=month)
            .on_conflict_do_nothing(constraint=UNIQUE_CONSTRAINT)
        )
        await db.execute(stmt)
        await self._finish(db, uow)

    async def get_by_period(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        year: int,
        month: int,
    ) -> Optional[MonthlyUsage]:
        """Get the row for (organization, year, month), refreshed from the database.

        Args:
            db: Database session
            organization_id: Organization ID
            year: Calendar year (UTC)
            month: Calendar month, 1-12 (UTC)

        Returns:
            The usage row or None
        """
        query = (
            select(self.model)
            .where(
                self.model.organization_id == organization_id,
                self.model.year == year,
                self.model.month == month,
            )
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, *, id: UUID) -> Optional[MonthlyUsage]:
        """Get a row by primary key, refreshed from the database."""
        query = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def increment(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        increments: Mapping[str, int],
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Atomically add ``increments`` to counters of one row.

        Issues a single ``UPDATE monthly_usage SET col = col + :delta ...``.

        Args:
            db: Database session
            id: Usage row ID
            increments: Counter name to delta
            uow: Optional unit of work; when given the caller commits

        Raises:
            ValueError: If a field is not an incrementable counter
        """
        unknown = set(increments) - INCREMENTABLE_FIELDS
        if unknown:
            raise ValueError(f"Not incrementable usage fields: {sorted(unknown)}")
        if not increments:
            return

        values = {
            field: getattr(self.model, field) + delta for field, delta in increments.items()
        }
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await db.execute(stmt)
        await self._finish(db, uow)

    async def set_counts(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        counts: Mapping[str, int],
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Overwrite cached resource counts with absolute values in one UPDATE.

        Args:
            db: Database session
            id: Usage row ID
            counts: Field name to new absolute value
            uow: Optional unit of work; when given the caller commits

        Raises:
            ValueError: If a field is not a cached resource count
        """
        unknown = set(counts) - SETTABLE_FIELDS
        if unknown:
            raise ValueError(f"Not settable usage fields: {sorted(unknown)}")
        if not counts:
            return

        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**dict(counts))
            .execution_options(synchronize_session=False)
        )
        await db.execute(stmt)
        await self._finish(db, uow)

    async def get_all_by_organization(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        limit: int = 12,
    ) -> list[MonthlyUsage]:
        """Get the most recent rows for an organization, newest month first.

        Args:
            db: Database session
            organization_id: Organization ID
            limit: Maximum number of months to return

        Returns:
            List of usage rows ordered by (year, month) desc
        """
        query = (
            select(self.model)
            .where(self.model.organization_id == organization_id)
            .order_by(self.model.year.desc(), self.model.month.desc())
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


monthly_usage = CRUDMonthlyUsage()
