"""Usage domain repositories wrapping crud.monthly_usage, crud.check and crud.api_key."""

from typing import Mapping, Optional, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse import crud
from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.models.monthly_usage import MonthlyUsage


class MonthlyUsageRepositoryProtocol(Protocol):
    """Data access for ledger rows."""

    async def insert_ignore(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        year: int,
        month: int,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Create the row for the period unless it already exists."""
        ...

    async def get_by_period(
        self, db: AsyncSession, *, organization_id: UUID, year: int, month: int
    ) -> Optional[MonthlyUsage]:
        """Get the row for (organization, year, month)."""
        ...

    async def get(self, db: AsyncSession, *, id: UUID) -> Optional[MonthlyUsage]:
        """Get a row by primary key."""
        ...

    async def increment(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        increments: Mapping[str, int],
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Atomically add deltas to counters."""
        ...

    async def set_counts(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        counts: Mapping[str, int],
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Overwrite cached resource counts."""
        ...

    async def get_all_by_organization(
        self, db: AsyncSession, *, organization_id: UUID, limit: int = 12
    ) -> list[MonthlyUsage]:
        """Get recent rows for an organization, newest first."""
        ...


class MonthlyUsageRepository(MonthlyUsageRepositoryProtocol):
    """Delegates to the crud.monthly_usage singleton."""

    async def insert_ignore(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        year: int,
        month: int,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Create the row for the period unless it already exists."""
        await crud.monthly_usage.insert_ignore(
            db, organization_id=organization_id, year=year, month=month, uow=uow
        )

    async def get_by_period(
        self, db: AsyncSession, *, organization_id: UUID, year: int, month: int
    ) -> Optional[MonthlyUsage]:
        """Get the row for (organization, year, month)."""
        return await crud.monthly_usage.get_by_period(
            db, organization_id=organization_id, year=year, month=month
        )

    async def get(self, db: AsyncSession, *, id: UUID) -> Optional[MonthlyUsage]:
        """Get a row by primary key."""
        return await crud.monthly_usage.get(db, id=id)

    async def increment(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        increments: Mapping[str, int],
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Atomically add deltas to counters."""
        await crud.monthly_usage.increment(db, id=id, increments=increments, uow=uow)

    async def set_counts(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        counts: Mapping[str, int],
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Overwrite cached resource counts."""
        await crud.monthly_usage.set_counts(db, id=id, counts=counts, uow=uow)

    async def get_all_by_organization(
        self, db: AsyncSession, *, organization_id: UUID, limit: int = 12
    ) -> list[MonthlyUsage]:
        """Get recent rows for an organization, newest first."""
        return await crud.monthly_usage.get_all_by_organization(
            db, organization_id=organization_id, limit=limit
        )


class ResourceCountRepositoryProtocol(Protocol):
    """Authoritative counts of metered resources."""

    async def count_live_checks(self, db: AsyncSession, organization_id: UUID) -> int:
        """Count checks that are not soft-deleted."""
        ...

    async def count_live_api_keys(self, db: AsyncSession, organization_id: UUID) -> int:
        """Count API keys that are not soft-deleted."""
        ...


class ResourceCountRepository(ResourceCountRepositoryProtocol):
    """Delegates to crud.check and crud.api_key."""

    async def count_live_checks(self, db: AsyncSession, organization_id: UUID) -> int:
        """Count checks that are not soft-deleted."""
        return await crud.check.count_live(db, organization_id=organization_id)

    async def count_live_api_keys(self, db: AsyncSession, organization_id: UUID) -> int:
        """Count API keys that are not soft-deleted."""
        return await crud.api_key.count_live(db, organization_id=organization_id)
