"""Fake usage repositories for testing.

``FakeMonthlyUsageRepository`` mimics the two database guarantees the ledger
relies on: the (organization, year, month) unique key makes ``insert_ignore``
a no-op for an existing period, and ``increment`` applies its deltas in one
step. Each method yields to the event loop first so concurrent callers
driven through ``asyncio.gather`` genuinely interleave.
"""

import asyncio
from typing import Mapping, Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.crud.crud_monthly_usage import INCREMENTABLE_FIELDS, SETTABLE_FIELDS
from lighthouse.models.monthly_usage import MonthlyUsage

_COUNTER_FIELDS = sorted(INCREMENTABLE_FIELDS | SETTABLE_FIELDS)


def new_usage_row(organization_id: UUID, year: int, month: int, **overrides: int) -> MonthlyUsage:
    """Build a detached all-zero ledger row (ORM defaults only apply on flush)."""
    values = {field: 0 for field in _COUNTER_FIELDS}
    values.update(overrides)
    return MonthlyUsage(
        id=uuid4(),
        organization_id=organization_id,
        year=year,
        month=month,
        **values,
    )


class FakeMonthlyUsageRepository:
    """In-memory fake for MonthlyUsageRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize empty in-memory stores."""
        self._by_key: dict[tuple[UUID, int, int], MonthlyUsage] = {}
        self._by_id: dict[UUID, MonthlyUsage] = {}
        self._failures: dict[str, Exception] = {}
        self._calls: list[tuple] = []

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    def seed(self, usage: MonthlyUsage) -> None:
        """Insert a prepared row."""
        self._by_key[(usage.organization_id, usage.year, usage.month)] = usage
        self._by_id[usage.id] = usage

    def fail_on(self, method: str, exc: Exception) -> None:
        """Make every later call to ``method`` raise ``exc``."""
        self._failures[method] = exc

    def rows(self, organization_id: Optional[UUID] = None) -> list[MonthlyUsage]:
        """All stored rows, optionally for one organization."""
        return [
            row
            for row in self._by_id.values()
            if organization_id is None or row.organization_id == organization_id
        ]

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    def _enter(self, name: str, *args: object) -> None:
        self._calls.append((name, *args))
        if name in self._failures:
            raise self._failures[name]

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    async def insert_ignore(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        year: int,
        month: int,
        uow: object = None,
    ) -> None:
        """Create the row unless the key exists (check and insert never interleave)."""
        self._enter("insert_ignore", db, organization_id, year, month)
        await asyncio.sleep(0)
        key = (organization_id, year, month)
        if key not in self._by_key:
            self.seed(new_usage_row(organization_id, year, month))

    async def get_by_period(
        self, db: AsyncSession, *, organization_id: UUID, year: int, month: int
    ) -> Optional[MonthlyUsage]:
        """Get the row for (organization, year, month)."""
        self._enter("get_by_period", db, organization_id, year, month)
        await asyncio.sleep(0)
        return self._by_key.get((organization_id, year, month))

    async def get(self, db: AsyncSession, *, id: UUID) -> Optional[MonthlyUsage]:
        """Get a row by primary key."""
        self._enter("get", db, id)
        await asyncio.sleep(0)
        return self._by_id.get(id)

    async def increment(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        increments: Mapping[str, int],
        uow: object = None,
    ) -> None:
        """Apply all deltas in one step, like a single UPDATE statement."""
        self._enter("increment", db, id, dict(increments))
        unknown = set(increments) - INCREMENTABLE_FIELDS
        if unknown:
            raise ValueError(f"Not incrementable usage fields: {sorted(unknown)}")
        await asyncio.sleep(0)
        usage = self._by_id.get(id)
        if usage is None:
            return
        for field, delta in increments.items():
            setattr(usage, field, getattr(usage, field) + delta)

    async def set_counts(
        self,
        db: AsyncSession,
        *,
        id: UUID,
        counts: Mapping[str, int],
        uow: object = None,
    ) -> None:
        """Overwrite cached counts."""
        self._enter("set_counts", db, id, dict(counts))
        unknown = set(counts) - SETTABLE_FIELDS
        if unknown:
            raise ValueError(f"Not settable usage fields: {sorted(unknown)}")
        await asyncio.sleep(0)
        usage = self._by_id.get(id)
        if usage is None:
            return
        for field, value in counts.items():
            setattr(usage, field, value)

    async def get_all_by_organization(
        self, db: AsyncSession, *, organization_id: UUID, limit: int = 12
    ) -> list[MonthlyUsage]:
        """Rows for an organization, newest month first."""
        self._enter("get_all_by_organization", db, organization_id, limit)
        rows = sorted(self.rows(organization_id), key=lambda r: (r.year, r.month), reverse=True)
        return rows[:limit]


class FakeResourceCountRepository:
    """In-memory fake for ResourceCountRepositoryProtocol backed by soft-deletable records."""

    def __init__(self) -> None:
        """Initialize with no checks or API keys."""
        # id -> (organization_id, deleted)
        self._checks: dict[UUID, tuple[UUID, bool]] = {}
        self._api_keys: dict[UUID, tuple[UUID, bool]] = {}
        self._failures: dict[str, Exception] = {}
        self._calls: list[tuple] = []

    def add_check(self, organization_id: UUID, *, deleted: bool = False) -> UUID:
        """Create a check record and return its ID."""
        check_id = uuid4()
        self._checks[check_id] = (organization_id, deleted)
        return check_id

    def add_api_key(self, organization_id: UUID, *, deleted: bool = False) -> UUID:
        """Create an API key record and return its ID."""
        key_id = uuid4()
        self._api_keys[key_id] = (organization_id, deleted)
        return key_id

    def delete_check(self, check_id: UUID) -> None:
        """Soft-delete a check."""
        organization_id, _ = self._checks[check_id]
        self._checks[check_id] = (organization_id, True)

    def delete_api_key(self, key_id: UUID) -> None:
        """Soft-delete an API key."""
        organization_id, _ = self._api_keys[key_id]
        self._api_keys[key_id] = (organization_id, True)

    def fail_on(self, method: str, exc: Exception) -> None:
        """Make every later call to ``method`` raise ``exc``."""
        self._failures[method] = exc

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    @staticmethod
    def _live(records: dict[UUID, tuple[UUID, bool]], organization_id: UUID) -> int:
        return sum(1 for org, deleted in records.values() if org == organization_id and not deleted)

    async def count_live_checks(self, db: AsyncSession, organization_id: UUID) -> int:
        """Count checks that are not soft-deleted."""
        self._calls.append(("count_live_checks", db, organization_id))
        if "count_live_checks" in self._failures:
            raise self._failures["count_live_checks"]
        return self._live(self._checks, organization_id)

    async def count_live_api_keys(self, db: AsyncSession, organization_id: UUID) -> int:
        """Count API keys that are not soft-deleted."""
        self._calls.append(("count_live_api_keys", db, organization_id))
        if "count_live_api_keys" in self._failures:
            raise self._failures["count_live_api_keys"]
        return self._live(self._api_keys, organization_id)
