"""Fake snapshot builder for testing.

Returns whatever snapshot was seeded for an organization, or an empty one.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.usage.protocols import UsageSnapshotBuilderProtocol
from lighthouse.domains.usage.types import BillingMonth
from lighthouse.schemas.usage import UsageSnapshot


class FakeUsageSnapshotBuilder(UsageSnapshotBuilderProtocol):
    """Test implementation of UsageSnapshotBuilderProtocol.

    Usage:
        builder = FakeUsageSnapshotBuilder()
        builder.seed(org_id, UsageSnapshot(api_key_count=2))
    """

    def __init__(self) -> None:
        """Initialize with no seeded snapshots."""
        self._snapshots: dict[UUID, UsageSnapshot] = {}
        self.calls: list[UUID] = []

    def seed(self, organization_id: UUID, snapshot: UsageSnapshot) -> None:
        """Set the snapshot returned for an organization."""
        self._snapshots[organization_id] = snapshot

    async def build(
        self,
        db: AsyncSession,
        organization_id: UUID,
        *,
        period: Optional[BillingMonth] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> UsageSnapshot:
        """Return the seeded snapshot."""
        self.calls.append(organization_id)
        return self._snapshots.get(organization_id, UsageSnapshot())
