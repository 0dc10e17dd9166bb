"""Entitlement service — the caller-facing "is this allowed" API.

Callers gate a resource mutation like so:

    async with UnitOfWork(db) as uow:
        await entitlement_service.ensure_allowed(
            db, org, EntitlementDimension.CHECKS, uow=uow
        )
        ...create the check...
    await resource_sync.sync_best_effort(db, org.id)

Only ``ensure_allowed`` raises for an exceeded limit; the evaluator itself
always returns a plain result.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.billing.catalog import PlanCatalog
from lighthouse.domains.billing.entitlements import evaluate
from lighthouse.domains.usage.exceptions import UsageLimitExceededError
from lighthouse.domains.usage.protocols import (
    EntitlementServiceProtocol,
    UsageSnapshotBuilderProtocol,
)
from lighthouse.domains.usage.types import EntitlementReport
from lighthouse.models.organization import Organization
from lighthouse.schemas.entitlement import EntitlementDimension, LimitCheck

logger = logging.getLogger(__name__)


class EntitlementService(EntitlementServiceProtocol):
    """Builds a snapshot, resolves the organization's plan, and evaluates."""

    def __init__(
        self,
        catalog: PlanCatalog,
        snapshot_builder: UsageSnapshotBuilderProtocol,
    ) -> None:
        """Initialize with the plan catalog and snapshot builder."""
        self._catalog = catalog
        self._snapshot_builder = snapshot_builder

    async def get_report(
        self,
        db: AsyncSession,
        organization: Organization,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> EntitlementReport:
        """Plan, usage and every evaluated dimension for ``organization``."""
        plan = self._catalog.plan_for_organization(organization)
        plan_config = self._catalog.lookup(plan)
        snapshot = await self._snapshot_builder.build(db, organization.id, uow=uow)
        return EntitlementReport(
            organization_id=organization.id,
            plan=plan,
            plan_config=plan_config,
            usage=snapshot,
            entitlements=evaluate(plan_config, snapshot),
        )

    async def check(
        self,
        db: AsyncSession,
        organization: Organization,
        dimension: EntitlementDimension,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> LimitCheck:
        """Evaluate a single dimension."""
        report = await self.get_report(db, organization, uow=uow)
        return report.entitlements.get(dimension)

    async def is_allowed(
        self,
        db: AsyncSession,
        organization: Organization,
        dimension: EntitlementDimension,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> bool:
        """Whether one more unit of ``dimension`` fits the plan."""
        result = await self.check(db, organization, dimension, uow=uow)
        return result.allowed

    async def ensure_allowed(
        self,
        db: AsyncSession,
        organization: Organization,
        dimension: EntitlementDimension,
        *,
        uow: Optional[UnitOfWork] = None,
    ) -> LimitCheck:
        """Evaluate ``dimension`` and raise if one more unit is not allowed.

        Raises:
            UsageLimitExceededError: If the dimension is at or over its limit
        """
        result = await self.check(db, organization, dimension, uow=uow)
        if not result.allowed:
            logger.info(
                "Blocked %s for org %s: %d/%d",
                result.dimension.value,
                organization.id,
                result.current,
                result.limit,
            )
            raise UsageLimitExceededError(
                dimension=result.dimension.value,
                limit=result.limit,
                current_usage=result.current,
            )
        return result
