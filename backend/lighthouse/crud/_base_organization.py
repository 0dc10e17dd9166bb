"""Shared helpers for CRUD classes over organization-owned, soft-deletable rows."""

from typing import Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lighthouse.models._base import OrganizationBase

ModelType = TypeVar("ModelType", bound=OrganizationBase)


class CRUDBaseOrganization(Generic[ModelType]):
    """Read access scoped to a single organization."""

    def __init__(self, model: Type[ModelType]):
        """Initialize with the SQLAlchemy model class.

        Args:
        ----
            model (Type[ModelType]): The model class this CRUD object manages.

        """
        self.model = model

    def _live_filter(self):
        deleted_at = getattr(self.model, "deleted_at", None)
        return deleted_at.is_(None) if deleted_at is not None else None

    async def count_live(self, db: AsyncSession, *, organization_id: UUID) -> int:
        """Count the organization's rows that are not soft-deleted.

        Args:
        ----
            db (AsyncSession): The database session.
            organization_id (UUID): The owning organization.

        Returns:
        -------
            int: Number of live rows.

        """
        query = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.organization_id == organization_id)
        )
        live = self._live_filter()
        if live is not None:
            query = query.where(live)
        result = await db.execute(query)
        return int(result.scalar_one())
