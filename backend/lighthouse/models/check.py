"""Monitoring check model."""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lighthouse.models._base import OrganizationBase, SoftDeleteMixin


class Check(OrganizationBase, SoftDeleteMixin):
    """An uptime check configured by an organization. Metered against ``max_checks``."""

    __tablename__ = "check"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    interval_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=300)

    __table_args__ = (Index("idx_check_org_deleted_at", "organization_id", "deleted_at"),)
