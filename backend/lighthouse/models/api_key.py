"""API key model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import ARRAY, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from lighthouse.models._base import OrganizationBase, SoftDeleteMixin


class APIKey(OrganizationBase, SoftDeleteMixin):
    """API key model. Metered against ``max_api_keys``."""

    __tablename__ = "api_key"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    prefix: Mapped[str] = mapped_column(String(12), nullable=False)
    key_hash: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    scopes: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    last_used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("idx_api_key_org_deleted_at", "organization_id", "deleted_at"),)
