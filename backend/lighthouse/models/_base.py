"""Declarative base and shared mixins for ORM models."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Declarative base holding the shared metadata."""

    pass


class TimestampedBase(Base):
    """UUID primary key plus audit timestamps."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    modified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class OrganizationBase(TimestampedBase):
    """Base class for rows owned by an organization."""

    __abstract__ = True

    @declared_attr
    def organization_id(cls) -> Mapped[uuid.UUID]:
        """Owning organization."""
        return mapped_column(
            UUID(as_uuid=True),
            ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class SoftDeleteMixin:
    """Rows are hidden rather than removed; live rows have ``deleted_at IS NULL``."""

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True
    )
