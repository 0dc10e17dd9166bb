"""Organization model."""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lighthouse.models._base import TimestampedBase


class Organization(TimestampedBase):
    """Tenant; the unit of plan assignment and usage accounting.

    ``plan`` is stored as a plain string rather than a database enum so that
    legacy or hand-edited values load without error; entitlement code
    resolves it through the plan catalog and falls back to the free tier.
    """

    __tablename__ = "organization"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    plan: Mapped[str] = mapped_column(String(32), nullable=False, default="free")
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
