"""Monthly usage model."""

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from lighthouse.models._base import OrganizationBase

if TYPE_CHECKING:
    from lighthouse.schemas.usage import UsageSnapshot


class MonthlyUsage(OrganizationBase):
    """Resource consumption for one organization in one calendar month (UTC).

    Used for enforcement and display, not for invoicing. At most one row
    exists per (organization_id, year, month).
    """

    __tablename__ = "monthly_usage"

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)

    # Cached resource counts (current state, overwritten by the synchronizer)
    check_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    status_page_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    api_key_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    # Counters that reset every month (only ever incremented)
    log_volume_bytes: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    ai_level1_calls: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    ai_level2_calls: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    ai_level3_calls: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "year", "month", name="uq_monthly_usage_org_month"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_monthly_usage_month_range"),
    )

    def to_snapshot(self) -> "UsageSnapshot":
        """Convert this row's own counters into a snapshot.

        Note that check and API key counts here are the cached values; the
        snapshot builder replaces them with live counts.
        """
        from lighthouse.schemas.usage import UsageSnapshot

        return UsageSnapshot(
            check_count=self.check_count or 0,
            log_volume_bytes=self.log_volume_bytes or 0,
            status_page_count=self.status_page_count or 0,
            api_key_count=self.api_key_count or 0,
            ai_level1_calls=self.ai_level1_calls or 0,
            ai_level2_calls=self.ai_level2_calls or 0,
            ai_level3_calls=self.ai_level3_calls or 0,
        )
