"""Usage domain test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import pytest

from lighthouse.domains.billing.catalog import PlanCatalog
from lighthouse.domains.billing.types import DEFAULT_PLAN_CONFIGS
from lighthouse.domains.usage.fakes.repository import (
    FakeMonthlyUsageRepository,
    FakeResourceCountRepository,
)
from lighthouse.domains.usage.ledger import MonthlyUsageLedger
from lighthouse.domains.usage.snapshot import UsageSnapshotBuilder
from lighthouse.domains.usage.synchronizer import ResourceCountSynchronizer
from lighthouse.domains.usage.types import BillingMonth
from lighthouse.models.organization import Organization

DEFAULT_ORG_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_ORG_ID = UUID("00000000-0000-0000-0000-000000000002")

# Mid-month so no test straddles a period boundary by accident
FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
FIXED_PERIOD = BillingMonth(2026, 3)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class MutableClock:
    """Clock whose time tests can move."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _make_org(
    org_id: UUID = DEFAULT_ORG_ID,
    plan: str = "free",
) -> Organization:
    return Organization(id=org_id, name="Test Org", plan=plan)


def _make_ledger(
    *,
    usage_repo: Optional[FakeMonthlyUsageRepository] = None,
    clock: Optional[MutableClock] = None,
) -> tuple[MonthlyUsageLedger, FakeMonthlyUsageRepository]:
    """Build a MonthlyUsageLedger wired to fakes. Returns (ledger, usage_repo)."""
    ur = usage_repo or FakeMonthlyUsageRepository()
    ledger = MonthlyUsageLedger(usage_repo=ur, clock=clock or MutableClock())
    return ledger, ur


def _make_stack(
    clock: Optional[MutableClock] = None,
) -> tuple[
    MonthlyUsageLedger,
    UsageSnapshotBuilder,
    ResourceCountSynchronizer,
    FakeMonthlyUsageRepository,
    FakeResourceCountRepository,
]:
    """Ledger, builder and synchronizer sharing one pair of fake repositories."""
    ledger, usage_repo = _make_ledger(clock=clock)
    resource_repo = FakeResourceCountRepository()
    builder = UsageSnapshotBuilder(ledger=ledger, resource_repo=resource_repo)
    sync = ResourceCountSynchronizer(
        ledger=ledger, usage_repo=usage_repo, resource_repo=resource_repo
    )
    return ledger, builder, sync, usage_repo, resource_repo


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock():
    return MutableClock()


@pytest.fixture
def catalog():
    return PlanCatalog(DEFAULT_PLAN_CONFIGS)
