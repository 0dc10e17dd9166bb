"""Unit tests for UsageSnapshotBuilder and MonthlyUsage.to_snapshot."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from lighthouse.db.unit_of_work import UnitOfWork
from lighthouse.domains.usage.fakes.repository import new_usage_row
from lighthouse.domains.usage.ledger import MonthlyUsageLedger
from lighthouse.domains.usage.repository import MonthlyUsageRepository, ResourceCountRepository
from lighthouse.domains.usage.snapshot import UsageSnapshotBuilder
from lighthouse.domains.usage.tests.conftest import (
    DEFAULT_ORG_ID,
    OTHER_ORG_ID,
    MutableClock,
    _make_stack,
)
from lighthouse.schemas.usage import UsageSnapshot

DB_DOWN = OperationalError("SELECT count(*)", {}, Exception("connection reset"))


# ---------------------------------------------------------------------------
# MonthlyUsage.to_snapshot
# ---------------------------------------------------------------------------


class TestToSnapshot:
    def test_zero_row_gives_zero_snapshot(self):
        row = new_usage_row(DEFAULT_ORG_ID, 2026, 3)

        assert row.to_snapshot() == UsageSnapshot()

    def test_copies_every_counter(self):
        row = new_usage_row(
            DEFAULT_ORG_ID,
            2026,
            3,
            check_count=4,
            status_page_count=1,
            api_key_count=2,
            log_volume_bytes=10_000,
            ai_level1_calls=5,
            ai_level2_calls=6,
            ai_level3_calls=7,
        )

        assert row.to_snapshot() == UsageSnapshot(
            check_count=4,
            status_page_count=1,
            api_key_count=2,
            log_volume_bytes=10_000,
            ai_level1_calls=5,
            ai_level2_calls=6,
            ai_level3_calls=7,
        )


# ---------------------------------------------------------------------------
# UsageSnapshotBuilder.build
# ---------------------------------------------------------------------------


class TestBuild:
    @pytest.mark.asyncio
    async def test_fresh_row_uses_live_counts(self, db):
        """A brand-new ledger row is all zeros, but checks/keys come from the live tables."""
        _, builder, _, usage_repo, resources = _make_stack()
        for _ in range(3):
            resources.add_check(DEFAULT_ORG_ID)
        resources.add_api_key(DEFAULT_ORG_ID)

        snapshot = await builder.build(db, DEFAULT_ORG_ID)

        assert snapshot == UsageSnapshot(check_count=3, api_key_count=1)
        (row,) = usage_repo.rows(DEFAULT_ORG_ID)
        assert row.check_count == 0
        assert row.api_key_count == 0

    @pytest.mark.asyncio
    async def test_live_counts_override_stale_cache(self, db):
        _, builder, _, usage_repo, resources = _make_stack()
        usage_repo.seed(new_usage_row(DEFAULT_ORG_ID, 2026, 3, check_count=9, api_key_count=9))
        resources.add_check(DEFAULT_ORG_ID)

        snapshot = await builder.build(db, DEFAULT_ORG_ID)

        assert snapshot.check_count == 1
        assert snapshot.api_key_count == 0

    @pytest.mark.asyncio
    async def test_monthly_counters_and_status_pages_come_from_ledger(self, db):
        _, builder, _, usage_repo, _ = _make_stack()
        usage_repo.seed(
            new_usage_row(
                DEFAULT_ORG_ID,
                2026,
                3,
                status_page_count=2,
                log_volume_bytes=777,
                ai_level1_calls=1,
                ai_level2_calls=2,
                ai_level3_calls=3,
            )
        )

        snapshot = await builder.build(db, DEFAULT_ORG_ID)

        assert snapshot.status_page_count == 2
        assert snapshot.log_volume_bytes == 777
        assert (snapshot.ai_level1_calls, snapshot.ai_level2_calls, snapshot.ai_level3_calls) == (
            1,
            2,
            3,
        )

    @pytest.mark.asyncio
    async def test_previous_month_counters_not_used(self, db):
        _, builder, _, usage_repo, _ = _make_stack()
        usage_repo.seed(new_usage_row(DEFAULT_ORG_ID, 2026, 2, log_volume_bytes=5_000))

        snapshot = await builder.build(db, DEFAULT_ORG_ID)

        assert snapshot.log_volume_bytes == 0

    @pytest.mark.asyncio
    async def test_soft_deleted_and_foreign_resources_excluded(self, db):
        _, builder, _, _, resources = _make_stack()
        resources.add_check(DEFAULT_ORG_ID)
        resources.add_check(DEFAULT_ORG_ID, deleted=True)
        resources.add_check(OTHER_ORG_ID)
        resources.add_api_key(DEFAULT_ORG_ID, deleted=True)

        snapshot = await builder.build(db, DEFAULT_ORG_ID)

        assert snapshot.check_count == 1
        assert snapshot.api_key_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["count_live_checks", "count_live_api_keys"])
    async def test_failed_count_aborts_build(self, db, failing):
        _, builder, _, usage_repo, resources = _make_stack()
        resources.fail_on(failing, DB_DOWN)

        with pytest.raises(OperationalError):
            await builder.build(db, DEFAULT_ORG_ID)

    @pytest.mark.asyncio
    async def test_failed_ledger_read_aborts_build(self, db):
        _, builder, _, usage_repo, _ = _make_stack()
        usage_repo.fail_on("get_by_period", DB_DOWN)

        with pytest.raises(OperationalError):
            await builder.build(db, DEFAULT_ORG_ID)

    @pytest.mark.asyncio
    async def test_snapshot_is_immutable(self, db):
        _, builder, _, _, _ = _make_stack()
        snapshot = await builder.build(db, DEFAULT_ORG_ID)

        with pytest.raises(ValidationError):
            snapshot.check_count = 5


# ---------------------------------------------------------------------------
# Transaction scope over the real repositories
# ---------------------------------------------------------------------------


def _make_db_backed_builder(db, *, live_count: int = 0, log_volume_bytes: int = 0):
    """Builder over the crud-backed repositories with a mocked session.

    Every ``db.execute`` returns the same result: ``live_count`` for count
    queries and a ledger row for the period read.
    """
    row = new_usage_row(DEFAULT_ORG_ID, 2026, 3, log_volume_bytes=log_volume_bytes)
    db.execute.return_value = MagicMock(
        scalar_one=MagicMock(return_value=live_count),
        scalar_one_or_none=MagicMock(return_value=row),
    )
    ledger = MonthlyUsageLedger(usage_repo=MonthlyUsageRepository(), clock=MutableClock())
    builder = UsageSnapshotBuilder(ledger=ledger, resource_repo=ResourceCountRepository())
    return builder, ledger


class TestTransactionScope:
    @pytest.mark.asyncio
    async def test_build_inside_unit_of_work_only_flushes(self, db):
        builder, _ = _make_db_backed_builder(db, live_count=2)

        async with UnitOfWork(db) as uow:
            snapshot = await builder.build(db, DEFAULT_ORG_ID, uow=uow)
            db.commit.assert_not_awaited()
            db.flush.assert_awaited_once()

        assert snapshot == UsageSnapshot(check_count=2, api_key_count=2)
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_build_without_unit_of_work_commits_row_creation(self, db):
        builder, _ = _make_db_backed_builder(db)

        await builder.build(db, DEFAULT_ORG_ID)

        db.commit.assert_awaited_once()
        db.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_current_log_volume_inside_unit_of_work_only_flushes(self, db):
        _, ledger = _make_db_backed_builder(db, log_volume_bytes=4096)

        async with UnitOfWork(db) as uow:
            total = await ledger.get_current_log_volume(db, DEFAULT_ORG_ID, uow=uow)
            db.commit.assert_not_awaited()

        assert total == 4096
        db.commit.assert_awaited_once()
