"""Tests for EntitlementService, including end-to-end scenarios over the real ledger."""

import logging

import pytest

from lighthouse.domains.usage.exceptions import UsageLimitExceededError
from lighthouse.domains.usage.fakes.snapshot import FakeUsageSnapshotBuilder
from lighthouse.domains.usage.service import EntitlementService
from lighthouse.domains.usage.tests.conftest import DEFAULT_ORG_ID, _make_org, _make_stack
from lighthouse.schemas.entitlement import EntitlementDimension
from lighthouse.schemas.plan import Plan
from lighthouse.schemas.usage import UsageSnapshot


def _make_service(catalog, snapshot: UsageSnapshot = UsageSnapshot()):
    builder = FakeUsageSnapshotBuilder()
    builder.seed(DEFAULT_ORG_ID, snapshot)
    return EntitlementService(catalog=catalog, snapshot_builder=builder), builder


# ---------------------------------------------------------------------------
# get_report
# ---------------------------------------------------------------------------


class TestGetReport:
    @pytest.mark.asyncio
    async def test_report_contents(self, db, catalog):
        snapshot = UsageSnapshot(check_count=3, api_key_count=1)
        service, builder = _make_service(catalog, snapshot)

        report = await service.get_report(db, _make_org(plan="team"))

        assert report.organization_id == DEFAULT_ORG_ID
        assert report.plan == Plan.TEAM
        assert report.plan_config == catalog.lookup(Plan.TEAM)
        assert report.usage == snapshot
        assert report.entitlements.checks.remaining == 72
        assert builder.calls == [DEFAULT_ORG_ID]

    @pytest.mark.asyncio
    async def test_unknown_plan_reports_free_and_warns(self, db, catalog, caplog):
        service, _ = _make_service(catalog)

        with caplog.at_level(logging.WARNING, logger="lighthouse.domains.billing.catalog"):
            report = await service.get_report(db, _make_org(plan="platinum"))

        assert report.plan == Plan.FREE
        assert report.plan_config == catalog.lookup(Plan.FREE)
        assert any("platinum" in r.getMessage() for r in caplog.records)


# ---------------------------------------------------------------------------
# check / ensure_allowed
# ---------------------------------------------------------------------------


class TestEnsureAllowed:
    @pytest.mark.asyncio
    async def test_allowed_returns_limit_check(self, db, catalog):
        service, _ = _make_service(catalog, UsageSnapshot(check_count=9))

        result = await service.ensure_allowed(db, _make_org(), EntitlementDimension.CHECKS)

        assert result.allowed is True
        assert result.remaining == 1

    @pytest.mark.asyncio
    async def test_blocked_raises_with_details(self, db, catalog):
        service, _ = _make_service(catalog, UsageSnapshot(check_count=10))

        with pytest.raises(UsageLimitExceededError) as exc_info:
            await service.ensure_allowed(db, _make_org(), EntitlementDimension.CHECKS)

        assert exc_info.value.dimension == "checks"
        assert exc_info.value.limit == 10
        assert exc_info.value.current_usage == 10

    @pytest.mark.asyncio
    async def test_check_never_raises_when_blocked(self, db, catalog):
        service, _ = _make_service(catalog, UsageSnapshot(check_count=500))

        result = await service.check(db, _make_org(), EntitlementDimension.CHECKS)

        assert result.allowed is False
        assert result.remaining == 0

    @pytest.mark.asyncio
    async def test_is_allowed(self, db, catalog):
        service, _ = _make_service(catalog, UsageSnapshot(ai_level1_calls=1))

        assert await service.is_allowed(db, _make_org(), EntitlementDimension.AI_LEVEL1) is False
        assert await service.is_allowed(db, _make_org(), EntitlementDimension.CHECKS) is True

    @pytest.mark.asyncio
    async def test_unlimited_dimension_always_allowed(self, db, catalog):
        service, _ = _make_service(catalog, UsageSnapshot(api_key_count=10_000))

        result = await service.ensure_allowed(
            db, _make_org(plan="agency"), EntitlementDimension.API_KEYS
        )

        assert result.unlimited is True
        assert result.remaining is None


# ---------------------------------------------------------------------------
# Scenarios over the real ledger, builder and synchronizer
# ---------------------------------------------------------------------------


class TestScenarios:
    @pytest.mark.asyncio
    async def test_free_plan_api_keys_freed_by_delete(self, db, catalog):
        _, builder, sync, _, resources = _make_stack()
        service = EntitlementService(catalog=catalog, snapshot_builder=builder)
        org = _make_org(plan="free")
        first_key = resources.add_api_key(DEFAULT_ORG_ID)
        resources.add_api_key(DEFAULT_ORG_ID)

        blocked = await service.check(db, org, EntitlementDimension.API_KEYS)
        assert (blocked.allowed, blocked.remaining) == (False, 0)

        resources.delete_api_key(first_key)
        assert await sync.sync_best_effort(db, DEFAULT_ORG_ID) is True

        allowed = await service.check(db, org, EntitlementDimension.API_KEYS)
        assert (allowed.allowed, allowed.remaining) == (True, 1)

    @pytest.mark.asyncio
    async def test_free_plan_tier2_ai_calls_recorded_but_blocked(self, db, catalog):
        ledger, builder, _, usage_repo, _ = _make_stack()
        service = EntitlementService(catalog=catalog, snapshot_builder=builder)

        for _ in range(31):
            await ledger.increment_ai_calls(db, DEFAULT_ORG_ID, 2)

        (row,) = usage_repo.rows(DEFAULT_ORG_ID)
        assert row.ai_level2_calls == 31
        result = await service.check(db, _make_org(plan="free"), EntitlementDimension.AI_LEVEL2)
        assert result.allowed is False
        assert result.limit == 0

    @pytest.mark.asyncio
    async def test_log_volume_blocks_after_ceiling(self, db, catalog):
        ledger, builder, _, _, _ = _make_stack()
        service = EntitlementService(catalog=catalog, snapshot_builder=builder)
        ceiling = catalog.lookup(Plan.FREE).log_volume_bytes_per_month

        await ledger.increment_log_volume(db, DEFAULT_ORG_ID, ceiling - 1)
        assert (await service.check(db, _make_org(), EntitlementDimension.LOG_VOLUME)).allowed

        await ledger.increment_log_volume(db, DEFAULT_ORG_ID, 1)
        result = await service.check(db, _make_org(), EntitlementDimension.LOG_VOLUME)
        assert result.allowed is False
        assert result.current == ceiling
