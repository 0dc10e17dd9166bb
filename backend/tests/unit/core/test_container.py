"""Unit tests for container construction and the global container lifecycle."""

from datetime import datetime, timezone

import pytest

from lighthouse.core import container as container_module
from lighthouse.core.config import Settings
from lighthouse.core.container import create_container, initialize_container, reset_container
from lighthouse.domains.usage.ledger import MonthlyUsageLedger
from lighthouse.domains.usage.protocols import (
    EntitlementServiceProtocol,
    ResourceCountSynchronizerProtocol,
    UsageLedgerProtocol,
    UsageSnapshotBuilderProtocol,
)
from lighthouse.domains.usage.types import BillingMonth
from lighthouse.schemas.plan import Plan


@pytest.fixture(autouse=True)
def _clean_global_container():
    reset_container()
    yield
    reset_container()


class TestCreateContainer:
    def test_wires_protocol_implementations(self):
        c = create_container(Settings())

        assert isinstance(c.usage_ledger, UsageLedgerProtocol)
        assert isinstance(c.snapshot_builder, UsageSnapshotBuilderProtocol)
        assert isinstance(c.resource_sync, ResourceCountSynchronizerProtocol)
        assert isinstance(c.entitlement_service, EntitlementServiceProtocol)
        assert isinstance(c.usage_ledger, MonthlyUsageLedger)

    def test_catalog_uses_configured_price_ids(self):
        c = create_container(Settings(STRIPE_AGENCY_PRICE_ID="price_agency"))

        assert c.plan_catalog.lookup_by_price_id("price_agency") == (Plan.AGENCY, True)

    def test_clock_is_injected(self):
        c = create_container(
            Settings(), clock=lambda: datetime(2027, 12, 31, 23, 0, tzinfo=timezone.utc)
        )

        assert c.usage_ledger.current_period() == BillingMonth(2027, 12)

    def test_container_is_frozen(self):
        c = create_container(Settings())

        with pytest.raises(AttributeError):
            c.plan_catalog = None  # type: ignore[misc]


class TestGlobalContainer:
    def test_initialize_once(self):
        initialize_container(Settings())

        assert container_module.container is not None
        with pytest.raises(RuntimeError):
            initialize_container(Settings())

    def test_reset(self):
        initialize_container(Settings())
        reset_container()

        assert container_module.container is None
