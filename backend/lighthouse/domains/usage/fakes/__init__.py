"""Fake implementations for usage domain testing."""

from lighthouse.domains.usage.fakes.repository import (
    FakeMonthlyUsageRepository,
    FakeResourceCountRepository,
)
from lighthouse.domains.usage.fakes.snapshot import FakeUsageSnapshotBuilder

__all__ = [
    "FakeMonthlyUsageRepository",
    "FakeResourceCountRepository",
    "FakeUsageSnapshotBuilder",
]
