"""Entitlement schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EntitlementDimension(str, Enum):
    """A metered resource that a plan puts a ceiling on."""

    CHECKS = "checks"
    API_KEYS = "api_keys"
    LOG_VOLUME = "log_volume"
    STATUS_PAGES = "status_pages"
    AI_LEVEL1 = "ai_level1"
    AI_LEVEL2 = "ai_level2"
    AI_LEVEL3 = "ai_level3"


class LimitCheck(BaseModel):
    """Outcome of comparing one dimension's usage against its limit.

    ``remaining`` is None when the limit is unlimited.
    """

    model_config = ConfigDict(frozen=True)

    dimension: EntitlementDimension
    allowed: bool
    current: int
    limit: int
    unlimited: bool = False
    remaining: Optional[int] = None


class EntitlementResult(BaseModel):
    """Per-dimension evaluation of a usage snapshot against a plan."""

    model_config = ConfigDict(frozen=True)

    checks: LimitCheck
    api_keys: LimitCheck
    log_volume: LimitCheck
    status_pages: LimitCheck
    ai_level1: LimitCheck
    ai_level2: LimitCheck
    ai_level3: LimitCheck

    def get(self, dimension: EntitlementDimension) -> LimitCheck:
        """Return the check for ``dimension``."""
        return getattr(self, EntitlementDimension(dimension).value)

    @property
    def limit_checks(self) -> list[LimitCheck]:
        return [self.get(dimension) for dimension in EntitlementDimension]

    @property
    def blocked(self) -> list[EntitlementDimension]:
        """Dimensions where one more unit would exceed the plan."""
        return [check.dimension for check in self.limit_checks if not check.allowed]

    @property
    def all_allowed(self) -> bool:
        return not self.blocked
