"""Plan schema."""

from enum import Enum
from typing import Any


class Plan(str, Enum):
    """Subscription tier of an organization."""

    FREE = "free"
    INDIE_PRO = "indie_pro"
    TEAM = "team"
    AGENCY = "agency"

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        """Check whether ``value`` names a known tier."""
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in cls._value2member_map_

    @property
    def is_paid(self) -> bool:
        """Every tier except free requires a subscription."""
        return self is not Plan.FREE
