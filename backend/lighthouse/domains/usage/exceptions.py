"""Usage domain exceptions."""

from typing import Optional
from uuid import UUID

from lighthouse.core.exceptions import InvalidStateError, NotFoundException


class MonthlyUsageNotFoundError(NotFoundException):
    """Raised when a ledger row cannot be read back after it was ensured to exist."""

    def __init__(
        self,
        organization_id: UUID,
        period: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        """Initialize with the organization and period that were looked up."""
        if message is None:
            where = f" for {period}" if period else ""
            message = f"Monthly usage for organization {organization_id} not found{where}"
        self.organization_id = organization_id
        self.period = period
        super().__init__(message)


class UsageLimitExceededError(InvalidStateError):
    """Raised when an action would exceed the organization's plan limit."""

    def __init__(
        self,
        dimension: str,
        limit: int,
        current_usage: int,
        message: Optional[str] = None,
    ) -> None:
        """Initialize with dimension, limit, and current usage."""
        if message is None:
            message = f"Usage limit exceeded for {dimension}: {current_usage}/{limit}"
        self.dimension = dimension
        self.limit = limit
        self.current_usage = current_usage
        super().__init__(message)
