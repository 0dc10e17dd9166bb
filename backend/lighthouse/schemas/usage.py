"""Usage schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UsageSnapshot(BaseModel):
    """Point-in-time view of an organization's resource usage.

    Checks and API keys are live counts from their own tables; log volume,
    AI calls and status pages come from the current month's ledger row.
    Never persisted.
    """

    model_config = ConfigDict(frozen=True)

    check_count: int = Field(default=0, ge=0)
    log_volume_bytes: int = Field(default=0, ge=0)
    status_page_count: int = Field(default=0, ge=0)
    api_key_count: int = Field(default=0, ge=0)
    ai_level1_calls: int = Field(default=0, ge=0)
    ai_level2_calls: int = Field(default=0, ge=0)
    ai_level3_calls: int = Field(default=0, ge=0)


class MonthlyUsageCounts(BaseModel):
    """Absolute values written over the cached resource counts of a ledger row."""

    check_count: int = Field(ge=0)
    api_key_count: int = Field(ge=0)
