"""
Pydantic schemas for read-only distributor views.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class DistributorStatus(BaseModel):
    """Status summary of one distributor."""
    model_config = ConfigDict(frozen=True)

    queue_length: int = Field(ge=0)
    pending_value: int = Field(
        ge=0,
        description="Raw sum of pending amounts across all assets, in each asset's own units; not a price-weighted value"
    )
    reward_balance: int = Field(ge=0)
    next_distribution_time: int
    can_distribute: bool
    emergency_paused: bool
    failure_count: int = Field(ge=0)
    total_jobs_processed: int = Field(ge=0)
    total_jobs_failed: int = Field(ge=0)
    success_rate_bps: int = Field(ge=0, le=10_000, description="Processed / attempted, in basis points")
    average_cost_by_job_type: Dict[str, int]
    queued_jobs_by_type: Dict[str, int]
