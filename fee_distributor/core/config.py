"""
Configuration management using Pydantic Settings.
Every limit of the fee pipeline can be overridden through FEE_DISTRIBUTOR_* variables.
"""

from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import JobType


class Settings(BaseSettings):
    """Fee distributor settings with environment-based configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FEE_DISTRIBUTOR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Fee Distributor"
    app_version: str = "0.1.0"
    environment: str = Field(default="development")

    # Circuit breaker / batching
    max_failures: int = Field(default=3, ge=1)
    max_jobs_per_batch: int = Field(default=10, ge=1)
    max_pairs_per_collection: int = Field(default=20, ge=1)

    # Distribution
    distribution_cooldown: int = Field(default=3600, ge=0)  # seconds
    minimum_distribution_amount: int = Field(default=1, ge=1)
    auto_distribute: bool = True

    # Conversion
    slippage_bps: int = Field(default=100, ge=0, lt=10_000)
    swap_deadline_seconds: int = Field(default=300, ge=1)
    max_conversion_depth: int = Field(default=3, ge=1)

    # Queue priorities (higher is processed first)
    reward_asset_priority: int = 100
    bridge_asset_priority: int = 75
    lp_position_priority: int = 50
    generic_priority: int = 25

    # Rough cost units per job type, reported by status()
    reward_asset_cost_estimate: int = 30_000
    bridge_asset_cost_estimate: int = 150_000
    lp_position_cost_estimate: int = 300_000
    generic_cost_estimate: int = 200_000

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # json or console
    log_file: Optional[str] = None

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError("Log format must be 'json' or 'console'")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def priority_for(self, job_type: JobType) -> int:
        """Queue priority assigned to a job type."""
        return {
            JobType.REWARD_ASSET: self.reward_asset_priority,
            JobType.BRIDGE_ASSET: self.bridge_asset_priority,
            JobType.LP_POSITION: self.lp_position_priority,
            JobType.GENERIC: self.generic_priority,
        }[job_type]

    def cost_estimates(self) -> Dict[JobType, int]:
        """Average cost estimate per job type."""
        return {
            JobType.REWARD_ASSET: self.reward_asset_cost_estimate,
            JobType.BRIDGE_ASSET: self.bridge_asset_cost_estimate,
            JobType.LP_POSITION: self.lp_position_cost_estimate,
            JobType.GENERIC: self.generic_cost_estimate,
        }


# Global settings instance
settings = Settings()
