"""
Tests for settings validation and logging setup.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from fee_distributor.core.config import Settings
from fee_distributor.core.logging import get_logger, setup_logging
from fee_distributor.core.types import JobType


def test_defaults():
    config = Settings()

    assert config.max_failures == 3
    assert config.max_jobs_per_batch == 10
    assert config.max_pairs_per_collection == 20
    assert config.priority_for(JobType.REWARD_ASSET) > config.priority_for(JobType.BRIDGE_ASSET)
    assert config.priority_for(JobType.BRIDGE_ASSET) > config.priority_for(JobType.LP_POSITION)
    assert config.priority_for(JobType.LP_POSITION) > config.priority_for(JobType.GENERIC)


def test_environment_override(monkeypatch):
    monkeypatch.setenv("FEE_DISTRIBUTOR_DISTRIBUTION_COOLDOWN", "120")
    monkeypatch.setenv("FEE_DISTRIBUTOR_LOG_LEVEL", "debug")

    config = Settings()

    assert config.distribution_cooldown == 120
    assert config.log_level == "DEBUG"


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Settings(environment="moon")
    with pytest.raises(ValidationError):
        Settings(log_format="xml")
    with pytest.raises(ValidationError):
        Settings(max_failures=0)
    with pytest.raises(ValidationError):
        Settings(slippage_bps=10_000)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "distributor.log"

    setup_logging(log_file=str(log_file), config=Settings(log_format="json", environment="production"))
    try:
        get_logger("tests").info("hello", answer=42)
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()
        assert '"answer": 42' in log_file.read_text()
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()
