"""
Smoke tests for the typer CLI.
"""

import logging

import pytest
import structlog
from typer.testing import CliRunner

from fee_distributor.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """simulate installs handlers bound to the runner's streams; drop them afterwards."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


def test_settings_command():
    result = runner.invoke(app, ["settings"])

    assert result.exit_code == 0
    assert "max_jobs_per_batch" in result.output


def test_simulate_command():
    result = runner.invoke(app, ["simulate", "--fee-amount", "5000", "--batch-size", "5"])

    assert result.exit_code == 0, result.output
    assert "Batch result" in result.output
    assert "staking balance" in result.output
