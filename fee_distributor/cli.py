#!/usr/bin/env python3
"""
Command line entry points for the fee distributor.
"""

import typer
from rich.console import Console
from rich.table import Table

from fee_distributor.core.config import Settings
from fee_distributor.core.logging import setup_logging, get_logger
from fee_distributor.sandbox import SandboxEnvironment

console = Console()
logger = get_logger(__name__)
app = typer.Typer(help="Fee distributor commands")


@app.command()
def simulate(
    fee_amount: int = typer.Option(10_000, help="Fees accrued per pool before collection"),
    batch_size: int = typer.Option(10, help="Jobs requested per process_queue call"),
    cooldown: int = typer.Option(3600, help="Distribution cooldown in seconds"),
):
    """Run one collect -> process -> distribute cycle against the in-memory sandbox."""
    config = Settings(distribution_cooldown=cooldown, auto_distribute=False)
    setup_logging(config=config)

    env = SandboxEnvironment()
    other = "0x00000000000000000000000000000000000000cc"
    orphan = "0x00000000000000000000000000000000000000dd"

    env.create_pool(env.BRIDGE, env.REWARD, 1_000_000, 1_000_000)
    other_pool = env.create_pool(other, env.BRIDGE, 1_000_000, 1_000_000)
    orphan_pool = env.create_pool(orphan, other, 1_000_000, 1_000_000)

    other_pool.accrue_fees(other, fee_amount)
    other_pool.accrue_fees(env.BRIDGE, fee_amount)
    orphan_pool.accrue_fees(orphan, fee_amount)

    distributor = env.build_distributor(config)
    distributor.add_tokens_to_tracking([other, orphan], sender=env.OWNER)
    distributor.collect_fees([other_pool.address, orphan_pool.address])

    result = distributor.process_queue(batch_size)
    env.clock.advance(cooldown)
    distributed = distributor.distribute() if distributor.can_distribute() else 0
    logger.info("Simulation finished", succeeded=result.succeeded, distributed=distributed)

    table = Table(title="Batch result")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for name in ("attempted", "succeeded", "failed", "abandoned"):
        table.add_row(name, str(getattr(result, name)))
    table.add_row("distributed", str(distributed))
    table.add_row("staking balance", str(env.balance(env.REWARD, env.STAKING)))
    console.print(table)

    status = distributor.status()
    status_table = Table(title="Status")
    status_table.add_column("Field")
    status_table.add_column("Value", justify="right")
    for key, value in status.model_dump().items():
        status_table.add_row(key, str(value))
    console.print(status_table)


@app.command(name="settings")
def show_settings():
    """Print the effective configuration."""
    table = Table(title="Fee distributor settings")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in Settings().model_dump().items():
        table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    app()
