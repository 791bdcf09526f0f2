"""
Cooldown-gated payout of the reward asset to the staking pool.
"""

import structlog

from fee_distributor.core.exceptions import DistributionTooFrequentError, InvalidAmountError
from fee_distributor.core.types import EventType
from .context import PipelineContext


logger = structlog.get_logger(__name__)


class DistributionGate:
    """Transfers the whole reward balance once per cooldown window."""

    def __init__(self, ctx: PipelineContext):
        self.ctx = ctx
        self.logger = logger.bind(service="distribution_gate")

    def reward_balance(self) -> int:
        return self.ctx.holdings(self.ctx.reward_asset)

    def next_distribution_time(self) -> int:
        return self.ctx.state.last_distribution_timestamp + self.ctx.settings.distribution_cooldown

    def cooldown_elapsed(self) -> bool:
        return self.ctx.now() >= self.next_distribution_time()

    def can_distribute(self) -> bool:
        return (
            not self.ctx.state.emergency_paused
            and self.cooldown_elapsed()
            and self.reward_balance() >= self.ctx.settings.minimum_distribution_amount
        )

    def distribute(self) -> int:
        """
        Send the entire reward balance to staking.

        Returns:
            Amount transferred
        """
        amount = self.reward_balance()
        if amount < self.ctx.settings.minimum_distribution_amount:
            raise InvalidAmountError(
                "Reward balance below distribution minimum",
                {"balance": amount, "minimum": self.ctx.settings.minimum_distribution_amount}
            )

        now = self.ctx.now()
        next_allowed = self.next_distribution_time()
        if now < next_allowed:
            raise DistributionTooFrequentError(now, next_allowed)

        self.ctx.ledger.transfer(
            self.ctx.reward_asset,
            self.ctx.address,
            self.ctx.staking.address,
            amount,
        )
        self.ctx.state.last_distribution_timestamp = now
        self.ctx.refresh_snapshot(self.ctx.reward_asset)

        self.ctx.emit(EventType.FEES_DISTRIBUTED, total_amount=amount, staking=self.ctx.staking.address)
        self.logger.info(
            "Fees distributed",
            amount=amount,
            staking=self.ctx.staking.address,
            next_distribution=self.next_distribution_time()
        )
        return amount
