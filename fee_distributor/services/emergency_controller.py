"""
Emergency pause/resume and manual, queue-bypassing token processing.
"""

import structlog

from fee_distributor.core.exceptions import EmergencyPausedError, NotInEmergencyModeError
from fee_distributor.core.types import EventType
from .context import PipelineContext
from .conversion_router import ConversionRouter


logger = structlog.get_logger(__name__)


class EmergencyController:
    """Pause switch plus the manual rescue path used while paused."""

    def __init__(self, ctx: PipelineContext, router: ConversionRouter):
        self.ctx = ctx
        self.router = router
        self.logger = logger.bind(service="emergency_controller")

    @property
    def paused(self) -> bool:
        return self.ctx.state.emergency_paused

    def require_running(self, operation: str) -> None:
        if self.paused:
            raise EmergencyPausedError(operation)

    def require_paused(self, operation: str) -> None:
        if not self.paused:
            raise NotInEmergencyModeError(operation)

    def pause(self) -> None:
        self.require_running("emergency_pause")
        self.ctx.state.emergency_paused = True
        self.ctx.emit(EventType.EMERGENCY_PAUSED)
        self.logger.warning("Emergency pause activated", queue_length=len(self.ctx.state.queue))

    def resume(self) -> None:
        self.require_paused("emergency_resume")
        cleared = self.ctx.state.failure_count
        self.ctx.state.emergency_paused = False
        # Per-job failure counts of queued jobs are kept
        self.ctx.state.failure_count = 0
        self.ctx.emit(EventType.EMERGENCY_RESUMED, failures_cleared=cleared)
        self.logger.info("Emergency pause lifted", failures_cleared=cleared)

    def process_token(self, asset: str, amount: int) -> int:
        """
        Move or convert an asset directly, skipping queue and ordinary checks.

        The reward asset goes straight to staking. Anything else is routed
        to the reward asset. An amount of 0 means the full holdings; larger
        amounts are capped by holdings.

        Returns:
            Amount of the asset processed
        """
        self.require_paused("emergency_process_token")

        holdings = self.ctx.holdings(asset)
        amount = holdings if amount == 0 else min(amount, holdings)

        if amount > 0:
            if asset == self.ctx.reward_asset:
                self.ctx.ledger.transfer(asset, self.ctx.address, self.ctx.staking.address, amount)
            else:
                self.router.convert(asset, amount)

        self.ctx.refresh_snapshot(asset)
        self.ctx.emit(EventType.EMERGENCY_TOKEN_PROCESSED, token=asset, amount=amount)
        self.logger.warning("Emergency token processed", asset=asset, amount=amount)
        return amount
