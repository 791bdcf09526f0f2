"""
Balance tracker: turns unprocessed deposit deltas into queued conversion jobs.
"""

from typing import List, Sequence

import structlog

from fee_distributor.core.exceptions import ArrayLengthMismatchError, InvalidAmountError, ZeroAddressError
from fee_distributor.core.types import EventType, ProcessingJob, is_zero_address
from .context import PipelineContext
from .conversion_router import ConversionRouter
from .job_queue import PriorityJobQueue


logger = structlog.get_logger(__name__)


class BalanceTracker:
    """Detects per-asset deltas since the last snapshot and enqueues them."""

    def __init__(self, ctx: PipelineContext, queue: PriorityJobQueue, router: ConversionRouter):
        self.ctx = ctx
        self.queue = queue
        self.router = router
        self.logger = logger.bind(service="balance_tracker")

    def track(self, asset: str) -> bool:
        """Mark an asset as tracked; returns False if it already was."""
        entry = self.ctx.state.asset(asset)
        if entry.tracked:
            return False
        entry.tracked = True
        return True

    def update(self) -> List[ProcessingJob]:
        """
        Enqueue one job per tracked asset whose holdings grew.

        Repeated calls without new deposits are no-ops.

        Returns:
            Jobs created by this call
        """
        created = []
        for address, entry in list(self.ctx.state.assets.items()):
            if not entry.tracked:
                continue

            current = self.ctx.holdings(address)
            delta = current - entry.last_processed_balance
            if delta <= 0:
                continue

            job_type = self.router.classify(address)
            job = self.queue.push(
                asset=address,
                amount=delta,
                priority=self.ctx.settings.priority_for(job_type),
                job_type=job_type,
            )
            entry.pending_balance += delta
            entry.last_processed_balance = current
            created.append(job)

            self.ctx.emit(
                EventType.JOB_QUEUED,
                token=address,
                amount=delta,
                priority=job.priority,
                job_type=job_type.value,
            )

        if created:
            self.logger.info(
                "Balance deltas queued",
                jobs_created=len(created),
                queue_length=len(self.queue)
            )
        return created

    def add(self, assets: Sequence[str]) -> List[str]:
        """Track new assets without touching their snapshots."""
        added = []
        for asset in assets:
            if is_zero_address(asset):
                raise ZeroAddressError("asset")
            if self.track(asset):
                added.append(asset)

        if added:
            self.ctx.emit(EventType.TOKENS_TRACKED, tokens=added)
            self.logger.info("Assets added to tracking", assets=added)
        return added

    def reset(self, assets: Sequence[str], balances: Sequence[int]) -> None:
        """Overwrite snapshots and drop pending amounts (emergency recovery)."""
        if len(assets) != len(balances):
            raise ArrayLengthMismatchError(len(assets), len(balances))

        for asset, balance in zip(assets, balances):
            if is_zero_address(asset):
                raise ZeroAddressError("asset")
            if balance < 0:
                raise InvalidAmountError("Balance snapshot cannot be negative", {"asset": asset, "balance": balance})
            entry = self.ctx.state.asset(asset)
            entry.last_processed_balance = balance
            entry.pending_balance = 0

        self.ctx.emit(
            EventType.BALANCE_TRACKING_RESET,
            tokens=list(assets),
            balances=list(balances),
        )
        self.logger.warning("Balance tracking reset", assets=list(assets))

    def consume(self, asset: str, amount: int) -> None:
        """Lower the snapshot by an amount converted away, so later deposits show up as deltas."""
        entry = self.ctx.state.asset(asset)
        entry.last_processed_balance = max(0, entry.last_processed_balance - amount)

    def release(self, asset: str, amount: int) -> None:
        """Remove a finished job's amount from the asset's pending balance."""
        entry = self.ctx.state.asset(asset)
        entry.pending_balance = max(0, entry.pending_balance - amount)
