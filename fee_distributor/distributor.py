"""
FeeDistributor: the public surface of the fee pipeline.

Collection -> balance tracking -> queued conversion -> cooldown-gated payout.
Every mutating entry point runs under a non-reentrant guard that also rolls
back distributor state if the call raises.
"""

import time
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from fee_distributor.core.config import Settings, settings as default_settings
from fee_distributor.core.exceptions import NotOwnerError, NotPendingOwnerError, ZeroAddressError
from fee_distributor.core.guard import ReentrancyGuard, non_reentrant
from fee_distributor.core.types import (
    BatchResult,
    DistributorEvent,
    DistributorState,
    EventType,
    JobType,
    ProcessingJob,
    TrackedAsset,
    is_zero_address,
)
from fee_distributor.interfaces import (
    AssetLedger,
    ExchangeRouter,
    PoolDirectory,
    PoolRegistry,
    StakingPool,
)
from fee_distributor.schemas import DistributorStatus
from fee_distributor.services import (
    BalanceTracker,
    ConversionRouter,
    DistributionGate,
    EmergencyController,
    FeeCollector,
    JobProcessor,
    PipelineContext,
    PriorityJobQueue,
)


logger = structlog.get_logger(__name__)


class FeeDistributor:
    """
    Converts collected pool fees into the reward asset and pays staking.

    Collaborators are injected; see fee_distributor.interfaces for the
    protocols and fee_distributor.sandbox for an in-memory implementation.
    """

    def __init__(
        self,
        address: str,
        owner: str,
        reward_asset: str,
        bridge_asset: str,
        ledger: AssetLedger,
        registry: PoolRegistry,
        router: ExchangeRouter,
        staking: StakingPool,
        pools: PoolDirectory,
        config: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        for field_name, value in (
            ("address", address),
            ("owner", owner),
            ("reward_asset", reward_asset),
            ("bridge_asset", bridge_asset),
        ):
            if is_zero_address(value):
                raise ZeroAddressError(field_name)

        self.settings = config or default_settings
        self.state = DistributorState(owner=owner)
        self._guard = ReentrancyGuard()
        self.logger = logger.bind(service="fee_distributor", address=address)

        self.ctx = PipelineContext(
            address=address,
            reward_asset=reward_asset,
            bridge_asset=bridge_asset,
            state=self.state,
            settings=self.settings,
            ledger=ledger,
            registry=registry,
            router=router,
            staking=staking,
            clock=clock,
            guard=self._guard,
        )

        # Components
        self.queue = PriorityJobQueue(self.state)
        self.router = ConversionRouter(self.ctx)
        self.tracker = BalanceTracker(self.ctx, self.queue, self.router)
        self.gate = DistributionGate(self.ctx)
        self.processor = JobProcessor(self.ctx, self.queue, self.router, self.tracker, self.gate)
        self.emergency = EmergencyController(self.ctx, self.router)
        self.collector = FeeCollector(self.ctx, pools)

        # Reward and bridge assets are tracked from the start
        self.tracker.track(reward_asset)
        self.tracker.track(bridge_asset)

        self.logger.info(
            "FeeDistributor initialized",
            owner=owner,
            reward_asset=reward_asset,
            bridge_asset=bridge_asset,
            staking=staking.address,
            cooldown=self.settings.distribution_cooldown,
            max_jobs_per_batch=self.settings.max_jobs_per_batch
        )

    # Identity

    @property
    def address(self) -> str:
        return self.ctx.address

    @property
    def reward_asset(self) -> str:
        return self.ctx.reward_asset

    @property
    def bridge_asset(self) -> str:
        return self.ctx.bridge_asset

    @property
    def owner(self) -> str:
        return self.state.owner

    @property
    def pending_owner(self) -> Optional[str]:
        return self.state.pending_owner

    def _after_rollback(self) -> None:
        # Collaborator movements made before the failure are not undone
        self.ctx.reconcile_snapshots()

    def _only_owner(self, sender: str) -> None:
        if sender != self.state.owner:
            raise NotOwnerError(sender)

    # Collection and tracking

    @non_reentrant
    def collect_fees(self, pairs: Sequence[str]) -> Dict[str, int]:
        """Skim fees from up to max_pairs_per_collection pairs, then queue the deltas."""
        self.emergency.require_running("collect_fees")
        collected = self.collector.collect(pairs)
        self.tracker.update()
        return collected

    def collect_fees_from_pair(self, pair: str) -> Dict[str, int]:
        return self.collect_fees([pair])

    @non_reentrant
    def update_balance_tracking(self) -> List[ProcessingJob]:
        return self.tracker.update()

    @non_reentrant
    def add_tokens_to_tracking(self, assets: Sequence[str], sender: str) -> List[str]:
        self._only_owner(sender)
        return self.tracker.add(assets)

    @non_reentrant
    def reset_balance_tracking(self, assets: Sequence[str], balances: Sequence[int], sender: str) -> None:
        self._only_owner(sender)
        self.tracker.reset(assets, balances)

    # Queue processing

    @non_reentrant
    def process_queue(self, requested_successes: int) -> BatchResult:
        """
        Process up to min(requested_successes, max_jobs_per_batch) jobs.

        Per-job failures are retried and eventually abandoned; the call only
        raises for mode or re-entrancy violations and an invalid request.
        """
        self.emergency.require_running("process_queue")
        return self.processor.process(requested_successes)

    @non_reentrant
    def clear_queue(self, sender: str) -> int:
        self._only_owner(sender)
        removed = self.queue.clear()
        for entry in self.state.assets.values():
            entry.pending_balance = 0
        self.ctx.emit(EventType.QUEUE_CLEARED, jobs_removed=len(removed))
        self.logger.warning("Queue cleared", jobs_removed=len(removed))
        return len(removed)

    # Conversion and distribution

    @non_reentrant
    def convert_fees(self, asset: str) -> int:
        """Convert the full holdings of an asset to the reward asset right away."""
        if is_zero_address(asset):
            raise ZeroAddressError("asset")
        self.emergency.require_running("convert_fees")
        produced = self.router.convert_fees(asset)
        if asset != self.reward_asset:
            self.ctx.clamp_snapshot(asset)
        return produced

    @non_reentrant
    def distribute(self) -> int:
        self.emergency.require_running("distribute")
        return self.gate.distribute()

    # Emergency

    @non_reentrant
    def emergency_pause(self, sender: str) -> None:
        self._only_owner(sender)
        self.emergency.pause()

    @non_reentrant
    def emergency_resume(self, sender: str) -> None:
        self._only_owner(sender)
        self.emergency.resume()

    @non_reentrant
    def emergency_process_token(self, asset: str, amount: int, sender: str) -> int:
        self._only_owner(sender)
        return self.emergency.process_token(asset, amount)

    # Ownership

    @non_reentrant
    def transfer_ownership(self, new_owner: str, sender: str) -> None:
        self._only_owner(sender)
        if is_zero_address(new_owner):
            raise ZeroAddressError("new_owner")
        self.state.pending_owner = new_owner
        self.ctx.emit(
            EventType.OWNERSHIP_TRANSFER_STARTED,
            previous_owner=self.state.owner,
            new_owner=new_owner,
        )

    @non_reentrant
    def accept_ownership(self, sender: str) -> None:
        if sender != self.state.pending_owner:
            raise NotPendingOwnerError(sender)
        previous = self.state.owner
        self.state.owner = sender
        self.state.pending_owner = None
        self.ctx.emit(EventType.OWNERSHIP_TRANSFERRED, previous_owner=previous, new_owner=sender)
        self.logger.info("Ownership transferred", previous_owner=previous, new_owner=sender)

    # Views

    @property
    def events(self) -> List[DistributorEvent]:
        return list(self.state.events)

    @property
    def paused(self) -> bool:
        return self.state.emergency_paused

    @property
    def failure_count(self) -> int:
        return self.state.failure_count

    @property
    def total_jobs_processed(self) -> int:
        return self.state.total_jobs_processed

    @property
    def total_jobs_failed(self) -> int:
        return self.state.total_jobs_failed

    @property
    def last_distribution_timestamp(self) -> int:
        return self.state.last_distribution_timestamp

    def queue_length(self) -> int:
        return len(self.queue)

    def job_at(self, index: int) -> ProcessingJob:
        return self.queue.at(index)

    def pending_balance(self, asset: str) -> int:
        entry = self.state.assets.get(asset)
        return entry.pending_balance if entry else 0

    def last_processed_balance(self, asset: str) -> int:
        entry = self.state.assets.get(asset)
        return entry.last_processed_balance if entry else 0

    def is_tracked(self, asset: str) -> bool:
        entry = self.state.assets.get(asset)
        return bool(entry and entry.tracked)

    def tracked_assets(self) -> List[TrackedAsset]:
        return [entry for entry in self.state.assets.values() if entry.tracked]

    def next_distribution_time(self) -> int:
        return self.gate.next_distribution_time()

    def can_distribute(self) -> bool:
        return self.gate.can_distribute()

    def status(self) -> DistributorStatus:
        """Summary of queue, balances and processing health."""
        processed = self.state.total_jobs_processed
        attempts = processed + self.state.total_jobs_failed
        return DistributorStatus(
            queue_length=len(self.queue),
            pending_value=sum(entry.pending_balance for entry in self.state.assets.values()),
            reward_balance=self.gate.reward_balance(),
            next_distribution_time=self.gate.next_distribution_time(),
            can_distribute=self.gate.can_distribute(),
            emergency_paused=self.state.emergency_paused,
            failure_count=self.state.failure_count,
            total_jobs_processed=processed,
            total_jobs_failed=self.state.total_jobs_failed,
            success_rate_bps=(processed * 10_000 // attempts) if attempts else 10_000,
            average_cost_by_job_type={
                job_type.value: cost for job_type, cost in self.settings.cost_estimates().items()
            },
            queued_jobs_by_type={
                job_type.value: sum(1 for job in self.queue if job.job_type is job_type)
                for job_type in JobType
            },
        )
