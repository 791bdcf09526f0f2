"""
Shared wiring handed to every pipeline component.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable

import structlog

from fee_distributor.core.config import Settings
from fee_distributor.core.guard import ReentrancyGuard
from fee_distributor.core.types import DistributorEvent, DistributorState, EventType
from fee_distributor.interfaces import AssetLedger, ExchangeRouter, PoolRegistry, StakingPool


logger = structlog.get_logger(__name__)


@dataclass
class PipelineContext:
    """State, settings and collaborators of one distributor instance."""
    address: str
    reward_asset: str
    bridge_asset: str
    state: DistributorState
    settings: Settings
    ledger: AssetLedger
    registry: PoolRegistry
    router: ExchangeRouter
    staking: StakingPool
    clock: Callable[[], float] = field(default=time.time)
    guard: ReentrancyGuard = field(default_factory=ReentrancyGuard)

    def now(self) -> int:
        return int(self.clock())

    def holdings(self, asset: str) -> int:
        """Current ledger balance of an asset held by the distributor."""
        return self.ledger.balance_of(asset, self.address)

    def refresh_snapshot(self, asset: str) -> None:
        """Align the asset's last processed balance with current holdings."""
        entry = self.state.asset(asset)
        entry.last_processed_balance = self.holdings(asset)

    def clamp_snapshot(self, asset: str) -> None:
        """Lower the asset's last processed balance to current holdings if it is above them."""
        entry = self.state.asset(asset)
        entry.last_processed_balance = min(entry.last_processed_balance, self.holdings(asset))

    def reconcile_snapshots(self) -> None:
        """Clamp every snapshot to holdings, e.g. after ledger movements that state no longer reflects."""
        for address in list(self.state.assets):
            self.clamp_snapshot(address)

    def emit(self, event_type: EventType, **data: Any) -> DistributorEvent:
        event = DistributorEvent(event_type=event_type, timestamp=self.now(), data=data)
        self.state.events.append(event)
        logger.debug("Event emitted", event_type=event_type.value, **data)
        return event
