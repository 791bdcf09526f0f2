"""
Types shared by the fee pipeline components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def is_zero_address(address: Optional[str]) -> bool:
    return not address or address == ZERO_ADDRESS


class JobType(Enum):
    """Role of the asset a job converts; decides queue priority and routing."""
    REWARD_ASSET = "reward_asset"
    BRIDGE_ASSET = "bridge_asset"
    LP_POSITION = "lp_position"
    GENERIC = "generic"


class EventType(Enum):
    """Notifications emitted by the distributor."""

    # Collection
    FEES_COLLECTED = "fees_collected"

    # Queue
    JOB_QUEUED = "job_queued"
    JOB_PROCESSED = "job_processed"
    JOB_FAILED = "job_failed"
    JOB_ABANDONED = "job_abandoned"
    QUEUE_CLEARED = "queue_cleared"

    # Conversion
    FEES_CONVERTED = "fees_converted"
    LP_DECOMPOSED = "lp_decomposed"

    # Distribution
    FEES_DISTRIBUTED = "fees_distributed"

    # Tracking
    TOKENS_TRACKED = "tokens_tracked"
    BALANCE_TRACKING_RESET = "balance_tracking_reset"

    # Emergency
    EMERGENCY_PAUSED = "emergency_paused"
    EMERGENCY_RESUMED = "emergency_resumed"
    EMERGENCY_TOKEN_PROCESSED = "emergency_token_processed"

    # Ownership
    OWNERSHIP_TRANSFER_STARTED = "ownership_transfer_started"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"


@dataclass
class DistributorEvent:
    """A single emitted notification."""
    event_type: EventType
    timestamp: int
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TrackedAsset:
    """Balance snapshot bookkeeping for one asset."""
    asset: str
    tracked: bool = True
    last_processed_balance: int = 0
    pending_balance: int = 0


@dataclass
class ProcessingJob:
    """A unit of pending conversion work for one asset and amount."""
    asset: str
    amount: int
    priority: int
    job_type: JobType
    sequence: int
    failure_count: int = 0

    @property
    def sort_key(self):
        # Descending priority, FIFO among equal priority
        return (-self.priority, self.sequence)


@dataclass
class BatchResult:
    """Outcome of one process_queue call."""
    requested: int = 0
    target: int = 0
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    abandoned: int = 0
    distributed: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class DistributorState:
    """
    All mutable distributor state; snapshotted and restored as a unit.

    events is append-only and excluded from snapshots.
    """
    owner: str
    pending_owner: Optional[str] = None
    assets: Dict[str, TrackedAsset] = field(default_factory=dict)
    queue: List[ProcessingJob] = field(default_factory=list)
    next_sequence: int = 0
    failure_count: int = 0
    total_jobs_processed: int = 0
    total_jobs_failed: int = 0
    last_distribution_timestamp: int = 0
    emergency_paused: bool = False
    events: List[DistributorEvent] = field(default_factory=list)

    def asset(self, address: str) -> TrackedAsset:
        """Return the bookkeeping entry for an asset, creating an untracked one if needed."""
        entry = self.assets.get(address)
        if entry is None:
            entry = TrackedAsset(asset=address, tracked=False)
            self.assets[address] = entry
        return entry
