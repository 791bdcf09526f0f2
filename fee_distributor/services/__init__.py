"""
Fee pipeline components.
"""

from .context import PipelineContext
from .job_queue import PriorityJobQueue
from .conversion_router import ConversionRouter
from .balance_tracker import BalanceTracker
from .distribution_gate import DistributionGate
from .job_processor import JobProcessor
from .emergency_controller import EmergencyController
from .fee_collector import FeeCollector

__all__ = [
    "PipelineContext",
    "PriorityJobQueue",
    "ConversionRouter",
    "BalanceTracker",
    "DistributionGate",
    "JobProcessor",
    "EmergencyController",
    "FeeCollector",
]
