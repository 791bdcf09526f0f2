"""
Fee distributor: collects pool fees, converts them to a reward asset and pays staking.
"""

from .core.config import Settings, settings
from .distributor import FeeDistributor
from .schemas import DistributorStatus

__all__ = [
    "FeeDistributor",
    "DistributorStatus",
    "Settings",
    "settings",
]

__version__ = "0.1.0"
