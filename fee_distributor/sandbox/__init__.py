"""
In-memory collaborators for tests, demos and the CLI.
"""

from .ledger import InMemoryLedger
from .pools import ExchangeError, SandboxFactory, SandboxPair, SandboxRouter, pair_address
from .environment import ManualClock, SandboxEnvironment, SandboxStaking

__all__ = [
    "InMemoryLedger",
    "ExchangeError",
    "SandboxFactory",
    "SandboxPair",
    "SandboxRouter",
    "pair_address",
    "ManualClock",
    "SandboxEnvironment",
    "SandboxStaking",
]
