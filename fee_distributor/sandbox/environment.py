"""
Ready-wired in-memory environment for running a FeeDistributor end to end.
"""

from dataclasses import dataclass
from typing import Optional

from fee_distributor.core.config import Settings
from fee_distributor.distributor import FeeDistributor
from .ledger import InMemoryLedger
from .pools import SandboxFactory, SandboxPair, SandboxRouter


class ManualClock:
    """Deterministic clock; call it for the current time, advance() to move it."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@dataclass
class SandboxStaking:
    """Staking pool stand-in; rewards simply accumulate on its address."""
    address: str


class SandboxEnvironment:
    """
    Ledger, factory, router, staking pool and clock sharing one world.

    Well-known addresses are plain strings; LP tokens use the deterministic
    pair addresses from the factory.
    """

    DISTRIBUTOR = "0xd15791b070000000000000000000000000000001"
    OWNER = "0x0000000000000000000000000000000000000a11"
    ROUTER = "0x0000000000000000000000000000000000000b0b"
    STAKING = "0x00000000000000000000000000000000005ca1e0"
    LIQUIDITY_PROVIDER = "0x0000000000000000000000000000000000001111"

    REWARD = "0x00000000000000000000000000000000000000aa"
    BRIDGE = "0x00000000000000000000000000000000000000bb"

    def __init__(self, clock: Optional[ManualClock] = None):
        self.clock = clock or ManualClock()
        self.ledger = InMemoryLedger()
        self.factory = SandboxFactory(self.ledger)
        self.router = SandboxRouter(self.ROUTER, self.ledger, self.factory, self.clock)
        self.staking = SandboxStaking(self.STAKING)

    def create_pool(self, token_a: str, token_b: str, amount_a: int, amount_b: int) -> SandboxPair:
        """Create a pair and seed it with liquidity from the liquidity provider."""
        pair = self.factory.create_pair(token_a, token_b)
        self.ledger.mint(token_a, self.LIQUIDITY_PROVIDER, amount_a)
        self.ledger.mint(token_b, self.LIQUIDITY_PROVIDER, amount_b)
        pair.mint_liquidity(self.LIQUIDITY_PROVIDER, amount_a, token_a, amount_b)
        return pair

    def deposit(self, asset: str, amount: int, holder: Optional[str] = None) -> None:
        """Credit fees straight to the distributor (or another holder)."""
        self.ledger.mint(asset, holder or self.DISTRIBUTOR, amount)

    def give_lp(self, pair: SandboxPair, liquidity: int, holder: Optional[str] = None) -> None:
        """Move LP tokens from the liquidity provider to the distributor."""
        self.ledger.transfer(pair.address, self.LIQUIDITY_PROVIDER, holder or self.DISTRIBUTOR, liquidity)

    def balance(self, asset: str, holder: Optional[str] = None) -> int:
        return self.ledger.balance_of(asset, holder or self.DISTRIBUTOR)

    def build_distributor(self, config: Optional[Settings] = None) -> FeeDistributor:
        return FeeDistributor(
            address=self.DISTRIBUTOR,
            owner=self.OWNER,
            reward_asset=self.REWARD,
            bridge_asset=self.BRIDGE,
            ledger=self.ledger,
            registry=self.factory,
            router=self.router,
            staking=self.staking,
            pools=self.factory,
            config=config,
            clock=self.clock,
        )
