"""
Collaborator interfaces consumed by the fee distributor.

The distributor never swaps, mints or burns on its own; it drives these
collaborators. Any implementation (an RPC-backed client, the in-memory
sandbox) only has to satisfy the protocols below.
"""

from typing import List, Optional, Protocol, Sequence, Tuple


class AssetLedger(Protocol):
    """Balances and transfers for every asset, LP positions included."""

    def balance_of(self, asset: str, holder: str) -> int:
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        ...

    def approve(self, asset: str, owner: str, spender: str, amount: int) -> None:
        ...

    def pair_tokens(self, asset: str) -> Optional[Tuple[str, str]]:
        """Constituents an asset claims to represent, or None for plain assets."""
        ...


class PoolRegistry(Protocol):
    """Canonical pair lookup (factory)."""

    def get_pair(self, token_a: str, token_b: str) -> Optional[str]:
        ...


class FeePool(Protocol):
    """A two-asset exchange pool holding uncollected fees."""

    address: str
    token0: str
    token1: str

    def skim(self, to: str) -> Tuple[int, int]:
        """Send balances in excess of reserves to `to`; returns amounts per token."""
        ...


class PoolDirectory(Protocol):
    """Resolves pool addresses to pool objects for collection."""

    def get_pool(self, address: str) -> Optional[FeePool]:
        ...


class ExchangeRouter(Protocol):
    """Swaps and liquidity redemption with slippage protection."""

    address: str

    def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> List[int]:
        ...

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> List[int]:
        ...

    def remove_liquidity(
        self,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> Tuple[int, int]:
        ...


class StakingPool(Protocol):
    """Sink for distributed reward-asset transfers."""

    address: str
