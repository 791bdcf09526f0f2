"""
In-memory constant-product pairs, factory and router.

Enough exchange behaviour to exercise routing, slippage protection and LP
redemption. Pair invariants are kept only as far as these operations need.
"""

import hashlib
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .ledger import InMemoryLedger


class ExchangeError(Exception):
    """Raised by the sandbox exchange, the way a reverting pool call would."""


def pair_address(token_a: str, token_b: str) -> str:
    """Deterministic pair address for a token couple (order independent)."""
    token0, token1 = sorted((token_a, token_b))
    digest = hashlib.sha256(f"{token0}:{token1}".encode()).hexdigest()
    return "0x" + digest[:40]


class SandboxPair:
    """Two-asset pool; its own address doubles as the LP token."""

    def __init__(self, ledger: InMemoryLedger, token_a: str, token_b: str):
        self.ledger = ledger
        self.token0, self.token1 = sorted((token_a, token_b))
        self.address = pair_address(token_a, token_b)
        self.reserve0 = 0
        self.reserve1 = 0
        ledger.register_pair_tokens(self.address, self.token0, self.token1)

    def reserves_for(self, token_in: str) -> Tuple[int, int]:
        if token_in == self.token0:
            return self.reserve0, self.reserve1
        if token_in == self.token1:
            return self.reserve1, self.reserve0
        raise ExchangeError(f"{token_in} is not part of pair {self.address}")

    def sync(self) -> None:
        self.reserve0 = self.ledger.balance_of(self.token0, self.address)
        self.reserve1 = self.ledger.balance_of(self.token1, self.address)

    def accrue_fees(self, token: str, amount: int) -> None:
        """Credit the pair with a fee surplus that skim() will release."""
        self.reserves_for(token)
        self.ledger.mint(token, self.address, amount)

    def skim(self, to: str) -> Tuple[int, int]:
        excess0 = self.ledger.balance_of(self.token0, self.address) - self.reserve0
        excess1 = self.ledger.balance_of(self.token1, self.address) - self.reserve1
        if excess0 > 0:
            self.ledger.transfer(self.token0, self.address, to, excess0)
        if excess1 > 0:
            self.ledger.transfer(self.token1, self.address, to, excess1)
        return max(excess0, 0), max(excess1, 0)

    def mint_liquidity(self, provider: str, amount_a: int, token_a: str, amount_b: int) -> int:
        """Deposit both tokens (already held by provider) and mint LP tokens to them."""
        amount0, amount1 = (amount_a, amount_b) if token_a == self.token0 else (amount_b, amount_a)
        self.ledger.transfer(self.token0, provider, self.address, amount0)
        self.ledger.transfer(self.token1, provider, self.address, amount1)

        supply = self.ledger.total_supply(self.address)
        if supply == 0:
            liquidity = math.isqrt(amount0 * amount1)
        else:
            liquidity = min(amount0 * supply // self.reserve0, amount1 * supply // self.reserve1)
        if liquidity <= 0:
            raise ExchangeError("Insufficient liquidity minted")

        self.ledger.mint(self.address, provider, liquidity)
        self.sync()
        return liquidity

    def burn_liquidity(self, liquidity: int, to: str) -> Tuple[int, int]:
        supply = self.ledger.total_supply(self.address)
        amount0 = liquidity * self.reserve0 // supply
        amount1 = liquidity * self.reserve1 // supply
        if amount0 == 0 and amount1 == 0:
            raise ExchangeError("Insufficient liquidity burned")

        self.ledger.burn(self.address, self.address, liquidity)
        self.ledger.transfer(self.token0, self.address, to, amount0)
        self.ledger.transfer(self.token1, self.address, to, amount1)
        self.sync()
        return amount0, amount1


class SandboxFactory:
    """Pair registry and pool directory."""

    def __init__(self, ledger: InMemoryLedger):
        self.ledger = ledger
        self._pairs: Dict[str, SandboxPair] = {}
        self._by_tokens: Dict[Tuple[str, str], str] = {}

    def create_pair(self, token_a: str, token_b: str) -> SandboxPair:
        if token_a == token_b:
            raise ExchangeError("Identical addresses")
        key = tuple(sorted((token_a, token_b)))
        if key in self._by_tokens:
            raise ExchangeError(f"Pair exists for {token_a}/{token_b}")

        pair = SandboxPair(self.ledger, token_a, token_b)
        self._pairs[pair.address] = pair
        self._by_tokens[key] = pair.address
        return pair

    def get_pair(self, token_a: str, token_b: str) -> Optional[str]:
        return self._by_tokens.get(tuple(sorted((token_a, token_b))))

    def get_pool(self, address: str) -> Optional[SandboxPair]:
        return self._pairs.get(address)

    def all_pairs(self) -> List[SandboxPair]:
        return list(self._pairs.values())


class SandboxRouter:
    """Constant-product router with a 0.3% pool fee."""

    FEE_NUMERATOR = 997
    FEE_DENOMINATOR = 1000

    def __init__(
        self,
        address: str,
        ledger: InMemoryLedger,
        factory: SandboxFactory,
        clock: Callable[[], float],
    ):
        self.address = address
        self.ledger = ledger
        self.factory = factory
        self.clock = clock
        # Shortfall between quoted and executed output, to simulate price movement
        self.price_impact_bps = 0

    def _pair(self, token_a: str, token_b: str) -> SandboxPair:
        address = self.factory.get_pair(token_a, token_b)
        if address is None:
            raise ExchangeError(f"No pair for {token_a}/{token_b}")
        return self.factory.get_pool(address)

    def _check_deadline(self, deadline: int) -> None:
        if self.clock() > deadline:
            raise ExchangeError("Transaction expired")

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        if amount_in <= 0:
            raise ExchangeError("Insufficient input amount")
        if reserve_in <= 0 or reserve_out <= 0:
            raise ExchangeError("Insufficient liquidity")
        amount_in_with_fee = amount_in * self.FEE_NUMERATOR
        return amount_in_with_fee * reserve_out // (reserve_in * self.FEE_DENOMINATOR + amount_in_with_fee)

    def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> List[int]:
        if len(path) < 2:
            raise ExchangeError("Invalid path")
        amounts = [amount_in]
        for token_in, token_out in zip(path, path[1:]):
            reserve_in, reserve_out = self._pair(token_in, token_out).reserves_for(token_in)
            amounts.append(self.get_amount_out(amounts[-1], reserve_in, reserve_out))
        return amounts

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> List[int]:
        """Swap along `path`; the input is pulled from `to`, which must have approved the router."""
        self._check_deadline(deadline)
        amounts = self.get_amounts_out(amount_in, path)
        if self.price_impact_bps:
            amounts[-1] = amounts[-1] * (10_000 - self.price_impact_bps) // 10_000
        if amounts[-1] < amount_out_min:
            raise ExchangeError(
                f"Insufficient output amount: {amounts[-1]} < {amount_out_min}"
            )

        first = self._pair(path[0], path[1])
        self.ledger.transfer_from(path[0], self.address, to, first.address, amount_in)

        for index, (token_in, token_out) in enumerate(zip(path, path[1:])):
            pair = self._pair(token_in, token_out)
            is_last = index == len(path) - 2
            recipient = to if is_last else self._pair(token_out, path[index + 2]).address
            self.ledger.transfer(token_out, pair.address, recipient, amounts[index + 1])
            pair.sync()
        return amounts

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
        self._check_deadline(deadline)
        pair = self._pair(token_a, token_b)
        supply = self.ledger.total_supply(pair.address)
        if supply == 0:
            raise ExchangeError("Pair has no liquidity")
        expected_a, expected_b = (
            liquidity * reserve // supply for reserve in pair.reserves_for(token_a)
        )
        if expected_a < amount_a_min or expected_b < amount_b_min:
            raise ExchangeError("Insufficient redemption amount")

        self.ledger.transfer_from(pair.address, self.address, to, pair.address, liquidity)
        amount0, amount1 = pair.burn_liquidity(liquidity, to)
        return (amount0, amount1) if token_a == pair.token0 else (amount1, amount0)

