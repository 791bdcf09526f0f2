"""
Pulls accrued pool fees into the distributor's holdings.
"""

from typing import Dict, List, Sequence

import structlog

from fee_distributor.core.exceptions import (
    EmptyArrayError,
    InvalidPairAddressError,
    TooManyPairsError,
    ZeroAddressError,
)
from fee_distributor.core.types import EventType, is_zero_address
from fee_distributor.interfaces import FeePool, PoolDirectory
from .context import PipelineContext


logger = structlog.get_logger(__name__)


class FeeCollector:
    """Validates pairs against the registry and skims them."""

    def __init__(self, ctx: PipelineContext, pools: PoolDirectory):
        self.ctx = ctx
        self.pools = pools
        self.logger = logger.bind(service="fee_collector")

    def _resolve(self, pair: str) -> FeePool:
        if is_zero_address(pair):
            raise ZeroAddressError("pair")

        pool = self.pools.get_pool(pair)
        if pool is None or self.ctx.registry.get_pair(pool.token0, pool.token1) != pair:
            raise InvalidPairAddressError(pair)
        return pool

    def collect(self, pairs: Sequence[str]) -> Dict[str, int]:
        """
        Skim every pair into the distributor.

        All pairs are validated before the first skim. Duplicates are
        collected once.

        Returns:
            Amount collected per token
        """
        if not pairs:
            raise EmptyArrayError("pairs")
        maximum = self.ctx.settings.max_pairs_per_collection
        if len(pairs) > maximum:
            raise TooManyPairsError(len(pairs), maximum)

        pools: List[FeePool] = []
        seen = set()
        for pair in pairs:
            pool = self._resolve(pair)
            if pair in seen:
                continue
            seen.add(pair)
            pools.append(pool)

        collected: Dict[str, int] = {}
        for pool in pools:
            amount0, amount1 = pool.skim(self.ctx.address)
            for token, amount in ((pool.token0, amount0), (pool.token1, amount1)):
                if amount <= 0:
                    continue
                collected[token] = collected.get(token, 0) + amount
                self.ctx.emit(EventType.FEES_COLLECTED, token=token, amount=amount, pair=pool.address)

        self.logger.info(
            "Fees collected",
            pairs=len(pools),
            tokens=len(collected),
            total_by_token=collected
        )
        return collected
