"""
Conversion router: turns any held asset into the reward asset.

Routing order for a non-reward asset:
1. LP position (verified against the registry) -> redeem, then convert each underlying
2. Direct pool asset/reward
3. Bridged path asset/bridge/reward
Anything else is NoConversionPath.
"""

from typing import List, Optional, Tuple

import structlog

from fee_distributor.core.exceptions import (
    FeeDistributorException,
    InvalidAmountError,
    NoConversionPathError,
    PairNotFoundError,
    SwapFailedError,
    ZeroAddressError,
)
from fee_distributor.core.types import EventType, JobType, is_zero_address
from .context import PipelineContext


logger = structlog.get_logger(__name__)


class ConversionRouter:
    """Decides conversion paths and drives the exchange router."""

    def __init__(self, ctx: PipelineContext):
        self.ctx = ctx
        self.logger = logger.bind(service="conversion_router")

    # Classification

    def lp_constituents(self, asset: str) -> Optional[Tuple[str, str]]:
        """
        Return the two underlying assets if `asset` is a genuine LP position.

        The asset's own claim is not trusted: the canonical pair for the
        claimed constituents is looked up in the registry and must be the
        asset itself.
        """
        claimed = self.ctx.ledger.pair_tokens(asset)
        if not claimed:
            return None
        token0, token1 = claimed
        if is_zero_address(token0) or is_zero_address(token1):
            return None
        if self.ctx.registry.get_pair(token0, token1) != asset:
            self.logger.warning(
                "Rejected spoofed LP position",
                asset=asset,
                claimed_token0=token0,
                claimed_token1=token1
            )
            return None
        return token0, token1

    def classify(self, asset: str) -> JobType:
        if asset == self.ctx.reward_asset:
            return JobType.REWARD_ASSET
        if asset == self.ctx.bridge_asset:
            return JobType.BRIDGE_ASSET
        if self.lp_constituents(asset) is not None:
            return JobType.LP_POSITION
        return JobType.GENERIC

    def find_path(self, asset: str) -> List[str]:
        """Direct path if a pool exists, else via the bridge asset."""
        reward = self.ctx.reward_asset
        bridge = self.ctx.bridge_asset
        registry = self.ctx.registry

        if not is_zero_address(registry.get_pair(asset, reward)):
            return [asset, reward]

        if asset != bridge and not is_zero_address(bridge):
            if not is_zero_address(registry.get_pair(asset, bridge)):
                if is_zero_address(registry.get_pair(bridge, reward)):
                    raise PairNotFoundError(bridge, reward)
                return [asset, bridge, reward]

        raise NoConversionPathError(asset)

    # Conversion

    def convert_fees(self, asset: str) -> int:
        """
        Convert the full holdings of `asset` to the reward asset.

        Returns:
            Reward asset amount produced (0 for the reward asset itself)
        """
        if is_zero_address(asset):
            raise ZeroAddressError("asset")
        if asset == self.ctx.reward_asset:
            return 0

        amount = self.ctx.holdings(asset)
        if amount == 0:
            raise InvalidAmountError(f"No holdings of {asset} to convert", {"asset": asset})

        return self.convert(asset, amount)

    def convert(self, asset: str, amount: int, depth: int = 0) -> int:
        """Convert `amount` of `asset`; dispatches on the asset's job type."""
        if amount <= 0:
            raise InvalidAmountError(f"Nothing to convert for {asset}", {"asset": asset, "amount": amount})
        if depth >= self.ctx.settings.max_conversion_depth:
            raise NoConversionPathError(asset, "maximum LP decomposition depth reached")

        job_type = self.classify(asset)
        if job_type is JobType.REWARD_ASSET:
            return 0
        if job_type is JobType.LP_POSITION:
            return self._decompose(asset, amount, depth)
        return self._swap(asset, amount)

    def _deadline(self) -> int:
        return self.ctx.now() + self.ctx.settings.swap_deadline_seconds

    def _min_out(self, quoted: int) -> int:
        return quoted * (10_000 - self.ctx.settings.slippage_bps) // 10_000

    def _swap(self, asset: str, amount: int) -> int:
        path = self.find_path(asset)
        router = self.ctx.router

        try:
            quoted = router.get_amounts_out(amount, path)[-1]
            self.ctx.ledger.approve(asset, self.ctx.address, router.address, amount)
            amounts = router.swap_exact_tokens_for_tokens(
                amount,
                self._min_out(quoted),
                path,
                self.ctx.address,
                self._deadline(),
            )
        except FeeDistributorException:
            # Re-entrancy and transfer errors keep their own type
            raise
        except Exception as e:
            self.logger.warning("Swap failed", asset=asset, amount=amount, path=path, error=str(e))
            raise SwapFailedError(
                f"Swap of {asset} failed: {e}",
                {"asset": asset, "amount": amount, "path": list(path)}
            ) from e

        amount_out = amounts[-1]
        self.ctx.emit(
            EventType.FEES_CONVERTED,
            token=asset,
            token_amount=amount,
            reward_amount=amount_out,
            path=list(path),
        )
        self.logger.info(
            "Fees converted",
            asset=asset,
            amount_in=amount,
            amount_out=amount_out,
            hops=len(path) - 1
        )
        return amount_out

    def _decompose(self, lp_token: str, liquidity: int, depth: int) -> int:
        token0, token1 = self.lp_constituents(lp_token)
        router = self.ctx.router

        try:
            self.ctx.ledger.approve(lp_token, self.ctx.address, router.address, liquidity)
            amount0, amount1 = router.remove_liquidity(
                token0,
                token1,
                liquidity,
                0,
                0,
                self.ctx.address,
                self._deadline(),
            )
        except FeeDistributorException:
            raise
        except Exception as e:
            self.logger.warning("LP redemption failed", lp_token=lp_token, liquidity=liquidity, error=str(e))
            raise SwapFailedError(
                f"Redemption of {lp_token} failed: {e}",
                {"lp_token": lp_token, "liquidity": liquidity}
            ) from e

        self.ctx.emit(
            EventType.LP_DECOMPOSED,
            lp_token=lp_token,
            liquidity=liquidity,
            token0=token0,
            amount0=amount0,
            token1=token1,
            amount1=amount1,
        )
        self.logger.info(
            "LP position decomposed",
            lp_token=lp_token,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1
        )

        produced = 0
        for token, received in ((token0, amount0), (token1, amount1)):
            if token == self.ctx.reward_asset or received == 0:
                continue
            produced += self.convert(token, received, depth + 1)
        return produced
