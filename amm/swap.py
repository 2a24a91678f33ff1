"""Constant-product swap engine.

Pools follow the constant product rule x * y = k. A trade adds amount_in to
the input reserve and removes

    amount_out = amount_in * reserve_out // (reserve_in + amount_in)

from the output reserve. Truncating the output keeps the post-trade product
at or above the pre-trade product. With a non-zero swap fee the Uniswap V2
form is used instead:

    amount_out = (in * (10000 - fee)) * res_out // (res_in * 10000 + in * (10000 - fee))

and the fee stays in the reserves.
"""

from __future__ import annotations

import time

import structlog

from amm.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from amm.constants import FEE_DENOMINATOR, MAX_SWAP_FEE_BPS
from amm.errors import InvalidInput, NoLiquidity, SlippageExceeded
from amm.ledgers.base import AssetTransfer
from amm.models.types import normalize_asset
from amm.pools.key import canonical_key
from amm.pools.registry import PoolRegistry
from amm.pools.state import PoolState
from amm.safe_int import S
from amm.transaction import Clock, Transaction, ensure_not_expired
from amm.validation import require_distinct, require_non_negative, require_positive

logger = structlog.get_logger()


def _fee_multiplier(fee_bps: int) -> int:
    if not (0 <= fee_bps <= MAX_SWAP_FEE_BPS):
        raise InvalidInput(f"fee_bps must be in [0, {MAX_SWAP_FEE_BPS}], got {fee_bps}")
    return FEE_DENOMINATOR - fee_bps


def quote_output(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> int:
    """Calculate the output of an exact-input trade against raw reserves.

    Args:
        amount_in: Input asset amount
        reserve_in: Reserve of the input asset
        reserve_out: Reserve of the output asset
        fee_bps: Swap fee in basis points (default 0, no fee)

    Returns:
        Output asset amount, truncated toward zero

    Raises:
        InvalidInput: If any amount or reserve is not positive
    """
    require_positive("amount_in", amount_in)
    require_positive("reserve_in", reserve_in)
    require_positive("reserve_out", reserve_out)

    amount_in_with_fee = S(amount_in) * S(_fee_multiplier(fee_bps))
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee

    return (numerator // denominator).to_uint256()


def quote_input(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> int:
    """Calculate the input an exact-output trade requires.

    Formula: amount_in = (res_in * out * 10000) // ((res_out - out) * (10000 - fee)) + 1

    The +1 rounds in the pool's favour so the product never decreases.

    Raises:
        InvalidInput: If any value is not positive, or amount_out would
            drain the output reserve
    """
    require_positive("amount_out", amount_out)
    require_positive("reserve_in", reserve_in)
    require_positive("reserve_out", reserve_out)
    if amount_out >= reserve_out:
        raise InvalidInput(f"amount_out {amount_out} must be below reserve_out {reserve_out}")

    numerator = S(reserve_in) * S(amount_out) * S(FEE_DENOMINATOR)
    denominator = (S(reserve_out) - S(amount_out)) * S(_fee_multiplier(fee_bps))

    return (numerator // denominator + 1).to_uint256()


class SwapEngine:
    """Executes single-hop trades against registry pools.

    Args:
        registry: Pool registry shared with the other engines
        assets: Asset transfer collaborator
        config: Engine configuration (fee policy)
        clock: Source of the current time for deadline checks
    """

    def __init__(
        self,
        registry: PoolRegistry,
        assets: AssetTransfer,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Clock = time.time,
    ) -> None:
        self.registry = registry
        self.assets = assets
        self.config = config
        self.clock = clock

    def _resolve_pool(self, input_asset: str, output_asset: str) -> PoolState:
        require_distinct(input_asset, output_asset)
        key = canonical_key(input_asset, output_asset)
        # Unfunded pairs are rejected without registering them
        if not self.registry.get(key).is_initialized:
            raise NoLiquidity(f"Pool {key} has no liquidity")
        return self.registry.get_or_create(key)

    def quote_exact_in(self, amount_in: int, input_asset: str, output_asset: str) -> int:
        """Output `amount_in` would buy right now, without trading."""
        require_distinct(input_asset, output_asset)
        pool = self.registry.get(canonical_key(input_asset, output_asset))
        if not pool.has_liquidity:
            raise NoLiquidity(f"Pool {pool.key} has no liquidity")
        reserve_in, reserve_out = pool.get_reserves(input_asset)
        return quote_output(amount_in, reserve_in, reserve_out, self.config.swap_fee_bps)

    def swap_exact_in(
        self,
        amount_in: int,
        amount_out_min: int,
        input_asset: str,
        output_asset: str,
        sender: str,
        recipient: str,
        deadline: int,
    ) -> int:
        """Sell exactly `amount_in` of `input_asset` for `output_asset`.

        Raises:
            Expired: If the deadline has passed
            InvalidPath: If both assets are the same
            NoLiquidity: If the pool was never funded
            InvalidInput: If amount_in is not positive
            SlippageExceeded: If the output is below amount_out_min

        Returns:
            Amount of `output_asset` sent to `recipient`
        """
        ensure_not_expired(deadline, self.clock)
        pool = self._resolve_pool(input_asset, output_asset)
        require_non_negative("amount_out_min", amount_out_min)

        reserve_in, reserve_out = pool.get_reserves(input_asset)
        amount_out = quote_output(amount_in, reserve_in, reserve_out, self.config.swap_fee_bps)
        if amount_out < amount_out_min:
            logger.warning(
                "slippage_exceeded",
                operation="swap_exact_in",
                pair=str(pool.key),
                amount_out=amount_out,
                amount_out_min=amount_out_min,
            )
            raise SlippageExceeded(f"Output {amount_out} below minimum {amount_out_min}")

        self._settle(pool, input_asset, output_asset, amount_in, amount_out, sender, recipient)
        return amount_out

    def swap_exact_out(
        self,
        amount_out: int,
        amount_in_max: int,
        input_asset: str,
        output_asset: str,
        sender: str,
        recipient: str,
        deadline: int,
    ) -> int:
        """Buy exactly `amount_out` of `output_asset`, paying in `input_asset`.

        Raises:
            Expired: If the deadline has passed
            InvalidPath: If both assets are the same
            NoLiquidity: If the pool was never funded
            InvalidInput: If amount_out is not positive or drains the reserve
            SlippageExceeded: If the required input exceeds amount_in_max

        Returns:
            Amount of `input_asset` taken from `sender`
        """
        ensure_not_expired(deadline, self.clock)
        pool = self._resolve_pool(input_asset, output_asset)
        require_non_negative("amount_in_max", amount_in_max)

        reserve_in, reserve_out = pool.get_reserves(input_asset)
        amount_in = quote_input(amount_out, reserve_in, reserve_out, self.config.swap_fee_bps)
        if amount_in > amount_in_max:
            logger.warning(
                "slippage_exceeded",
                operation="swap_exact_out",
                pair=str(pool.key),
                amount_in=amount_in,
                amount_in_max=amount_in_max,
            )
            raise SlippageExceeded(f"Input {amount_in} above maximum {amount_in_max}")

        self._settle(pool, input_asset, output_asset, amount_in, amount_out, sender, recipient)
        return amount_in

    def _settle(
        self,
        pool: PoolState,
        input_asset: str,
        output_asset: str,
        amount_in: int,
        amount_out: int,
        sender: str,
        recipient: str,
    ) -> None:
        reserve_in, reserve_out = pool.get_reserves(input_asset)
        new_in = (S(reserve_in) + S(amount_in)).to_uint256()
        new_out = (S(reserve_out) - S(amount_out)).to_uint256()
        reserve0, reserve1 = pool.ordered(input_asset, new_in, new_out)
        asset_in = normalize_asset(input_asset)
        asset_out = normalize_asset(output_asset)

        with Transaction(self.assets, operation="swap") as tx:
            tx.pull(asset_in, sender, amount_in)
            tx.push(asset_out, recipient, amount_out)
            tx.update_pool(pool, reserve0, reserve1)

        logger.info(
            "swap_executed",
            pair=str(pool.key),
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=amount_out,
            reserve0=pool.reserve0,
            reserve1=pool.reserve1,
        )


__all__ = ["SwapEngine", "quote_input", "quote_output"]
