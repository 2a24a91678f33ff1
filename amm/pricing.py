"""Read-only price queries over pool reserves."""

from __future__ import annotations

import structlog

from amm.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from amm.errors import NoLiquidity
from amm.pools.key import canonical_key
from amm.pools.registry import PoolRegistry
from amm.safe_int import S
from amm.swap import quote_input, quote_output
from amm.validation import require_distinct

logger = structlog.get_logger()


class PricingOracle:
    """Spot prices and stateless trade estimates.

    Never mutates pool state; lookups go through PoolRegistry.get().
    """

    def __init__(
        self,
        registry: PoolRegistry,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self.registry = registry
        self.config = config

    def spot_price(self, base_asset: str, quote_asset: str) -> int:
        """Quote-asset units per one base-asset unit, scaled by price_scale.

        Formula: price = reserve_quote * price_scale // reserve_base

        Raises:
            InvalidPath: If both assets are the same
            NoLiquidity: If either reserve is empty
        """
        require_distinct(base_asset, quote_asset)
        pool = self.registry.get(canonical_key(base_asset, quote_asset))
        reserve_base, reserve_quote = pool.get_reserves(base_asset)
        if reserve_base <= 0 or reserve_quote <= 0:
            raise NoLiquidity(f"Pool {pool.key} has no liquidity to price")

        price = (S(reserve_quote) * S(self.config.price_scale) // S(reserve_base)).to_uint256()
        logger.debug("spot_price", base=base_asset, quote=quote_asset, price=price)
        return price

    def quote_output(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Stateless output estimate from raw reserves (configured fee applies)."""
        return quote_output(amount_in, reserve_in, reserve_out, self.config.swap_fee_bps)

    def quote_input(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Stateless input estimate for an exact output from raw reserves."""
        return quote_input(amount_out, reserve_in, reserve_out, self.config.swap_fee_bps)


__all__ = ["PricingOracle"]
