"""Public entry point of the pool engine.

The Exchange wires one PoolRegistry into the liquidity, swap and pricing
engines and accepts asset pairs in whatever order the caller names them.
Amounts and minimums passed to (and returned from) the Exchange follow the
caller's asset order; the engines below work in canonical pool order.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

import structlog

from amm.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from amm.ledgers.base import AssetTransfer, ShareLedger
from amm.ledgers.memory import InMemoryAssetBank, InMemoryShareLedger
from amm.liquidity import LiquidityEngine
from amm.pools.key import PairKey, canonical_key
from amm.pools.registry import PoolRegistry
from amm.pricing import PricingOracle
from amm.swap import SwapEngine, quote_input, quote_output
from amm.transaction import Clock

logger = structlog.get_logger()


@dataclass(frozen=True)
class LiquidityResult:
    """Outcome of a deposit, in the caller's asset order."""

    amount_a: int
    amount_b: int
    shares: int


@dataclass(frozen=True)
class WithdrawResult:
    """Outcome of a withdrawal, in the caller's asset order."""

    amount_a: int
    amount_b: int


@dataclass(frozen=True)
class PoolReserves:
    """Pool snapshot, in the caller's asset order."""

    key: PairKey
    reserve_a: int
    reserve_b: int
    total_shares: int


def _in_caller_order(key: PairKey, asset_a: str, value0: int, value1: int) -> tuple[int, int]:
    """Map (asset0, asset1) values to (asset_a, asset_b) order and back.

    The mapping is its own inverse.
    """
    if key.is_asset0(asset_a):
        return value0, value1
    return value1, value0


class Exchange:
    """Constant-product exchange over any number of two-asset pools.

    Args:
        assets: Asset transfer collaborator. Defaults to an in-memory bank.
        shares: Share ledger collaborator. Defaults to an in-memory ledger.
        registry: Pool registry. Defaults to a fresh, empty registry.
        config: Engine configuration (fee policy, price scale).
        clock: Source of the current time for deadline checks.

    Every method that reads or changes pool or ledger state holds `lock`
    for its whole duration, so concurrent callers see each operation either
    fully applied or not at all.
    """

    def __init__(
        self,
        assets: AssetTransfer | None = None,
        shares: ShareLedger | None = None,
        registry: PoolRegistry | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Clock = time.time,
    ) -> None:
        self.assets = assets if assets is not None else InMemoryAssetBank()
        self.shares = shares if shares is not None else InMemoryShareLedger()
        self.registry = registry if registry is not None else PoolRegistry()
        self.config = config
        self.lock = threading.Lock()

        self.liquidity = LiquidityEngine(self.registry, self.assets, self.shares, clock=clock)
        self.swaps = SwapEngine(self.registry, self.assets, config=config, clock=clock)
        self.oracle = PricingOracle(self.registry, config=config)

    # --- Mutating operations ---

    def add_liquidity(
        self,
        asset_a: str,
        asset_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        sender: str,
        recipient: str,
        deadline: int,
    ) -> LiquidityResult:
        """Deposit into the (asset_a, asset_b) pool; see LiquidityEngine.add_liquidity."""
        key = canonical_key(asset_a, asset_b)
        desired0, desired1 = _in_caller_order(key, asset_a, amount_a_desired, amount_b_desired)
        min0, min1 = _in_caller_order(key, asset_a, amount_a_min, amount_b_min)

        with self.lock:
            deposit = self.liquidity.add_liquidity(
                key, desired0, desired1, min0, min1, sender, recipient, deadline
            )

        used_a, used_b = _in_caller_order(key, asset_a, deposit.amount0, deposit.amount1)
        return LiquidityResult(amount_a=used_a, amount_b=used_b, shares=deposit.shares)

    def remove_liquidity(
        self,
        asset_a: str,
        asset_b: str,
        shares: int,
        amount_a_min: int,
        amount_b_min: int,
        sender: str,
        recipient: str,
        deadline: int,
    ) -> WithdrawResult:
        """Withdraw from the (asset_a, asset_b) pool; see LiquidityEngine.remove_liquidity."""
        key = canonical_key(asset_a, asset_b)
        min0, min1 = _in_caller_order(key, asset_a, amount_a_min, amount_b_min)

        with self.lock:
            withdrawal = self.liquidity.remove_liquidity(
                key, shares, min0, min1, sender, recipient, deadline
            )

        out_a, out_b = _in_caller_order(key, asset_a, withdrawal.amount0, withdrawal.amount1)
        return WithdrawResult(amount_a=out_a, amount_b=out_b)

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
        with self.lock:
            return self.swaps.swap_exact_in(
                amount_in, amount_out_min, input_asset, output_asset, sender, recipient, deadline
            )

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
        with self.lock:
            return self.swaps.swap_exact_out(
                amount_out, amount_in_max, input_asset, output_asset, sender, recipient, deadline
            )

    def credit(self, asset: str, account: str, amount: int) -> int:
        """Fund `account` through the in-memory asset bank; returns the new balance.

        Raises:
            TypeError: If the exchange runs against an external asset collaborator
        """
        if not isinstance(self.assets, InMemoryAssetBank):
            raise TypeError("Asset balances are managed by an external collaborator")
        with self.lock:
            return self.assets.credit(asset, account, amount)

    # --- Read-only queries ---

    def spot_price(self, base_asset: str, quote_asset: str) -> int:
        with self.lock:
            return self.oracle.spot_price(base_asset, quote_asset)

    def quote_output(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return quote_output(amount_in, reserve_in, reserve_out, self.config.swap_fee_bps)

    def quote_input(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return quote_input(amount_out, reserve_in, reserve_out, self.config.swap_fee_bps)

    def get_reserves(self, asset_a: str, asset_b: str) -> PoolReserves:
        key = canonical_key(asset_a, asset_b)
        with self.lock:
            pool = self.registry.get(key)
        reserve_a, reserve_b = _in_caller_order(key, asset_a, pool.reserve0, pool.reserve1)
        return PoolReserves(
            key=key,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            total_shares=pool.total_shares,
        )

    def share_balance(self, asset_a: str, asset_b: str, holder: str) -> int:
        key = canonical_key(asset_a, asset_b)
        with self.lock:
            return self.shares.balance_of(key, holder)

    def asset_balance(self, asset: str, account: str) -> int:
        """Balance of `account` in the in-memory asset bank.

        Raises:
            TypeError: If the exchange runs against an external asset collaborator
        """
        if not isinstance(self.assets, InMemoryAssetBank):
            raise TypeError("Asset balances are managed by an external collaborator")
        with self.lock:
            return self.assets.balance_of(asset, account)


_default_exchange: Exchange | None = None
_default_lock = threading.Lock()


def get_default_exchange() -> Exchange:
    """Process-wide exchange used by the HTTP service.

    Built on first use from EngineConfig.from_env() with in-memory
    collaborators.
    """
    global _default_exchange
    with _default_lock:
        if _default_exchange is None:
            config = EngineConfig.from_env()
            logger.info(
                "exchange_created",
                swap_fee_bps=config.swap_fee_bps,
                price_scale=config.price_scale,
            )
            _default_exchange = Exchange(config=config)
    return _default_exchange


__all__ = [
    "Exchange",
    "LiquidityResult",
    "PoolReserves",
    "WithdrawResult",
    "get_default_exchange",
]
