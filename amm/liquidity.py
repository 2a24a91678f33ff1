"""Liquidity provision: proportional deposits and withdrawals.

Share accounting:
- First deposit: shares = isqrt(amount0 * amount1); the depositor's ratio
  becomes the pool's exchange rate.
- Later deposits are trimmed to the current reserve ratio and issue
  min(used0 * T // reserve0, used1 * T // reserve1) shares, so an uneven
  deposit is never credited for its larger side.
- Withdrawals pay out shares * reserve // T of each asset.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog

from amm.errors import InsufficientShares, NoLiquidity, SlippageExceeded, ZeroLiquidity
from amm.ledgers.base import AssetTransfer, ShareLedger
from amm.pools.key import PairKey
from amm.pools.registry import PoolRegistry
from amm.pools.state import PoolState
from amm.safe_int import S
from amm.transaction import Clock, Transaction, ensure_not_expired
from amm.validation import require_non_negative, require_pair, require_positive

logger = structlog.get_logger()


@dataclass(frozen=True)
class Deposit:
    """Amounts a deposit actually uses, in canonical order, and shares issued."""

    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class Withdrawal:
    """Amounts paid out for burned shares, in canonical order."""

    amount0: int
    amount1: int
    shares: int


def quote_proportional(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B worth `amount_a` of A at the current reserve ratio.

    Raises:
        InvalidInput: If amount_a is not positive
        NoLiquidity: If either reserve is empty
    """
    require_positive("amount_a", amount_a)
    if reserve_a <= 0 or reserve_b <= 0:
        raise NoLiquidity(f"Reserves ({reserve_a}, {reserve_b}) cannot price a deposit")
    return (S(amount_a) * S(reserve_b) // S(reserve_a)).to_uint256()


def compute_deposit(
    pool: PoolState,
    amount0_desired: int,
    amount1_desired: int,
    amount0_min: int,
    amount1_min: int,
) -> Deposit:
    """Work out the amounts used and shares issued for a deposit.

    Pure with respect to the pool; nothing is mutated.

    Raises:
        SlippageExceeded: If the ratio-matched amount is below its minimum
        ZeroLiquidity: If the deposit would issue no shares
    """
    if not pool.is_initialized:
        used0, used1 = amount0_desired, amount1_desired
        shares = (S(used0) * S(used1)).sqrt().to_uint256()
    else:
        reserve0, reserve1, total = S(pool.reserve0), S(pool.reserve1), S(pool.total_shares)
        optimal1 = (S(amount0_desired) * reserve1 // reserve0).to_uint256()
        if optimal1 <= amount1_desired:
            if optimal1 < amount1_min:
                raise SlippageExceeded(
                    f"Matched amount1 {optimal1} below minimum {amount1_min}"
                )
            used0, used1 = amount0_desired, optimal1
        else:
            optimal0 = (S(amount1_desired) * reserve0 // reserve1).to_uint256()
            if optimal0 < amount0_min:
                raise SlippageExceeded(
                    f"Matched amount0 {optimal0} below minimum {amount0_min}"
                )
            used0, used1 = optimal0, amount1_desired

        shares = (
            (S(used0) * total // reserve0).min(S(used1) * total // reserve1).to_uint256()
        )

    if shares == 0:
        raise ZeroLiquidity(f"Deposit ({used0}, {used1}) into {pool.key} issues no shares")

    return Deposit(amount0=used0, amount1=used1, shares=shares)


def compute_withdrawal(
    pool: PoolState,
    shares: int,
    amount0_min: int,
    amount1_min: int,
) -> Withdrawal:
    """Work out the payout for burning `shares`.

    Raises:
        InsufficientShares: If more shares are burned than exist
        SlippageExceeded: If either payout is below its minimum
    """
    if shares > pool.total_shares:
        raise InsufficientShares(
            f"Burning {shares} shares of {pool.key}, only {pool.total_shares} exist"
        )

    total = S(pool.total_shares)
    amount0 = (S(shares) * S(pool.reserve0) // total).to_uint256()
    amount1 = (S(shares) * S(pool.reserve1) // total).to_uint256()

    if amount0 < amount0_min:
        raise SlippageExceeded(f"Payout amount0 {amount0} below minimum {amount0_min}")
    if amount1 < amount1_min:
        raise SlippageExceeded(f"Payout amount1 {amount1} below minimum {amount1_min}")

    return Withdrawal(amount0=amount0, amount1=amount1, shares=shares)


class LiquidityEngine:
    """Adds and removes pool liquidity.

    Amounts and minimums are in the key's canonical order (asset0, asset1).

    Args:
        registry: Pool registry shared with the other engines
        assets: Asset transfer collaborator
        shares: Share ledger collaborator
        clock: Source of the current time for deadline checks
    """

    def __init__(
        self,
        registry: PoolRegistry,
        assets: AssetTransfer,
        shares: ShareLedger,
        clock: Clock = time.time,
    ) -> None:
        self.registry = registry
        self.assets = assets
        self.shares = shares
        self.clock = clock

    def add_liquidity(
        self,
        key: PairKey,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        sender: str,
        recipient: str,
        deadline: int,
    ) -> Deposit:
        """Deposit both assets of `key` and mint shares to `recipient`.

        Raises:
            Expired: If the deadline has passed
            InvalidPath: If the key names one asset twice
            InvalidInput: If an amount is negative
            SlippageExceeded: If the ratio-matched amount is below its minimum
            ZeroLiquidity: If no shares would be issued
            InsufficientBalanceOrAllowance: If the sender cannot pay
        """
        ensure_not_expired(deadline, self.clock)
        require_pair(key)
        for name, value in (
            ("amount0_desired", amount0_desired),
            ("amount1_desired", amount1_desired),
            ("amount0_min", amount0_min),
            ("amount1_min", amount1_min),
        ):
            require_non_negative(name, value)

        current = self.registry.get(key)
        first_deposit = not current.is_initialized
        try:
            deposit = compute_deposit(
                current, amount0_desired, amount1_desired, amount0_min, amount1_min
            )
        except (SlippageExceeded, ZeroLiquidity) as err:
            logger.warning("add_liquidity_rejected", pair=str(key), reason=err.code)
            raise

        with Transaction(self.assets, self.shares, operation="add_liquidity") as tx:
            tx.pull(key.asset0, sender, deposit.amount0)
            tx.pull(key.asset1, sender, deposit.amount1)
            # Registered only once the sender has paid
            pool = self.registry.get_or_create(key)
            tx.update_pool(
                pool,
                (S(pool.reserve0) + S(deposit.amount0)).value,
                (S(pool.reserve1) + S(deposit.amount1)).value,
                (S(pool.total_shares) + S(deposit.shares)).value,
            )
            tx.mint(key, recipient, deposit.shares)

        if first_deposit:
            logger.info(
                "pool_initialized",
                pair=str(key),
                reserve0=pool.reserve0,
                reserve1=pool.reserve1,
                shares=deposit.shares,
            )
        else:
            logger.info(
                "liquidity_added",
                pair=str(key),
                amount0=deposit.amount0,
                amount1=deposit.amount1,
                shares=deposit.shares,
                total_shares=pool.total_shares,
            )
        return deposit

    def remove_liquidity(
        self,
        key: PairKey,
        shares: int,
        amount0_min: int,
        amount1_min: int,
        sender: str,
        recipient: str,
        deadline: int,
    ) -> Withdrawal:
        """Burn `sender`'s shares and pay the proportional reserves to `recipient`.

        Raises:
            Expired: If the deadline has passed
            InvalidPath: If the key names one asset twice
            InvalidInput: If shares is not positive
            InsufficientShares: If the sender holds fewer shares
            SlippageExceeded: If either payout is below its minimum
            TransferFailed: If a payout cannot be delivered
        """
        ensure_not_expired(deadline, self.clock)
        require_pair(key)
        require_positive("shares", shares)
        require_non_negative("amount0_min", amount0_min)
        require_non_negative("amount1_min", amount1_min)

        held = self.shares.balance_of(key, sender)
        if held < shares:
            logger.warning(
                "remove_liquidity_rejected",
                pair=str(key),
                reason=InsufficientShares.code,
                held=held,
                requested=shares,
            )
            raise InsufficientShares(f"{sender} holds {held} shares of {key}, requested {shares}")

        withdrawal = compute_withdrawal(self.registry.get(key), shares, amount0_min, amount1_min)
        pool = self.registry.get_or_create(key)

        with Transaction(self.assets, self.shares, operation="remove_liquidity") as tx:
            tx.update_pool(
                pool,
                (S(pool.reserve0) - S(withdrawal.amount0)).value,
                (S(pool.reserve1) - S(withdrawal.amount1)).value,
                (S(pool.total_shares) - S(shares)).value,
            )
            tx.burn(key, sender, shares)
            tx.push(key.asset0, recipient, withdrawal.amount0)
            tx.push(key.asset1, recipient, withdrawal.amount1)

        logger.info(
            "liquidity_removed",
            pair=str(key),
            amount0=withdrawal.amount0,
            amount1=withdrawal.amount1,
            shares=shares,
            total_shares=pool.total_shares,
        )
        return withdrawal


__all__ = [
    "Deposit",
    "LiquidityEngine",
    "Withdrawal",
    "compute_deposit",
    "compute_withdrawal",
    "quote_proportional",
]
