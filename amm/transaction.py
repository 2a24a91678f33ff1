"""All-or-nothing execution of pool operations.

Every mutating operation validates its inputs first and then performs its
side effects through a Transaction. Each applied step registers its inverse;
if a later step raises, the inverses run in reverse order and the original
exception propagates, so no partial state survives.

An inverse that itself fails is logged and skipped; the remaining inverses
still run and the operation's original exception is the one re-raised,
annotated with the number of inverses that could not be applied.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from contextlib import ExitStack
from types import TracebackType
from typing import Any

import structlog

from amm.errors import Expired
from amm.ledgers.base import AssetTransfer, ShareLedger
from amm.pools.key import PairKey
from amm.pools.state import PoolState

logger = structlog.get_logger()

Clock = Callable[[], float]


def ensure_not_expired(deadline: int | float, clock: Clock = time.time) -> None:
    """Reject an operation whose deadline has passed.

    Raises:
        Expired: If the current time is later than `deadline`
    """
    now = clock()
    if now > deadline:
        raise Expired(f"Deadline {deadline} passed (now {now:.0f})")


class Transaction:
    """Undo journal for one engine operation.

    Usage:
        with Transaction(assets, shares, operation="swap") as tx:
            tx.pull(asset_in, sender, amount_in)
            tx.push(asset_out, recipient, amount_out)
            tx.update_pool(pool, new_reserve0, new_reserve1)
    """

    def __init__(
        self,
        assets: AssetTransfer,
        shares: ShareLedger | None = None,
        operation: str = "operation",
    ) -> None:
        self.assets = assets
        self.shares = shares
        self.operation = operation
        self._undo = ExitStack()
        self._steps = 0
        self._undo_failures: list[Exception] = []

    def __enter__(self) -> Transaction:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None:
            self._undo.pop_all()
            return False

        if self._steps:
            logger.warning(
                "operation_rolled_back",
                operation=self.operation,
                steps=self._steps,
                error=type(exc).__name__,
            )
        self._undo.close()

        if self._undo_failures:
            exc.add_note(
                f"{self.operation} rollback incomplete: "
                f"{len(self._undo_failures)} of {self._steps} steps could not be undone"
            )
        # Propagate the operation's own error, never one raised while undoing
        return False

    def _register(self, inverse: Callable[..., None], *args: Any) -> None:
        self._undo.callback(self._compensate, inverse, *args)
        self._steps += 1

    def _compensate(self, inverse: Callable[..., None], *args: Any) -> None:
        try:
            inverse(*args)
        except Exception as err:
            self._undo_failures.append(err)
            logger.error(
                "rollback_step_failed",
                operation=self.operation,
                step=getattr(inverse, "__name__", repr(inverse)),
                error=type(err).__name__,
                detail=str(err),
            )

    def _share_ledger(self) -> ShareLedger:
        if self.shares is None:
            raise RuntimeError(f"{self.operation} has no share ledger attached")
        return self.shares

    @property
    def undo_failures(self) -> list[Exception]:
        """Errors raised by inverses during the last rollback."""
        return list(self._undo_failures)

    def pull(self, asset: str, payer: str, amount: int) -> None:
        """Move `amount` of `asset` from `payer` into custody."""
        self.assets.pull_from(asset, payer, amount)
        self._register(self.assets.push_to, asset, payer, amount)

    def push(self, asset: str, recipient: str, amount: int) -> None:
        """Move `amount` of `asset` from custody to `recipient`."""
        self.assets.push_to(asset, recipient, amount)
        self._register(self.assets.pull_from, asset, recipient, amount)

    def mint(self, key: PairKey, holder: str, amount: int) -> None:
        ledger = self._share_ledger()
        ledger.mint(key, holder, amount)
        self._register(ledger.burn, key, holder, amount)

    def burn(self, key: PairKey, holder: str, amount: int) -> None:
        ledger = self._share_ledger()
        ledger.burn(key, holder, amount)
        self._register(ledger.mint, key, holder, amount)

    def update_pool(
        self,
        pool: PoolState,
        reserve0: int,
        reserve1: int,
        total_shares: int | None = None,
    ) -> None:
        """Replace the pool's reserves (and share supply) in one assignment."""
        snapshot = pool.snapshot()
        pool.apply(reserve0, reserve1, total_shares)
        self._register(pool.restore, snapshot)


__all__ = ["Clock", "Transaction", "ensure_not_expired"]
