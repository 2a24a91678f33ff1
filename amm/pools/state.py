"""Per-pair pool state."""

from __future__ import annotations

from dataclasses import dataclass, replace

from amm.pools.key import PairKey
from amm.safe_int import S


@dataclass
class PoolState:
    """Reserves and share supply of one unordered asset pair.

    Reserves are held in the key's canonical order (reserve0 belongs to
    key.asset0). A pool with total_shares == 0 has zero reserves and
    behaves as never used; once shares exist both reserves are positive.
    """

    key: PairKey
    reserve0: int = 0
    reserve1: int = 0
    total_shares: int = 0

    @property
    def is_initialized(self) -> bool:
        return self.total_shares > 0

    @property
    def has_liquidity(self) -> bool:
        """True if both reserves are positive."""
        return self.reserve0 > 0 and self.reserve1 > 0

    def get_reserves(self, asset_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if self.key.is_asset0(asset_in):
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def ordered(self, asset_a: str, amount_a: int, amount_b: int) -> tuple[int, int]:
        """Map a pair of amounts given in (asset_a, other) order to canonical order."""
        if self.key.is_asset0(asset_a):
            return amount_a, amount_b
        return amount_b, amount_a

    def apply(self, reserve0: int, reserve1: int, total_shares: int | None = None) -> None:
        """Replace reserves (and optionally the share supply) in one step.

        All values are validated before anything is assigned, so a rejected
        update leaves the pool untouched.

        Raises:
            Uint256Overflow: If a value falls outside the uint256 range
            ValueError: If the result breaks the reserves/shares invariant
        """
        shares = self.total_shares if total_shares is None else total_shares
        new_reserve0 = S(reserve0).to_uint256()
        new_reserve1 = S(reserve1).to_uint256()
        new_shares = S(shares).to_uint256()

        if new_shares > 0 and (new_reserve0 == 0 or new_reserve1 == 0):
            raise ValueError(
                f"Pool {self.key} would hold shares with an empty reserve: "
                f"({new_reserve0}, {new_reserve1}, shares={new_shares})"
            )

        self.reserve0, self.reserve1, self.total_shares = new_reserve0, new_reserve1, new_shares

    def snapshot(self) -> PoolState:
        """Detached copy of the current state."""
        return replace(self)

    def restore(self, snapshot: PoolState) -> None:
        """Reset reserves and shares from a snapshot of this pool."""
        if snapshot.key != self.key:
            raise ValueError(f"Snapshot of {snapshot.key} cannot restore {self.key}")
        self.reserve0, self.reserve1, self.total_shares = (
            snapshot.reserve0,
            snapshot.reserve1,
            snapshot.total_shares,
        )


__all__ = ["PoolState"]
