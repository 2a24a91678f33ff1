"""Pool registry.

Owns the mapping from PairKey to PoolState. The registry is an explicit
object handed to every engine; there is no module-level pool map.
"""

from __future__ import annotations

import structlog

from amm.pools.key import PairKey
from amm.pools.state import PoolState

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of constant-product pools keyed by canonical pair.

    Pools are created zero-valued on first mutable reference and never
    removed; a drained pool is indistinguishable from a new one.
    """

    def __init__(self) -> None:
        self._pools: dict[PairKey, PoolState] = {}

    def get_or_create(self, key: PairKey) -> PoolState:
        """Return the mutable pool for `key`, creating an empty one if absent."""
        pool = self._pools.get(key)
        if pool is None:
            pool = PoolState(key=key)
            self._pools[key] = pool
            logger.debug("pool_created", pair=str(key), key=key.hex[:18])
        return pool

    def get(self, key: PairKey) -> PoolState:
        """Read-only lookup.

        Returns a detached copy, so callers cannot mutate registry state. An
        unknown key yields an empty state without registering it.
        """
        pool = self._pools.get(key)
        if pool is None:
            return PoolState(key=key)
        return pool.snapshot()

    def pools(self) -> list[PoolState]:
        """Snapshots of every registered pool."""
        return [pool.snapshot() for pool in self._pools.values()]

    def __contains__(self, key: object) -> bool:
        return key in self._pools

    def __len__(self) -> int:
        return len(self._pools)


__all__ = ["PoolRegistry"]
