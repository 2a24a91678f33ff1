"""Pool management package.

Provides canonical pair keys, per-pair state and the PoolRegistry.
"""

from .key import PairKey, canonical_key, sort_assets
from .registry import PoolRegistry
from .state import PoolState

__all__ = [
    "PairKey",
    "canonical_key",
    "sort_assets",
    "PoolRegistry",
    "PoolState",
]
