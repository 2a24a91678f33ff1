"""Canonical, order-independent pool keys.

A pool is identified by its unordered asset pair. The two identifiers are
sorted, ABI-encoded as a string pair and hashed, so (x, y) and (y, x)
always resolve to the same 32-byte digest.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from eth_abi import encode  # type: ignore[attr-defined]

from amm.models.types import normalize_asset


@dataclass(frozen=True)
class PairKey:
    """Canonical identifier of an unordered asset pair.

    Attributes:
        asset0: The lower asset identifier of the pair
        asset1: The higher asset identifier of the pair
        digest: SHA-256 of the ABI-encoded (asset0, asset1)
    """

    asset0: str
    asset1: str
    digest: bytes = field(repr=False)

    @property
    def hex(self) -> str:
        """Digest as 0x-prefixed hex."""
        return "0x" + self.digest.hex()

    @property
    def assets(self) -> tuple[str, str]:
        return self.asset0, self.asset1

    def is_asset0(self, asset: str) -> bool:
        """True if `asset` sits on the reserve0 side of the pool.

        Raises:
            ValueError: If the asset is not part of this pair
        """
        asset_norm = normalize_asset(asset)
        if asset_norm == self.asset0:
            return True
        if asset_norm == self.asset1:
            return False
        raise ValueError(f"Asset {asset} not in pair {self.asset0}/{self.asset1}")

    def __str__(self) -> str:
        return f"{self.asset0}/{self.asset1}"


def sort_assets(asset_x: str, asset_y: str) -> tuple[str, str]:
    """Normalize and order two asset identifiers."""
    x = normalize_asset(asset_x)
    y = normalize_asset(asset_y)
    return (x, y) if x <= y else (y, x)


def canonical_key(asset_x: str, asset_y: str) -> PairKey:
    """Derive the pool key of an unordered asset pair.

    canonical_key(x, y) == canonical_key(y, x) for all x, y. Identical
    assets are not rejected here; the engines raise InvalidPath for them.
    """
    asset0, asset1 = sort_assets(asset_x, asset_y)
    digest = hashlib.sha256(encode(["string", "string"], [asset0, asset1])).digest()
    return PairKey(asset0=asset0, asset1=asset1, digest=digest)


__all__ = ["PairKey", "canonical_key", "sort_assets"]
