"""Argument checks shared by the engines."""

from amm.errors import InvalidInput, InvalidPath
from amm.models.types import normalize_asset
from amm.pools.key import PairKey


def require_positive(name: str, value: int) -> int:
    """Raise InvalidInput unless `value` is an int greater than zero."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidInput(f"{name} must be positive, got {value}")
    return value


def require_non_negative(name: str, value: int) -> int:
    """Raise InvalidInput unless `value` is an int of at least zero."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidInput(f"{name} cannot be negative, got {value}")
    return value


def require_distinct(asset_a: str, asset_b: str) -> None:
    """Raise InvalidPath unless the two identifiers name different assets."""
    if normalize_asset(asset_a) == normalize_asset(asset_b):
        raise InvalidPath(f"A pool needs two distinct assets, got {asset_a} twice")


def require_pair(key: PairKey) -> None:
    """Raise InvalidPath for a key built from one asset twice."""
    if key.asset0 == key.asset1:
        raise InvalidPath(f"A pool needs two distinct assets, got {key.asset0} twice")
