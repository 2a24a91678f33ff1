"""Constant-product AMM pool engine."""

from amm.errors import AMMError
from amm.exchange import Exchange, get_default_exchange
from amm.pools import PairKey, PoolRegistry, PoolState, canonical_key
from amm.swap import quote_input, quote_output

__version__ = "0.1.0"
__all__ = [
    "AMMError",
    "Exchange",
    "get_default_exchange",
    "PairKey",
    "PoolRegistry",
    "PoolState",
    "canonical_key",
    "quote_input",
    "quote_output",
    "__version__",
]
