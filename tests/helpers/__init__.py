"""Test helpers module for shared test utilities.

- constants: Asset ids, accounts and timestamps
- factories: Exchange and pool factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    DAI,
    DEADLINE,
    EXPIRED,
    FUNDING,
    NOW,
    TOKEN_A,
    TOKEN_B,
    USDC,
    WETH,
)
from tests.helpers.factories import FixedClock, make_exchange, seed_pool

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "TOKEN_A",
    "TOKEN_B",
    "ALICE",
    "BOB",
    "CAROL",
    "NOW",
    "DEADLINE",
    "EXPIRED",
    "FUNDING",
    # Factories
    "FixedClock",
    "make_exchange",
    "seed_pool",
]
