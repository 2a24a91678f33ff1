"""Pytest configuration and fixtures."""

import pytest

from amm.exchange import Exchange
from amm.ledgers.memory import InMemoryAssetBank, InMemoryShareLedger
from amm.pools import PoolRegistry
from tests.helpers import ALICE, BOB, FUNDING, TOKEN_A, TOKEN_B, FixedClock, make_exchange, seed_pool


@pytest.fixture
def clock() -> FixedClock:
    """A clock frozen at NOW; tests may move it."""
    return FixedClock()


@pytest.fixture
def registry() -> PoolRegistry:
    return PoolRegistry()


@pytest.fixture
def bank() -> InMemoryAssetBank:
    """An asset bank where ALICE and BOB hold FUNDING of both test tokens."""
    bank = InMemoryAssetBank()
    for account in (ALICE, BOB):
        for asset in (TOKEN_A, TOKEN_B):
            bank.credit(asset, account, FUNDING)
    return bank


@pytest.fixture
def share_ledger() -> InMemoryShareLedger:
    return InMemoryShareLedger()


@pytest.fixture
def exchange(clock: FixedClock) -> Exchange:
    """A fee-less exchange with funded accounts and no pools."""
    return make_exchange(clock=clock)


@pytest.fixture
def seeded_exchange(exchange: Exchange) -> Exchange:
    """The exchange with a 1000/1000 TOKEN_A/TOKEN_B pool owned by ALICE."""
    seed_pool(exchange, TOKEN_A, TOKEN_B, 1000, 1000)
    return exchange
