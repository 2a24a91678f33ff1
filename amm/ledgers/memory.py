"""In-memory collaborator implementations.

Used by the HTTP service and the test suite. Balances live in plain dicts;
the pool's own holdings sit in a dedicated custody account.
"""

from __future__ import annotations

from collections import defaultdict

from amm.constants import POOL_CUSTODY_ACCOUNT
from amm.errors import InsufficientBalanceOrAllowance, InsufficientShares, TransferFailed
from amm.models.types import normalize_asset
from amm.pools.key import PairKey
from amm.safe_int import S


class InMemoryAssetBank:
    """Per-asset account balances with a pool custody account.

    Args:
        custody: Account name that holds pooled assets
    """

    def __init__(self, custody: str = POOL_CUSTODY_ACCOUNT) -> None:
        self.custody = custody
        # asset -> account -> balance
        self._balances: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        # Accounts that refuse incoming transfers (e.g. blocked recipients)
        self._frozen: set[str] = set()

    def credit(self, asset: str, account: str, amount: int) -> int:
        """Mint `amount` of `asset` to `account` and return the new balance."""
        asset = normalize_asset(asset)
        book = self._balances[asset]
        book[account] = S(book[account] + S(amount).to_uint256()).to_uint256()
        return book[account]

    def balance_of(self, asset: str, account: str) -> int:
        return self._balances.get(normalize_asset(asset), {}).get(account, 0)

    def freeze(self, account: str) -> None:
        """Make every push to `account` fail with TransferFailed."""
        self._frozen.add(account)

    def pull_from(self, asset: str, payer: str, amount: int) -> None:
        asset = normalize_asset(asset)
        available = self.balance_of(asset, payer)
        if available < amount:
            raise InsufficientBalanceOrAllowance(
                f"{payer} holds {available} of {asset}, needs {amount}"
            )
        book = self._balances[asset]
        book[payer] = available - amount
        book[self.custody] += amount

    def push_to(self, asset: str, recipient: str, amount: int) -> None:
        asset = normalize_asset(asset)
        if recipient in self._frozen:
            raise TransferFailed(f"Recipient {recipient} cannot receive {asset}")
        held = self.balance_of(asset, self.custody)
        if held < amount:
            raise TransferFailed(f"Custody holds {held} of {asset}, cannot send {amount}")
        book = self._balances[asset]
        book[self.custody] = held - amount
        book[recipient] += amount


class InMemoryShareLedger:
    """Share receipts tracked per pool key and holder."""

    def __init__(self) -> None:
        self._balances: dict[PairKey, dict[str, int]] = defaultdict(lambda: defaultdict(int))

    def mint(self, key: PairKey, holder: str, amount: int) -> None:
        book = self._balances[key]
        book[holder] = S(book[holder] + S(amount).to_uint256()).to_uint256()

    def burn(self, key: PairKey, holder: str, amount: int) -> None:
        held = self.balance_of(key, holder)
        if held < amount:
            raise InsufficientShares(f"{holder} holds {held} shares of {key}, burning {amount}")
        self._balances[key][holder] = held - amount

    def balance_of(self, key: PairKey, holder: str) -> int:
        return self._balances.get(key, {}).get(holder, 0)


__all__ = ["InMemoryAssetBank", "InMemoryShareLedger"]
