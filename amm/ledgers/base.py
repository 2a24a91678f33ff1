"""Collaborator interfaces consumed by the engines.

The engines never move balances themselves. Asset custody and share
issuance are delegated to these two protocols so that the same engine can
run against an in-memory ledger, a database or a chain adapter.
"""

from typing import Protocol, runtime_checkable

from amm.pools.key import PairKey


@runtime_checkable
class AssetTransfer(Protocol):
    """Moves fungible assets between parties and the pool custody."""

    def pull_from(self, asset: str, payer: str, amount: int) -> None:
        """Move `amount` of `asset` from `payer` into pool custody.

        Raises:
            InsufficientBalanceOrAllowance: If the payer cannot cover the amount
        """
        ...

    def push_to(self, asset: str, recipient: str, amount: int) -> None:
        """Move `amount` of `asset` from pool custody to `recipient`.

        Raises:
            TransferFailed: If the transfer cannot be completed
        """
        ...


@runtime_checkable
class ShareLedger(Protocol):
    """Issues pool-share receipts, one receipt class per pool key."""

    def mint(self, key: PairKey, holder: str, amount: int) -> None:
        """Credit `amount` shares of pool `key` to `holder`."""
        ...

    def burn(self, key: PairKey, holder: str, amount: int) -> None:
        """Destroy `amount` shares of pool `key` held by `holder`.

        Raises:
            InsufficientShares: If the holder owns fewer shares
        """
        ...

    def balance_of(self, key: PairKey, holder: str) -> int:
        """Shares of pool `key` held by `holder`."""
        ...


__all__ = ["AssetTransfer", "ShareLedger"]
