"""Asset transfer and share ledger collaborators."""

from amm.ledgers.base import AssetTransfer, ShareLedger
from amm.ledgers.memory import InMemoryAssetBank, InMemoryShareLedger

__all__ = [
    "AssetTransfer",
    "ShareLedger",
    "InMemoryAssetBank",
    "InMemoryShareLedger",
]
