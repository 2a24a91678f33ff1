"""Pool engine error classes.

Every failure aborts the whole operation before (or after rolling back)
any state change. The `code` attribute is a stable identifier used by the
HTTP layer.
"""


class AMMError(Exception):
    """Base error for pool engine operations."""

    code = "amm_error"


class Expired(AMMError):
    """The caller-supplied deadline is in the past."""

    code = "expired"


class InvalidInput(AMMError):
    """A zero or otherwise malformed amount or reserve."""

    code = "invalid_input"


class InvalidPath(AMMError):
    """The asset pair does not name exactly two distinct assets."""

    code = "invalid_path"


class NoLiquidity(AMMError):
    """The operation needs an initialized pool."""

    code = "no_liquidity"


class SlippageExceeded(AMMError):
    """A computed amount violates a caller-supplied bound."""

    code = "slippage_exceeded"


class ZeroLiquidity(AMMError):
    """A deposit would issue zero shares."""

    code = "zero_liquidity"


class InsufficientShares(AMMError):
    """The holder owns fewer shares than requested."""

    code = "insufficient_shares"


class InsufficientBalanceOrAllowance(AMMError):
    """The payer cannot cover an asset pull."""

    code = "insufficient_balance_or_allowance"


class TransferFailed(AMMError):
    """An asset push to a recipient failed."""

    code = "transfer_failed"


__all__ = [
    "AMMError",
    "Expired",
    "InvalidInput",
    "InvalidPath",
    "NoLiquidity",
    "SlippageExceeded",
    "ZeroLiquidity",
    "InsufficientShares",
    "InsufficientBalanceOrAllowance",
    "TransferFailed",
]
