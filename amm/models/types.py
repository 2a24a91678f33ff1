"""Annotated field types shared by the request and response models.

Amounts travel as decimal strings so that values above 2**53 survive JSON
clients. Asset identifiers are opaque strings; Ethereum-style hex addresses
compare case-insensitively and are lower-cased on the way in.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from amm.safe_int import UINT256_MAX


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string into a canonical uint256 string.

    Raises:
        ValueError: On non-integers, negative values or values above 2**256 - 1
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Amount must be an int or decimal string, got {type(value).__name__}")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Amount is not a decimal integer: {value!r}") from err

    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"Amount {value} is outside the uint256 range")
    return str(value)


def validate_asset_id(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Asset id must be a string, got {type(value).__name__}")
    if not value.strip():
        raise ValueError("Asset id must not be empty")
    return normalize_asset(value)


Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="Unsigned 256-bit amount as a decimal string"),
]

AssetId = Annotated[
    str,
    BeforeValidator(validate_asset_id),
    Field(description="Asset identifier, e.g. an ERC-20 address or a ticker"),
]


def normalize_asset(asset: str) -> str:
    """Normalize an asset identifier.

    Surrounding whitespace is removed. Hex addresses are lower-cased so that
    checksummed and plain spellings resolve to the same pool; any other
    identifier is kept as-is.
    """
    asset = asset.strip()
    if is_valid_address(asset.lower()):
        return asset.lower()
    return asset


def is_valid_address(address: str) -> bool:
    """True for a 0x-prefixed, 20-byte hex string."""
    if not isinstance(address, str) or len(address) != 42 or not address.startswith("0x"):
        return False
    try:
        int(address[2:], 16)
    except ValueError:
        return False
    return True
