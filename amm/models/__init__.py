"""Pydantic models for the pool engine HTTP surface."""

from amm.models.requests import (
    AddLiquidityRequest,
    CreditRequest,
    RemoveLiquidityRequest,
    SwapExactInRequest,
    SwapExactOutRequest,
)
from amm.models.responses import (
    AddLiquidityResponse,
    BalanceResponse,
    ErrorResponse,
    PoolResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityResponse,
    SwapResponse,
)
from amm.models.types import AssetId, Uint256

__all__ = [
    # Types
    "AssetId",
    "Uint256",
    # Requests
    "AddLiquidityRequest",
    "RemoveLiquidityRequest",
    "SwapExactInRequest",
    "SwapExactOutRequest",
    "CreditRequest",
    # Responses
    "AddLiquidityResponse",
    "RemoveLiquidityResponse",
    "SwapResponse",
    "PoolResponse",
    "PriceResponse",
    "QuoteResponse",
    "BalanceResponse",
    "ErrorResponse",
]
