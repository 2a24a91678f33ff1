"""Response bodies of the HTTP service."""

from pydantic import BaseModel, Field

from amm.models.types import Uint256


class _ResponseModel(BaseModel):
    model_config = {"populate_by_name": True}


class AddLiquidityResponse(_ResponseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")
    shares: Uint256


class RemoveLiquidityResponse(_ResponseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")


class SwapResponse(_ResponseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")


class PoolResponse(_ResponseModel):
    """Pool reserves in the order the assets were requested."""

    key: str = Field(description="0x-prefixed pool key digest")
    asset_a: str = Field(alias="assetA")
    asset_b: str = Field(alias="assetB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_shares: Uint256 = Field(alias="totalShares")


class PriceResponse(_ResponseModel):
    base: str
    quote: str
    price: Uint256
    scale: Uint256


class QuoteResponse(_ResponseModel):
    amount: Uint256


class BalanceResponse(_ResponseModel):
    account: str
    asset: str
    balance: Uint256


class ErrorResponse(_ResponseModel):
    error: str
    detail: str
