"""Request bodies of the HTTP service.

Amounts travel as uint256 decimal strings; asset identifiers are
normalized on the way in.
"""

from pydantic import BaseModel, Field

from amm.models.types import AssetId, Uint256


class _RequestModel(BaseModel):
    model_config = {"populate_by_name": True, "extra": "forbid"}


class AddLiquidityRequest(_RequestModel):
    """Deposit into the (assetA, assetB) pool."""

    asset_a: AssetId = Field(alias="assetA")
    asset_b: AssetId = Field(alias="assetB")
    amount_a_desired: Uint256 = Field(alias="amountADesired")
    amount_b_desired: Uint256 = Field(alias="amountBDesired")
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")
    sender: str = Field(min_length=1)
    recipient: str | None = Field(default=None, description="Defaults to the sender.")
    deadline: int = Field(ge=0, description="Unix timestamp (seconds).")


class RemoveLiquidityRequest(_RequestModel):
    """Burn shares of the (assetA, assetB) pool."""

    asset_a: AssetId = Field(alias="assetA")
    asset_b: AssetId = Field(alias="assetB")
    shares: Uint256
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")
    sender: str = Field(min_length=1)
    recipient: str | None = None
    deadline: int = Field(ge=0)


class SwapExactInRequest(_RequestModel):
    """Sell an exact input amount."""

    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(default="0", alias="amountOutMin")
    input_asset: AssetId = Field(alias="inputAsset")
    output_asset: AssetId = Field(alias="outputAsset")
    sender: str = Field(min_length=1)
    recipient: str | None = None
    deadline: int = Field(ge=0)


class SwapExactOutRequest(_RequestModel):
    """Buy an exact output amount."""

    amount_out: Uint256 = Field(alias="amountOut")
    amount_in_max: Uint256 = Field(alias="amountInMax")
    input_asset: AssetId = Field(alias="inputAsset")
    output_asset: AssetId = Field(alias="outputAsset")
    sender: str = Field(min_length=1)
    recipient: str | None = None
    deadline: int = Field(ge=0)


class CreditRequest(_RequestModel):
    """Fund an account in the in-memory asset bank."""

    asset: AssetId
    amount: Uint256
