"""API endpoints for the pool engine."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from amm.exchange import Exchange, get_default_exchange
from amm.ledgers.memory import InMemoryAssetBank
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
    PoolResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityResponse,
    SwapResponse,
)
from amm.models.types import normalize_asset

logger = structlog.get_logger()

router = APIRouter()


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Handlers are coroutines and the engine is synchronous, so each request
    runs to completion on the event loop; the Exchange lock additionally
    serializes callers on other threads.

    Override this in tests to inject an isolated exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange

    Returns:
        The exchange instance serving requests.
    """
    return get_default_exchange()


def _require_asset_bank(exchange: Exchange) -> None:
    if not isinstance(exchange.assets, InMemoryAssetBank):
        raise HTTPException(status_code=501, detail="Asset balances are managed externally")


@router.post("/liquidity/add")
async def add_liquidity(
    request: AddLiquidityRequest,
    exchange: Exchange = Depends(get_exchange),
) -> AddLiquidityResponse:
    """Deposit both assets and mint pool shares to the recipient."""
    result = exchange.add_liquidity(
        asset_a=request.asset_a,
        asset_b=request.asset_b,
        amount_a_desired=int(request.amount_a_desired),
        amount_b_desired=int(request.amount_b_desired),
        amount_a_min=int(request.amount_a_min),
        amount_b_min=int(request.amount_b_min),
        sender=request.sender,
        recipient=request.recipient or request.sender,
        deadline=request.deadline,
    )
    return AddLiquidityResponse(
        amount_a=result.amount_a, amount_b=result.amount_b, shares=result.shares
    )


@router.post("/liquidity/remove")
async def remove_liquidity(
    request: RemoveLiquidityRequest,
    exchange: Exchange = Depends(get_exchange),
) -> RemoveLiquidityResponse:
    """Burn the sender's shares and pay out the proportional reserves."""
    result = exchange.remove_liquidity(
        asset_a=request.asset_a,
        asset_b=request.asset_b,
        shares=int(request.shares),
        amount_a_min=int(request.amount_a_min),
        amount_b_min=int(request.amount_b_min),
        sender=request.sender,
        recipient=request.recipient or request.sender,
        deadline=request.deadline,
    )
    return RemoveLiquidityResponse(amount_a=result.amount_a, amount_b=result.amount_b)


@router.post("/swap/exact-in")
async def swap_exact_in(
    request: SwapExactInRequest,
    exchange: Exchange = Depends(get_exchange),
) -> SwapResponse:
    amount_in = int(request.amount_in)
    amount_out = exchange.swap_exact_in(
        amount_in=amount_in,
        amount_out_min=int(request.amount_out_min),
        input_asset=request.input_asset,
        output_asset=request.output_asset,
        sender=request.sender,
        recipient=request.recipient or request.sender,
        deadline=request.deadline,
    )
    return SwapResponse(amount_in=amount_in, amount_out=amount_out)


@router.post("/swap/exact-out")
async def swap_exact_out(
    request: SwapExactOutRequest,
    exchange: Exchange = Depends(get_exchange),
) -> SwapResponse:
    amount_out = int(request.amount_out)
    amount_in = exchange.swap_exact_out(
        amount_out=amount_out,
        amount_in_max=int(request.amount_in_max),
        input_asset=request.input_asset,
        output_asset=request.output_asset,
        sender=request.sender,
        recipient=request.recipient or request.sender,
        deadline=request.deadline,
    )
    return SwapResponse(amount_in=amount_in, amount_out=amount_out)


@router.get("/pools/{asset_a}/{asset_b}")
async def get_pool(
    asset_a: str,
    asset_b: str,
    exchange: Exchange = Depends(get_exchange),
) -> PoolResponse:
    """Reserves and share supply, in the order the assets are named."""
    reserves = exchange.get_reserves(asset_a, asset_b)
    return PoolResponse(
        key=reserves.key.hex,
        asset_a=normalize_asset(asset_a),
        asset_b=normalize_asset(asset_b),
        reserve_a=reserves.reserve_a,
        reserve_b=reserves.reserve_b,
        total_shares=reserves.total_shares,
    )


@router.get("/pools/{asset_a}/{asset_b}/shares/{holder}")
async def get_share_balance(
    asset_a: str,
    asset_b: str,
    holder: str,
    exchange: Exchange = Depends(get_exchange),
) -> QuoteResponse:
    return QuoteResponse(amount=exchange.share_balance(asset_a, asset_b, holder))


@router.get("/price/{base}/{quote}")
async def get_spot_price(
    base: str,
    quote: str,
    exchange: Exchange = Depends(get_exchange),
) -> PriceResponse:
    """Quote units per base unit, fixed-point scaled."""
    price = exchange.spot_price(base, quote)
    return PriceResponse(
        base=normalize_asset(base),
        quote=normalize_asset(quote),
        price=price,
        scale=exchange.config.price_scale,
    )


@router.get("/quote/output")
async def get_quote_output(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    exchange: Exchange = Depends(get_exchange),
) -> QuoteResponse:
    """Stateless output estimate for raw reserves."""
    return QuoteResponse(amount=exchange.quote_output(amount_in, reserve_in, reserve_out))


@router.get("/quote/input")
async def get_quote_input(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    exchange: Exchange = Depends(get_exchange),
) -> QuoteResponse:
    """Stateless input estimate for an exact output against raw reserves."""
    return QuoteResponse(amount=exchange.quote_input(amount_out, reserve_in, reserve_out))


@router.post("/accounts/{account}/credit")
async def credit_account(
    account: str,
    request: CreditRequest,
    exchange: Exchange = Depends(get_exchange),
) -> BalanceResponse:
    """Fund an account in the in-memory asset bank."""
    _require_asset_bank(exchange)
    balance = exchange.credit(request.asset, account, int(request.amount))
    logger.info("account_credited", account=account, asset=request.asset, amount=request.amount)
    return BalanceResponse(account=account, asset=request.asset, balance=balance)


@router.get("/accounts/{account}/balances/{asset}")
async def get_balance(
    account: str,
    asset: str,
    exchange: Exchange = Depends(get_exchange),
) -> BalanceResponse:
    _require_asset_bank(exchange)
    asset_norm = normalize_asset(asset)
    return BalanceResponse(
        account=account, asset=asset_norm, balance=exchange.asset_balance(asset_norm, account)
    )
