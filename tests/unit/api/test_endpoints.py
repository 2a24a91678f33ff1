"""Tests for the HTTP endpoints."""

from concurrent.futures import ThreadPoolExecutor

from amm.exchange import Exchange
from amm.safe_int import UINT256_MAX
from tests.helpers import (
    ALICE,
    BOB,
    CAROL,
    DEADLINE,
    EXPIRED,
    FUNDING,
    TOKEN_A,
    TOKEN_B,
    USDC,
    WETH,
    seed_pool,
)


def add_liquidity_body(**overrides) -> dict:
    body = {
        "assetA": TOKEN_A,
        "assetB": TOKEN_B,
        "amountADesired": "1000",
        "amountBDesired": "1000",
        "sender": ALICE,
        "deadline": DEADLINE,
    }
    body.update(overrides)
    return body


def swap_body(**overrides) -> dict:
    body = {
        "amountIn": "100",
        "amountOutMin": "0",
        "inputAsset": TOKEN_A,
        "outputAsset": TOKEN_B,
        "sender": BOB,
        "deadline": DEADLINE,
    }
    body.update(overrides)
    return body


class TestLiquidityEndpoints:
    """Tests for POST /liquidity/add and /liquidity/remove."""

    def test_add_liquidity(self, client, api_exchange: Exchange):
        response = client.post("/liquidity/add", json=add_liquidity_body())

        assert response.status_code == 200
        assert response.json() == {"amountA": "1000", "amountB": "1000", "shares": "1000"}
        assert api_exchange.share_balance(TOKEN_A, TOKEN_B, ALICE) == 1000

    def test_add_liquidity_to_recipient(self, client, api_exchange: Exchange):
        client.post("/liquidity/add", json=add_liquidity_body(recipient=CAROL))

        assert api_exchange.share_balance(TOKEN_A, TOKEN_B, CAROL) == 1000
        assert api_exchange.share_balance(TOKEN_A, TOKEN_B, ALICE) == 0

    def test_add_liquidity_accepts_snake_case(self, client):
        body = {
            "asset_a": TOKEN_A,
            "asset_b": TOKEN_B,
            "amount_a_desired": "4",
            "amount_b_desired": 9,
            "sender": ALICE,
            "deadline": DEADLINE,
        }
        response = client.post("/liquidity/add", json=body)

        assert response.status_code == 200
        assert response.json()["shares"] == "6"

    def test_remove_liquidity(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post(
            "/liquidity/remove",
            json={
                "assetA": TOKEN_B,
                "assetB": TOKEN_A,
                "shares": "400",
                "sender": ALICE,
                "deadline": DEADLINE,
            },
        )

        assert response.status_code == 200
        assert response.json() == {"amountA": "400", "amountB": "400"}

    def test_remove_more_than_held(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post(
            "/liquidity/remove",
            json={"assetA": TOKEN_A, "assetB": TOKEN_B, "shares": "1", "sender": BOB, "deadline": DEADLINE},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "insufficient_shares"


class TestSwapEndpoints:
    """Tests for POST /swap/exact-in and /swap/exact-out."""

    def test_swap_exact_in(self, client, api_exchange: Exchange):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post("/swap/exact-in", json=swap_body())

        assert response.status_code == 200
        assert response.json() == {"amountIn": "100", "amountOut": "90"}
        assert api_exchange.assets.balance_of(TOKEN_B, BOB) == FUNDING + 90

    def test_swap_exact_out(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post(
            "/swap/exact-out",
            json={
                "amountOut": "90",
                "amountInMax": "100",
                "inputAsset": TOKEN_A,
                "outputAsset": TOKEN_B,
                "sender": BOB,
                "deadline": DEADLINE,
            },
        )

        assert response.status_code == 200
        assert response.json() == {"amountIn": "99", "amountOut": "90"}

    def test_slippage_is_409(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post("/swap/exact-in", json=swap_body(amountOutMin="91"))

        assert response.status_code == 409
        assert response.json()["error"] == "slippage_exceeded"

    def test_expired_is_410(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post("/swap/exact-in", json=swap_body(deadline=EXPIRED))

        assert response.status_code == 410
        assert response.json()["error"] == "expired"

    def test_no_liquidity_is_404(self, client):
        response = client.post("/swap/exact-in", json=swap_body())

        assert response.status_code == 404
        assert response.json()["error"] == "no_liquidity"

    def test_identical_assets_is_400(self, client):
        response = client.post("/swap/exact-in", json=swap_body(outputAsset=TOKEN_A))

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_path"

    def test_zero_amount_is_400(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.post("/swap/exact-in", json=swap_body(amountIn="0"))

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"


class TestQueryEndpoints:
    def test_get_pool_in_request_order(self, client):
        client.post(
            "/liquidity/add",
            json=add_liquidity_body(amountADesired="1000", amountBDesired="2000"),
        )

        response = client.get(f"/pools/{TOKEN_B}/{TOKEN_A}")

        assert response.status_code == 200
        data = response.json()
        assert data["assetA"] == TOKEN_B
        assert data["reserveA"] == "2000"
        assert data["reserveB"] == "1000"
        assert data["totalShares"] == "1414"
        assert data["key"].startswith("0x") and len(data["key"]) == 66

    def test_unknown_pool_is_empty(self, client):
        response = client.get(f"/pools/{WETH}/{USDC}")

        assert response.status_code == 200
        assert response.json()["totalShares"] == "0"

    def test_share_balance(self, client):
        client.post("/liquidity/add", json=add_liquidity_body())

        response = client.get(f"/pools/{TOKEN_A}/{TOKEN_B}/shares/{ALICE}")

        assert response.json() == {"amount": "1000"}

    def test_spot_price(self, client):
        client.post(
            "/liquidity/add",
            json=add_liquidity_body(amountADesired="1000", amountBDesired="2000"),
        )

        response = client.get(f"/price/{TOKEN_A}/{TOKEN_B}")

        assert response.status_code == 200
        assert response.json() == {
            "base": TOKEN_A,
            "quote": TOKEN_B,
            "price": str(2 * 10**18),
            "scale": str(10**18),
        }

    def test_spot_price_without_liquidity(self, client):
        response = client.get(f"/price/{TOKEN_A}/{TOKEN_B}")

        assert response.status_code == 404

    def test_quote_output(self, client):
        response = client.get(
            "/quote/output", params={"amount_in": 100, "reserve_in": 1000, "reserve_out": 1000}
        )

        assert response.json() == {"amount": "90"}

    def test_quote_input(self, client):
        response = client.get(
            "/quote/input", params={"amount_out": 90, "reserve_in": 1000, "reserve_out": 1000}
        )

        assert response.json() == {"amount": "99"}

    def test_quote_rejects_empty_reserve(self, client):
        response = client.get(
            "/quote/output", params={"amount_in": 100, "reserve_in": 0, "reserve_out": 1000}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"


class TestAccountEndpoints:
    def test_credit_and_balance(self, client):
        response = client.post(f"/accounts/{CAROL}/credit", json={"asset": TOKEN_A, "amount": "500"})

        assert response.status_code == 200
        assert response.json() == {"account": CAROL, "asset": TOKEN_A, "balance": "500"}

        response = client.get(f"/accounts/{CAROL}/balances/{TOKEN_A}")
        assert response.json()["balance"] == "500"

    def test_credit_overflow_is_400(self, client):
        client.post(f"/accounts/{CAROL}/credit", json={"asset": TOKEN_A, "amount": str(UINT256_MAX)})

        response = client.post(f"/accounts/{CAROL}/credit", json={"asset": TOKEN_A, "amount": "1"})

        assert response.status_code == 400
        assert response.json()["error"] == "overflow"


class TestRequestValidation:
    def test_negative_amount_is_422(self, client):
        response = client.post("/liquidity/add", json=add_liquidity_body(amountADesired="-1"))

        assert response.status_code == 422

    def test_amount_above_uint256_is_422(self, client):
        response = client.post(
            "/liquidity/add", json=add_liquidity_body(amountADesired=str(UINT256_MAX + 1))
        )

        assert response.status_code == 422

    def test_unknown_field_is_422(self, client):
        response = client.post("/swap/exact-in", json=swap_body(slippage="0.5"))

        assert response.status_code == 422

    def test_missing_deadline_is_422(self, client):
        body = swap_body()
        del body["deadline"]

        response = client.post("/swap/exact-in", json=body)

        assert response.status_code == 422


class TestConcurrentRequests:
    """Requests served in parallel keep custody and reserves in step."""

    def test_parallel_swaps_keep_custody_equal_to_reserves(self, client, api_exchange: Exchange):
        seed_pool(api_exchange, TOKEN_A, TOKEN_B, 10**9, 10**9)
        bodies = [
            swap_body(
                amountIn=str(1_000 + n),
                inputAsset=TOKEN_A if n % 2 else TOKEN_B,
                outputAsset=TOKEN_B if n % 2 else TOKEN_A,
                sender=ALICE if n % 3 else BOB,
            )
            for n in range(40)
        ]

        with ThreadPoolExecutor(max_workers=8) as pool:
            responses = list(pool.map(lambda body: client.post("/swap/exact-in", json=body), bodies))

        assert all(response.status_code == 200 for response in responses)
        bank = api_exchange.assets
        reserves = api_exchange.get_reserves(TOKEN_A, TOKEN_B)
        assert bank.balance_of(TOKEN_A, bank.custody) == reserves.reserve_a
        assert bank.balance_of(TOKEN_B, bank.custody) == reserves.reserve_b
        for asset in (TOKEN_A, TOKEN_B):
            held = sum(bank.balance_of(asset, account) for account in (ALICE, BOB, bank.custody))
            assert held == 2 * FUNDING


class TestReadsAndRejectionsStoreNothing:
    def test_failed_swaps_do_not_register_pools(self, client, api_exchange: Exchange):
        for n in range(5):
            response = client.post(
                "/swap/exact-in", json=swap_body(inputAsset=f"X{n}", outputAsset=f"Y{n}")
            )
            assert response.status_code == 404

        assert len(api_exchange.registry) == 0

    def test_balance_queries_do_not_grow_ledgers(self, client, api_exchange: Exchange):
        assets_before = len(api_exchange.assets._balances)

        for n in range(5):
            assert client.get(f"/accounts/nobody{n}/balances/UNKNOWN{n}").json()["balance"] == "0"
            assert client.get(f"/pools/X{n}/Y{n}/shares/nobody{n}").json() == {"amount": "0"}
            assert client.get(f"/pools/X{n}/Y{n}").status_code == 200

        assert len(api_exchange.assets._balances) == assets_before
        assert len(api_exchange.shares._balances) == 0
        assert len(api_exchange.registry) == 0
