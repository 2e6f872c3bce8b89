import pytest

from conftest import build_account, mint
from nouxis_core.constants import NOUXIS_TREASURY, PROTOCOL_FEE_BPS, SOLANA_DEVNET, SOLANA_MAINNET
from nouxis_core.errors import GateError
from nouxis_core.gate import (
    GateConfig,
    RoutePayment,
    build_route_accepts,
    precheck,
    price_from_amount,
    require_active,
)
from nouxis_core.models import ResolvedAgent


@pytest.mark.parametrize("amount,price", [
    ("1000", "$0.001"),
    ("1000000", "$1"),
    ("1500000", "$1.5"),
    ("10000000", "$10"),
    ("0", "$0"),
    (1, "$0.000001"),
])
def test_price_from_amount(amount, price):
    assert price_from_amount(amount) == price


def test_price_keeps_u64_precision():
    assert price_from_amount("18446744073709551615") == "$18446744073709.551615"


def test_require_active():
    rec = ResolvedAgent(pay_to="wallet", amount="1", token_mint="mint", active=True)
    assert require_active(rec, "agent") == "wallet"

    with pytest.raises(GateError):
        require_active(None, "agent")
    with pytest.raises(GateError):
        require_active(ResolvedAgent("wallet", "1", "mint", False), "agent")


def test_static_routes():
    routes = build_route_accepts(GateConfig(
        pay_to="StaticWallet",
        network="mainnet",
        routes={"POST /": RoutePayment(price="$0.001", description="Agent query")},
    ))

    route = routes["POST /"]
    assert route["accepts"]["pay_to"] == "StaticWallet"
    assert route["accepts"]["price"] == "$0.001"
    assert route["accepts"]["network"] == SOLANA_MAINNET
    assert route["accepts"]["extra"] == {"treasury": NOUXIS_TREASURY, "protocol_fee_bps": PROTOCOL_FEE_BPS}
    assert route["description"] == "Agent query"
    assert route["mime_type"] == "application/json"


def test_dynamic_routes_resolve_per_request(resolver, publish):
    publish(mint(4), data=build_account(amount=2500))
    routes = build_route_accepts(
        GateConfig(agent_mint=mint(4), routes={"POST /": RoutePayment()}),
        resolver=resolver,
    )

    accepts = routes["POST /"]["accepts"]
    assert accepts["network"] == SOLANA_DEVNET
    assert accepts["extra"]["agent_mint"] == mint(4)
    assert accepts["pay_to"]() == resolver.resolve(mint(4)).pay_to
    assert accepts["price"]() == "$0.0025"
    assert routes["POST /"]["description"] == "Nouxis agent service"


def test_dynamic_route_keeps_static_price(resolver):
    routes = build_route_accepts(
        GateConfig(agent_mint=mint(4), routes={"GET /": RoutePayment(price="$2")}),
        resolver=resolver,
    )
    assert routes["GET /"]["accepts"]["price"] == "$2"


def test_dynamic_inactive_agent_refuses_payment(resolver, publish):
    publish(mint(5), data=build_account(active=False))
    routes = build_route_accepts(
        GateConfig(agent_mint=mint(5), routes={"POST /": RoutePayment()}),
        resolver=resolver,
    )
    with pytest.raises(GateError):
        routes["POST /"]["accepts"]["pay_to"]()
    # inactive records still carry a price
    assert routes["POST /"]["accepts"]["price"]() == "$1"


def test_missing_agent_refuses_price(resolver):
    routes = build_route_accepts(
        GateConfig(agent_mint=mint(6), routes={"POST /": RoutePayment()}),
        resolver=resolver,
    )
    with pytest.raises(GateError):
        routes["POST /"]["accepts"]["price"]()


def test_requires_pay_to_or_agent_mint():
    with pytest.raises(GateError):
        build_route_accepts(GateConfig(routes={"POST /": RoutePayment()}))


def test_agent_mint_requires_resolver():
    with pytest.raises(GateError):
        build_route_accepts(GateConfig(agent_mint=mint(1), routes={}))


def test_precheck_logs_outcome(resolver, publish, caplog):
    assert precheck(resolver, mint(7)) is None
    assert "not found on-chain" in caplog.text

    publish(mint(8))
    assert precheck(resolver, mint(8)).active
    assert "price=$1" in caplog.text
