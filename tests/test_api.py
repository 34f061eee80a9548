from decimal import Decimal

import httpx
import pytest

from cryptopay import __version__
from cryptopay.core.config import Settings, WalletSettings
from cryptopay.core.container import build_container
from cryptopay.main import create_app
from cryptopay.modules.common import CurrencyKind, utcnow
from cryptopay.modules.orders import PaymentStatus

from .conftest import BLOCKSTREAM, BTC_ADDRESS, COINGECKO, esplora_tx

TXS = f"{BLOCKSTREAM}/address/{BTC_ADDRESS}/txs"


@pytest.fixture
def app_for(engine, http_client):
    def _build(settings: Settings):
        return create_app(build_container(settings, engine=engine, http_client=http_client))

    return _build


@pytest.fixture
async def api(app_for, settings):
    transport = httpx.ASGITransport(app=app_for(settings))
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def test_health(api):
    response = await api.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


async def test_checkout_flow(api, network, make_order):
    network.add(COINGECKO, {"bitcoin": {"eur": 50000}})
    network.add(TXS, [])
    order = await make_order("100.00")

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": "100.00", "currency": "bitcoin"})

    assert response.status_code == 201
    body = response.json()
    assert body["address"] == BTC_ADDRESS
    assert body["currency"] == "bitcoin"
    assert body["qr_uri"] == f"bitcoin:{BTC_ADDRESS}?amount=0.00200000"
    assert body["rate_source"] == "coingecko"

    response = await api.post(f"/api/payments/{order.id}/check")
    assert response.status_code == 200
    assert response.json()["paid"] is False

    network.add(TXS, [esplora_tx("a1", BTC_ADDRESS, 200_000)])
    response = await api.post(f"/api/payments/{order.id}/check")
    assert response.status_code == 200
    assert response.json()["paid"] is True
    assert response.json()["status"] == "confirmed"
    assert response.json()["confirmed_at"] is not None

    response = await api.get(f"/api/orders/{order.id}")
    assert response.status_code == 200
    assert response.json()["payment_status"] == "confirmed"
    assert response.json()["payment_address"] == BTC_ADDRESS


async def test_quote_binding_is_persisted(api, network, make_order, load_order):
    network.add(COINGECKO, {"bitcoin": {"eur": 50000}})
    order = await make_order("100.00")

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": "100.00"})

    assert response.status_code == 201
    stored = await load_order(order.id)
    assert stored.payment_currency is CurrencyKind.BITCOIN
    assert stored.payment_address == BTC_ADDRESS
    assert stored.expected_amount == Decimal("0.002")


async def test_failed_quote_leaves_order_untouched(api, make_order, load_order):
    order = await make_order("100.00")

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": "50.00"})

    assert response.status_code == 422
    assert not (await load_order(order.id)).has_binding


async def test_default_currency_is_bitcoin(api, network, make_order):
    network.add(COINGECKO, {"bitcoin": {"eur": 50000}})
    order = await make_order("100.00")

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": 100})

    assert response.status_code == 201
    assert response.json()["currency"] == "bitcoin"


@pytest.mark.parametrize("amount", ["0", "-10", "99.99"])
async def test_invalid_amount_is_422(api, make_order, amount):
    order = await make_order("100.00")

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": amount})

    assert response.status_code == 422


async def test_unsupported_currency_is_422(api, make_order):
    order = await make_order("100.00")

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": "100.00", "currency": "dogecoin"})

    assert response.status_code == 422


async def test_unknown_order_is_404(api, network):
    network.add(COINGECKO, {"bitcoin": {"eur": 50000}})

    response = await api.post("/api/payments", json={"order_id": "missing", "amount": "100.00"})
    assert response.status_code == 404

    response = await api.post("/api/payments/missing/check")
    assert response.status_code == 404

    response = await api.get("/api/orders/missing")
    assert response.status_code == 404


async def test_confirmed_order_requote_is_409(api, network, make_order):
    network.add(COINGECKO, {"bitcoin": {"eur": 50000}})
    order = await make_order(
        "100.00",
        payment_currency=CurrencyKind.BITCOIN,
        payment_address=BTC_ADDRESS,
        payment_status=PaymentStatus.CONFIRMED,
        payment_confirmed_at=utcnow(),
    )

    response = await api.post("/api/payments", json={"order_id": order.id, "amount": "100.00"})

    assert response.status_code == 409


async def test_missing_wallet_is_503(app_for, make_order):
    settings = Settings(_env_file=None, environment="test", wallets=WalletSettings())
    order = await make_order("100.00")
    transport = httpx.ASGITransport(app=app_for(settings))

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/api/payments", json={"order_id": order.id, "amount": "100.00"})

    assert response.status_code == 503


async def test_sweep_endpoint(api, network, make_order):
    network.add(TXS, [esplora_tx("a1", BTC_ADDRESS, 200_000)])
    await make_order(
        "100.00",
        payment_currency=CurrencyKind.BITCOIN,
        payment_address=BTC_ADDRESS,
        expected_amount=Decimal("0.002"),
        quoted_at=utcnow(),
    )

    response = await api.post("/api/reconciliation/sweep")

    assert response.status_code == 200
    assert response.json() == {"total_checked": 1, "confirmed_count": 1, "failed_count": 0}
