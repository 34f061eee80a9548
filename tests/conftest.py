"""Shared fixtures: a sqlite database per test and a fake outbound network."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cryptopay.core.config import RateSettings, Settings, WalletSettings
from cryptopay.infrastructure.database import init_db
from cryptopay.infrastructure.database.repositories import SqlOrderRepository
from cryptopay.modules.orders import Order

BTC_ADDRESS = "bc1qstorefront0receiving0address0000000000"
LTC_ADDRESS = "ltc1qstorefront0receiving0address000000000"

COINGECKO = "https://api.coingecko.com/api/v3/simple/price"
COINDESK = "https://api.coindesk.com/v1/bpi/currentprice/EUR.json"
BLOCKSTREAM = "https://blockstream.info/api"
MEMPOOL = "https://mempool.space/api"
BLOCKCHAIR = "https://api.blockchair.com/litecoin/dashboards/address"
LITECOINSPACE = "https://litecoinspace.org/api"


class FakeNetwork:
    """Answers outbound requests from canned responses keyed by URL without query string."""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, json: Any = None, status: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status, json=json)

    def add_text(self, url: str, text: str, status: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status, text=text)

    def fail(self, url: str, exc_type: type[httpx.TransportError] = httpx.ConnectTimeout) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated failure", request=request)

        self.routes[url] = _raise

    def requested(self, url: str) -> int:
        return sum(1 for request in self.requests if _route_key(request) == url)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(_route_key(request))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def _route_key(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


def esplora_tx(txid: str, address: str, value: int, *, confirmed: bool = True) -> dict[str, Any]:
    return {
        "txid": txid,
        "vout": [
            {"scriptpubkey_address": "bc1qchange00000000000000000000000000000000", "value": 5_000_000},
            {"scriptpubkey_address": address, "value": value},
        ],
        "status": {"confirmed": confirmed, "block_height": 860_000 if confirmed else None},
    }


def blockchair_dashboard(address: str, received: int, utxo: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "data": {
            address: {
                "address": {"type": "witness_v0_keyhash", "balance": received, "received": received, "spent": 0},
                "transactions": [],
                "utxo": utxo or [],
            }
        },
        "context": {"code": 200},
    }


class CountingRepository:
    """Order gateway wrapper that counts writes."""

    def __init__(self, inner: SqlOrderRepository) -> None:
        self.inner = inner
        self.updates = 0

    async def get(self, order_id):
        return await self.inner.get(order_id)

    async def update(self, order_id, patch, *, if_status=None):
        self.updates += 1
        return await self.inner.update(order_id, patch, if_status=if_status)

    async def list_pending_bound(self, *, quoted_after=None, limit=None):
        return await self.inner.list_pending_bound(quoted_after=quoted_after, limit=limit)

    async def create(self, *, fiat_amount, fiat_currency="EUR"):
        return await self.inner.create(fiat_amount=fiat_amount, fiat_currency=fiat_currency)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        wallets=WalletSettings(bitcoin_address=BTC_ADDRESS, litecoin_address=LTC_ADDRESS),
        rates=RateSettings(cache_ttl_seconds=0),
    )


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
async def http_client(network: FakeNetwork):
    client = network.client()
    yield client
    await client.aclose()


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'payments.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_order(session_factory):
    async def _make(amount: str = "100.00", **binding: Any) -> Order:
        async with session_factory() as session:
            repository = SqlOrderRepository(session)
            order = await repository.create(fiat_amount=Decimal(amount))
            if binding:
                order = await repository.update(order.id, binding)
            await session.commit()
        return order

    return _make


@pytest.fixture
def load_order(session_factory):
    async def _load(order_id: str) -> Order | None:
        async with session_factory() as session:
            return await SqlOrderRepository(session).get(order_id)

    return _load
