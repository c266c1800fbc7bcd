"""
Endpoint tests over an in-memory store.
"""
from datetime import timedelta
import pytest
from httpx import AsyncClient
from dexstats.storage.daos.relayer_dao import RelayerDao
from dexstats.storage.daos.trade_dao import TradeDao
from dexstats.storage.models import Relayer
from dexstats.storage.models.columns import utcnow
from dexstats.tests.factories import addr, trade_row, RELAYER_1, OWNER, TOKEN_X, TOKEN_Y

A, B = addr(0xB1), addr(0xB2)


@pytest.fixture
def seeded(session):
    dao = TradeDao(session)
    dao.upsert(trade_row(A, B, 100, created_at=utcnow() - timedelta(hours=2)))
    dao.upsert(trade_row(B, A, 40, created_at=utcnow() - timedelta(days=3)))
    RelayerDao(session).create(Relayer(address=RELAYER_1, owner=OWNER, rid=1, domain="dex.example.com"))


async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["database"] is True


async def test_volume_empty_is_list(client: AsyncClient):
    resp = await client.get("/stats/trades/volume")
    assert resp.status_code == 200
    assert resp.json() == []


async def test_volume_ranking(client: AsyncClient, seeded):
    resp = await client.get("/stats/trades/volume", params={"relayerAddress": RELAYER_1.lower()})
    assert resp.status_code == 200
    assert resp.json() == [
        {"userAddress": A, "volume": 140, "rank": 1},
        {"userAddress": B, "volume": 140, "rank": 2},
    ]


async def test_total_is_an_alias_of_volume(client: AsyncClient, seeded):
    volume = await client.get("/stats/trades/volume", params={"top": "1"})
    total = await client.get("/stats/trades/total", params={"top": "1"})
    assert volume.json() == total.json()
    assert len(total.json()) == 1


async def test_repeated_base_token(client: AsyncClient, seeded):
    resp = await client.get("/stats/trades/volume", params=[("baseToken", TOKEN_X), ("baseToken", TOKEN_Y)])
    assert resp.status_code == 200
    assert len(resp.json()) == 2


async def test_volume24h(client: AsyncClient, seeded):
    resp = await client.get("/stats/trades/volume24h")
    assert [r["volume"] for r in resp.json()] == [100, 100]


async def test_summary(client: AsyncClient, seeded):
    resp = await client.get("/stats/trades/summary")
    assert resp.json() == {"trader": 2, "totalVolume": 140}


@pytest.mark.parametrize("param", ["relayerAddress", "userAddress", "quoteToken", "baseToken"])
async def test_invalid_address_is_400(client: AsyncClient, param):
    resp = await client.get("/stats/trades/volume", params={param: "0xnothex"})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid ")
    assert resp.json()["error"].endswith(" address")


async def test_non_integer_top_is_400(client: AsyncClient):
    resp = await client.get("/stats/trades/volume", params={"top": "ten"})
    assert resp.status_code == 400
    assert "top" in resp.json()["error"]


async def test_top_pnl(client: AsyncClient, seeded):
    resp = await client.get(
        "/stats/trades/top/pnl",
        params={"baseToken": TOKEN_X, "quoteToken": TOKEN_Y, "relayerAddress": RELAYER_1},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert {r["userAddress"] for r in body} == {A, B}
    assert {"volumeAsk", "volumeBid", "volumeAskByQuote", "volumeBidByQuote", "currentPrice", "currentPnL"} <= set(body[0])


async def test_users_count_durations(client: AsyncClient, seeded):
    everything = await client.get("/stats/trades/users/count")
    assert everything.json() == {"activeUser": 2, "duration": "all"}

    day = await client.get("/stats/trades/users/count", params={"duration": "1d", "excludeBot": "true"})
    assert day.json() == {"activeUser": 2, "duration": "1d"}


async def test_users_count_rejects_unknown_duration(client: AsyncClient):
    resp = await client.get("/stats/trades/users/count", params={"duration": "2d"})
    assert resp.status_code == 400
    assert resp.json()["error"] == 'duration must be one of {"", "1d", "7d", "30d"}'


async def test_pairs_empty(client: AsyncClient):
    resp = await client.get("/stats/pairs", params={"relayerAddress": RELAYER_1})
    assert resp.status_code == 200
    assert resp.json() == []


async def test_relayer_by_query_and_host(client: AsyncClient, seeded):
    by_query = await client.get("/stats/relayer", params={"relayerAddress": RELAYER_1})
    assert by_query.status_code == 200
    assert by_query.json()["address"] == RELAYER_1

    by_host = await client.get("/stats/relayer", headers={"host": "dex.example.com"})
    assert by_host.json()["domain"] == "dex.example.com"


async def test_unknown_relayer_is_404(client: AsyncClient):
    resp = await client.get("/stats/relayer", params={"relayerAddress": addr(0x99)})
    assert resp.status_code == 404


@pytest.mark.parametrize("param,value", [("from", str(10**15)), ("to", str(10**15)), ("from", "-1")])
async def test_out_of_range_timestamp_is_400(client: AsyncClient, param, value):
    resp = await client.get("/stats/trades/volume", params={param: value})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith(f"Invalid {param}:")
