from dotenv import load_dotenv
import pathlib

# Automatically load .env from project root
load_dotenv(dotenv_path=pathlib.Path(__file__).parent.parent.parent / ".env")

import pytest
from httpx import AsyncClient, ASGITransport
from dexstats.main import create_app
from dexstats.services.relayer_service import RelayerService
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.relayer_dao import RelayerDao
from dexstats.storage.daos.token_dao import TokenDao
from dexstats.storage.daos.trade_dao import TradeDao
from dexstats.storage.db import Database
from dexstats.tests.factories import FakeRelayerSource


@pytest.fixture
def database():
    """Fresh in-memory SQLite per test."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture
def source():
    return FakeRelayerSource()


@pytest.fixture
def relayer_service(source, session):
    return RelayerService(source, TokenDao(session), PairDao(session), RelayerDao(session))


@pytest.fixture
def trade_dao(session):
    return TradeDao(session)


@pytest.fixture
async def client(database):
    """Async HTTP client bound to the in-memory database."""
    app = create_app(database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
