import os
import pytest
from dexstats.config import settings
from dexstats.errors import ConfigError
from dexstats.services.filters import VolumeFilter
from dexstats.services.trade_service import TradeService
from dexstats.storage.base import Base
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.trade_dao import TradeDao
from dexstats.storage.db import Database
from dexstats.tests.factories import addr, trade_row

PG_URL = os.getenv("TEST_DATABASE_URL")


def test_file_backed_sqlite_is_refused(tmp_path):
    path = tmp_path / "dexstats.db"
    with pytest.raises(ConfigError, match="SQLite"):
        Database(f"sqlite:///{path}")
    assert not path.exists()


def test_missing_database_url_is_refused(monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", None)
    with pytest.raises(ConfigError, match="DATABASE_URL"):
        Database()


def test_in_memory_sqlite_is_accepted():
    database = Database("sqlite://")
    try:
        assert database.ping()
    finally:
        database.dispose()


@pytest.mark.skipif(not PG_URL, reason="TEST_DATABASE_URL not set")
def test_uint256_amounts_are_exact_on_postgres():
    a, b = addr(0xC1), addr(0xC2)
    amount = 10**21 + 1
    database = Database(PG_URL)
    database.create_all()
    try:
        with database.session() as s:
            dao = TradeDao(s)
            dao.upsert(trade_row(a, b, amount))
            svc = TradeService(dao, PairDao(s))

            assert svc.query_volume(VolumeFilter(user_address=a))[0].volume == amount
            assert svc.query_total(VolumeFilter()).total_volume == amount
    finally:
        Base.metadata.drop_all(database.engine)
        database.dispose()
