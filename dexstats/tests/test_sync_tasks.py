import pytest
from dexstats.errors import RelayerSourceError
from dexstats.scheduler import sync_tasks
from dexstats.services.relayer_service import RelayerService
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.relayer_dao import RelayerDao
from dexstats.storage.daos.token_dao import TokenDao
from dexstats.tests.factories import rinfo, RELAYER_1


class FakeLocker:
    def __init__(self, free=True):
        self.free = free
        self.taken = []
        self.released = []

    def lock(self, name, ttl):
        self.taken.append(name)
        return {"resource": name} if self.free else False

    def unlock(self, lock):
        self.released.append(lock["resource"])


@pytest.fixture
def wired(monkeypatch, database, source):
    locker = FakeLocker()
    monkeypatch.setattr(sync_tasks, "LOCKER", locker)
    monkeypatch.setattr(sync_tasks, "Database", lambda worker: database)
    monkeypatch.setattr(
        sync_tasks, "build_relayer_service",
        lambda db: RelayerService(source, TokenDao(db), PairDao(db), RelayerDao(db)),
    )
    return locker


def test_fleet_sync_runs_under_global_lock(wired, source):
    source.relayers = {RELAYER_1: rinfo(RELAYER_1)}

    result = sync_tasks.sync_relayers()

    assert result == {"created": 4, "updated": 0, "deleted": 0, "failed": []}
    assert wired.taken == wired.released == ["relayer_sync_lock"]


def test_single_relayer_sync_takes_its_own_lock(wired, source):
    source.relayers = {RELAYER_1: rinfo(RELAYER_1)}

    sync_tasks.sync_relayer(RELAYER_1.lower())

    assert wired.taken == [f"relayer_sync_lock:{RELAYER_1}"]


def test_busy_lock_skips(wired, source):
    wired.free = False
    source.fail = True

    assert sync_tasks.sync_relayers() is None
    assert wired.released == []


def test_source_failure_is_raised_for_retry_and_lock_released(wired, source):
    source.fail = True

    with pytest.raises(RelayerSourceError):
        sync_tasks.sync_relayers()
    assert wired.released == ["relayer_sync_lock"]
