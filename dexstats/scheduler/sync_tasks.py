from typing import Optional
from celery import shared_task
from redis import Redis
from redlock import Redlock
from sqlalchemy.orm import Session
from dexstats.config import settings
from dexstats.errors import RelayerSourceError, StoreError
from dexstats.services.relayer_service import RelayerService
from dexstats.sources.relayer.base import RelayerSource
from dexstats.sources.relayer.contract_source import ContractRelayerSource
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.relayer_dao import RelayerDao
from dexstats.storage.daos.token_dao import TokenDao
from dexstats.storage.db import Database
from dexstats.utils.address import to_address
import logging

log = logging.getLogger(__name__)

# ── run locks: one fleet sweep at a time, one sync per relayer ──────────
LOCKER = Redlock([Redis.from_url(settings.REDIS_URL)])
SYNC_LOCK = "relayer_sync_lock"


def build_relayer_service(db: Session, source: Optional[RelayerSource] = None) -> RelayerService:
    return RelayerService(source or ContractRelayerSource(), TokenDao(db), PairDao(db), RelayerDao(db))


def _run_locked(task, lock_name: str, sync):
    """Runs `sync(service)` under `lock_name`; skips when the lock is taken
    and asks Celery to retry on source / store failures."""
    lock = LOCKER.lock(lock_name, settings.SYNC_LOCK_MS)
    log.info(f"🔒  Acquired {lock_name}: {bool(lock)}")
    if not lock:
        log.info(f"🔒 Another sync holds {lock_name}; skipping.")
        return None

    database = Database(worker=True)
    try:
        with database.session() as db:
            report = sync(build_relayer_service(db))
        for outcome in report.failed:
            log.warning(f"❌ {outcome}")
        return report.to_dict()
    except (RelayerSourceError, StoreError) as e:
        log.warning(f"Sync under {lock_name} failed, retrying: {e}")
        raise task.retry(exc=e, countdown=settings.SYNC_RETRY_COUNTDOWN_S)
    finally:
        database.dispose()
        LOCKER.unlock(lock)


@shared_task(name="sync_relayers", queue="sync", bind=True, max_retries=settings.SYNC_MAX_RETRIES)
def sync_relayers(self):
    log.info("🔄  Starting relayer fleet sync…")
    return _run_locked(self, SYNC_LOCK, lambda svc: svc.update_relayers())


@shared_task(name="sync_relayer", queue="sync", bind=True, max_retries=settings.SYNC_MAX_RETRIES)
def sync_relayer(self, address: str):
    address = to_address(address)
    log.info(f"🔄  Starting sync of relayer {address}…")
    return _run_locked(self, f"{SYNC_LOCK}:{address}", lambda svc: svc.update_relayer(address))
