from typing import Optional
from dexstats.config import settings
from dexstats.errors import StoreError
from dexstats.services.reconciler import (
    Outcome, ReconcileReport, TokenDelta, PairDelta, RelayerDelta,
    diff_tokens, diff_pairs, diff_relayers, build_relayer_record,
    KIND_TOKEN, KIND_PAIR, KIND_RELAYER, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE,
)
from dexstats.sources.relayer.base import RelayerSource
from dexstats.sources.relayer.types import RInfo
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.relayer_dao import RelayerDao
from dexstats.storage.daos.token_dao import TokenDao
from dexstats.storage.models import Pair, Token, Relayer
from dexstats.utils.address import to_address, is_zero_address
import logging

log = logging.getLogger(__name__)


class RelayerService:
    """Keeps the relayer / token / pair mirror in line with the chain.

    Writes are best effort: each one commits on its own and a failed write
    is logged and reported, the pass goes on. Failing to fetch the snapshot
    or to read the mirror aborts the pass instead (RelayerSourceError /
    StoreError propagate to the caller).
    """

    def __init__(
        self,
        source: Optional[RelayerSource],
        token_dao: TokenDao,
        pair_dao: PairDao,
        relayer_dao: RelayerDao,
    ):
        self.source = source
        self.token_dao = token_dao
        self.pair_dao = pair_dao
        self.relayer_dao = relayer_dao

    # ── operator / lookup ─────────────────────────────────────────────
    def get_by_address(self, address: str) -> Optional[Relayer]:
        return self.relayer_dao.get_by_address(address)

    def update_name_by_address(self, address: str, name: str, url: str) -> int:
        return self.relayer_dao.update_name_by_address(address, name, url)

    def resolve_relayer_address(self, query_value: Optional[str], host: Optional[str] = None) -> str:
        """Explicit query value first, then the relayer serving `host`, then
        the configured exchange address."""
        if query_value:
            return to_address(query_value)
        relayer = self.relayer_dao.get_by_host(host) if host else None
        if relayer is not None:
            return relayer.address
        if is_zero_address(settings.EXCHANGE_ADDRESS):
            return settings.EXCHANGE_ADDRESS
        return to_address(settings.EXCHANGE_ADDRESS)

    # ── sync ──────────────────────────────────────────────────────────
    def update_relayer(self, address: str) -> ReconcileReport:
        info = self.source.get_relayer(address)
        lending = self.source.get_lending(info.address)

        report = self._sync_relayer_assets(info)
        mirrored = self.relayer_dao.get_by_address(info.address)
        delta = diff_relayers(
            [build_relayer_record(info, lending)],
            [mirrored] if mirrored is not None else [],
        )
        report.extend(self._apply_relayers(delta))
        log.info(f"Relayer {info.address} synced: {report.summary()}")
        return report

    def update_relayers(self) -> ReconcileReport:
        infos = self.source.get_relayers()
        report = ReconcileReport()
        for info in infos:
            report.extend(self._sync_relayer_assets(info))

        lendings = {to_address(l.address): l for l in self.source.get_lendings()}
        records = [build_relayer_record(i, lendings.get(to_address(i.address))) for i in infos]
        delta = diff_relayers(records, self.relayer_dao.get_all(), sweep=True)
        report.extend(self._apply_relayers(delta))
        log.info(f"Relayer fleet synced ({len(infos)} relayers): {report.summary()}")
        return report

    def _sync_relayer_assets(self, info: RInfo) -> ReconcileReport:
        # tokens first, pairs are built from the same token metadata
        report = self._apply_tokens(diff_tokens(info, self.token_dao.get_all_by_relayer(info.address)))
        report.extend(self._apply_pairs(diff_pairs(info, self.pair_dao.get_all_by_relayer(info.address))))
        return report

    # ── apply ─────────────────────────────────────────────────────────
    @staticmethod
    def _attempt(report: ReconcileReport, kind: str, action: str, key, fn, *args, **kwargs) -> None:
        try:
            fn(*args, **kwargs)
        except StoreError as e:
            log.warning(f"{action} {kind} {key} failed: {e}")
            report.add(Outcome(kind, action, key, ok=False, reason=str(e)))
            return
        log.debug(f"{action} {kind} {key}")
        report.add(Outcome(kind, action, key))

    def _apply_tokens(self, delta: TokenDelta) -> ReconcileReport:
        report = ReconcileReport()
        relayer = delta.relayer_address
        for addr, fields in delta.updates:
            self._attempt(report, KIND_TOKEN, ACTION_UPDATE, addr,
                          self.token_dao.update_by_token_and_relayer, addr, relayer, **fields)
        for row in delta.creates:
            self._attempt(report, KIND_TOKEN, ACTION_CREATE, row["contract_address"],
                          self.token_dao.create, Token(**row))
        for addr in delta.deletes:
            self._attempt(report, KIND_TOKEN, ACTION_DELETE, addr,
                          self.token_dao.delete_by_token_and_relayer, addr, relayer)
        return report

    def _apply_pairs(self, delta: PairDelta) -> ReconcileReport:
        report = ReconcileReport()
        relayer = delta.relayer_address
        for err in delta.failures:
            log.error(f"Relayer {relayer}: {err}")
            report.add(Outcome(KIND_PAIR, ACTION_CREATE, err.pair_key, ok=False, reason=str(err)))
        for row in delta.creates:
            key = (row["base_token_address"], row["quote_token_address"])
            self._attempt(report, KIND_PAIR, ACTION_CREATE, key, self.pair_dao.create, Pair(**row))
        for base, quote in delta.deletes:
            self._attempt(report, KIND_PAIR, ACTION_DELETE, (base, quote),
                          self.pair_dao.delete_by_token_and_relayer, base, quote, relayer)
        return report

    def _apply_relayers(self, delta: RelayerDelta) -> ReconcileReport:
        report = ReconcileReport()
        for row in delta.creates:
            self._attempt(report, KIND_RELAYER, ACTION_CREATE, row["address"],
                          self.relayer_dao.create, Relayer(**row))
        for addr, fields in delta.updates:
            self._attempt(report, KIND_RELAYER, ACTION_UPDATE, addr,
                          self.relayer_dao.update_by_address, addr, **fields)
        for addr in delta.deletes:
            log.info(f"Relayer {addr} left the registry, its tokens and pairs are kept")
            self._attempt(report, KIND_RELAYER, ACTION_DELETE, addr,
                          self.relayer_dao.delete_by_address, addr)
        return report
