"""Pure diffing of an on-chain relayer snapshot against the mirrored rows.

Nothing here touches the store. Every function takes the snapshot plus the
rows currently mirrored and returns what has to be created, updated and
deleted; `RelayerService` applies the result.

Identities are compared as sets of composite keys:

* token   -> contract address (within one relayer)
* pair    -> (base address, quote address) (within one relayer)
* relayer -> coinbase address

Updates whose values already equal the stored ones are dropped, so
reconciling the same snapshot twice yields an empty delta.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from dexstats.errors import MissingTokenError
from dexstats.sources.relayer.types import RInfo, LendingInfo
from dexstats.utils.address import to_address


KIND_TOKEN = "token"
KIND_PAIR = "pair"
KIND_RELAYER = "relayer"

ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"


@dataclass
class Outcome:
    kind: str
    action: str
    key: Any
    ok: bool = True
    reason: Optional[str] = None

    def __str__(self) -> str:
        status = "ok" if self.ok else f"failed: {self.reason}"
        return f"{self.action} {self.kind} {self.key} {status}"


@dataclass
class ReconcileReport:
    outcomes: List[Outcome] = field(default_factory=list)

    def add(self, outcome: Outcome) -> None:
        self.outcomes.append(outcome)

    def extend(self, other: "ReconcileReport") -> "ReconcileReport":
        self.outcomes.extend(other.outcomes)
        return self

    def count(self, action: str, kind: Optional[str] = None, ok: bool = True) -> int:
        return sum(
            1 for o in self.outcomes
            if o.action == action and o.ok == ok and (kind is None or o.kind == kind)
        )

    @property
    def failed(self) -> List[Outcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return (
            f"created={self.count(ACTION_CREATE)} updated={self.count(ACTION_UPDATE)} "
            f"deleted={self.count(ACTION_DELETE)} failed={len(self.failed)}"
        )

    def to_dict(self) -> Dict:
        return {
            "created": self.count(ACTION_CREATE),
            "updated": self.count(ACTION_UPDATE),
            "deleted": self.count(ACTION_DELETE),
            "failed": [str(o) for o in self.failed],
        }


@dataclass
class TokenDelta:
    relayer_address: str
    creates: List[Dict] = field(default_factory=list)
    updates: List[Tuple[str, Dict]] = field(default_factory=list)     # (contract address, changed fields)
    deletes: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)


@dataclass
class PairDelta:
    relayer_address: str
    creates: List[Dict] = field(default_factory=list)
    deletes: List[Tuple[str, str]] = field(default_factory=list)
    # pairs that could not be built from the snapshot
    failures: List[MissingTokenError] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.creates or self.deletes or self.failures)


@dataclass
class RelayerDelta:
    creates: List[Dict] = field(default_factory=list)
    updates: List[Tuple[str, Dict]] = field(default_factory=list)
    deletes: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)


def _changed(row, wanted: Dict) -> Dict:
    return {k: v for k, v in wanted.items() if getattr(row, k) != v}


# ── tokens ───────────────────────────────────────────────────────────
def token_record(info: RInfo, address: str) -> Dict:
    meta = info.tokens[address]
    return {
        "contract_address": to_address(address),
        "relayer_address": to_address(info.address),
        "symbol": meta.symbol,
        "decimals": int(meta.decimals),
        "make_fee": int(info.make_fee),
        "take_fee": int(info.take_fee),
    }


def diff_tokens(info: RInfo, mirrored: Iterable) -> TokenDelta:
    delta = TokenDelta(relayer_address=to_address(info.address))
    wanted = {to_address(a): a for a in info.tokens}
    current = {t.contract_address: t for t in mirrored}

    for addr in sorted(wanted.keys() - current.keys()):
        delta.creates.append(token_record(info, wanted[addr]))

    for addr in sorted(wanted.keys() & current.keys()):
        record = token_record(info, wanted[addr])
        fields = {k: record[k] for k in ("symbol", "decimals", "make_fee", "take_fee")}
        changed = _changed(current[addr], fields)
        if changed:
            delta.updates.append((addr, changed))

    delta.deletes.extend(sorted(current.keys() - wanted.keys()))
    return delta


# ── pairs ────────────────────────────────────────────────────────────
def pair_record(info: RInfo, base: str, quote: str) -> Dict:
    """Row for a new pair. Token metadata must come from the same snapshot;
    raises MissingTokenError when either side is not in the token map."""
    tokens = {to_address(a): m for a, m in info.tokens.items()}
    key = (to_address(base), to_address(quote))
    for token in key:
        if token not in tokens:
            raise MissingTokenError(key, token)

    base_meta, quote_meta = tokens[key[0]], tokens[key[1]]
    return {
        "base_token_symbol": base_meta.symbol,
        "base_token_address": key[0],
        "base_token_decimals": int(base_meta.decimals),
        "quote_token_symbol": quote_meta.symbol,
        "quote_token_address": key[1],
        "quote_token_decimals": int(quote_meta.decimals),
        "relayer_address": to_address(info.address),
        "active": True,
        "make_fee": int(info.make_fee),
        "take_fee": int(info.take_fee),
    }


def diff_pairs(info: RInfo, mirrored: Iterable) -> PairDelta:
    delta = PairDelta(relayer_address=to_address(info.address))
    # keeps snapshot order for creates, drops duplicate listings
    wanted = list(dict.fromkeys((to_address(p.base_token), to_address(p.quote_token)) for p in info.pairs))
    current = {(p.base_token_address, p.quote_token_address) for p in mirrored}

    for base, quote in wanted:
        if (base, quote) in current:
            continue
        try:
            delta.creates.append(pair_record(info, base, quote))
        except MissingTokenError as e:
            delta.failures.append(e)

    delta.deletes.extend(sorted(current - set(wanted)))
    return delta


# ── relayers ─────────────────────────────────────────────────────────
def build_relayer_record(info: RInfo, lending: Optional[LendingInfo] = None) -> Dict:
    return {
        "address": to_address(info.address),
        "rid": int(info.rid),
        "owner": to_address(info.owner),
        "deposit": int(info.deposit),
        "resign": bool(info.resign),
        "lock_time": int(info.lock_time),
        "make_fee": int(info.make_fee),
        "take_fee": int(info.take_fee),
        "lending_fee": int(lending.fee) if lending is not None else 0,
    }


def diff_relayers(records: Iterable[Dict], mirrored: Iterable, sweep: bool = False) -> RelayerDelta:
    """`sweep` marks a full-fleet snapshot: mirrored relayers it does not
    list are deleted. Their tokens and pairs are left in place."""
    delta = RelayerDelta()
    wanted = {r["address"]: r for r in records}
    current = {r.address: r for r in mirrored}

    for addr in sorted(wanted.keys() - current.keys()):
        delta.creates.append(wanted[addr])

    for addr in sorted(wanted.keys() & current.keys()):
        fields = {k: v for k, v in wanted[addr].items() if k != "address"}
        changed = _changed(current[addr], fields)
        if changed:
            delta.updates.append((addr, changed))

    if sweep:
        delta.deletes.extend(sorted(current.keys() - wanted.keys()))
    return delta
