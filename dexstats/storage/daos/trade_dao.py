from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from sqlalchemy import select, union_all, union, func, case, or_, and_, true
from sqlalchemy.dialects import postgresql, sqlite
from dexstats.storage.daos.base_dao import BaseDao
from dexstats.storage.models.columns import utcnow
from dexstats.storage.models.trade import Trade
import logging

log = logging.getLogger(__name__)

# columns refreshed when a trade with a known hash arrives again
_UPSERT_SET = (
    "taker", "maker", "base_token", "quote_token", "maker_order_hash",
    "taker_order_hash", "tx_hash", "pair_name", "status", "pricepoint", "amount",
    "make_fee", "take_fee", "taker_order_side", "taker_order_type",
    "maker_order_type", "maker_exchange", "taker_exchange",
)


@dataclass
class TradeQuery:
    """Already-normalized trade filter. None / empty means unconstrained."""
    relayer: Optional[str] = None
    user: Optional[str] = None
    base_tokens: Sequence[str] = field(default_factory=list)
    quote_token: Optional[str] = None
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    exclude_users: Sequence[str] = field(default_factory=list)


class TradeDao(BaseDao):

    # ── writes ─────────────────────────────────────────────────────────
    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"trade upsert not supported on {dialect}")

    def upsert(self, row: Dict) -> None:
        """Insert or refresh one trade keyed on `hash`. `created_at` is only
        written on insert; None values never overwrite stored ones."""
        now = utcnow()
        values = {k: v for k, v in row.items() if v is not None}
        values.setdefault("created_at", now)
        values["updated_at"] = now

        insert = self._insert()
        stmt = insert(Trade.__table__).values(values)
        set_ = {col: stmt.excluded[col] for col in _UPSERT_SET if col in values}
        set_["updated_at"] = stmt.excluded.updated_at
        stmt = stmt.on_conflict_do_update(index_elements=["hash"], set_=set_)

        with self._writing(f"upsert trade {values.get('hash')}"):
            self.session.execute(stmt)

    # ── reads ──────────────────────────────────────────────────────────
    def get_by_hash(self, trade_hash: str) -> Optional[Trade]:
        with self._reading("get trade"):
            return self.session.execute(select(Trade).where(Trade.hash == trade_hash)).scalars().first()

    @staticmethod
    def _conditions(q: TradeQuery) -> list:
        conds = []
        if q.relayer:
            conds.append(or_(Trade.maker_exchange == q.relayer, Trade.taker_exchange == q.relayer))
        if q.base_tokens:
            conds.append(Trade.base_token.in_(list(q.base_tokens)))
        if q.quote_token:
            conds.append(Trade.quote_token == q.quote_token)
        if q.since is not None:
            conds.append(Trade.created_at >= q.since)
        if q.until is not None:
            conds.append(Trade.created_at <= q.until)
        return conds

    def _legs(self, q: TradeQuery, extra_cols):
        """One row per (trade, participant). A self-trade yields a single leg.
        `seq` orders legs as they appeared: by trade, maker before taker."""
        conds = self._conditions(q)
        maker_leg = select((Trade.id * 2).label("seq"), Trade.maker.label("user"), *extra_cols("maker")) \
            .where(and_(true(), *conds))
        taker_leg = select((Trade.id * 2 + 1).label("seq"), Trade.taker.label("user"), *extra_cols("taker")) \
            .where(and_(Trade.taker != Trade.maker, *conds))
        return union_all(maker_leg, taker_leg).subquery("legs")

    def user_volumes(self, q: TradeQuery, limit: int) -> List[Dict]:
        """Per-user summed amount, highest first; ties go to the user whose
        first matching trade came earliest."""
        legs = self._legs(q, lambda _: (func.coalesce(Trade.amount, 0).label("amount"),))
        volume = func.sum(legs.c.amount).label("volume")
        first_seen = func.min(legs.c.seq).label("first_seen")
        stmt = select(legs.c.user, volume, first_seen).group_by(legs.c.user)
        if q.user:
            stmt = stmt.where(legs.c.user == q.user)
        stmt = stmt.order_by(volume.desc(), first_seen.asc()).limit(limit)

        with self._reading("aggregate user volume"):
            rows = self.session.execute(stmt).all()
        return [{"user": r.user, "volume": int(r.volume or 0)} for r in rows]

    def user_side_volumes(self, q: TradeQuery) -> List[Dict]:
        """Per-user base amount sold (ask) / bought (bid) and the raw quote
        value of each (amount * pricepoint, not yet scaled by decimals).
        The maker always sits on the opposite side of the taker; trades
        without a side count for neither. Rows come in order of first
        appearance, like `user_volumes`; a self-trade keeps both legs."""
        amount = func.coalesce(Trade.amount, 0)
        quote_raw = amount * func.coalesce(Trade.pricepoint, 0)
        taker_buys = Trade.taker_order_side == "BUY"
        taker_sells = Trade.taker_order_side == "SELL"

        def cols(role):
            sells, buys = (taker_buys, taker_sells) if role == "maker" else (taker_sells, taker_buys)
            return (
                case((sells, amount), else_=0).label("ask"),
                case((buys, amount), else_=0).label("bid"),
                case((sells, quote_raw), else_=0).label("ask_quote"),
                case((buys, quote_raw), else_=0).label("bid_quote"),
            )

        conds = self._conditions(q)
        maker_leg = select((Trade.id * 2).label("seq"), Trade.maker.label("user"), *cols("maker")) \
            .where(and_(true(), *conds))
        taker_leg = select((Trade.id * 2 + 1).label("seq"), Trade.taker.label("user"), *cols("taker")) \
            .where(and_(true(), *conds))
        legs = union_all(maker_leg, taker_leg).subquery("legs")
        stmt = select(
            legs.c.user,
            func.sum(legs.c.ask).label("ask"),
            func.sum(legs.c.bid).label("bid"),
            func.sum(legs.c.ask_quote).label("ask_quote"),
            func.sum(legs.c.bid_quote).label("bid_quote"),
        ).group_by(legs.c.user).order_by(func.min(legs.c.seq))

        with self._reading("aggregate user side volume"):
            rows = self.session.execute(stmt).all()
        return [
            {
                "user": r.user,
                "ask": int(r.ask or 0),
                "bid": int(r.bid or 0),
                "ask_quote": int(r.ask_quote or 0),
                "bid_quote": int(r.bid_quote or 0),
            }
            for r in rows
        ]

    def count_distinct_users(self, q: TradeQuery) -> int:
        conds = self._conditions(q)
        makers = select(Trade.maker.label("user")).where(and_(true(), *conds))
        takers = select(Trade.taker.label("user")).where(and_(true(), *conds))
        if q.exclude_users:
            makers = makers.where(Trade.maker.notin_(list(q.exclude_users)))
            takers = takers.where(Trade.taker.notin_(list(q.exclude_users)))
        users = union(makers, takers).subquery("users")

        with self._reading("count traders"):
            return int(self.session.execute(select(func.count()).select_from(users)).scalar() or 0)

    def total_volume(self, q: TradeQuery) -> int:
        stmt = select(func.coalesce(func.sum(Trade.amount), 0)).where(and_(true(), *self._conditions(q)))
        with self._reading("sum volume"):
            return int(self.session.execute(stmt).scalar() or 0)

    def latest_pricepoint(self, base_token: str, quote_token: str) -> Optional[int]:
        stmt = (
            select(Trade.pricepoint)
            .where(
                Trade.base_token == base_token,
                Trade.quote_token == quote_token,
                Trade.pricepoint.isnot(None),
            )
            .order_by(Trade.created_at.desc(), Trade.id.desc())
            .limit(1)
        )
        with self._reading("latest price"):
            value = self.session.execute(stmt).scalar()
        return int(value) if value is not None else None
