from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional
from dexstats.config.settings import DEFAULT_BASE_DECIMALS
from dexstats.schemas.stats import UserVolume, UserPnL, TradeVolume
from dexstats.services.filters import VolumeFilter, PnLFilter, TraderCountFilter, effective_top
from dexstats.storage.daos.pair_dao import PairDao
from dexstats.storage.daos.trade_dao import TradeDao, TradeQuery
from dexstats.storage.models.columns import utcnow
from dexstats.utils.address import to_address
import logging

log = logging.getLogger(__name__)

# (base token, quote token) -> price in quote units per base, or None
PriceProvider = Callable[[str, str], Optional[int]]


class TradeService:
    """Read-only statistics over the trade mirror.

    Filters arrive validated; a zero address, an empty list or a zero
    timestamp leaves that dimension open. Nothing matching gives an empty
    list or 0.
    """

    def __init__(
        self,
        trade_dao: TradeDao,
        pair_dao: PairDao,
        price_provider: Optional[PriceProvider] = None,
        bot_addresses: Iterable[str] = (),
    ):
        self.trade_dao = trade_dao
        self.pair_dao = pair_dao
        self.price_provider = price_provider or trade_dao.latest_pricepoint
        self.bot_addresses = sorted({to_address(a) for a in bot_addresses})

    def _ranked(self, q: TradeQuery, top: int) -> List[UserVolume]:
        rows = self.trade_dao.user_volumes(q, effective_top(top))
        return [
            UserVolume(user_address=r["user"], volume=r["volume"], rank=i)
            for i, r in enumerate(rows, start=1)
        ]

    def query_volume(self, f: VolumeFilter) -> List[UserVolume]:
        return self._ranked(f.to_query(), f.top)

    def query_24h_volume(self, f: VolumeFilter, now: Optional[datetime] = None) -> List[UserVolume]:
        now = now or utcnow()
        q = f.to_query()
        q.since, q.until = now - timedelta(hours=24), now
        return self._ranked(q, f.top)

    def query_total(self, f: VolumeFilter) -> TradeVolume:
        q = f.to_query()
        return TradeVolume(
            trader=self.trade_dao.count_distinct_users(q),
            total_volume=self.trade_dao.total_volume(q),
        )

    def get_number_trader_by_time(self, f: TraderCountFilter) -> int:
        q = f.to_query()
        if f.exclude_bot:
            q.exclude_users = self.bot_addresses
        return self.trade_dao.count_distinct_users(q)

    # ── pnl ──────────────────────────────────────────────────────────
    def _base_decimals(self, q: TradeQuery) -> int:
        if not q.base_tokens or not q.quote_token:
            return DEFAULT_BASE_DECIMALS
        base = q.base_tokens[0]
        if q.relayer:
            pair = self.pair_dao.get_by_token_address(base, q.quote_token, q.relayer)
        else:
            pair = next(
                (p for p in self.pair_dao.get_active_pairs()
                 if p.base_token_address == base and p.quote_token_address == q.quote_token),
                None,
            )
        return pair.base_token_decimals if pair is not None else DEFAULT_BASE_DECIMALS

    def _current_price(self, q: TradeQuery) -> int:
        if not q.base_tokens or not q.quote_token:
            return 0
        return int(self.price_provider(q.base_tokens[0], q.quote_token) or 0)

    def get_relayer_top_pnl(self, f: PnLFilter) -> List[UserPnL]:
        q = f.to_query()
        scale = 10 ** self._base_decimals(q)
        price = self._current_price(q)

        out = []
        for r in self.trade_dao.user_side_volumes(q):
            ask_by_quote = r["ask_quote"] // scale
            bid_by_quote = r["bid_quote"] // scale
            # realized quote flow plus the open base position marked at price
            pnl = ask_by_quote - bid_by_quote + (r["bid"] - r["ask"]) * price // scale
            out.append(UserPnL(
                user_address=r["user"],
                volume_ask=r["ask"],
                volume_bid=r["bid"],
                volume_ask_by_quote=ask_by_quote,
                volume_bid_by_quote=bid_by_quote,
                current_price=price,
                pnl=pnl,
            ))

        # stable sort, ties keep first appearance
        out.sort(key=lambda u: u.pnl, reverse=True)
        return out[:effective_top(f.top)]
