from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from dexstats.config.settings import DEFAULT_TOP
from dexstats.storage.daos.trade_dao import TradeQuery
from dexstats.utils.address import ZERO_ADDRESS, to_address, is_zero_address


def _address(value: Optional[str]) -> Optional[str]:
    # zero address means "any"
    return None if is_zero_address(value) else to_address(value)


def _time(ts: Optional[int]) -> Optional[datetime]:
    return datetime.fromtimestamp(ts, tz=timezone.utc) if ts else None


@dataclass
class VolumeFilter:
    relayer_address: str = ZERO_ADDRESS
    user_address: str = ZERO_ADDRESS
    base_tokens: List[str] = field(default_factory=list)
    quote_token: str = ZERO_ADDRESS
    from_time: int = 0      # unix seconds, 0 = open
    to_time: int = 0
    top: int = DEFAULT_TOP

    def to_query(self) -> TradeQuery:
        return TradeQuery(
            relayer=_address(self.relayer_address),
            user=_address(self.user_address),
            base_tokens=[to_address(t) for t in self.base_tokens if not is_zero_address(t)],
            quote_token=_address(self.quote_token),
            since=_time(self.from_time),
            until=_time(self.to_time),
        )


@dataclass
class PnLFilter:
    relayer_address: str = ZERO_ADDRESS
    base_token: str = ZERO_ADDRESS
    quote_token: str = ZERO_ADDRESS
    top: int = DEFAULT_TOP

    def to_query(self) -> TradeQuery:
        base = _address(self.base_token)
        return TradeQuery(
            relayer=_address(self.relayer_address),
            base_tokens=[base] if base else [],
            quote_token=_address(self.quote_token),
        )


@dataclass
class TraderCountFilter:
    relayer_address: str = ZERO_ADDRESS
    base_token: str = ZERO_ADDRESS
    quote_token: str = ZERO_ADDRESS
    since: int = 0
    until: int = 0
    exclude_bot: bool = False

    def to_query(self) -> TradeQuery:
        base = _address(self.base_token)
        return TradeQuery(
            relayer=_address(self.relayer_address),
            base_tokens=[base] if base else [],
            quote_token=_address(self.quote_token),
            since=_time(self.since),
            until=_time(self.until),
        )


def effective_top(top: int) -> int:
    return top if top and top > 0 else DEFAULT_TOP
