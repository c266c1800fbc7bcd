from datetime import datetime, timezone
from typing import Dict, List, Optional
from dexstats.sources.relayer.base import RelayerSource
from dexstats.sources.relayer.types import RInfo, LendingInfo, TokenInfo, PairInfo
from dexstats.errors import RelayerSourceError
from dexstats.utils.address import to_address, compute_trade_hash


def addr(n: int) -> str:
    return to_address(f"0x{n:040x}")


def order_hash(n: int) -> str:
    return f"0x{n:064x}"


RELAYER_1 = addr(0xA1)
RELAYER_2 = addr(0xA2)
OWNER = addr(0x0F)
TOKEN_X = addr(0x1001)
TOKEN_Y = addr(0x1002)
TOKEN_Z = addr(0x1003)


def rinfo(address: str = RELAYER_1, pairs=((TOKEN_X, TOKEN_Y),), tokens=None, fee: int = 10, **kw) -> RInfo:
    if tokens is None:
        tokens = {}
        for base, quote in pairs:
            tokens.setdefault(base, TokenInfo(f"T{base[-3:]}", 18))
            tokens.setdefault(quote, TokenInfo(f"T{quote[-3:]}", 18))
    return RInfo(
        address=address,
        owner=kw.pop("owner", OWNER),
        rid=kw.pop("rid", 1),
        deposit=kw.pop("deposit", 25000),
        make_fee=fee,
        take_fee=fee,
        tokens=dict(tokens),
        pairs=[PairInfo(b, q) for b, q in pairs],
        **kw,
    )


class FakeRelayerSource(RelayerSource):
    """In-memory snapshot; tests mutate `relayers` / `lendings` between passes."""

    def __init__(self, relayers: Optional[List[RInfo]] = None, lendings: Optional[List[LendingInfo]] = None):
        self.relayers: Dict[str, RInfo] = {r.address: r for r in relayers or []}
        self.lendings: Dict[str, LendingInfo] = {l.address: l for l in lendings or []}
        self.fail = False

    def _check(self):
        if self.fail:
            raise RelayerSourceError("rpc unavailable")

    def get_relayer(self, address):
        self._check()
        try:
            return self.relayers[to_address(address)]
        except KeyError:
            raise RelayerSourceError(f"relayer {address} is not registered")

    def get_relayers(self):
        self._check()
        return list(self.relayers.values())

    def get_lending(self, address):
        self._check()
        return self.lendings.get(to_address(address))

    def get_lendings(self):
        self._check()
        return list(self.lendings.values())


_seq = iter(range(1, 1_000_000))


def trade_row(maker: str, taker: str, amount: int, *, base: str = TOKEN_X, quote: str = TOKEN_Y,
              pricepoint: int = 100, side: str = "BUY", relayer: str = RELAYER_1,
              taker_relayer: Optional[str] = None, created_at: Optional[datetime] = None) -> Dict:
    n = next(_seq)
    maker_hash, taker_hash = order_hash(2 * n), order_hash(2 * n + 1)
    return {
        "maker": maker,
        "taker": taker,
        "base_token": base,
        "quote_token": quote,
        "maker_order_hash": maker_hash,
        "taker_order_hash": taker_hash,
        "hash": compute_trade_hash(maker_hash, taker_hash),
        "amount": amount,
        "pricepoint": pricepoint,
        "taker_order_side": side,
        "maker_exchange": relayer,
        "taker_exchange": taker_relayer or relayer,
        "status": "SUCCESS",
        "created_at": created_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
